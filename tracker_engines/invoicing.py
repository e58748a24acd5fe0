"""
Invoice Drafting Engine.

Pure functions with deterministic behavior. No I/O.

Turns a selection of time entries into an invoice draft: entries are
grouped by (project, effective hourly rate) and each group becomes one
line item.  Rendering and exporting the invoice belongs to the caller.

Usage:
    from tracker_engines.invoicing import draft_invoice_from_entries

    draft = draft_invoice_from_entries(
        entries,
        default_hourly_rate=Decimal("80"),
        issue_date=date(2024, 3, 1),
        tax_rate=Decimal("8.5"),
    )
    draft.total  # Decimal("...")
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Sequence

from tracker_kernel.domain.entries import TimeEntry
from tracker_kernel.exceptions import EmptyInvoiceError
from tracker_kernel.logging_config import get_logger
from tracker_engines.earnings import (
    HUNDRED,
    ZERO,
    effective_duration_seconds,
    effective_rate,
    seconds_to_hours,
    to_decimal,
)
from tracker_engines.tracer import traced_engine

logger = get_logger("engines.invoicing")

_TWO_PLACES = Decimal("0.01")

DEFAULT_DUE_DAYS = 30
FALLBACK_DESCRIPTION = "Time Tracking"


def _money(value: Decimal) -> Decimal:
    return value.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class InvoiceLineItem:
    """
    One invoice line: all selected entries of a project billed at one rate.

    Attributes:
        description: "<project name> - <n> entries"
        quantity: Hours (unrounded)
        rate: Hourly rate
        amount: quantity * rate, rounded to cents
        time_entry_ids: Entries covered by the line, in selection order
    """

    description: str
    quantity: Decimal
    rate: Decimal
    amount: Decimal
    time_entry_ids: tuple[str, ...]


@dataclass(frozen=True)
class InvoiceDraft:
    """An unsent invoice built from time entries."""

    title: str
    client_id: str | None
    project_id: str | None
    issue_date: date
    due_date: date
    line_items: tuple[InvoiceLineItem, ...]
    tax_rate: Decimal = ZERO  # percent

    @property
    def subtotal(self) -> Decimal:
        return sum((item.amount for item in self.line_items), ZERO)

    @property
    def tax_amount(self) -> Decimal:
        return _money(self.subtotal * self.tax_rate / HUNDRED)

    @property
    def total(self) -> Decimal:
        return self.subtotal + self.tax_amount


@traced_engine(
    "invoice_draft",
    "1.0",
    fingerprint_fields=("default_hourly_rate", "issue_date", "due_in_days", "tax_rate"),
)
def draft_invoice_from_entries(
    entries: Sequence[TimeEntry],
    default_hourly_rate: Any = None,
    issue_date: date | None = None,
    due_in_days: int = DEFAULT_DUE_DAYS,
    client_id: str | None = None,
    project_id: str | None = None,
    tax_rate: Any = ZERO,
    billable_only: bool = False,
) -> InvoiceDraft:
    """Build an invoice draft from the selected entries.

    Client and project default to those of the first entry.

    Raises:
        EmptyInvoiceError: if no entries remain after selection.
        ValueError: if ``issue_date`` is missing.
    """
    selected = [e for e in entries if e.is_billable or not billable_only]
    if not selected:
        raise EmptyInvoiceError()
    if issue_date is None:
        raise ValueError("issue_date is required")

    groups: dict[tuple[str, Decimal], list[TimeEntry]] = {}
    for entry in selected:
        key = (entry.project_id, effective_rate(entry, default_hourly_rate))
        groups.setdefault(key, []).append(entry)

    line_items = []
    for (_, rate), group in groups.items():
        project = group[0].project
        hours = seconds_to_hours(
            sum((effective_duration_seconds(e) for e in group), ZERO)
        )
        name = project.name if project and project.name else FALLBACK_DESCRIPTION
        line_items.append(
            InvoiceLineItem(
                description=f"{name} - {len(group)} entries",
                quantity=hours,
                rate=rate,
                amount=_money(hours * rate),
                time_entry_ids=tuple(e.id for e in group),
            )
        )

    first = selected[0]
    first_name = (
        first.project.name if first.project and first.project.name else FALLBACK_DESCRIPTION
    )
    draft = InvoiceDraft(
        title=f"Invoice for {first_name}",
        client_id=client_id or first.client_id,
        project_id=project_id or first.project_id,
        issue_date=issue_date,
        due_date=issue_date + timedelta(days=due_in_days),
        line_items=tuple(line_items),
        tax_rate=to_decimal(tax_rate),
    )
    logger.info(
        "invoice_drafted",
        extra={
            "line_count": len(line_items),
            "entry_count": len(selected),
            "subtotal": draft.subtotal,
        },
    )
    return draft
