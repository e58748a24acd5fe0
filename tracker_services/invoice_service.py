"""
tracker_services.invoice_service -- Invoice drafting with account settings.

Responsibility:
    Draft invoices from selected time entries using the configured default
    hourly rate, payment terms (``invoice_due_days``) and currency, and
    format invoice amounts for display.

Architecture position:
    Services -- orchestration over ``tracker_engines.invoicing`` and
    ``tracker_engines.durations``.  The issue date defaults to today in the
    configured timezone, read from the injected Clock.

Failure modes:
    - EmptyInvoiceError when no entries remain after selection.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Sequence

from tracker_config.schema import AnalyticsSettings
from tracker_engines.durations import format_currency
from tracker_engines.earnings import ZERO, to_local
from tracker_engines.invoicing import InvoiceDraft, draft_invoice_from_entries
from tracker_kernel.domain.clock import Clock
from tracker_kernel.domain.entries import TimeEntry
from tracker_kernel.logging_config import get_logger

logger = get_logger("services.invoice")


class InvoiceService:
    """
    Drafts invoices under the account's payment terms and currency.

    Contract:
        Receives a Clock and AnalyticsSettings via constructor injection.
        Explicit arguments override the settings for a single draft.
    """

    def __init__(self, clock: Clock, settings: AnalyticsSettings):
        self._clock = clock
        self._settings = settings

    @property
    def currency(self) -> str:
        return self._settings.currency

    def today(self) -> date:
        return to_local(self._clock.now(), self._settings.tz).date()

    def draft(
        self,
        entries: Sequence[TimeEntry],
        *,
        issue_date: date | None = None,
        due_in_days: int | None = None,
        default_hourly_rate: Any = None,
        tax_rate: Any = ZERO,
        billable_only: bool = False,
        client_id: str | None = None,
        project_id: str | None = None,
    ) -> InvoiceDraft:
        settings = self._settings
        draft = draft_invoice_from_entries(
            entries,
            default_hourly_rate=(
                default_hourly_rate
                if default_hourly_rate is not None
                else settings.default_hourly_rate
            ),
            issue_date=issue_date or self.today(),
            due_in_days=due_in_days if due_in_days is not None else settings.invoice_due_days,
            client_id=client_id,
            project_id=project_id,
            tax_rate=tax_rate,
            billable_only=billable_only,
        )
        logger.info(
            "invoice_prepared",
            extra={
                "currency": settings.currency,
                "total": draft.total,
                "due_date": draft.due_date,
            },
        )
        return draft

    def format_amount(self, amount: Any) -> str:
        """Format an amount in the configured currency."""
        return format_currency(amount, self._settings.currency)
