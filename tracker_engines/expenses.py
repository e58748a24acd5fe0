"""
Module: tracker_engines.expenses
Responsibility:
    Summarize tracked expenses: overall, billable and reimbursable totals
    plus a per-category breakdown.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Decimal-only arithmetic.
    - Negative or non-finite amounts contribute 0.
    - Categories are ordered by total, largest first; ties keep first
      appearance order.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Sequence

from tracker_kernel.domain.entries import Number
from tracker_engines.earnings import ZERO, to_decimal
from tracker_engines.tracer import traced_engine


@dataclass(frozen=True)
class Expense:
    """A single business expense."""

    id: str
    amount: Number
    category: str
    expense_date: date | None = None
    description: str = ""
    project_id: str | None = None
    is_billable: bool = False
    is_reimbursable: bool = False

    @property
    def normalized_amount(self) -> Decimal:
        amount = to_decimal(self.amount)
        return amount if amount > ZERO else ZERO


@dataclass(frozen=True)
class ExpenseCategoryTotal:
    category: str
    total: Decimal
    count: int
    expense_ids: tuple[str, ...]


@dataclass(frozen=True)
class ExpenseSummary:
    total: Decimal
    billable: Decimal
    reimbursable: Decimal
    categories: tuple[ExpenseCategoryTotal, ...]

    @property
    def count(self) -> int:
        return sum(c.count for c in self.categories)


@traced_engine("expense_summary", "1.0")
def summarize_expenses(expenses: Sequence[Expense]) -> ExpenseSummary:
    by_category: dict[str, list[Expense]] = {}
    for expense in expenses:
        by_category.setdefault(expense.category, []).append(expense)

    categories = [
        ExpenseCategoryTotal(
            category=category,
            total=sum((e.normalized_amount for e in group), ZERO),
            count=len(group),
            expense_ids=tuple(e.id for e in group),
        )
        for category, group in by_category.items()
    ]

    return ExpenseSummary(
        total=sum((e.normalized_amount for e in expenses), ZERO),
        billable=sum((e.normalized_amount for e in expenses if e.is_billable), ZERO),
        reimbursable=sum(
            (e.normalized_amount for e in expenses if e.is_reimbursable), ZERO
        ),
        categories=tuple(sorted(categories, key=lambda c: c.total, reverse=True)),
    )
