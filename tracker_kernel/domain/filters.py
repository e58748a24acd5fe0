"""
Analytics filter value objects.

``AnalyticsFilter`` is what the dashboard sends; ``ResolvedRange`` is the
concrete, timezone-aware interval the date-range resolver produces from it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Iterable, Mapping

from tracker_kernel.exceptions import InvalidDateRangeError

Bound = datetime | date | str


class DateRangePreset(str, Enum):
    """Date range presets offered by the analytics dashboard."""

    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"
    CUSTOM = "custom"


@dataclass(frozen=True)
class AnalyticsFilter:
    """
    Filter applied to the entry collection before aggregation.

    Contract:
        - ``start_date``/``end_date`` are only consulted for ``CUSTOM``.
        - Empty ``project_ids``/``client_ids`` mean "no restriction".
        - ``include_non_billable=False`` keeps billable entries only.
    """

    date_range: DateRangePreset = DateRangePreset.MONTH
    start_date: Bound | None = None
    end_date: Bound | None = None
    project_ids: frozenset[str] = field(default_factory=frozenset)
    client_ids: frozenset[str] = field(default_factory=frozenset)
    include_non_billable: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.date_range, DateRangePreset):
            object.__setattr__(
                self, "date_range", _parse_preset(self.date_range)
            )
        object.__setattr__(self, "project_ids", _id_set(self.project_ids))
        object.__setattr__(self, "client_ids", _id_set(self.client_ids))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AnalyticsFilter:
        """Parse a dashboard payload (camelCase or snake_case keys).

        A missing date range defaults to the current month.

        Raises:
            InvalidDateRangeError: if the date range is not a known preset.
        """

        def pick(camel: str, snake: str) -> Any:
            return data.get(camel, data.get(snake))

        include_non_billable = pick("includeNonBillable", "include_non_billable")
        return cls(
            date_range=_parse_preset(
                pick("dateRange", "date_range") or DateRangePreset.MONTH
            ),
            start_date=pick("startDate", "start_date"),
            end_date=pick("endDate", "end_date"),
            project_ids=pick("projectIds", "project_ids") or (),
            client_ids=pick("clientIds", "client_ids") or (),
            include_non_billable=include_non_billable is not False,
        )


@dataclass(frozen=True)
class ResolvedRange:
    """Concrete inclusive interval ``[start, end]``.

    An inverted interval (``start > end``) is legal and contains nothing.
    """

    start: datetime
    end: datetime

    @property
    def is_empty(self) -> bool:
        return self.start > self.end

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


def _parse_preset(value: Any) -> DateRangePreset:
    if isinstance(value, DateRangePreset):
        return value
    try:
        return DateRangePreset(str(value).lower())
    except ValueError:
        raise InvalidDateRangeError(
            value, tuple(p.value for p in DateRangePreset)
        ) from None


def _id_set(values: Iterable[Any] | None) -> frozenset[str]:
    if not values:
        return frozenset()
    if isinstance(values, str):
        return frozenset({values})
    return frozenset(str(v) for v in values)
