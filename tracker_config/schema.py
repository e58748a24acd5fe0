"""
AnalyticsSettings schema.

The validated, frozen settings object every service receives.  YAML
files are parsed into this type by the loader; nothing else constructs it
from raw input.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from zoneinfo import ZoneInfo

from tracker_kernel.domain.analytics import DEFAULT_LABELS, SentinelLabels


@dataclass(frozen=True)
class AnalyticsSettings:
    """Settings for analytics, reports and invoicing."""

    timezone: str = "UTC"
    week_starts_on: int = 0  # 0=Sunday .. 6=Saturday
    default_hourly_rate: Decimal | None = None
    currency: str = "USD"
    invoice_due_days: int = 30
    include_unassigned_client_bucket: bool = True
    labels: SentinelLabels = DEFAULT_LABELS
    checksum: str = field(default="", compare=False)

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)
