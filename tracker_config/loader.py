"""
Settings Loader (``tracker_config.loader``).

Responsibility
--------------
Loads YAML settings files, overlays user values on the bundled defaults
and parses the result into a frozen ``AnalyticsSettings``.  Services never
call this directly; the single runtime entry point is
``tracker_config.get_active_settings()``.

Invariants enforced
-------------------
* Unknown keys and invalid values raise ``ConfigurationError`` naming the
  offending field; nothing is silently dropped or coerced.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the merged
  settings, independent of key order.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* A file whose top level is not a mapping  -> ``ConfigurationError``.
"""

from __future__ import annotations

import hashlib
import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Mapping
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from tracker_kernel.domain.analytics import SentinelLabels
from tracker_kernel.exceptions import ConfigurationError, UnknownTimezoneError
from tracker_config.schema import AnalyticsSettings

_SETTING_KEYS = frozenset(
    {
        "timezone",
        "week_starts_on",
        "default_hourly_rate",
        "currency",
        "invoice_due_days",
        "include_unassigned_client_bucket",
        "labels",
    }
)
_LABEL_KEYS = frozenset({"unknown_project", "unknown_client", "no_client"})


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Postconditions:
        - Returns a ``dict`` (empty if the YAML document is empty).
    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ConfigurationError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(str(path), "top level must be a mapping")
    return data


def merge_settings(
    defaults: Mapping[str, Any],
    overrides: Mapping[str, Any],
) -> dict[str, Any]:
    """Overlay ``overrides`` on ``defaults``; ``labels`` merge key by key."""
    merged = dict(defaults)
    for key, value in overrides.items():
        if key == "labels" and isinstance(value, Mapping):
            merged["labels"] = {**(defaults.get("labels") or {}), **value}
        else:
            merged[key] = value
    return merged


def compute_checksum(data: Mapping[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


# ---------------------------------------------------------------------------
# Field parsers
# ---------------------------------------------------------------------------


def parse_timezone(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigurationError("timezone", "must be a non-empty string")
    name = value.strip()
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise UnknownTimezoneError(name) from None
    return name


def _parse_int(field: str, value: Any, low: int, high: int | None = None) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(field, f"must be an integer, got {value!r}")
    if value < low or (high is not None and value > high):
        bounds = f"{low}..{high}" if high is not None else f">= {low}"
        raise ConfigurationError(field, f"must be {bounds}, got {value}")
    return value


def parse_hourly_rate(value: Any) -> Decimal | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ConfigurationError("default_hourly_rate", "must be a number")
    try:
        rate = Decimal(str(value))
    except InvalidOperation:
        raise ConfigurationError(
            "default_hourly_rate", f"must be a number, got {value!r}"
        ) from None
    if not rate.is_finite() or rate < 0:
        raise ConfigurationError(
            "default_hourly_rate", f"must be a finite, non-negative number, got {value!r}"
        )
    return rate


def parse_labels(value: Any) -> SentinelLabels:
    if value is None:
        return SentinelLabels()
    if not isinstance(value, Mapping):
        raise ConfigurationError("labels", "must be a mapping")
    unknown = set(value) - _LABEL_KEYS
    if unknown:
        raise ConfigurationError("labels", f"unknown keys: {', '.join(sorted(unknown))}")
    for key, label in value.items():
        if not isinstance(label, str) or not label.strip():
            raise ConfigurationError(f"labels.{key}", "must be a non-empty string")
    return SentinelLabels(**value)


def parse_settings(data: Mapping[str, Any]) -> AnalyticsSettings:
    """
    Validate merged settings and build ``AnalyticsSettings``.

    Raises:
        ConfigurationError: for unknown keys or invalid values.
        UnknownTimezoneError: if ``timezone`` is not a known IANA zone.
    """
    unknown = set(data) - _SETTING_KEYS
    if unknown:
        raise ConfigurationError(sorted(unknown)[0], "unknown setting")

    currency = data.get("currency", "USD")
    if not isinstance(currency, str) or not currency.strip():
        raise ConfigurationError("currency", "must be a non-empty currency code")

    include_unassigned = data.get("include_unassigned_client_bucket", True)
    if not isinstance(include_unassigned, bool):
        raise ConfigurationError(
            "include_unassigned_client_bucket", "must be true or false"
        )

    return AnalyticsSettings(
        timezone=parse_timezone(data.get("timezone", "UTC")),
        week_starts_on=_parse_int("week_starts_on", data.get("week_starts_on", 0), 0, 6),
        default_hourly_rate=parse_hourly_rate(data.get("default_hourly_rate")),
        currency=currency.strip().upper(),
        invoice_due_days=_parse_int(
            "invoice_due_days", data.get("invoice_due_days", 30), 0
        ),
        include_unassigned_client_bucket=include_unassigned,
        labels=parse_labels(data.get("labels")),
        checksum=compute_checksum(data),
    )
