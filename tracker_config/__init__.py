"""
tracker_config -- single public entrypoint for analytics settings.

Responsibility:
    Provides the ONLY way to obtain settings at runtime through
    ``get_active_settings()``.  No other component reads configuration
    files or environment variables.  Services receive the returned
    ``AnalyticsSettings`` by constructor injection.

Architecture position:
    Configuration -- sits above ``tracker_kernel`` and below
    ``tracker_services``.  The kernel and the engines never import from
    ``tracker_config``.

Invariants enforced:
    - Single entrypoint: all runtime settings flow through
      ``get_active_settings()``.
    - Deterministic: the same files always produce the same checksum.

Failure modes:
    - ``FileNotFoundError`` -- the user settings file does not exist.
    - ``ConfigurationError`` -- unknown keys or invalid values.
    - ``UnknownTimezoneError`` -- the timezone is not a known IANA zone.

Every successful call emits a ``TRACKER_CONFIG_TRACE`` log entry carrying
the checksum and the effective values, so any computed analytics can be
tied back to the settings that shaped it.
"""

from __future__ import annotations

from pathlib import Path

from tracker_config.loader import load_yaml_file, merge_settings, parse_settings
from tracker_config.schema import AnalyticsSettings
from tracker_kernel.logging_config import get_logger

__all__ = ["AnalyticsSettings", "get_active_settings"]

_logger = get_logger("config")

_DEFAULTS_FILE = Path(__file__).parent / "defaults" / "analytics.yaml"


def get_active_settings(config_path: Path | str | None = None) -> AnalyticsSettings:
    """The ONLY public settings entrypoint.

    Args:
        config_path: Optional user YAML file overlaid on the bundled
            defaults.  Keys it omits keep their default values.

    Returns:
        A frozen, validated ``AnalyticsSettings``.

    Raises:
        FileNotFoundError: If ``config_path`` does not exist.
        ConfigurationError: If the merged settings fail validation.
    """
    data = load_yaml_file(_DEFAULTS_FILE)
    if config_path is not None:
        data = merge_settings(data, load_yaml_file(Path(config_path)))

    settings = parse_settings(data)

    _logger.info(
        "TRACKER_CONFIG_TRACE",
        extra={
            "trace_type": "TRACKER_CONFIG_TRACE",
            "source": str(config_path) if config_path is not None else "defaults",
            "checksum": settings.checksum,
            "timezone": settings.timezone,
            "week_starts_on": settings.week_starts_on,
            "currency": settings.currency,
        },
    )
    return settings
