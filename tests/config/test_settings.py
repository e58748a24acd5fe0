"""
Tests for tracker_config.get_active_settings and the settings loader.

Covers:
- Bundled defaults
- User overlay (partial files, label merging)
- Validation errors with structured fields
- Checksum determinism
- TRACKER_CONFIG_TRACE emission
"""

from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest
import yaml

from tracker_config import get_active_settings
from tracker_config.loader import compute_checksum, merge_settings, parse_settings
from tracker_kernel.exceptions import ConfigurationError, UnknownTimezoneError


def _write(tmp_path, data, name="settings.yaml"):
    path = tmp_path / name
    path.write_text(yaml.safe_dump(data))
    return path


class TestDefaults:
    def test_bundled_defaults(self):
        settings = get_active_settings()

        assert settings.timezone == "UTC"
        assert settings.week_starts_on == 0
        assert settings.default_hourly_rate is None
        assert settings.currency == "USD"
        assert settings.invoice_due_days == 30
        assert settings.include_unassigned_client_bucket is True
        assert settings.labels.no_client == "No Client"
        assert settings.tz == ZoneInfo("UTC")

    def test_checksum_is_deterministic(self):
        assert get_active_settings().checksum == get_active_settings().checksum
        assert len(get_active_settings().checksum) == 64


class TestOverlay:
    def test_partial_user_file(self, tmp_path):
        path = _write(
            tmp_path,
            {"timezone": "Europe/Berlin", "default_hourly_rate": 85.5, "currency": "eur"},
        )
        settings = get_active_settings(path)

        assert settings.timezone == "Europe/Berlin"
        assert settings.default_hourly_rate == Decimal("85.5")
        assert settings.currency == "EUR"
        assert settings.week_starts_on == 0

    def test_labels_merge_key_by_key(self, tmp_path):
        path = _write(tmp_path, {"labels": {"no_client": "Personal"}})
        settings = get_active_settings(str(path))

        assert settings.labels.no_client == "Personal"
        assert settings.labels.unknown_project == "Unknown Project"

    def test_overlay_changes_checksum(self, tmp_path):
        path = _write(tmp_path, {"week_starts_on": 1})
        assert get_active_settings(path).checksum != get_active_settings().checksum

    def test_empty_user_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert get_active_settings(path) == get_active_settings()

    def test_missing_user_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_active_settings(tmp_path / "nope.yaml")

    def test_merge_settings(self):
        merged = merge_settings(
            {"currency": "USD", "labels": {"a": "1", "b": "2"}},
            {"labels": {"b": "3"}},
        )
        assert merged == {"currency": "USD", "labels": {"a": "1", "b": "3"}}


class TestValidation:
    def test_unknown_timezone(self, tmp_path):
        path = _write(tmp_path, {"timezone": "Mars/Olympus_Mons"})

        with pytest.raises(UnknownTimezoneError) as exc_info:
            get_active_settings(path)

        assert exc_info.value.code == "UNKNOWN_TIMEZONE"
        assert exc_info.value.timezone == "Mars/Olympus_Mons"
        assert exc_info.value.field == "timezone"

    @pytest.mark.parametrize(
        "data, field",
        [
            ({"week_starts_on": 7}, "week_starts_on"),
            ({"week_starts_on": "monday"}, "week_starts_on"),
            ({"week_starts_on": True}, "week_starts_on"),
            ({"default_hourly_rate": -1}, "default_hourly_rate"),
            ({"default_hourly_rate": "lots"}, "default_hourly_rate"),
            ({"invoice_due_days": -3}, "invoice_due_days"),
            ({"currency": ""}, "currency"),
            ({"include_unassigned_client_bucket": "yes"}, "include_unassigned_client_bucket"),
            ({"labels": {"no_client": ""}}, "labels.no_client"),
            ({"labels": {"nickname": "x"}}, "labels"),
            ({"colour": "blue"}, "colour"),
        ],
    )
    def test_invalid_values(self, data, field):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_settings({**data})

        assert exc_info.value.field == field
        assert exc_info.value.code in ("CONFIGURATION_INVALID", "UNKNOWN_TIMEZONE")

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError):
            get_active_settings(path)

    def test_checksum_ignores_key_order(self):
        assert compute_checksum({"a": 1, "b": 2}) == compute_checksum({"b": 2, "a": 1})


class TestConfigTrace:
    def test_trace_emitted(self, tmp_path, captured_logs):
        path = _write(tmp_path, {"timezone": "Asia/Tokyo"})
        settings = get_active_settings(path)

        traces = [r for r in captured_logs() if r["message"] == "TRACKER_CONFIG_TRACE"]
        assert len(traces) == 1
        assert traces[0]["trace_type"] == "TRACKER_CONFIG_TRACE"
        assert traces[0]["checksum"] == settings.checksum
        assert traces[0]["timezone"] == "Asia/Tokyo"
        assert traces[0]["source"] == str(path)
