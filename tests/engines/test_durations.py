"""Tests for duration and money display helpers."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from tracker_engines.durations import (
    calculate_earnings,
    format_currency,
    format_duration,
    format_duration_short,
    is_time_overlapping,
    parse_duration,
)

UTC = timezone.utc
T0 = datetime(2024, 3, 5, 9, 0, tzinfo=UTC)


class TestFormatting:
    @pytest.mark.parametrize(
        "seconds, expected",
        [(0, "0:00:00"), (59, "0:00:59"), (3725, "1:02:05"), (36000, "10:00:00"), (-5, "0:00:00")],
    )
    def test_format_duration(self, seconds, expected):
        assert format_duration(seconds) == expected

    def test_format_duration_truncates_fractions(self):
        assert format_duration(Decimal("61.9")) == "0:01:01"

    @pytest.mark.parametrize(
        "seconds, expected",
        [(2700, "45m"), (5400, "1h 30m"), (7200, "2h 0m"), (-1, "0h 0m")],
    )
    def test_format_duration_short(self, seconds, expected):
        assert format_duration_short(seconds) == expected

    def test_format_currency(self):
        assert format_currency(Decimal("1234.5")) == "$1,234.50"
        assert format_currency(-5, "eur") == "-€5.00"
        assert format_currency(10, "CHF") == "CHF 10.00"


class TestParsing:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("1:30:00", 5400),
            ("0:00:45", 45),
            ("1h 30m", 5400),
            ("2h30m", 9000),
            ("90m", 5400),
            ("  15m ", 900),
            ("ninety minutes", 0),
            ("", 0),
        ],
    )
    def test_parse_duration(self, text, expected):
        assert parse_duration(text) == expected


class TestEarningsAndOverlap:
    def test_calculate_earnings(self):
        assert calculate_earnings(5400, 100) == Decimal("150")

    def test_overlapping(self):
        assert is_time_overlapping(
            T0, T0 + timedelta(hours=2), T0 + timedelta(hours=1), T0 + timedelta(hours=3), T0
        )

    def test_touching_spans_do_not_overlap(self):
        assert not is_time_overlapping(
            T0, T0 + timedelta(hours=1), T0 + timedelta(hours=1), T0 + timedelta(hours=2), T0
        )

    def test_open_span_runs_until_now(self):
        now = T0 + timedelta(hours=5)
        assert is_time_overlapping(T0, None, T0 + timedelta(hours=4), T0 + timedelta(hours=6), now)
        assert not is_time_overlapping(
            T0, None, T0 + timedelta(hours=6), T0 + timedelta(hours=7), now
        )

    def test_naive_span_read_in_zone_of_now(self):
        naive_start = datetime(2024, 3, 5, 10, 0)
        assert is_time_overlapping(
            T0, T0 + timedelta(hours=2), naive_start, naive_start + timedelta(hours=1), T0
        )
        assert not is_time_overlapping(
            T0, T0 + timedelta(hours=1), naive_start, None, T0 + timedelta(hours=3)
        )

    def test_aware_spans_with_naive_now(self):
        now = datetime(2024, 3, 5, 12, 0)
        assert is_time_overlapping(T0, None, T0 + timedelta(hours=2), None, now)
