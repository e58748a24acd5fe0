"""
Pytest fixtures for the tracker test suite.

Provides:
- Structured logging configured for the session, LogContext cleared per test
- Deterministic clocks
- Entry, project and client builders
"""

import json
import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from io import StringIO

import pytest

from tracker_config.schema import AnalyticsSettings
from tracker_kernel.domain.clock import DeterministicClock
from tracker_kernel.domain.entries import Client, Project, ProjectStatus, TimeEntry
from tracker_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

# Friday 2024-03-15 12:00 UTC
FIXED_NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture tracker logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            service.compute(...)
            logs = captured_logs()
            assert any(r["message"] == "analytics_computed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("tracker")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Clock fixtures
# =============================================================================


@pytest.fixture
def deterministic_clock():
    """Provide a deterministic clock fixed at FIXED_NOW."""
    return DeterministicClock(FIXED_NOW)


@pytest.fixture
def utc_settings():
    return AnalyticsSettings()


# =============================================================================
# Builders
# =============================================================================


def make_client(client_id="c1", name="Acme"):
    return Client(id=client_id, name=name)


def make_project(
    project_id="p1",
    name="Website",
    client=None,
    client_id=None,
    hourly_rate=None,
    budget=None,
    status=ProjectStatus.ACTIVE,
):
    if client_id is None and client is not None:
        client_id = client.id
    return Project(
        id=project_id,
        name=name,
        client_id=client_id,
        client=client,
        hourly_rate=hourly_rate,
        budget=budget,
        status=status,
    )


_entry_counter = 0


def make_entry(
    project=None,
    start=FIXED_NOW,
    hours=1,
    is_billable=True,
    hourly_rate=None,
    entry_id=None,
    project_id=None,
    description="",
):
    """Closed entry of ``hours`` starting at ``start``."""
    global _entry_counter
    _entry_counter += 1
    seconds = Decimal(str(hours)) * 3600
    if project_id is None:
        project_id = project.id if project is not None else "p1"
    return TimeEntry(
        id=entry_id or f"e{_entry_counter}",
        project_id=project_id,
        start_time=start,
        end_time=start + timedelta(seconds=float(seconds)),
        duration_seconds=seconds,
        is_billable=is_billable,
        hourly_rate=hourly_rate,
        description=description,
        project=project,
    )


@pytest.fixture
def entry_factory():
    return make_entry


@pytest.fixture
def project_factory():
    return make_project
