"""
Time entry, project and client value objects.

Responsibility
--------------
Immutable snapshots of the records the entry store hands to the analytics
core.  Entries arrive already joined with their project, and projects with
their client; the core never fetches anything itself.

Architecture position
---------------------
**Kernel > Domain** -- pure data definitions with ZERO I/O.

Notes
-----
* Numeric fields (durations, rates, budgets) are stored as received.  They
  may be ``int``, ``float`` or ``Decimal`` and may even be non-finite; the
  engines normalize them (``tracker_engines.earnings.to_decimal``) rather
  than rejecting them here, so a bad row never aborts an aggregation.
* ``from_record`` accepts the row shape produced by the store
  (``duration`` / ``hourly_rate`` / nested ``project`` and ``client``).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Mapping

Number = int | float | Decimal


class ProjectStatus(str, Enum):
    """Project lifecycle states."""

    ACTIVE = "active"
    COMPLETED = "completed"
    PAUSED = "paused"
    ARCHIVED = "archived"


@dataclass(frozen=True)
class Client:
    """A client that owns zero or more projects."""

    id: str
    name: str

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Client:
        return cls(id=str(record["id"]), name=record.get("name") or "")


@dataclass(frozen=True)
class Project:
    """A project, optionally linked to a client.

    ``client_id`` may be set while ``client`` is missing (deleted or not
    joined); rollups then label the client as unknown.
    """

    id: str
    name: str
    client_id: str | None = None
    client: Client | None = None
    hourly_rate: Number | None = None
    budget: Number | None = None
    status: ProjectStatus = ProjectStatus.ACTIVE

    @property
    def is_completed(self) -> bool:
        return self.status == ProjectStatus.COMPLETED

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Project:
        client_record = record.get("client")
        client = Client.from_record(client_record) if client_record else None
        client_id = record.get("client_id")
        if client_id is None and client is not None:
            client_id = client.id
        return cls(
            id=str(record["id"]),
            name=record.get("name") or "",
            client_id=str(client_id) if client_id is not None else None,
            client=client,
            hourly_rate=_parse_number(record.get("hourly_rate")),
            budget=_parse_number(record.get("budget")),
            status=ProjectStatus(record.get("status") or ProjectStatus.ACTIVE.value),
        )


@dataclass(frozen=True)
class TimeEntry:
    """One recorded (or in-progress) span of worked time tied to a project.

    ``duration_seconds`` is ``None`` while the entry is open (no
    ``end_time``), unless the caller supplied a provisional duration.
    ``hourly_rate`` is the entry-level override rate.
    """

    id: str
    project_id: str
    start_time: datetime
    end_time: datetime | None = None
    duration_seconds: Number | None = None
    is_billable: bool = True
    hourly_rate: Number | None = None
    description: str = ""
    project: Project | None = None

    @property
    def is_open(self) -> bool:
        return self.end_time is None

    @property
    def client_id(self) -> str | None:
        """Client id via the joined project, if any."""
        if self.project is None:
            return None
        return self.project.client_id

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> TimeEntry:
        """Build an entry from a store row.

        Raises:
            KeyError: if ``id``, ``project_id`` or ``start_time`` is missing.
            ValueError: if a timestamp is not ISO-8601.
        """
        project_record = record.get("project")
        end_time = record.get("end_time")
        return cls(
            id=str(record["id"]),
            project_id=str(record["project_id"]),
            start_time=_parse_timestamp(record["start_time"]),
            end_time=_parse_timestamp(end_time) if end_time else None,
            duration_seconds=_parse_number(
                record.get("duration_seconds", record.get("duration"))
            ),
            is_billable=bool(record.get("is_billable", True)),
            hourly_rate=_parse_number(record.get("hourly_rate")),
            description=record.get("description") or "",
            project=Project.from_record(project_record) if project_record else None,
        )


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def _parse_number(value: Any) -> Number | None:
    """Keep numbers as-is; turn numeric strings into Decimal; drop the rest."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return None
