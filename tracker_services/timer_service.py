"""
tracker_services.timer_service -- The single running timer.

Responsibility:
    Start, stop, pause and resume the one active time entry, report its
    elapsed time and hand out a provisional entry for live analytics.

Architecture position:
    Services -- stateful orchestration.  All timestamps come from the
    injected Clock; entry ids from the injected id factory.

Invariants enforced:
    - At most one running entry: ``start`` stops the previous one first.
    - A stopped entry has ``end_time`` set and a whole-second
      ``duration_seconds`` that is never negative.
    - ``pause`` is the same as ``stop``; ``resume`` starts a new entry on
      the selected project with the last description.

Failure modes:
    - NoProjectSelectedError from ``resume`` when no project was ever
      selected or started.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from dataclasses import dataclass
from uuid import uuid4

from tracker_kernel.domain.clock import Clock
from tracker_kernel.domain.entries import Project, TimeEntry
from tracker_kernel.exceptions import NoProjectSelectedError
from tracker_kernel.logging_config import LogContext, get_logger

logger = get_logger("services.timer")


@dataclass(frozen=True)
class TimerState:
    """Immutable snapshot of the timer."""

    active_entry: TimeEntry | None
    is_running: bool
    elapsed_seconds: int
    selected_project: Project | None


class TimerService:
    """
    Tracks the currently running time entry.

    Contract:
        Receives a Clock (and optionally an id factory) via constructor
        injection.  Persisting entries is the caller's job: ``start``
        returns the new open entry and ``stop`` the closed one.
    """

    def __init__(self, clock: Clock, id_factory: Callable[[], object] = uuid4):
        self._clock = clock
        self._id_factory = id_factory
        self._active: TimeEntry | None = None
        self._selected_project: Project | None = None
        self._last_description = ""
        self._completed: list[TimeEntry] = []

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._active is not None

    @property
    def active_entry(self) -> TimeEntry | None:
        return self._active

    @property
    def selected_project(self) -> Project | None:
        return self._selected_project

    @property
    def completed_entries(self) -> tuple[TimeEntry, ...]:
        """Stopped entries since the last ``drain_completed``."""
        return tuple(self._completed)

    @property
    def state(self) -> TimerState:
        return TimerState(
            active_entry=self._active,
            is_running=self.is_running,
            elapsed_seconds=self.elapsed_seconds(),
            selected_project=self._selected_project,
        )

    def elapsed_seconds(self) -> int:
        """Whole seconds since the active entry started; 0 when idle."""
        if self._active is None:
            return 0
        return self._seconds_between(self._active.start_time)

    def provisional_entry(self) -> TimeEntry | None:
        """The active entry with its duration so far, for live analytics."""
        if self._active is None:
            return None
        return dataclasses.replace(self._active, duration_seconds=self.elapsed_seconds())

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def select_project(self, project: Project | None) -> None:
        self._selected_project = project

    def drain_completed(self) -> tuple[TimeEntry, ...]:
        """Hand over the stopped entries not yet persisted and forget them."""
        drained = tuple(self._completed)
        self._completed.clear()
        return drained

    def restore(self, entry: TimeEntry) -> None:
        """Adopt an open entry loaded from the store as the running timer."""
        if not entry.is_open:
            raise ValueError(f"Entry {entry.id} is already stopped")
        self._active = entry
        self._last_description = entry.description
        if entry.project is not None:
            self._selected_project = entry.project

    def start(
        self,
        project: Project,
        description: str = "",
        is_billable: bool = True,
    ) -> TimeEntry:
        """Start a new entry on ``project``, stopping any running one first."""
        if self._active is not None:
            self.stop()

        entry = TimeEntry(
            id=str(self._id_factory()),
            project_id=project.id,
            start_time=self._clock.now(),
            is_billable=is_billable,
            description=description,
            project=project,
        )
        self._active = entry
        self._selected_project = project
        self._last_description = description

        with LogContext.bind(project_id=project.id, entry_id=entry.id):
            logger.info("timer_started", extra={"start_time": entry.start_time})
        return entry

    def stop(self) -> TimeEntry | None:
        """Close the running entry; no-op (``None``) when idle."""
        if self._active is None:
            return None

        active = self._active
        end_time = self._clock.now()
        stopped = dataclasses.replace(
            active,
            end_time=end_time,
            duration_seconds=self._seconds_between(active.start_time, end_time),
        )
        self._active = None
        self._last_description = stopped.description
        self._completed.append(stopped)

        with LogContext.bind(project_id=stopped.project_id, entry_id=stopped.id):
            logger.info(
                "timer_stopped",
                extra={"duration_seconds": stopped.duration_seconds},
            )
        return stopped

    def pause(self) -> TimeEntry | None:
        return self.stop()

    def resume(self) -> TimeEntry:
        """Start a new entry on the selected project with the last description.

        Raises:
            NoProjectSelectedError: if no project is selected.
        """
        if self._selected_project is None:
            raise NoProjectSelectedError()
        return self.start(self._selected_project, self._last_description)

    def _seconds_between(self, start, end=None) -> int:
        end = end if end is not None else self._clock.now()
        if start.tzinfo is None:
            start = start.replace(tzinfo=end.tzinfo)
        return max(0, int((end - start).total_seconds()))
