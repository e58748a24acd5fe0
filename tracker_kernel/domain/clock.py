"""
Clock -- Injectable time source.

Responsibility:
    Gives services a single place to ask "what time is it?" so that the
    analytics engines and the timer never call ``datetime.now()`` directly.
    Week/month trend windows, the default custom-range end and timer
    durations all derive from the injected clock.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O (except SystemClock,
    which is the one sanctioned I/O boundary for time).

Failure modes:
    - SequentialClock raises ValueError when constructed with no times.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Iterator


class Clock(ABC):
    """
    Abstract clock interface.

    Contract:
        Services that need the current time receive a Clock via constructor
        injection.  Engines receive ``now`` as an explicit argument.

    Guarantees:
        - ``now()`` returns a timezone-aware ``datetime``.
        - ``now_in(tz)`` returns the same instant expressed in ``tz``.
    """

    @abstractmethod
    def now(self) -> datetime:
        """Get the current time."""
        ...

    def now_utc(self) -> datetime:
        """Get the current UTC time."""
        return self.now().astimezone(timezone.utc)

    def now_in(self, tz: tzinfo) -> datetime:
        """Get the current time in the given zone."""
        return self.now().astimezone(tz)


class SystemClock(Clock):
    """Production clock that returns actual system time (UTC)."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class DeterministicClock(Clock):
    """
    Test clock with controlled time.

    Guarantees:
        - ``now()`` returns the same value on repeated calls until
          ``advance()`` or ``set_time()`` is called.
        - ``tick()`` advances by exactly 1 second and returns the new time.
    """

    def __init__(self, fixed_time: datetime | None = None):
        """
        Args:
            fixed_time: Starting instant.  Naive values are taken as UTC.
                        Defaults to 2024-01-01 12:00 UTC.
        """
        self._fixed_time = _aware(
            fixed_time or datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        )
        self._advance_seconds = 0

    def now(self) -> datetime:
        return self._fixed_time + timedelta(seconds=self._advance_seconds)

    def set_time(self, time: datetime) -> None:
        """Set the clock to a specific time."""
        self._fixed_time = _aware(time)
        self._advance_seconds = 0

    def advance(self, seconds: int = 1) -> None:
        """Advance the clock by the specified seconds."""
        self._advance_seconds += seconds

    def tick(self) -> datetime:
        """Advance by 1 second and return new time."""
        self.advance(1)
        return self.now()


class SequentialClock(Clock):
    """
    Clock that returns times from a predefined list, one per call.

    After exhaustion the last value repeats.

    Raises:
        ValueError: If initialized with an empty list.
    """

    def __init__(self, times: list[datetime]):
        if not times:
            raise ValueError("SequentialClock requires at least one time")
        self._times: Iterator[datetime] = iter([_aware(t) for t in times])
        self._last_time: datetime | None = None

    def now(self) -> datetime:
        self._last_time = next(self._times, self._last_time)
        return self._last_time


def _aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
