"""
Module: tracker_engines.goals
Responsibility:
    Goal progress for the goal tracker: progress percentage per goal, the
    current value of a goal measured from an analytics result, and the
    completion summary shown above the goal list.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Progress is capped at 100 and is 0 for a non-positive target.
    - ``measure_goal`` reads only the supplied ``AnalyticsResult``.

Failure modes:
    - ``Goal`` raises ValueError for a blank title.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Sequence

from tracker_kernel.domain.analytics import AnalyticsResult
from tracker_kernel.domain.entries import Number
from tracker_engines.earnings import HUNDRED, ZERO, safe_percentage, to_decimal


class GoalType(str, Enum):
    HOURS = "hours"
    EARNINGS = "earnings"
    PROJECTS = "projects"
    CLIENTS = "clients"
    PRODUCTIVITY = "productivity"


class GoalStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    PAUSED = "paused"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Goal:
    id: str
    title: str
    goal_type: GoalType
    target_value: Number
    current_value: Number = 0
    target_date: date | None = None
    status: GoalStatus = GoalStatus.ACTIVE
    description: str = ""

    def __post_init__(self) -> None:
        if not self.title or not self.title.strip():
            raise ValueError("Goal title cannot be blank")


@dataclass(frozen=True)
class GoalSummary:
    total: int
    active: int
    completed: int
    completion_rate: Decimal  # percent of goals completed


def goal_progress(goal: Goal) -> Decimal:
    """``current / target * 100`` capped at 100; 0 for a non-positive target."""
    target = to_decimal(goal.target_value)
    if target <= ZERO:
        return ZERO
    progress = to_decimal(goal.current_value) / target * HUNDRED
    return max(ZERO, min(progress, HUNDRED))


def is_goal_reached(goal: Goal) -> bool:
    return goal_progress(goal) >= HUNDRED


def measure_goal(goal_type: GoalType, result: AnalyticsResult) -> Decimal:
    """Current value of a goal of ``goal_type`` for an analytics result.

    Clients are counted excluding the combined "No Client" bucket.
    """
    if goal_type == GoalType.HOURS:
        return result.metrics.total_hours
    if goal_type == GoalType.EARNINGS:
        return result.total_earnings
    if goal_type == GoalType.PROJECTS:
        return Decimal(len(result.projects))
    if goal_type == GoalType.CLIENTS:
        return Decimal(sum(1 for c in result.clients if c.client_id is not None))
    return result.metrics.productivity_rate


def summarize_goals(goals: Sequence[Goal]) -> GoalSummary:
    completed = sum(1 for g in goals if g.status == GoalStatus.COMPLETED)
    active = sum(1 for g in goals if g.status == GoalStatus.ACTIVE)
    return GoalSummary(
        total=len(goals),
        active=active,
        completed=completed,
        completion_rate=safe_percentage(Decimal(completed), Decimal(len(goals))),
    )
