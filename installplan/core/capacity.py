from __future__ import annotations

from typing import Iterable

from installplan.core.config import PLANNING_CONFIG
from installplan.core.schema import WorkOrder

HOURS_PER_DAY = PLANNING_CONFIG.hours_per_day
OVERFLOW_TOLERANCE = PLANNING_CONFIG.overflow_tolerance


def hours_of(work: WorkOrder) -> float:
    return work.load * HOURS_PER_DAY


def team_load(works: Iterable[WorkOrder], day_key: str, team: str) -> float:
    """Hours committed to ``team`` on ``day_key`` by scheduled work orders."""

    return sum(
        hours_of(work)
        for work in works
        if work.status == "scheduled" and work.scheduled_date == day_key and work.assigned_team == team
    )


def is_overflow(current_hours: float, incoming_hours: float) -> bool:
    return current_hours + incoming_hours > HOURS_PER_DAY + OVERFLOW_TOLERANCE


def available_hours(current_hours: float) -> float:
    """Free hours against the plain daily capacity, without the overflow tolerance."""

    return max(0.0, HOURS_PER_DAY - current_hours)
