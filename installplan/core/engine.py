"""Capacity-constrained assignment and splitting of work orders.

Every function here is pure: it receives a :class:`PlanState` and returns the
next one without touching the input. Committing, persisting and reconciling
the returned plan is the caller's job.
"""
from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Iterable, Literal

from installplan.core import capacity
from installplan.core.calendar import next_working_day
from installplan.core.config import PLANNING_CONFIG
from installplan.core.errors import AssignmentRejected, SplitRejected, WorkOrderNotFound
from installplan.core.schema import WorkOrder, replace_work
from installplan.domain import PlanState

MIN_SPLIT_HOURS = PLANNING_CONFIG.min_split_hours
CONTINUATION_SUFFIX = " (P2)"

OutcomeKind = Literal["direct", "overflow", "rejected"]


@dataclass(frozen=True)
class AssignmentOutcome:
    kind: OutcomeKind
    plan: PlanState
    work_id: str
    available_hours: float | None = None
    reason: str | None = None

    @property
    def changed(self) -> bool:
        return self.kind == "direct"


@dataclass(frozen=True)
class SplitResult:
    plan: PlanState
    parts: list[WorkOrder] = field(default_factory=list)

    @property
    def degenerate(self) -> bool:
        return len(self.parts) == 1


class SplitIdFactory:
    """Monotonic generator of split-sibling ids, checked against existing ids."""

    def __init__(self, start: int = 1) -> None:
        self._counter = itertools.count(start)

    def __call__(self, parent_id: str, existing: Iterable[str]) -> str:
        taken = set(existing)
        while True:
            candidate = f"{parent_id}_split_{next(self._counter)}"
            if candidate not in taken:
                return candidate


def _require(plan: PlanState, work_id: str) -> WorkOrder:
    work = plan.find(work_id)
    if work is None:
        raise WorkOrderNotFound(work_id)
    return work


def _is_frozen(work: WorkOrder) -> bool:
    return work.is_fixed and work.status == "scheduled"


def _schedule(work: WorkOrder, day_key: str, team: str, **changes) -> WorkOrder:
    return replace_work(work, status="scheduled", scheduled_date=day_key, assigned_team=team, **changes)


def propose_assignment(plan: PlanState, work_id: str, day_key: str, team: str) -> AssignmentOutcome:
    """Try to place ``work_id`` on ``team`` for ``day_key``.

    Returns a ``direct`` outcome carrying the next plan when the team has room
    (within the overflow tolerance), an ``overflow`` outcome with the hours
    still free when it does not, and ``rejected`` for unknown or locked work
    orders. Only ``direct`` changes the plan.
    """

    work = plan.find(work_id)
    if work is None:
        return AssignmentOutcome("rejected", plan, work_id, reason="not_found")
    if _is_frozen(work):
        return AssignmentOutcome("rejected", plan, work_id, reason="locked")

    current = capacity.team_load(plan.works, day_key, team)
    incoming = capacity.hours_of(work)
    if capacity.is_overflow(current, incoming):
        return AssignmentOutcome(
            "overflow",
            plan,
            work_id,
            available_hours=capacity.available_hours(current),
        )

    return AssignmentOutcome("direct", plan.replace(_schedule(work, day_key, team)), work_id)


def confirm_split(
    plan: PlanState,
    work_id: str,
    day_key: str,
    team: str,
    available_hours: float,
    *,
    id_factory: SplitIdFactory | None = None,
) -> SplitResult:
    """Resolve a confirmed overflow by splitting the work order over two days.

    With ``available_hours`` at or below the minimum split the order moves
    whole to the next working day instead.
    """

    work = _require(plan, work_id)
    if _is_frozen(work):
        raise SplitRejected("locked", work_id)
    if available_hours is None or available_hours < 0:
        raise SplitRejected("invalid_hours", work_id)

    next_day = next_working_day(day_key)
    total_hours = capacity.hours_of(work)
    remaining_hours = total_hours - available_hours

    if available_hours <= MIN_SPLIT_HOURS:
        moved = _schedule(work, next_day, team)
        return SplitResult(plan.replace(moved), [moved])

    if remaining_hours <= 0:
        raise SplitRejected("nothing_to_split", work_id)

    id_factory = id_factory or SplitIdFactory()
    today_part = _schedule(work, day_key, team, load=available_hours / capacity.HOURS_PER_DAY, is_split=True)
    sibling = _schedule(
        work,
        next_day,
        team,
        id=id_factory(work.id, plan.ids()),
        load=remaining_hours / capacity.HOURS_PER_DAY,
        is_split=True,
        code=f"{work.code}{CONTINUATION_SUFFIX}",
    )
    works = [today_part if item.id == work.id else item for item in plan.works]
    works.append(sibling)
    return SplitResult(plan.with_works(works), [today_part, sibling])


def unassign(plan: PlanState, work_id: str) -> PlanState:
    work = _require(plan, work_id)
    if work.is_fixed:
        raise AssignmentRejected("locked", work_id)
    if work.status != "scheduled":
        return plan
    return plan.replace(release(work))


def release(work: WorkOrder) -> WorkOrder:
    """Return ``work`` to the backlog, keeping load, split and lock flags."""

    return replace_work(work, status="pending", scheduled_date=None, assigned_team=None)


def toggle_lock(plan: PlanState, work_id: str) -> PlanState:
    work = _require(plan, work_id)
    return plan.replace(replace_work(work, is_fixed=not work.is_fixed))
