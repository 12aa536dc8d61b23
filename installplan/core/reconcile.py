from __future__ import annotations

from dataclasses import dataclass, field

from installplan.core.engine import release
from installplan.core.schema import WorkOrder
from installplan.domain import PlanState


@dataclass(frozen=True)
class ReconcileResult:
    plan: PlanState
    released: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.released)


def is_assignment_valid(work: WorkOrder, teams: dict[str, list[str]]) -> bool:
    if work.status != "scheduled":
        return True
    daily = teams.get(work.scheduled_date or "") or []
    return work.assigned_team in daily


def reconcile(plan: PlanState) -> ReconcileResult:
    """Send back to the backlog every scheduled order whose team is gone.

    Locked orders are released too (their lock flag survives). The whole
    store is processed in one batch; an already consistent plan is returned
    unchanged.
    """

    released: list[str] = []
    works: list[WorkOrder] = []
    for work in plan.works:
        if is_assignment_valid(work, plan.teams):
            works.append(work)
        else:
            released.append(work.id)
            works.append(release(work))

    if not released:
        return ReconcileResult(plan)
    return ReconcileResult(plan.with_works(works), released)
