from __future__ import annotations

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from installplan.core.schema import WorkOrder
from installplan.domain import PlanState


def make_work(work_id: str = "w1", load: float = 0.5, **extra) -> WorkOrder:
    data = {
        "id": work_id,
        "code": f"M-{work_id}",
        "client": f"Cliente {work_id}",
        "city": "Bilbao",
        "fractionOfDay": load,
    }
    data.update(extra)
    return WorkOrder.model_validate(data)


def scheduled(work_id: str, load: float, day: str, team: str, **extra) -> WorkOrder:
    return make_work(work_id, load, status="scheduled", scheduled_date=day, assigned_team=team, **extra)


def make_plan(*works: WorkOrder, teams: dict[str, list[str]] | None = None) -> PlanState:
    return PlanState(works=list(works), teams=dict(teams or {}))


def assert_assignment_fields_consistent(plan: PlanState) -> None:
    for work in plan.works:
        assert (work.scheduled_date is None) == (work.assigned_team is None)
        assert (work.scheduled_date is not None) == (work.status == "scheduled")
        assert 0 < work.load <= 1
