from __future__ import annotations

import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

sys.path.append(str(Path(__file__).resolve().parents[1]))

from installplan.core import capacity, engine
from installplan.core.errors import AssignmentRejected, SplitRejected, WorkOrderNotFound
from installplan.core.schema import AssignmentRequest, WorkOrder
from tests.utils import assert_assignment_fields_consistent, make_plan, make_work, scheduled

DAY = "2025-12-10"
TEAM = "A+B"


def test_work_order_rejects_half_assignment():
    with pytest.raises(ValidationError):
        make_work("w1", status="scheduled", scheduled_date=DAY)
    with pytest.raises(ValidationError):
        make_work("w1", status="pending", scheduled_date=DAY, assigned_team=TEAM)
    with pytest.raises(ValidationError):
        make_work("w1", status="scheduled")


def test_day_keys_must_be_real_calendar_days():
    with pytest.raises(ValidationError):
        AssignmentRequest(work_id="w1", day="2025-02-30", team=TEAM)
    with pytest.raises(ValidationError):
        scheduled("w1", 0.5, "2025-13-01", TEAM)
    assert AssignmentRequest(work_id="w1", day="2024-02-29", team=TEAM).day == "2024-02-29"


@pytest.mark.parametrize("load", [0, -0.25, 1.5])
def test_work_order_load_bounds(load):
    with pytest.raises(ValidationError):
        make_work("w1", load=load)


def test_work_order_payload_uses_frontend_names():
    work = scheduled("w1", 0.5, DAY, TEAM, is_fixed=True)
    payload = work.to_payload()
    assert payload["fractionOfDay"] == 0.5
    assert payload["scheduledDate"] == DAY
    assert payload["assignedTeam"] == TEAM
    assert payload["isFixed"] is True
    assert "dateExpiration" not in payload
    assert WorkOrder.model_validate(payload) == work


def test_team_load_counts_only_matching_scheduled_orders():
    plan = make_plan(
        scheduled("a", 0.5, DAY, TEAM),
        scheduled("b", 0.25, DAY, TEAM),
        scheduled("c", 0.5, DAY, "C+D"),
        scheduled("d", 0.5, "2025-12-11", TEAM),
        make_work("e", 1.0),
    )
    assert capacity.team_load(plan.works, DAY, TEAM) == pytest.approx(6.0)
    assert capacity.team_load(plan.works, DAY, "nobody") == 0


def test_direct_assignment_adds_hours():
    plan = make_plan(scheduled("a", 0.25, DAY, TEAM), make_work("w", 0.5))
    before = capacity.team_load(plan.works, DAY, TEAM)

    outcome = engine.propose_assignment(plan, "w", DAY, TEAM)

    assert outcome.kind == "direct"
    assert outcome.changed
    work = outcome.plan.find("w")
    assert work.status == "scheduled"
    assert work.scheduled_date == DAY
    assert work.assigned_team == TEAM
    assert work.load == 0.5
    assert not work.is_split
    assert capacity.team_load(outcome.plan.works, DAY, TEAM) == pytest.approx(before + 4.0)
    # input plan is untouched
    assert plan.find("w").status == "pending"
    assert_assignment_fields_consistent(outcome.plan)


def test_overflow_tolerance_is_applied_at_the_gate():
    full_day = scheduled("full", 1.0, DAY, TEAM)

    within = engine.propose_assignment(make_plan(full_day, make_work("w", 0.0078125)), "w", DAY, TEAM)
    assert within.kind == "direct"

    beyond = make_plan(full_day, make_work("w", 0.015625))
    outcome = engine.propose_assignment(beyond, "w", DAY, TEAM)
    assert outcome.kind == "overflow"
    assert outcome.available_hours == 0
    assert outcome.plan is beyond


def test_overflow_reports_available_hours_without_mutation():
    plan = make_plan(scheduled("a", 0.75, DAY, TEAM), make_work("w", 0.5))

    outcome = engine.propose_assignment(plan, "w", DAY, TEAM)

    assert outcome.kind == "overflow"
    assert outcome.available_hours == pytest.approx(2.0)
    assert outcome.plan is plan
    assert plan.find("w").status == "pending"


def test_locked_scheduled_order_cannot_be_moved():
    plan = make_plan(scheduled("w", 0.25, DAY, TEAM, is_fixed=True))

    outcome = engine.propose_assignment(plan, "w", "2025-12-11", "C+D")

    assert outcome.kind == "rejected"
    assert outcome.reason == "locked"
    assert outcome.plan is plan


def test_locked_pending_order_can_still_be_assigned():
    plan = make_plan(make_work("w", 0.25, is_fixed=True))
    outcome = engine.propose_assignment(plan, "w", DAY, TEAM)
    assert outcome.kind == "direct"
    assert outcome.plan.find("w").is_fixed


def test_unknown_order_is_rejected():
    plan = make_plan()
    outcome = engine.propose_assignment(plan, "ghost", DAY, TEAM)
    assert outcome.kind == "rejected"
    assert outcome.reason == "not_found"


def test_scheduled_order_can_be_moved_to_another_team():
    plan = make_plan(scheduled("w", 0.5, DAY, TEAM))
    outcome = engine.propose_assignment(plan, "w", "2025-12-11", "C+D")
    moved = outcome.plan.find("w")
    assert outcome.kind == "direct"
    assert (moved.scheduled_date, moved.assigned_team) == ("2025-12-11", "C+D")


def test_overflow_then_split_scenario():
    plan = make_plan(scheduled("busy", 0.75, DAY, TEAM), make_work("w", 0.5))
    outcome = engine.propose_assignment(plan, "w", DAY, TEAM)
    assert outcome.kind == "overflow"

    result = engine.confirm_split(plan, "w", DAY, TEAM, outcome.available_hours)

    assert not result.degenerate
    today, tomorrow = result.parts
    assert today.id == "w"
    assert today.scheduled_date == DAY
    assert today.load == pytest.approx(0.25)
    assert today.is_split
    assert tomorrow.id != "w"
    assert tomorrow.id.startswith("w_split_")
    assert tomorrow.scheduled_date == "2025-12-11"
    assert tomorrow.assigned_team == TEAM
    assert tomorrow.load == pytest.approx(0.25)
    assert tomorrow.is_split
    assert tomorrow.code == "M-w (P2)"
    assert tomorrow.client == today.client

    assert [work.id for work in result.plan.works] == ["busy", "w", tomorrow.id]
    assert capacity.team_load(result.plan.works, DAY, TEAM) == pytest.approx(8.0)
    assert_assignment_fields_consistent(result.plan)
    # input plan is untouched
    assert len(plan.works) == 2
    assert plan.find("w").load == 0.5


@pytest.mark.parametrize(("load", "available"), [(1.0, 3.0), (0.75, 0.6), (0.3, 1.2)])
def test_split_conserves_load(load, available):
    plan = make_plan(make_work("w", load))
    result = engine.confirm_split(plan, "w", DAY, TEAM, available)
    assert sum(part.load for part in result.parts) == pytest.approx(load)


def test_split_over_friday_lands_on_monday():
    plan = make_plan(make_work("w", 1.0))
    result = engine.confirm_split(plan, "w", "2025-12-12", TEAM, 3.0)
    assert result.parts[1].scheduled_date == "2025-12-15"


@pytest.mark.parametrize("available", [0.3, 0.5, 0.0])
def test_small_remainder_moves_whole_order_to_next_day(available):
    plan = make_plan(make_work("w", 0.5))

    result = engine.confirm_split(plan, "w", DAY, TEAM, available)

    assert result.degenerate
    (moved,) = result.parts
    assert moved.id == "w"
    assert moved.scheduled_date == "2025-12-11"
    assert moved.assigned_team == TEAM
    assert moved.load == 0.5
    assert not moved.is_split
    assert len(result.plan.works) == 1


def test_split_ids_are_unique_and_skip_existing():
    plan = make_plan(make_work("w", 1.0), scheduled("w_split_1", 0.25, DAY, TEAM))
    factory = engine.SplitIdFactory()

    first = engine.confirm_split(plan, "w", DAY, TEAM, 4.0, id_factory=factory)
    sibling = first.parts[1]
    assert sibling.id == "w_split_2"

    again = engine.confirm_split(first.plan, sibling.id, "2025-12-11", TEAM, 2.0, id_factory=factory)
    ids = [work.id for work in again.plan.works]
    assert len(ids) == len(set(ids))


def test_split_rejections():
    plan = make_plan(make_work("w", 0.5), scheduled("locked", 1.0, DAY, TEAM, is_fixed=True))
    with pytest.raises(SplitRejected):
        engine.confirm_split(plan, "w", DAY, TEAM, 4.0)  # nothing overflows
    with pytest.raises(SplitRejected):
        engine.confirm_split(plan, "locked", DAY, TEAM, 2.0)
    with pytest.raises(SplitRejected):
        engine.confirm_split(plan, "w", DAY, TEAM, -1.0)
    with pytest.raises(WorkOrderNotFound):
        engine.confirm_split(plan, "ghost", DAY, TEAM, 2.0)


def test_unassign_returns_order_to_backlog():
    plan = make_plan(scheduled("w", 0.25, DAY, TEAM, is_split=True))

    updated = engine.unassign(plan, "w")

    work = updated.find("w")
    assert work.status == "pending"
    assert work.scheduled_date is None
    assert work.assigned_team is None
    assert work.load == 0.25
    assert work.is_split


def test_unassign_rules():
    locked = make_plan(scheduled("w", 0.25, DAY, TEAM, is_fixed=True))
    with pytest.raises(AssignmentRejected) as excinfo:
        engine.unassign(locked, "w")
    assert excinfo.value.reason == "locked"

    pending = make_plan(make_work("w"))
    assert engine.unassign(pending, "w") is pending


def test_toggle_lock_flips_flag():
    plan = make_plan(scheduled("w", 0.25, DAY, TEAM))
    locked = engine.toggle_lock(plan, "w")
    assert locked.find("w").is_fixed
    assert locked.find("w").scheduled_date == DAY
    assert not engine.toggle_lock(locked, "w").find("w").is_fixed
