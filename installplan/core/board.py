from __future__ import annotations

from datetime import date

from installplan.core import capacity
from installplan.core.calendar import date_key, week_of
from installplan.core.roster import split_pair
from installplan.domain import PlanState


def build_team_column(plan: PlanState, day_key: str, team: str) -> dict[str, object]:
    works = [
        work
        for work in plan.works
        if work.status == "scheduled" and work.scheduled_date == day_key and work.assigned_team == team
    ]
    load = capacity.team_load(works, day_key, team)
    return {
        "team": team,
        "members": split_pair(team),
        "load_hours": round(load, 2),
        "free_hours": round(capacity.available_hours(load), 2),
        "overloaded": load > capacity.HOURS_PER_DAY + capacity.OVERFLOW_TOLERANCE,
        "works": [work.to_payload() for work in works],
    }


def build_week_board(plan: PlanState, anchor: date) -> dict[str, object]:
    """Read model for the weekly board around ``anchor``."""

    days: list[dict[str, object]] = []
    for day in week_of(anchor):
        key = date_key(day)
        days.append(
            {
                "day": key,
                "weekend": day.weekday() >= 5,
                "teams": [build_team_column(plan, key, team) for team in plan.teams_on(key)],
            }
        )

    return {
        "week_start": days[0]["day"],
        "week_end": days[-1]["day"],
        "days": days,
        "pending": len(plan.pending()),
    }
