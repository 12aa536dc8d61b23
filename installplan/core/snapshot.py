from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from installplan.core.calendar import DAY_KEY_PATTERN
from installplan.core.errors import SnapshotError
from installplan.core.schema import WorkOrder
from installplan.domain import PlanState


def _parse_teams(raw: Any) -> dict[str, list[str]]:
    if not isinstance(raw, dict):
        raise SnapshotError("teams must be an object of day -> team list")
    teams: dict[str, list[str]] = {}
    for day, names in raw.items():
        if not isinstance(day, str) or not DAY_KEY_PATTERN.match(day):
            raise SnapshotError(f"invalid day key in teams: {day!r}")
        if not isinstance(names, list) or not all(isinstance(name, str) for name in names):
            raise SnapshotError(f"team list for {day} must be a list of names")
        teams[day] = list(names)
    return teams


def _parse_works(raw: Any) -> list[WorkOrder]:
    if not isinstance(raw, list):
        raise SnapshotError("works must be a list")
    works: list[WorkOrder] = []
    seen: set[str] = set()
    for index, item in enumerate(raw):
        try:
            work = WorkOrder.model_validate(item)
        except ValidationError as exc:
            raise SnapshotError(f"invalid work order at position {index}: {exc.errors()[0]['msg']}") from exc
        if work.id in seen:
            raise SnapshotError(f"duplicate work order id: {work.id}")
        seen.add(work.id)
        works.append(work)
    return works


def parse_snapshot(payload: Any) -> PlanState:
    """Build a plan from a decoded snapshot document.

    Validation is all-or-nothing: any problem raises :class:`SnapshotError`
    before a plan is produced.
    """

    if not isinstance(payload, dict):
        raise SnapshotError("snapshot must be a JSON object")
    if "works" not in payload or "teams" not in payload:
        raise SnapshotError("snapshot must contain works and teams")
    return PlanState(works=_parse_works(payload["works"]), teams=_parse_teams(payload["teams"]))


def loads_snapshot(text: str | bytes) -> PlanState:
    try:
        payload = json.loads(text)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise SnapshotError("snapshot is not valid JSON") from exc
    return parse_snapshot(payload)


def dump_snapshot(plan: PlanState, *, stamped: bool = False) -> dict[str, Any]:
    data: dict[str, Any] = {
        "works": [work.to_payload() for work in plan.works],
        "teams": {day: list(names) for day, names in plan.teams.items()},
    }
    if stamped:
        data["date"] = datetime.now(timezone.utc).isoformat()
    return data


def dumps_snapshot(plan: PlanState, *, stamped: bool = False) -> str:
    return json.dumps(dump_snapshot(plan, stamped=stamped), ensure_ascii=False, indent=2)
