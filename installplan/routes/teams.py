from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query

from installplan.application import get_planning_service
from installplan.core.errors import RosterError
from installplan.core.roster import pair_name
from installplan.core.schema import TeamRangeRequest

router = APIRouter(prefix="/teams", tags=["teams"])


@router.get("")
async def list_team_days() -> dict:
    service = get_planning_service()
    return {"items": service.snapshot()["teams"]}


@router.get("/installers")
async def list_installers() -> dict:
    service = get_planning_service()
    return {"items": service.installers()}


@router.post("/pairs")
async def build_pair(payload: dict) -> dict:
    members = payload.get("members") or []
    if len(members) != 2:
        raise HTTPException(status_code=400, detail="select exactly two installers")
    try:
        return {"team": pair_name(str(members[0]), str(members[1]))}
    except RosterError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.put("")
def apply_teams(payload: TeamRangeRequest) -> dict:
    service = get_planning_service()
    try:
        result = service.apply_teams(payload.start, payload.end, payload.pairs)
    except RosterError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"teams": result.plan.teams, "released": result.released}


@router.delete("")
def clear_teams(start: str = Query(...), end: str = Query(...)) -> dict:
    service = get_planning_service()
    try:
        result = service.clear_teams(start, end)
    except RosterError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"teams": result.plan.teams, "released": result.released}
