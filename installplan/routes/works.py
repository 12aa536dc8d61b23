from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query

from installplan.application import get_planning_service
from installplan.core.errors import AssignmentRejected, DuplicateWorkOrder, WorkOrderNotFound
from installplan.core.schema import AssignmentRequest, SplitRequest, WorkOrderCreate

router = APIRouter(tags=["works"])


def _rejected(exc: AssignmentRejected) -> HTTPException:
    return HTTPException(status_code=409, detail={"reason": exc.reason, "work_id": exc.work_id})


@router.get("/works")
async def list_works(status: str | None = Query(default=None)) -> dict:
    service = get_planning_service()
    return {"items": [work.to_payload() for work in service.list_works(status)]}


@router.post("/works")
def create_work(payload: WorkOrderCreate) -> dict:
    service = get_planning_service()
    try:
        work = service.create_work(payload)
    except DuplicateWorkOrder as exc:
        raise HTTPException(status_code=409, detail={"reason": "duplicate_id", "work_id": exc.work_id}) from exc
    return work.to_payload()


@router.get("/works/{work_id}")
async def get_work(work_id: str) -> dict:
    service = get_planning_service()
    try:
        return service.get_work(work_id).to_payload()
    except WorkOrderNotFound as exc:
        raise HTTPException(status_code=404, detail="work order not found") from exc


@router.get("/works/{work_id}/nearby")
async def nearby_works(work_id: str, limit: int = Query(default=5, ge=1, le=50)) -> dict:
    service = get_planning_service()
    try:
        items = service.nearby(work_id, limit)
    except WorkOrderNotFound as exc:
        raise HTTPException(status_code=404, detail="work order not found") from exc
    return {"work_id": work_id, "items": items}


@router.post("/works/{work_id}/unassign")
def unassign_work(work_id: str) -> dict:
    service = get_planning_service()
    try:
        work = service.unassign(work_id)
    except WorkOrderNotFound as exc:
        raise HTTPException(status_code=404, detail="work order not found") from exc
    except AssignmentRejected as exc:
        raise _rejected(exc) from exc
    return work.to_payload()


@router.post("/works/{work_id}/lock")
def toggle_work_lock(work_id: str) -> dict:
    service = get_planning_service()
    try:
        work = service.toggle_lock(work_id)
    except WorkOrderNotFound as exc:
        raise HTTPException(status_code=404, detail="work order not found") from exc
    return work.to_payload()


@router.post("/assignments")
def propose_assignment(payload: AssignmentRequest) -> dict:
    """Drop a work order on a team's day; overflow is reported, never auto-split."""
    service = get_planning_service()
    outcome = service.propose_assignment(payload.work_id, payload.day, payload.team)
    if outcome.kind == "rejected":
        status_code = 404 if outcome.reason == "not_found" else 409
        raise HTTPException(status_code=status_code, detail={"reason": outcome.reason, "work_id": payload.work_id})

    body: dict = {"outcome": outcome.kind, "work_id": payload.work_id, "day": payload.day, "team": payload.team}
    if outcome.kind == "overflow":
        body["available_hours"] = outcome.available_hours
    else:
        body["work"] = outcome.plan.find(payload.work_id).to_payload()
    return body


@router.post("/assignments/split")
def confirm_split(payload: SplitRequest) -> dict:
    service = get_planning_service()
    try:
        parts, released = service.confirm_split(payload.work_id, payload.day, payload.team, payload.available_hours)
    except WorkOrderNotFound as exc:
        raise HTTPException(status_code=404, detail="work order not found") from exc
    except AssignmentRejected as exc:
        raise _rejected(exc) from exc
    return {"items": [part.to_payload() for part in parts], "released": released}
