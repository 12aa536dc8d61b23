from __future__ import annotations

import io
import json
from datetime import date

from fastapi import APIRouter, File, HTTPException, Query, UploadFile
from fastapi.responses import Response

from installplan.application import get_planning_service
from installplan.core.calendar import date_key, parse_day_key
from installplan.core.errors import SnapshotError
from installplan.exporters.board_export import export_board_csv, export_board_xlsx

router = APIRouter(tags=["plan"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.get("/plan")
async def get_plan() -> dict:
    service = get_planning_service()
    return service.snapshot()


@router.get("/board")
async def get_board(day: str | None = Query(default=None)) -> dict:
    service = get_planning_service()
    try:
        anchor = parse_day_key(day) if day else date.today()
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return service.week_board(anchor)


@router.get("/snapshot/export")
async def export_snapshot() -> Response:
    service = get_planning_service()
    filename = f"InstallPlan_Backup_{date_key(date.today())}.json"
    return Response(
        content=json.dumps(service.snapshot(stamped=True), ensure_ascii=False, indent=2),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/snapshot/import")
async def import_snapshot(file: UploadFile = File(...)) -> dict:
    """Replace the whole plan with an uploaded backup."""
    try:
        raw = await file.read()
    finally:
        await file.close()

    service = get_planning_service()
    try:
        result = service.import_snapshot(raw)
    except SnapshotError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {
        "works": len(result.plan.works),
        "team_days": len(result.plan.teams),
        "released": result.released,
    }


@router.post("/snapshot/reset")
def reset_plan() -> dict:
    service = get_planning_service()
    service.reset()
    return {"works": 0, "team_days": 0}


@router.get("/export/board.csv")
async def export_csv() -> Response:
    service = get_planning_service()
    buffer = io.StringIO()
    export_board_csv(buffer, service.list_works("scheduled"))
    return Response(
        content=buffer.getvalue(),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="board.csv"'},
    )


@router.get("/export/board.xlsx")
async def export_xlsx() -> Response:
    service = get_planning_service()
    buffer = io.BytesIO()
    export_board_xlsx(buffer, service.list_works("scheduled"))
    return Response(
        content=buffer.getvalue(),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="board.xlsx"'},
    )
