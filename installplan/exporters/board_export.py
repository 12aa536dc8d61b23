from __future__ import annotations

from pathlib import Path
from typing import IO, Iterable

import pandas as pd

from installplan.core import capacity
from installplan.core.schema import WorkOrder

COLUMNS = ["day", "team", "code", "client", "city", "hours", "type", "split", "locked"]


def board_frame(works: Iterable[WorkOrder]) -> pd.DataFrame:
    records = []
    for work in works:
        if work.status != "scheduled":
            continue
        records.append({
            "day": work.scheduled_date,
            "team": work.assigned_team,
            "code": work.code,
            "client": work.client,
            "city": work.city,
            "hours": round(capacity.hours_of(work), 2),
            "type": work.type,
            "split": work.is_split,
            "locked": work.is_fixed,
        })
    df = pd.DataFrame(records, columns=COLUMNS)
    return df.sort_values(["day", "team", "code"], kind="stable").reset_index(drop=True)


def export_board_csv(path: Path | IO, works: Iterable[WorkOrder]) -> Path | IO:
    df = board_frame(works)
    if isinstance(path, Path):
        path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)
    return path


def export_board_xlsx(path: Path | IO, works: Iterable[WorkOrder]) -> Path | IO:
    """Write one sheet with every assignment and one with hours per team and day."""

    df = board_frame(works)
    summary = (
        df.groupby(["day", "team"], as_index=False)["hours"].sum()
        if not df.empty
        else pd.DataFrame(columns=["day", "team", "hours"])
    )
    if isinstance(path, Path):
        path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name="assignments", index=False)
        summary.to_excel(writer, sheet_name="team_load", index=False)
    return path
