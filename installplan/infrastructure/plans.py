"""Infrastructure layer for plan persistence."""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Protocol

from installplan.core.errors import SnapshotError
from installplan.core.snapshot import dumps_snapshot, loads_snapshot
from installplan.domain import PlanState

logger = logging.getLogger(__name__)

PLAN_FILENAME = "plan.json"


def data_root() -> Path | None:
    env_root = os.getenv("INSTALLPLAN_DATA_ROOT")
    if env_root:
        return Path(env_root).expanduser().resolve()
    return None


class PlanRepository(Protocol):
    """Persistence contract for the current plan."""

    def load(self) -> PlanState: ...

    def save(self, plan: PlanState) -> None: ...

    def reset(self) -> None: ...


class InMemoryPlanRepository:
    """Simple in-memory repository for fast iteration and tests."""

    def __init__(self) -> None:
        self._plan = PlanState()
        self.saves = 0

    def load(self) -> PlanState:
        return self._plan

    def save(self, plan: PlanState) -> None:
        self._plan = plan
        self.saves += 1

    def reset(self) -> None:
        self._plan = PlanState()
        self.saves = 0


class JsonFilePlanRepository:
    """Keeps the plan as a snapshot document on disk."""

    def __init__(self, root: Path) -> None:
        self._path = Path(root) / PLAN_FILENAME
        self._plan: PlanState | None = None

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> PlanState:
        if self._plan is None:
            if not self._path.exists():
                self._plan = PlanState()
                return self._plan
            try:
                self._plan = loads_snapshot(self._path.read_text(encoding="utf-8"))
            except SnapshotError:
                logger.warning("unreadable plan at %s, starting from an empty plan", self._path, exc_info=True)
                self._plan = PlanState()
            else:
                logger.info("loaded plan from %s (%d work orders)", self._path, len(self._plan.works))
        return self._plan

    def save(self, plan: PlanState) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(".json.tmp")
        tmp_path.write_text(dumps_snapshot(plan), encoding="utf-8")
        tmp_path.replace(self._path)
        self._plan = plan

    def reset(self) -> None:
        self._plan = PlanState()
        if self._path.exists():
            self._path.unlink()


def build_plan_repository() -> PlanRepository:
    root = data_root()
    if root is not None:
        return JsonFilePlanRepository(root)
    return InMemoryPlanRepository()
