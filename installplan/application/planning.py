"""Application service layer for the crew planning board."""
from __future__ import annotations

import logging
import threading
from datetime import date
from typing import Any, Iterable

from installplan.core import engine, roster
from installplan.core.board import build_week_board
from installplan.core.config import PLANNING_CONFIG
from installplan.core.errors import (
    AssignmentRejected,
    DuplicateWorkOrder,
    SnapshotError,
    SplitRejected,
    WorkOrderNotFound,
)
from installplan.core.proximity import nearest_pending
from installplan.core.reconcile import ReconcileResult, reconcile
from installplan.core.schema import WorkOrder, WorkOrderCreate
from installplan.core.snapshot import dump_snapshot, loads_snapshot, parse_snapshot
from installplan.domain import PlanState
from installplan.infrastructure import PlanRepository, build_plan_repository

logger = logging.getLogger(__name__)


class PlanningService:
    """Drives the pure planning engine and commits what it returns.

    Every accepted operation ends in exactly one ``save`` on the repository;
    rejected operations save nothing.
    """

    def __init__(self, repository: PlanRepository) -> None:
        self._repository = repository
        self._lock = threading.RLock()
        self._split_ids = engine.SplitIdFactory()
        self._work_counter = 0

    # ------------------------------------------------------------------
    # internal helpers
    # ------------------------------------------------------------------
    @property
    def plan(self) -> PlanState:
        return self._repository.load()

    def _commit(self, plan: PlanState) -> None:
        self._repository.save(plan)

    def _commit_reconciled(self, plan: PlanState) -> ReconcileResult:
        result = reconcile(plan)
        if result.released:
            logger.info("reconciliation returned %d work orders to backlog: %s", len(result.released), result.released)
        self._commit(result.plan)
        return result

    def _get(self, work_id: str) -> WorkOrder:
        work = self.plan.find(work_id)
        if work is None:
            raise WorkOrderNotFound(work_id)
        return work

    def _next_work_id(self, existing: set[str]) -> str:
        while True:
            self._work_counter += 1
            candidate = f"wo-{self._work_counter:05d}"
            if candidate not in existing:
                return candidate

    # ------------------------------------------------------------------
    # reads
    # ------------------------------------------------------------------
    def snapshot(self, *, stamped: bool = False) -> dict[str, Any]:
        return dump_snapshot(self.plan, stamped=stamped)

    def list_works(self, status: str | None = None) -> list[WorkOrder]:
        works = self.plan.works
        if status:
            works = [work for work in works if work.status == status]
        return list(works)

    def get_work(self, work_id: str) -> WorkOrder:
        return self._get(work_id)

    def week_board(self, anchor: date) -> dict[str, object]:
        return build_week_board(self.plan, anchor)

    def nearby(self, work_id: str, limit: int = 5) -> list[dict[str, object]]:
        origin = self._get(work_id)
        return [
            {"distance": round(dist, 3), "work": work.to_payload()}
            for work, dist in nearest_pending(self.plan.works, origin, limit)
        ]

    def installers(self) -> list[str]:
        return list(PLANNING_CONFIG.installers)

    # ------------------------------------------------------------------
    # work orders
    # ------------------------------------------------------------------
    def create_work(self, data: WorkOrderCreate) -> WorkOrder:
        with self._lock:
            plan = self.plan
            existing = plan.ids()
            work_id = data.id or self._next_work_id(existing)
            if work_id in existing:
                raise DuplicateWorkOrder(work_id)
            payload = data.model_dump(exclude={"id"})
            work = WorkOrder.model_validate({**payload, "id": work_id, "code": data.code or work_id})
            self._commit_reconciled(plan.with_works([*plan.works, work]))
            logger.info("work order %s added to backlog", work_id)
            return work

    def propose_assignment(self, work_id: str, day_key: str, team: str) -> engine.AssignmentOutcome:
        with self._lock:
            plan = self.plan
            if plan.find(work_id) is not None and team not in plan.teams_on(day_key):
                logger.debug("assignment of %s rejected: %s inactive on %s", work_id, team, day_key)
                return engine.AssignmentOutcome("rejected", plan, work_id, reason="team_inactive")

            outcome = engine.propose_assignment(plan, work_id, day_key, team)
            if outcome.kind == "direct":
                self._commit(outcome.plan)
                logger.info("work order %s assigned to %s on %s", work_id, team, day_key)
            elif outcome.kind == "overflow":
                logger.info(
                    "work order %s overflows %s on %s (%.2fh free)", work_id, team, day_key, outcome.available_hours
                )
            else:
                logger.debug("assignment of %s rejected: %s", work_id, outcome.reason)
            return outcome

    def confirm_split(
        self,
        work_id: str,
        day_key: str,
        team: str,
        available_hours: float,
    ) -> tuple[list[WorkOrder], list[str]]:
        """Commit a confirmed overflow; returns the resulting parts and any released ids."""

        with self._lock:
            plan = self.plan
            if plan.find(work_id) is not None and team not in plan.teams_on(day_key):
                logger.debug("split of %s rejected: %s inactive on %s", work_id, team, day_key)
                raise SplitRejected("team_inactive", work_id)

            try:
                result = engine.confirm_split(plan, work_id, day_key, team, available_hours, id_factory=self._split_ids)
            except AssignmentRejected as exc:
                logger.debug("split of %s rejected: %s", work_id, exc.reason)
                raise

            if result.degenerate:
                self._commit(result.plan)
                logger.info("work order %s moved whole to %s", work_id, result.parts[0].scheduled_date)
                return result.parts, []

            reconciled = self._commit_reconciled(result.plan)
            logger.info("work order %s split into %s", work_id, [part.id for part in result.parts])
            parts = [reconciled.plan.find(part.id) or part for part in result.parts]
            return parts, reconciled.released

    def unassign(self, work_id: str) -> WorkOrder:
        with self._lock:
            plan = self.plan
            try:
                updated = engine.unassign(plan, work_id)
            except AssignmentRejected as exc:
                logger.debug("unassign of %s rejected: %s", work_id, exc.reason)
                raise
            if updated is not plan:
                self._commit(updated)
                logger.info("work order %s returned to backlog", work_id)
            return updated.find(work_id)  # type: ignore[return-value]

    def toggle_lock(self, work_id: str) -> WorkOrder:
        with self._lock:
            updated = engine.toggle_lock(self.plan, work_id)
            self._commit(updated)
            work = updated.find(work_id)
            logger.info("work order %s %s", work_id, "locked" if work.is_fixed else "unlocked")
            return work

    # ------------------------------------------------------------------
    # team availability
    # ------------------------------------------------------------------
    def apply_teams(self, start: str, end: str, pairs: Iterable[str]) -> ReconcileResult:
        with self._lock:
            plan = self.plan
            teams = roster.apply_team_pairs(plan.teams, start, end, pairs)
            logger.info("teams for %s..%s set to %s", start, end, teams.get(start))
            return self._commit_reconciled(plan.with_teams(teams))

    def clear_teams(self, start: str, end: str) -> ReconcileResult:
        with self._lock:
            plan = self.plan
            teams = roster.clear_team_days(plan.teams, start, end)
            logger.info("teams for %s..%s cleared", start, end)
            return self._commit_reconciled(plan.with_teams(teams))

    # ------------------------------------------------------------------
    # snapshots
    # ------------------------------------------------------------------
    def import_snapshot(self, payload: bytes | str | dict) -> ReconcileResult:
        """Replace works and teams wholesale; nothing changes if the payload is malformed."""

        try:
            if isinstance(payload, dict):
                imported = parse_snapshot(payload)
            else:
                imported = loads_snapshot(payload)
        except SnapshotError:
            logger.warning("rejected malformed snapshot import", exc_info=True)
            raise

        with self._lock:
            result = self._commit_reconciled(imported)
            logger.info(
                "imported snapshot with %d work orders and %d team days", len(imported.works), len(imported.teams)
            )
            return result

    def reset(self) -> None:
        with self._lock:
            self._commit(PlanState())
            logger.info("plan reset")

    # ------------------------------------------------------------------
    # testing helpers
    # ------------------------------------------------------------------
    def reset_state(self) -> None:
        with self._lock:
            self._repository.reset()
            self._split_ids = engine.SplitIdFactory()
            self._work_counter = 0


_service = PlanningService(build_plan_repository())


def get_planning_service() -> PlanningService:
    """Return the singleton planning service for the process."""

    return _service


def configure_planning_service(repository: PlanRepository) -> PlanningService:
    global _service
    _service = PlanningService(repository)
    return _service


def reset_planning_state() -> None:
    """Reset the in-memory plan (used in tests)."""

    _service.reset_state()
