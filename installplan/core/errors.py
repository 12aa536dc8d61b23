from __future__ import annotations


class PlanningError(Exception):
    """Base class for recoverable planning failures."""


class WorkOrderNotFound(PlanningError, KeyError):
    def __init__(self, work_id: str) -> None:
        super().__init__(work_id)
        self.work_id = work_id

    def __str__(self) -> str:
        return f"work order not found: {self.work_id}"


class AssignmentRejected(PlanningError):
    """Raised when an operation is not permitted in the work order's current state."""

    def __init__(self, reason: str, work_id: str | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.work_id = work_id


class SplitRejected(AssignmentRejected):
    """Raised when a split confirmation cannot be honoured."""


class DuplicateWorkOrder(PlanningError):
    def __init__(self, work_id: str) -> None:
        super().__init__(work_id)
        self.work_id = work_id

    def __str__(self) -> str:
        return f"work order already exists: {self.work_id}"


class RosterError(PlanningError):
    """Raised when a roster edit is incomplete or malformed."""


class SnapshotError(PlanningError):
    """Raised when an imported snapshot cannot be applied."""
