"""Domain layer definitions."""

from .planning import PlanState

__all__ = [
    "PlanState",
]
