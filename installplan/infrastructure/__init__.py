"""Infrastructure layer exports."""

from .plans import (
    InMemoryPlanRepository,
    JsonFilePlanRepository,
    PlanRepository,
    build_plan_repository,
)

__all__ = [
    "InMemoryPlanRepository",
    "JsonFilePlanRepository",
    "PlanRepository",
    "build_plan_repository",
]
