from __future__ import annotations

import math
from typing import Iterable

from installplan.core.schema import WorkOrder


def distance(first: WorkOrder, second: WorkOrder) -> float:
    return math.hypot(first.coordinates.x - second.coordinates.x, first.coordinates.y - second.coordinates.y)


def nearest_pending(works: Iterable[WorkOrder], origin: WorkOrder, limit: int = 5) -> list[tuple[WorkOrder, float]]:
    """Pending work orders closest to ``origin``, nearest first."""

    candidates = [
        (work, distance(origin, work))
        for work in works
        if work.status == "pending" and work.id != origin.id
    ]
    candidates.sort(key=lambda item: (item[1], item[0].id))
    return candidates[: max(limit, 0)]
