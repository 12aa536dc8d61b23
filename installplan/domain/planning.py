"""Domain entities for the crew planning board."""
from __future__ import annotations

from dataclasses import dataclass, field

from installplan.core.schema import WorkOrder


@dataclass(frozen=True, slots=True)
class PlanState:
    """Work orders plus the day -> active teams registry.

    Treated as immutable: every engine operation returns a new instance.
    """

    works: list[WorkOrder] = field(default_factory=list)
    teams: dict[str, list[str]] = field(default_factory=dict)

    def find(self, work_id: str) -> WorkOrder | None:
        for work in self.works:
            if work.id == work_id:
                return work
        return None

    def ids(self) -> set[str]:
        return {work.id for work in self.works}

    def teams_on(self, day_key: str) -> list[str]:
        return list(self.teams.get(day_key) or [])

    def pending(self) -> list[WorkOrder]:
        return [work for work in self.works if work.status == "pending"]

    def with_works(self, works: list[WorkOrder]) -> "PlanState":
        return PlanState(works=list(works), teams=self.teams)

    def with_teams(self, teams: dict[str, list[str]]) -> "PlanState":
        return PlanState(works=self.works, teams={day: list(names) for day, names in teams.items()})

    def replace(self, updated: WorkOrder) -> "PlanState":
        return self.with_works([updated if work.id == updated.id else work for work in self.works])
