from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, constr, model_validator

from installplan.core.calendar import parse_day_key

WorkStatus = Literal["pending", "scheduled", "completed"]
WorkType = Literal["Montaje (M)", "Revisión (R)", "Otro"]


def _existing_day(value: str) -> str:
    parse_day_key(value)
    return value


DayKey = Annotated[constr(pattern=r"^\d{4}-\d{2}-\d{2}$"), AfterValidator(_existing_day)]


class Coordinates(BaseModel):
    x: float = 0.0
    y: float = 0.0


class WorkOrder(BaseModel):
    """A unit of installation work, scheduled onto at most one day/team pair."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(min_length=1)
    code: str = ""
    client: str = ""
    address: str = ""
    city: str = ""
    coordinates: Coordinates = Field(default_factory=Coordinates)
    date_accepted: str = Field(default="", alias="dateAccepted")
    date_expiration: str | None = Field(default=None, alias="dateExpiration")
    total_days: int = Field(default=1, ge=1, alias="totalDays")
    current_day: int = Field(default=1, ge=1, alias="currentDay")
    # fraction of one 8h working day
    load: float = Field(gt=0, le=1, alias="fractionOfDay")
    status: WorkStatus = "pending"
    scheduled_date: DayKey | None = Field(default=None, alias="scheduledDate")
    assigned_team: str | None = Field(default=None, alias="assignedTeam")
    type: WorkType = "Otro"
    is_split: bool = Field(default=False, alias="isSplit")
    is_fixed: bool = Field(default=False, alias="isFixed")

    @model_validator(mode="after")
    def _check_assignment(self) -> "WorkOrder":
        has_date = self.scheduled_date is not None
        has_team = bool(self.assigned_team)
        if has_date != has_team:
            raise ValueError("scheduledDate and assignedTeam must be set together")
        if has_date != (self.status == "scheduled"):
            raise ValueError("only scheduled work orders carry a day and team")
        return self

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def replace_work(work: WorkOrder, **changes: Any) -> WorkOrder:
    """Return a validated copy of ``work`` with ``changes`` applied."""

    data = work.model_dump()
    data.update(changes)
    return WorkOrder.model_validate(data)


class WorkOrderCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    code: str = ""
    client: str
    address: str = ""
    city: str = ""
    coordinates: Coordinates = Field(default_factory=Coordinates)
    date_accepted: str = Field(default="", alias="dateAccepted")
    date_expiration: str | None = Field(default=None, alias="dateExpiration")
    total_days: int = Field(default=1, ge=1, alias="totalDays")
    current_day: int = Field(default=1, ge=1, alias="currentDay")
    load: float = Field(gt=0, le=1, alias="fractionOfDay")
    type: WorkType = "Otro"


class AssignmentRequest(BaseModel):
    work_id: str
    day: DayKey
    team: str = Field(min_length=1)


class SplitRequest(AssignmentRequest):
    available_hours: float = Field(ge=0)


class TeamRangeRequest(BaseModel):
    start: DayKey
    end: DayKey
    pairs: list[str] = Field(default_factory=list)
