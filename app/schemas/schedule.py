from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from app.utils.timeslots import format_hhmm, normalize_weekdays, parse_hhmm


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SessionIn(CamelModel):
    start_time: str = Field(..., description="HH:mm, 24-hour")
    end_time: str = Field(..., description="HH:mm, 24-hour")

    @field_validator("start_time", "end_time")
    @classmethod
    def _hhmm(cls, v: str) -> str:
        return format_hhmm(parse_hhmm(v))

    @model_validator(mode="after")
    def _ordered(self):
        if self.end_time <= self.start_time:
            raise ValueError(f"session end {self.end_time} must be after start {self.start_time}")
        return self


class ScheduleProposal(CamelModel):
    """
    Request body of POST /schedules and PUT /schedules/{id}.
    title / creatorId are checked by the route so the caller gets a
    field-specific message.
    """
    title: Optional[str] = None
    creator_id: Optional[int] = None

    is_recurring: bool = False
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    days_of_week: List[str] = Field(default_factory=list, description="e.g. ['MON','WED']")

    assigned_to_teacher_id: Optional[int] = None
    assigned_to_group_id: Optional[int] = None
    course_id: Optional[int] = None
    location: Optional[str] = None
    room_id: Optional[int] = None

    sessions: List[SessionIn] = Field(default_factory=list)

    @field_validator("days_of_week", mode="before")
    @classmethod
    def _weekdays(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            v = [v]
        if not isinstance(v, (list, tuple)) or not all(isinstance(d, str) for d in v):
            raise ValueError("daysOfWeek must be a list of weekday names")
        return normalize_weekdays(v)

    @field_validator("title", "location")
    @classmethod
    def _strip(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @model_validator(mode="after")
    def _check(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        if self.is_recurring and not self.days_of_week:
            raise ValueError("daysOfWeek is required for a recurring schedule")
        if not self.is_recurring:
            self.days_of_week = []
        return self


class SessionOut(CamelModel):
    id: int
    start_time: datetime
    end_time: datetime
    start: str   # "HH:mm"
    end: str


class ScheduleOut(CamelModel):
    id: int
    title: str
    creator_id: int
    assigned_to_teacher_id: Optional[int] = None
    assigned_to_group_id: Optional[int] = None
    course_id: Optional[int] = None
    room_id: Optional[int] = None
    location: Optional[str] = None
    is_recurring: bool
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    days_of_week: List[str] = []
    sessions: List[SessionOut] = []

    teacher_name: Optional[str] = None
    group_name: Optional[str] = None
    course_name: Optional[str] = None


class ConflictOut(CamelModel):
    conflict: bool
    reason: Optional[str] = None
    resource: Optional[str] = None
    start: Optional[str] = None
    end: Optional[str] = None
    schedule_id: Optional[int] = None
    schedule_title: Optional[str] = None
