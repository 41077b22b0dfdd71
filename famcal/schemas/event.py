from datetime import datetime, time
from typing import List, Optional
from pydantic import Field, model_validator
from .base import BaseSchema, TimestampSchema, UTCDateTime
from famcal.engine.types import RecurrenceRule

# All-day events span the whole local day of their start date
ALL_DAY_START = time(0, 0, 0)
ALL_DAY_END = time(23, 59, 59)

def all_day_span(start: datetime) -> tuple[datetime, datetime]:
    """Fixed 00:00:00-23:59:59 span on the date of ``start``."""
    day = start.date()
    return (
        datetime.combine(day, ALL_DAY_START, tzinfo=start.tzinfo),
        datetime.combine(day, ALL_DAY_END, tzinfo=start.tzinfo)
    )

def is_recurring_rule(rule: RecurrenceRule | str | None) -> bool:
    return rule is not None and rule != RecurrenceRule.NONE

# --- Categories ---
class CategoryCreate(BaseSchema):
    name: str = Field(..., min_length=1, max_length=100)
    color: str = Field("#8B5CF6", pattern=r"^#[0-9A-Fa-f]{6}$")
    icon: Optional[str] = Field(None, max_length=16)

class CategoryResponse(BaseSchema):
    id: int
    name: str
    color: str
    icon: Optional[str] = None

# --- Core Event Schemas ---
class EventBase(BaseSchema):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    location: Optional[str] = Field(None, max_length=200)
    category_id: Optional[int] = None
    start_time: UTCDateTime
    end_time: UTCDateTime
    is_all_day: bool = False
    recurrence_rule: Optional[RecurrenceRule] = None

class EventCreate(EventBase):
    assigned_members: List[int] = Field(default_factory=list)

    @model_validator(mode="after")
    def normalize_times(self) -> "EventCreate":
        if self.is_all_day:
            self.start_time, self.end_time = all_day_span(self.start_time)
        if self.start_time >= self.end_time:
            raise ValueError("End time must be after start time")
        return self

    @property
    def is_recurring(self) -> bool:
        return is_recurring_rule(self.recurrence_rule)

# Columns an update may change but never clear
REQUIRED_EVENT_FIELDS = frozenset({"title", "start_time", "end_time", "is_all_day"})

class EventUpdate(BaseSchema):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    location: Optional[str] = Field(None, max_length=200)
    category_id: Optional[int] = None
    start_time: Optional[UTCDateTime] = None
    end_time: Optional[UTCDateTime] = None
    is_all_day: Optional[bool] = None
    recurrence_rule: Optional[RecurrenceRule] = None
    assigned_members: Optional[List[int]] = None

    @model_validator(mode="after")
    def validate_update(self) -> "EventUpdate":
        if not self.model_fields_set:
            raise ValueError("At least one field must be updated")
        cleared = sorted(f for f in REQUIRED_EVENT_FIELDS & self.model_fields_set if getattr(self, f) is None)
        if cleared:
            raise ValueError(f"Fields cannot be null: {', '.join(cleared)}")
        # Only validate dates if both start_time and end_time are provided
        if self.start_time is not None and self.end_time is not None and not self.is_all_day:
            if self.start_time >= self.end_time:
                raise ValueError("End time must be after start time")
        return self

class EventResponse(TimestampSchema):
    id: int
    family_id: int
    created_by_id: int
    title: str
    description: Optional[str] = None
    location: Optional[str] = None
    start_time: UTCDateTime
    end_time: UTCDateTime
    is_all_day: bool
    is_recurring: bool
    recurrence_rule: Optional[str] = None
    category: Optional[CategoryResponse] = None
    assigned_member_ids: List[int] = []
