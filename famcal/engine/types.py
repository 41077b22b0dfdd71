from datetime import datetime, timedelta
from enum import Enum
from typing import FrozenSet, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RecurrenceRule(str, Enum):
    """Supported recurrence rules."""
    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


class MemberRole(str, Enum):
    """Roles a family member can hold."""
    PARENT = "parent"
    CHILD = "child"


class EngineModel(BaseModel):
    """Immutable value object shared by the projection engine."""
    model_config = ConfigDict(frozen=True, from_attributes=True)


class Category(EngineModel):
    id: int
    name: str
    color: str
    icon: Optional[str] = None


class BaseEvent(EngineModel):
    """
    A stored event as handed over by storage.

    Durations are not validated here: storage may hand over broken rows and the
    projector is expected to skip them rather than fail the whole window.
    """
    id: int
    title: str = Field(..., min_length=1)
    start_time: datetime
    end_time: datetime
    is_all_day: bool = False
    is_recurring: bool = False
    recurrence_rule: Optional[str] = None
    category: Optional[Category] = None
    assigned_member_ids: FrozenSet[int] = frozenset()
    location: Optional[str] = None
    description: Optional[str] = None

    @property
    def duration(self) -> timedelta:
        return self.end_time - self.start_time

    @property
    def repeats(self) -> bool:
        """True when the event expands into more than one occurrence."""
        return self.is_recurring and self.recurrence_rule not in (None, "", RecurrenceRule.NONE.value)


class OccurrenceId(NamedTuple):
    event_id: int
    sequence_index: int


class Occurrence(EngineModel):
    """One dated instance of a base event inside a projected window."""
    event: BaseEvent
    sequence_index: int = Field(..., ge=0)
    start_time: datetime
    end_time: datetime

    @property
    def occurrence_id(self) -> OccurrenceId:
        return OccurrenceId(self.event.id, self.sequence_index)

    @property
    def title(self) -> str:
        return self.event.title

    @property
    def is_all_day(self) -> bool:
        return self.event.is_all_day

    @property
    def assigned_member_ids(self) -> FrozenSet[int]:
        return self.event.assigned_member_ids


class Viewer(EngineModel):
    """Who is looking at the calendar."""
    role: MemberRole
    member_id: Optional[int] = None

    @property
    def is_parent(self) -> bool:
        return self.role == MemberRole.PARENT


class GridBounds(EngineModel):
    """Hour range rendered by day and week time grids."""
    start_hour: int = Field(6, ge=0, le=23)
    end_hour: int = Field(22, ge=1, le=24)

    @model_validator(mode="after")
    def validate_hours(self) -> "GridBounds":
        if self.end_hour <= self.start_hour:
            raise ValueError("Grid end hour must be after start hour")
        return self

    @property
    def span_hours(self) -> int:
        return self.end_hour - self.start_hour


class GridPosition(EngineModel):
    top_percent: float
    height_percent: float
