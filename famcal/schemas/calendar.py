from datetime import date, datetime, timedelta
from typing import List, Optional
from pydantic import model_validator
from .base import BaseSchema, UTCDateTime
from .event import CategoryResponse
from famcal.core.config import settings
from famcal.engine import GridPosition, Occurrence

class WindowQuery(BaseSchema):
    """Time window requested by a calendar view"""
    start_time: UTCDateTime
    end_time: UTCDateTime

    @model_validator(mode="after")
    def validate_window(self) -> "WindowQuery":
        # A reversed window is legal and simply projects to nothing
        if self.end_time - self.start_time > timedelta(days=settings.MAX_WINDOW_DAYS):
            raise ValueError(f"Window cannot exceed {settings.MAX_WINDOW_DAYS} days")
        return self

class OccurrenceResponse(BaseSchema):
    """One dated instance of an event; edits go to ``event_id``"""
    event_id: int
    sequence_index: int
    title: str
    start_time: datetime
    end_time: datetime
    is_all_day: bool
    is_recurring: bool
    recurrence_rule: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    category: Optional[CategoryResponse] = None
    assigned_member_ids: List[int] = []

    @classmethod
    def from_occurrence(cls, occurrence: Occurrence) -> "OccurrenceResponse":
        event = occurrence.event
        return cls(
            event_id=event.id,
            sequence_index=occurrence.sequence_index,
            title=event.title,
            start_time=occurrence.start_time,
            end_time=occurrence.end_time,
            is_all_day=event.is_all_day,
            is_recurring=event.repeats,
            recurrence_rule=event.recurrence_rule,
            location=event.location,
            description=event.description,
            category=CategoryResponse.model_validate(event.category) if event.category else None,
            assigned_member_ids=sorted(event.assigned_member_ids)
        )

class TimedOccurrenceResponse(OccurrenceResponse):
    """Occurrence placed on the day/week time grid"""
    top_percent: float
    height_percent: float

    @classmethod
    def from_positioned(cls, occurrence: Occurrence, position: GridPosition) -> "TimedOccurrenceResponse":
        base = OccurrenceResponse.from_occurrence(occurrence)
        return cls(
            **base.model_dump(),
            top_percent=position.top_percent,
            height_percent=position.height_percent
        )

class DayViewResponse(BaseSchema):
    day: date
    all_day: List[OccurrenceResponse] = []
    timed: List[TimedOccurrenceResponse] = []

class WeekViewResponse(BaseSchema):
    start_time: datetime
    end_time: datetime
    grid_start_hour: int
    grid_end_hour: int
    days: List[DayViewResponse]

class MonthDayResponse(BaseSchema):
    day: date
    in_month: bool
    occurrences: List[OccurrenceResponse] = []

class MonthViewResponse(BaseSchema):
    start_time: datetime
    end_time: datetime
    days: List[MonthDayResponse]
