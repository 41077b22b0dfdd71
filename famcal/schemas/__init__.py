from .member import (
    MemberBase,
    MemberCreate,
    MemberResponse,
    MemberUpdate,
)
from .event import (
    CategoryCreate,
    CategoryResponse,
    EventBase,
    EventCreate,
    EventUpdate,
    EventResponse,
)
from .calendar import (
    WindowQuery,
    OccurrenceResponse,
    TimedOccurrenceResponse,
    DayViewResponse,
    WeekViewResponse,
    MonthDayResponse,
    MonthViewResponse,
)

__all__ = [
    "MemberBase",
    "MemberCreate",
    "MemberResponse",
    "MemberUpdate",
    "CategoryCreate",
    "CategoryResponse",
    "EventBase",
    "EventCreate",
    "EventUpdate",
    "EventResponse",
    "WindowQuery",
    "OccurrenceResponse",
    "TimedOccurrenceResponse",
    "DayViewResponse",
    "WeekViewResponse",
    "MonthDayResponse",
    "MonthViewResponse",
]
