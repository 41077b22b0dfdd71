from .types import (
    BaseEvent,
    Category,
    GridBounds,
    GridPosition,
    MemberRole,
    Occurrence,
    OccurrenceId,
    RecurrenceRule,
    Viewer,
)
from .recurrence import MAX_OCCURRENCES, MalformedEventError, generate
from .projection import project
from .visibility import can_view, filter_occurrences
from .layout import (
    DayLayout,
    PositionedOccurrence,
    bucket_by_day,
    layout_day,
    occurrences_on_day,
    position,
    split_all_day,
)

__all__ = [
    "BaseEvent",
    "Category",
    "GridBounds",
    "GridPosition",
    "MemberRole",
    "Occurrence",
    "OccurrenceId",
    "RecurrenceRule",
    "Viewer",
    "MAX_OCCURRENCES",
    "MalformedEventError",
    "generate",
    "project",
    "can_view",
    "filter_occurrences",
    "DayLayout",
    "PositionedOccurrence",
    "bucket_by_day",
    "layout_day",
    "occurrences_on_day",
    "position",
    "split_all_day",
]
