from datetime import date, datetime
from typing import List, Sequence

from famcal.core.config import settings
from famcal.engine import (
    BaseEvent,
    GridBounds,
    Occurrence,
    Viewer,
    bucket_by_day,
    filter_occurrences,
    layout_day,
    project,
)
from famcal.engine.intervals import days_in_window, month_grid_window, week_window
from famcal.models.event import Event
from famcal.schemas.calendar import (
    DayViewResponse,
    MonthDayResponse,
    MonthViewResponse,
    OccurrenceResponse,
    TimedOccurrenceResponse,
    WeekViewResponse,
)

def grid_bounds() -> GridBounds:
    return GridBounds(start_hour=settings.GRID_START_HOUR, end_hour=settings.GRID_END_HOUR)

def to_base_events(rows: Sequence[Event]) -> List[BaseEvent]:
    """Convert storage rows, preserving query order for stable tie breaking."""
    return [row.to_base_event() for row in rows]

def project_for_viewer(
    events: Sequence[BaseEvent],
    window_start: datetime,
    window_end: datetime,
    viewer: Viewer
) -> List[Occurrence]:
    """Project, then apply the viewer's visibility rules."""
    occurrences = project(
        events,
        window_start,
        window_end,
        limit=settings.MAX_OCCURRENCES_PER_EVENT
    )
    return filter_occurrences(occurrences, viewer)

def day_view_response(occurrences: Sequence[Occurrence], day: date | datetime) -> DayViewResponse:
    """Split one day into its all-day strip and positioned timed occurrences."""
    layout = layout_day(occurrences, day, grid_bounds(), settings.GRID_MIN_HEIGHT_PERCENT)
    return DayViewResponse(
        day=layout.day,
        all_day=[OccurrenceResponse.from_occurrence(o) for o in layout.all_day],
        timed=[
            TimedOccurrenceResponse.from_positioned(item.occurrence, item.position)
            for item in layout.timed
        ]
    )

def week_view_response(occurrences: Sequence[Occurrence], day: date) -> WeekViewResponse:
    start, end = week_window(day)
    bounds = grid_bounds()
    return WeekViewResponse(
        start_time=start,
        end_time=end,
        grid_start_hour=bounds.start_hour,
        grid_end_hour=bounds.end_hour,
        days=[day_view_response(occurrences, d) for d in days_in_window(start, end)]
    )

def month_view_response(occurrences: Sequence[Occurrence], day: date) -> MonthViewResponse:
    """Every day of the month grid with the occurrences starting on it."""
    start, end = month_grid_window(day)
    buckets = bucket_by_day(occurrences)
    return MonthViewResponse(
        start_time=start,
        end_time=end,
        days=[
            MonthDayResponse(
                day=d,
                in_month=(d.year, d.month) == (day.year, day.month),
                occurrences=[OccurrenceResponse.from_occurrence(o) for o in buckets.get(d, [])]
            )
            for d in days_in_window(start, end)
        ]
    )
