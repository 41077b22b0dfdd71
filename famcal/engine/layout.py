from datetime import date, datetime
from typing import Dict, List, Sequence, Tuple

from famcal.engine.intervals import day_key, hour_of_day, is_same_day
from famcal.engine.types import EngineModel, GridBounds, GridPosition, Occurrence

# Floor keeping short events tall enough to click
MIN_HEIGHT_PERCENT = 4.0

DEFAULT_GRID = GridBounds(start_hour=6, end_hour=22)


class PositionedOccurrence(EngineModel):
    occurrence: Occurrence
    position: GridPosition


class DayLayout(EngineModel):
    """Occurrences of one day split into the all-day strip and the time grid."""
    day: date
    all_day: List[Occurrence] = []
    timed: List[PositionedOccurrence] = []


def _clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(value, upper))


def position(
    occurrence: Occurrence,
    bounds: GridBounds = DEFAULT_GRID,
    min_height_percent: float = MIN_HEIGHT_PERCENT
) -> GridPosition:
    """
    Place a timed occurrence on a vertical time grid.

    Events starting before the grid are pinned to its top edge instead of being
    hidden. The height never drops below ``min_height_percent`` but never runs
    past the bottom of the grid either.
    """
    if occurrence.is_all_day:
        raise ValueError("All-day occurrences are not placed on the time grid")

    span = bounds.span_hours
    start_hour = hour_of_day(occurrence.start_time)
    end_hour = hour_of_day(occurrence.end_time)

    top = _clamp((start_hour - bounds.start_hour) / span * 100, 0.0, 100.0)
    height = (end_hour - start_hour) / span * 100
    height = min(100.0 - top, max(height, min_height_percent))
    return GridPosition(top_percent=top, height_percent=height)


def split_all_day(occurrences: Sequence[Occurrence]) -> Tuple[List[Occurrence], List[Occurrence]]:
    """Separate all-day occurrences from timed ones, keeping order."""
    all_day = [occurrence for occurrence in occurrences if occurrence.is_all_day]
    timed = [occurrence for occurrence in occurrences if not occurrence.is_all_day]
    return all_day, timed


def occurrences_on_day(occurrences: Sequence[Occurrence], day: date | datetime) -> List[Occurrence]:
    return [occurrence for occurrence in occurrences if is_same_day(occurrence.start_time, day)]


def bucket_by_day(occurrences: Sequence[Occurrence]) -> Dict[date, List[Occurrence]]:
    """Group occurrences by the calendar day they start on."""
    buckets: Dict[date, List[Occurrence]] = {}
    for occurrence in occurrences:
        buckets.setdefault(day_key(occurrence.start_time), []).append(occurrence)
    return buckets


def layout_day(
    occurrences: Sequence[Occurrence],
    day: date | datetime,
    bounds: GridBounds = DEFAULT_GRID,
    min_height_percent: float = MIN_HEIGHT_PERCENT
) -> DayLayout:
    """Build the day and week column layout for a single day."""
    all_day, timed = split_all_day(occurrences_on_day(occurrences, day))
    return DayLayout(
        day=day_key(day),
        all_day=all_day,
        timed=[
            PositionedOccurrence(
                occurrence=occurrence,
                position=position(occurrence, bounds, min_height_percent)
            )
            for occurrence in timed
        ]
    )
