from datetime import date, datetime, timedelta, UTC

import pytest
from pydantic import ValidationError

from famcal.engine import (
    GridBounds,
    bucket_by_day,
    layout_day,
    occurrences_on_day,
    position,
    project,
    split_all_day,
)

MARCH = (datetime(2024, 3, 1, tzinfo=UTC), datetime(2024, 3, 31, 23, 59, 59, tzinfo=UTC))

def at(day: int, hour: int, minute: int = 0) -> datetime:
    return datetime(2024, 3, day, hour, minute, tzinfo=UTC)

@pytest.fixture
def occurrence_at(event_factory):
    def make(start: datetime, duration: timedelta, **overrides):
        event = event_factory(start_time=start, duration=duration, **overrides)
        return project([event], *MARCH)[0]
    return make

def test_position_inside_grid(occurrence_at):
    result = position(occurrence_at(at(5, 9), timedelta(hours=1)))

    assert result.top_percent == pytest.approx(18.75)
    assert result.height_percent == pytest.approx(6.25)

def test_short_event_gets_minimum_height(occurrence_at):
    result = position(occurrence_at(at(5, 9), timedelta(minutes=15)))
    assert result.height_percent == pytest.approx(4.0)

def test_custom_minimum_height(occurrence_at):
    result = position(occurrence_at(at(5, 9), timedelta(minutes=15)), min_height_percent=10.0)
    assert result.height_percent == pytest.approx(10.0)

def test_event_before_grid_is_pinned_to_top(occurrence_at):
    result = position(occurrence_at(at(5, 5), timedelta(hours=2)))

    assert result.top_percent == 0.0
    assert result.height_percent == pytest.approx(12.5)

def test_height_stops_at_grid_bottom(occurrence_at):
    result = position(occurrence_at(at(5, 21, 30), timedelta(hours=2)))

    assert result.top_percent == pytest.approx(96.875)
    assert result.height_percent == pytest.approx(3.125)

def test_event_after_grid_is_pinned_to_bottom(occurrence_at):
    result = position(occurrence_at(at(5, 23), timedelta(minutes=30)))

    assert result.top_percent == 100.0
    assert result.height_percent == 0.0

def test_event_crossing_midnight_gets_minimum_height(occurrence_at):
    result = position(occurrence_at(at(5, 20), timedelta(hours=6)))

    assert result.top_percent == pytest.approx(87.5)
    assert result.height_percent == pytest.approx(4.0)

def test_custom_grid_bounds(occurrence_at):
    result = position(occurrence_at(at(5, 12), timedelta(hours=6)), GridBounds(start_hour=0, end_hour=24))

    assert result.top_percent == pytest.approx(50.0)
    assert result.height_percent == pytest.approx(25.0)

def test_grid_bounds_must_be_ordered():
    with pytest.raises(ValidationError):
        GridBounds(start_hour=18, end_hour=8)

def test_all_day_occurrences_are_not_positioned(occurrence_at):
    occurrence = occurrence_at(at(5, 0), timedelta(hours=23, minutes=59, seconds=59), is_all_day=True)

    with pytest.raises(ValueError):
        position(occurrence)

def test_split_all_day_keeps_order(occurrence_at):
    holiday = occurrence_at(at(5, 0), timedelta(hours=23), is_all_day=True, title="Holiday")
    swim = occurrence_at(at(5, 8), timedelta(hours=1), title="Swim")
    piano = occurrence_at(at(5, 16), timedelta(hours=1), title="Piano")

    all_day, timed = split_all_day([swim, holiday, piano])

    assert [o.title for o in all_day] == ["Holiday"]
    assert [o.title for o in timed] == ["Swim", "Piano"]

def test_bucket_by_day_groups_by_start_day(event_factory):
    events = [
        event_factory(title="Holiday", start_time=at(5, 0), end_time=at(5, 23, 59), is_all_day=True),
        event_factory(title="Swim", start_time=at(5, 17), recurrence_rule="weekly"),
    ]

    buckets = bucket_by_day(project(events, *MARCH))

    assert list(buckets) == [date(2024, 3, 5), date(2024, 3, 12), date(2024, 3, 19), date(2024, 3, 26)]
    assert [o.title for o in buckets[date(2024, 3, 5)]] == ["Holiday", "Swim"]
    assert date(2024, 3, 6) not in buckets

def test_occurrences_on_day(event_factory):
    events = [event_factory(start_time=at(d, 9)) for d in (4, 5, 5, 6)]
    occurrences = project(events, *MARCH)

    assert len(occurrences_on_day(occurrences, date(2024, 3, 5))) == 2
    assert len(occurrences_on_day(occurrences, at(6, 23))) == 1

def test_layout_day(event_factory):
    events = [
        event_factory(title="Holiday", start_time=at(5, 0), end_time=at(5, 23, 59), is_all_day=True),
        event_factory(title="Swim", start_time=at(5, 8)),
        event_factory(title="Tomorrow", start_time=at(6, 8)),
    ]

    layout = layout_day(project(events, *MARCH), date(2024, 3, 5))

    assert layout.day == date(2024, 3, 5)
    assert [o.title for o in layout.all_day] == ["Holiday"]
    assert [item.occurrence.title for item in layout.timed] == ["Swim"]
    assert layout.timed[0].position.top_percent == pytest.approx(12.5)
