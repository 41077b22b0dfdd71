from datetime import date, datetime, time, timedelta, UTC
from typing import List, Tuple

from dateutil.relativedelta import relativedelta, SU, SA

# Last representable instant of a calendar day
END_OF_DAY = time(23, 59, 59, 999999)


def ensure_aware(dt: datetime) -> datetime:
    """Express a datetime in UTC; naive values are taken to be UTC already."""
    return dt.astimezone(UTC) if dt.tzinfo else dt.replace(tzinfo=UTC)


def is_within_interval(value: datetime, start: datetime, end: datetime) -> bool:
    """Check whether value lies in the closed interval [start, end]."""
    if start > end:
        return False
    return start <= value <= end


def overlaps(start: datetime, end: datetime, window_start: datetime, window_end: datetime) -> bool:
    """Check whether [start, end] touches the window [window_start, window_end]."""
    return start <= window_end and end >= window_start


def is_same_day(left: datetime | date, right: datetime | date) -> bool:
    """Calendar-day equality, independent of time of day."""
    return day_key(left) == day_key(right)


def day_key(value: datetime | date) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def hour_of_day(value: datetime) -> float:
    """Fractional hour of day; seconds are ignored the same way the grid ignores them."""
    return value.hour + value.minute / 60


def start_of_day(value: datetime | date, tzinfo=UTC) -> datetime:
    if isinstance(value, datetime):
        return value.replace(hour=0, minute=0, second=0, microsecond=0)
    return datetime.combine(value, time.min, tzinfo=tzinfo)


def end_of_day(value: datetime | date, tzinfo=UTC) -> datetime:
    if isinstance(value, datetime):
        return value.replace(hour=23, minute=59, second=59, microsecond=999999)
    return datetime.combine(value, END_OF_DAY, tzinfo=tzinfo)


def day_window(value: datetime | date) -> Tuple[datetime, datetime]:
    """Window covering one calendar day."""
    return start_of_day(value), end_of_day(value)


def week_window(value: datetime | date) -> Tuple[datetime, datetime]:
    """Sunday-to-Saturday window containing the given day."""
    first = start_of_day(value) + relativedelta(weekday=SU(-1))
    last = end_of_day(value) + relativedelta(weekday=SA(+1))
    return first, last


def month_grid_window(value: datetime | date) -> Tuple[datetime, datetime]:
    """
    Window rendered by a month grid: from the Sunday on or before the first of
    the month to the Saturday on or after its last day.
    """
    month_start = start_of_day(value) + relativedelta(day=1)
    month_end = end_of_day(value) + relativedelta(day=31)
    return week_window(month_start)[0], week_window(month_end)[1]


def days_in_window(start: datetime, end: datetime) -> List[date]:
    """Every calendar day touched by [start, end], in order."""
    days: List[date] = []
    current = day_key(start)
    last = day_key(end)
    while current <= last:
        days.append(current)
        current += timedelta(days=1)
    return days
