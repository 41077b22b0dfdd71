from datetime import date, datetime
from typing import List
import time
from fastapi import APIRouter, Depends, Query
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from famcal.core.exceptions import ValidationError
from famcal.core.logging import calendar_logger
from famcal.core.metrics import record_db_operation
from famcal.core.security import get_current_member
from famcal.crud import event as crud_event
from famcal.db.database import get_db
from famcal.engine.intervals import day_window, month_grid_window, week_window
from famcal.models.family import FamilyMember
from famcal.schemas.calendar import (
    DayViewResponse,
    MonthViewResponse,
    OccurrenceResponse,
    WeekViewResponse,
    WindowQuery,
)
from famcal.utils.event_utils import (
    day_view_response,
    month_view_response,
    project_for_viewer,
    to_base_events,
    week_view_response,
)

router = APIRouter(
    prefix="/calendar",
    tags=["Calendar"],
    responses={
        401: {"description": "Unknown or missing family member"},
        422: {"description": "Invalid query parameters"}
    }
)

async def _project(
    db: AsyncSession,
    member: FamilyMember,
    window_start: datetime,
    window_end: datetime
):
    viewer = member.as_viewer()
    query_start = time.time()
    rows = await crud_event.get_family_events(db, member.family_id, viewer)
    record_db_operation("select_events", time.time() - query_start)
    occurrences = project_for_viewer(to_base_events(rows), window_start, window_end, viewer)

    calendar_logger.info(
        "Projected calendar window",
        extra={
            "member_id": member.id,
            "window_start": window_start.isoformat(),
            "window_end": window_end.isoformat(),
            "base_events": len(rows),
            "occurrences": len(occurrences)
        }
    )
    return occurrences

@router.get(
    "/occurrences",
    response_model=List[OccurrenceResponse],
    summary="List occurrences in a window",
    description="""
    Expand recurring events and return every occurrence starting inside the window.

    * Sorted by start time, ties in storage order
    * Children only see events assigned to them
    * A window whose end precedes its start is empty
    """
)
async def list_occurrences(
    *,
    db: AsyncSession = Depends(get_db),
    start_time: datetime = Query(..., description="Start of window (ISO format)"),
    end_time: datetime = Query(..., description="End of window (ISO format)"),
    member: FamilyMember = Depends(get_current_member)
) -> List[OccurrenceResponse]:
    """
    List occurrences in a window.

    Parameters:
    - **start_time**: Start of the window (inclusive)
    - **end_time**: End of the window (inclusive)
    """
    try:
        window = WindowQuery(start_time=start_time, end_time=end_time)
    except PydanticValidationError as e:
        raise ValidationError(e.errors()[0]["msg"])

    occurrences = await _project(db, member, window.start_time, window.end_time)
    return [OccurrenceResponse.from_occurrence(o) for o in occurrences]

@router.get(
    "/day",
    response_model=DayViewResponse,
    summary="Day view",
    description="All-day strip plus timed occurrences positioned on the hour grid."
)
async def get_day_view(
    *,
    db: AsyncSession = Depends(get_db),
    day: date = Query(..., description="Calendar day (YYYY-MM-DD)"),
    member: FamilyMember = Depends(get_current_member)
) -> DayViewResponse:
    start, end = day_window(day)
    occurrences = await _project(db, member, start, end)
    return day_view_response(occurrences, day)

@router.get(
    "/week",
    response_model=WeekViewResponse,
    summary="Week view",
    description="Seven day columns, Sunday to Saturday, for the week containing `day`."
)
async def get_week_view(
    *,
    db: AsyncSession = Depends(get_db),
    day: date = Query(..., description="Any day of the week (YYYY-MM-DD)"),
    member: FamilyMember = Depends(get_current_member)
) -> WeekViewResponse:
    start, end = week_window(day)
    occurrences = await _project(db, member, start, end)
    return week_view_response(occurrences, day)

@router.get(
    "/month",
    response_model=MonthViewResponse,
    summary="Month view",
    description="Month grid, padded to whole weeks, with occurrences bucketed by day."
)
async def get_month_view(
    *,
    db: AsyncSession = Depends(get_db),
    day: date = Query(..., description="Any day of the month (YYYY-MM-DD)"),
    member: FamilyMember = Depends(get_current_member)
) -> MonthViewResponse:
    start, end = month_grid_window(day)
    occurrences = await _project(db, member, start, end)
    return month_view_response(occurrences, day)
