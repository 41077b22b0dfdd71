from typing import List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from famcal.core.exceptions import ResourceNotFound, ValidationError
from famcal.core.logging import events_logger
from famcal.core.security import get_current_member, require_parent
from famcal.crud import event as crud_event
from famcal.db.database import get_db
from famcal.models.family import FamilyMember
from famcal.schemas.event import (
    CategoryCreate,
    CategoryResponse,
    EventCreate,
    EventResponse,
    EventUpdate,
)

router = APIRouter(
    tags=["Events"],
    responses={
        401: {"description": "Unknown or missing family member"},
        403: {"description": "Only parents can manage the calendar"},
        404: {"description": "Event not found"}
    }
)

@router.post(
    "/events/",
    response_model=EventResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create new event",
    description="""
    Create a new base event. Parents only.

    * All-day events are stored as 00:00:00-23:59:59 on their start date
    * `recurrence_rule` is one of none, daily, weekly, biweekly, monthly
    * `assigned_members` lists the family members the event applies to
    """,
    responses={
        201: {
            "description": "Event created successfully",
            "content": {
                "application/json": {
                    "example": {
                        "id": 1,
                        "family_id": 1,
                        "created_by_id": 1,
                        "title": "Soccer practice",
                        "start_time": "2024-01-01T09:00:00Z",
                        "end_time": "2024-01-01T10:00:00Z",
                        "is_all_day": False,
                        "is_recurring": True,
                        "recurrence_rule": "weekly",
                        "category": None,
                        "assigned_member_ids": [2]
                    }
                }
            }
        }
    }
)
async def create_event(
    *,
    db: AsyncSession = Depends(get_db),
    event_in: EventCreate,
    parent: FamilyMember = Depends(require_parent)
) -> EventResponse:
    """
    Create a new event.

    Parameters:
    - **event**: Event data including assigned member ids

    Returns the created event.
    """
    try:
        db_event = await crud_event.create_event(db, event_in, parent)
    except ValueError as e:
        raise ValidationError(str(e))

    events_logger.info("Event created", extra={"event_id": db_event.id, "member_id": parent.id})
    return EventResponse.model_validate(db_event)

@router.get(
    "/events/{event_id}",
    response_model=EventResponse,
    summary="Get event by ID",
    description="Retrieve a base event. Children can only read events assigned to them."
)
async def get_event(
    *,
    db: AsyncSession = Depends(get_db),
    event_id: int,
    member: FamilyMember = Depends(get_current_member)
) -> EventResponse:
    event = await crud_event.get_event(db, event_id, member.family_id, viewer=member.as_viewer())
    if not event:
        raise ResourceNotFound("Event not found")
    return EventResponse.model_validate(event)

@router.put(
    "/events/{event_id}",
    response_model=EventResponse,
    summary="Update event",
    description="""
    Update a base event. Parents only.

    Occurrences carry `event_id` and `sequence_index` separately; edits always
    target the base event, which changes every occurrence derived from it.
    """
)
async def update_event(
    *,
    db: AsyncSession = Depends(get_db),
    event_id: int,
    event_in: EventUpdate,
    parent: FamilyMember = Depends(require_parent)
) -> EventResponse:
    event = await crud_event.get_event(db, event_id, parent.family_id)
    if not event:
        raise ResourceNotFound("Event not found")

    try:
        event = await crud_event.update_event(db, event, event_in)
    except ValueError as e:
        raise ValidationError(str(e))

    events_logger.info("Event updated", extra={"event_id": event.id, "member_id": parent.id})
    return EventResponse.model_validate(event)

@router.delete(
    "/events/{event_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete event",
    description="Delete a base event and all its occurrences. Parents only."
)
async def delete_event(
    *,
    db: AsyncSession = Depends(get_db),
    event_id: int,
    parent: FamilyMember = Depends(require_parent)
) -> Response:
    event = await crud_event.get_event(db, event_id, parent.family_id)
    if not event:
        raise ResourceNotFound("Event not found")

    await crud_event.delete_event(db, event)
    events_logger.info("Event deleted", extra={"event_id": event_id, "member_id": parent.id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.get(
    "/categories/",
    response_model=List[CategoryResponse],
    tags=["Categories"],
    summary="List event categories"
)
async def list_categories(
    *,
    db: AsyncSession = Depends(get_db),
    member: FamilyMember = Depends(get_current_member)
) -> List[CategoryResponse]:
    categories = await crud_event.get_categories(db, member.family_id)
    return [CategoryResponse.model_validate(c) for c in categories]

@router.post(
    "/categories/",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Categories"],
    summary="Create event category",
    description="Add a color/icon category to the family. Parents only."
)
async def create_category(
    *,
    db: AsyncSession = Depends(get_db),
    category_in: CategoryCreate,
    parent: FamilyMember = Depends(require_parent)
) -> CategoryResponse:
    category = await crud_event.create_category(db, parent.family_id, category_in)
    return CategoryResponse.model_validate(category)
