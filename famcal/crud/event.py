from typing import Iterable, List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.sql import Select

from famcal.core.logging import db_logger
from famcal.engine.intervals import ensure_aware
from famcal.engine.types import RecurrenceRule, Viewer
from famcal.models.event import Event, EventAssignment, EventCategory
from famcal.models.family import FamilyMember
from famcal.schemas.event import (
    CategoryCreate, EventCreate, EventUpdate,
    all_day_span, is_recurring_rule
)

def _event_query() -> Select:
    """Base query loading everything the projection engine reads"""
    return select(Event).options(
        selectinload(Event.category),
        selectinload(Event.assignments)
    )

def _rule_value(rule: RecurrenceRule | None) -> str | None:
    if not is_recurring_rule(rule):
        return None
    return RecurrenceRule(rule).value

async def _validate_members(db: AsyncSession, family_id: int, member_ids: Iterable[int]) -> List[int]:
    """Deduplicate member ids and make sure they all belong to the family"""
    unique_ids = list(dict.fromkeys(member_ids))
    if not unique_ids:
        return []

    result = await db.execute(
        select(FamilyMember.id).where(
            FamilyMember.family_id == family_id,
            FamilyMember.id.in_(unique_ids)
        )
    )
    found = set(result.scalars().all())
    missing = [member_id for member_id in unique_ids if member_id not in found]
    if missing:
        raise ValueError(f"Unknown family members: {missing}")
    return unique_ids

async def _validate_category(db: AsyncSession, family_id: int, category_id: int | None) -> None:
    if category_id is None:
        return
    category = await db.get(EventCategory, category_id)
    if category is None or category.family_id != family_id:
        raise ValueError(f"Unknown category: {category_id}")

async def get_family_events(db: AsyncSession, family_id: int, viewer: Viewer) -> List[Event]:
    """
    Get the base events of a family in start-time order.

    Children only receive events assigned to them; this is the access rule,
    the engine's visibility filter only shapes what the UI shows.
    """
    query = _event_query().where(Event.family_id == family_id)

    if not viewer.is_parent:
        if viewer.member_id is None:
            return []
        query = query.where(
            Event.assignments.any(EventAssignment.member_id == viewer.member_id)
        )

    result = await db.execute(query.order_by(Event.start_time, Event.id))
    return list(result.scalars().all())

async def get_event(
    db: AsyncSession,
    event_id: int,
    family_id: int,
    viewer: Viewer | None = None,
    refresh: bool = False
) -> Optional[Event]:
    """Get an event by ID within a family, honouring child visibility"""
    query = _event_query().where(
        Event.id == event_id,
        Event.family_id == family_id
    )
    if refresh:
        query = query.execution_options(populate_existing=True)

    result = await db.execute(query)
    event = result.scalar_one_or_none()

    if event is not None and viewer is not None and not viewer.is_parent:
        if viewer.member_id not in event.assigned_member_ids:
            return None
    return event

async def create_event(db: AsyncSession, event_in: EventCreate, creator: FamilyMember) -> Event:
    """Create a new event and its assignments"""
    member_ids = await _validate_members(db, creator.family_id, event_in.assigned_members)
    await _validate_category(db, creator.family_id, event_in.category_id)

    db_event = Event(
        family_id=creator.family_id,
        created_by_id=creator.id,
        title=event_in.title,
        description=event_in.description,
        location=event_in.location,
        category_id=event_in.category_id,
        start_time=event_in.start_time,
        end_time=event_in.end_time,
        is_all_day=event_in.is_all_day,
        is_recurring=event_in.is_recurring,
        recurrence_rule=_rule_value(event_in.recurrence_rule),
        assignments=[EventAssignment(member_id=member_id) for member_id in member_ids]
    )
    db.add(db_event)
    await db.commit()

    db_logger.info("Event created", extra={"event": db_event.to_dict(), "member_id": creator.id})
    return await get_event(db, db_event.id, creator.family_id, refresh=True)

async def update_event(db: AsyncSession, db_event: Event, event_in: EventUpdate) -> Event:
    """Update an event; a provided member list replaces all assignments"""
    update_data = event_in.model_dump(exclude_unset=True)
    member_ids = update_data.pop("assigned_members", None)

    # Validate everything before touching the row
    if member_ids is not None:
        member_ids = await _validate_members(db, db_event.family_id, member_ids)
    if "category_id" in update_data:
        await _validate_category(db, db_event.family_id, update_data["category_id"])
    if "recurrence_rule" in update_data:
        update_data["recurrence_rule"] = _rule_value(update_data["recurrence_rule"])
        update_data["is_recurring"] = update_data["recurrence_rule"] is not None

    start_time = ensure_aware(update_data.pop("start_time", None) or db_event.start_time)
    end_time = ensure_aware(update_data.pop("end_time", None) or db_event.end_time)
    if update_data.get("is_all_day", db_event.is_all_day):
        start_time, end_time = all_day_span(start_time)
    if end_time <= start_time:
        raise ValueError("End time must be after start time")

    for field, value in update_data.items():
        setattr(db_event, field, value)
    db_event.start_time = start_time
    db_event.end_time = end_time

    if member_ids is not None:
        current = {assignment.member_id: assignment for assignment in db_event.assignments}
        for member_id, assignment in current.items():
            if member_id not in member_ids:
                db_event.assignments.remove(assignment)
        for member_id in member_ids:
            if member_id not in current:
                db_event.assignments.append(EventAssignment(member_id=member_id))

    await db.commit()

    db_logger.info("Event updated", extra={"event": db_event.to_dict(), "fields": sorted(event_in.model_fields_set)})
    return await get_event(db, db_event.id, db_event.family_id, refresh=True)

async def delete_event(db: AsyncSession, db_event: Event) -> None:
    """Delete an event together with its assignments"""
    event_id = db_event.id
    await db.delete(db_event)
    await db.commit()
    db_logger.info("Event deleted", extra={"event_id": event_id})

async def get_categories(db: AsyncSession, family_id: int) -> List[EventCategory]:
    """Get the categories of a family ordered by name"""
    result = await db.execute(
        select(EventCategory)
        .where(EventCategory.family_id == family_id)
        .order_by(EventCategory.name)
    )
    return list(result.scalars().all())

async def create_category(db: AsyncSession, family_id: int, category_in: CategoryCreate) -> EventCategory:
    category = EventCategory(family_id=family_id, **category_in.model_dump())
    db.add(category)
    await db.commit()
    await db.refresh(category)
    return category
