from typing import List, Optional
from sqlalchemy import case, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from famcal.core.logging import db_logger
from famcal.engine.types import MemberRole
from famcal.models.event import Event, EventAssignment
from famcal.models.family import FamilyMember
from famcal.schemas.member import MemberCreate, MemberUpdate

async def get_member(db: AsyncSession, member_id: int) -> Optional[FamilyMember]:
    """Get a family member by ID"""
    return await db.get(FamilyMember, member_id)

async def get_family_members(db: AsyncSession, family_id: int) -> List[FamilyMember]:
    """Get the members of a family, parents first, then by name"""
    parents_first = case((FamilyMember.role == MemberRole.PARENT, 0), else_=1)
    result = await db.execute(
        select(FamilyMember)
        .where(FamilyMember.family_id == family_id)
        .order_by(parents_first, FamilyMember.name)
    )
    return list(result.scalars().all())

async def _count_parents(db: AsyncSession, family_id: int) -> int:
    result = await db.execute(
        select(func.count(FamilyMember.id)).where(
            FamilyMember.family_id == family_id,
            FamilyMember.role == MemberRole.PARENT
        )
    )
    return result.scalar_one()

async def create_member(db: AsyncSession, family_id: int, member_in: MemberCreate) -> FamilyMember:
    member = FamilyMember(family_id=family_id, **member_in.model_dump())
    db.add(member)
    await db.commit()
    await db.refresh(member)
    return member

async def update_member(db: AsyncSession, member: FamilyMember, member_in: MemberUpdate) -> FamilyMember:
    """Update a member; the family always keeps at least one parent"""
    update_data = member_in.model_dump(exclude_unset=True)

    if member.is_parent and update_data.get("role") == MemberRole.CHILD:
        if await _count_parents(db, member.family_id) <= 1:
            raise ValueError("A family needs at least one parent")

    for field, value in update_data.items():
        setattr(member, field, value)

    await db.commit()
    await db.refresh(member)
    db_logger.info("Member updated", extra={"member_id": member.id, "fields": sorted(update_data)})
    return member

async def delete_member(db: AsyncSession, member: FamilyMember, acting: FamilyMember) -> None:
    """
    Remove a member from the family.

    Their events stay on the calendar: assignments to them are dropped and
    events they created pass to the acting parent.
    """
    if member.id == acting.id:
        raise ValueError("Members cannot remove themselves")

    member_id = member.id
    await db.execute(delete(EventAssignment).where(EventAssignment.member_id == member_id))
    await db.execute(
        update(Event)
        .where(Event.created_by_id == member_id)
        .values(created_by_id=acting.id)
    )
    await db.delete(member)
    await db.commit()
    db_logger.info("Member removed", extra={"removed_member_id": member_id, "member_id": acting.id})
