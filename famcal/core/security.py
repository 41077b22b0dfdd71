from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from famcal.core.config import MEMBER_HEADER
from famcal.core.exceptions import AuthenticationError, PermissionDenied
from famcal.crud import member as crud_member
from famcal.db.database import get_db
from famcal.models.family import FamilyMember

async def get_current_member(
    db: AsyncSession = Depends(get_db),
    acting_member_id: int | None = Header(None, alias=MEMBER_HEADER, description="Acting family member")
) -> FamilyMember:
    """
    Resolve the acting family member.

    Sign-in and PIN checks happen upstream; by the time a request arrives the
    selected member id travels in the ``X-Member-ID`` header.
    """
    if acting_member_id is None:
        raise AuthenticationError("Missing X-Member-ID header")

    member = await crud_member.get_member(db, acting_member_id)
    if member is None:
        raise AuthenticationError()
    return member

async def require_parent(member: FamilyMember = Depends(get_current_member)) -> FamilyMember:
    """Only parents may change the calendar"""
    if not member.is_parent:
        raise PermissionDenied()
    return member
