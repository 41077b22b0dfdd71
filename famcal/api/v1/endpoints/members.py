from typing import List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from famcal.core.exceptions import ResourceNotFound, ValidationError
from famcal.core.logging import members_logger
from famcal.core.security import get_current_member, require_parent
from famcal.crud import member as crud_member
from famcal.db.database import get_db
from famcal.models.family import FamilyMember
from famcal.schemas.member import MemberCreate, MemberResponse, MemberUpdate

router = APIRouter(
    prefix="/members",
    tags=["Members"],
    responses={
        401: {"description": "Unknown or missing family member"},
        403: {"description": "Only parents can manage members"},
        404: {"description": "Member not found"}
    }
)

@router.get(
    "/",
    response_model=List[MemberResponse],
    summary="List family members",
    description="Members of the acting member's family, parents first."
)
async def list_members(
    *,
    db: AsyncSession = Depends(get_db),
    member: FamilyMember = Depends(get_current_member)
) -> List[MemberResponse]:
    members = await crud_member.get_family_members(db, member.family_id)
    return [MemberResponse.model_validate(m) for m in members]

@router.get(
    "/me",
    response_model=MemberResponse,
    summary="Current member"
)
async def get_me(member: FamilyMember = Depends(get_current_member)) -> MemberResponse:
    return MemberResponse.model_validate(member)

@router.post(
    "/",
    response_model=MemberResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add family member",
    description="Add a parent or child to the family. Parents only."
)
async def create_member(
    *,
    db: AsyncSession = Depends(get_db),
    member_in: MemberCreate,
    parent: FamilyMember = Depends(require_parent)
) -> MemberResponse:
    member = await crud_member.create_member(db, parent.family_id, member_in)
    members_logger.info("Member added", extra={"new_member_id": member.id, "member_id": parent.id})
    return MemberResponse.model_validate(member)

async def _family_member(db: AsyncSession, member_id: int, parent: FamilyMember) -> FamilyMember:
    member = await crud_member.get_member(db, member_id)
    if member is None or member.family_id != parent.family_id:
        raise ResourceNotFound("Member not found")
    return member

@router.put(
    "/{member_id}",
    response_model=MemberResponse,
    summary="Update family member",
    description="Change a member's name, role, color or avatar. Parents only; the last parent cannot become a child."
)
async def update_member(
    *,
    db: AsyncSession = Depends(get_db),
    member_id: int,
    member_in: MemberUpdate,
    parent: FamilyMember = Depends(require_parent)
) -> MemberResponse:
    member = await _family_member(db, member_id, parent)
    try:
        member = await crud_member.update_member(db, member, member_in)
    except ValueError as e:
        raise ValidationError(str(e))

    members_logger.info("Member updated", extra={"updated_member_id": member.id, "member_id": parent.id})
    return MemberResponse.model_validate(member)

@router.delete(
    "/{member_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove family member",
    description="""
    Remove a member from the family. Parents only.

    * Their events remain but are no longer assigned to them
    * Events they created are handed to the acting parent
    * Parents cannot remove themselves
    """
)
async def delete_member(
    *,
    db: AsyncSession = Depends(get_db),
    member_id: int,
    parent: FamilyMember = Depends(require_parent)
) -> Response:
    member = await _family_member(db, member_id, parent)
    try:
        await crud_member.delete_member(db, member, parent)
    except ValueError as e:
        raise ValidationError(str(e))

    members_logger.info("Member removed", extra={"removed_member_id": member_id, "member_id": parent.id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)
