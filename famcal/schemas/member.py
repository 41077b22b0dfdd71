from typing import Optional
from pydantic import Field, model_validator
from .base import BaseSchema
from famcal.engine.types import MemberRole

class MemberBase(BaseSchema):
    """Base schema for family member data"""
    name: str = Field(..., min_length=1, max_length=100)
    role: MemberRole = MemberRole.CHILD
    color: str = Field("#8B5CF6", pattern=r"^#[0-9A-Fa-f]{6}$")
    avatar_emoji: Optional[str] = Field(None, max_length=16)

class MemberCreate(MemberBase):
    """Schema for adding a member to the family"""
    pass

class MemberResponse(MemberBase):
    """Schema for member response data"""
    id: int
    family_id: int

class MemberUpdate(BaseSchema):
    """Partial update of a family member"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    role: Optional[MemberRole] = None
    color: Optional[str] = Field(None, pattern=r"^#[0-9A-Fa-f]{6}$")
    avatar_emoji: Optional[str] = Field(None, max_length=16)

    @model_validator(mode="after")
    def validate_update(self) -> "MemberUpdate":
        if not self.model_fields_set:
            raise ValueError("At least one field must be updated")
        cleared = sorted(f for f in ("name", "role", "color") if f in self.model_fields_set and getattr(self, f) is None)
        if cleared:
            raise ValueError(f"Fields cannot be null: {', '.join(cleared)}")
        return self
