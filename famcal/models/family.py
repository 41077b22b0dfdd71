from typing import List
from sqlalchemy import String, Enum as SQLAEnum, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from .base import Base
from famcal.engine.types import MemberRole, Viewer

class Family(Base):
    """A household sharing one calendar"""

    __tablename__ = "family"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, default="My Family")

    members: Mapped[List["FamilyMember"]] = relationship(
        "FamilyMember",
        back_populates="family",
        cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<Family(id={self.id}, name={self.name})>"

class FamilyMember(Base):
    """A parent or child belonging to a family"""

    __tablename__ = "family_member"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    family_id: Mapped[int] = mapped_column(ForeignKey("family.id", ondelete="CASCADE"), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[MemberRole] = mapped_column(
        SQLAEnum(MemberRole, values_callable=lambda roles: [r.value for r in roles]),
        nullable=False,
        default=MemberRole.CHILD
    )
    color: Mapped[str] = mapped_column(String(20), default="#8B5CF6")
    avatar_emoji: Mapped[str | None] = mapped_column(String(16))

    family: Mapped["Family"] = relationship("Family", back_populates="members")

    __table_args__ = (
        Index('ix_family_member_family_role', 'family_id', 'role'),
    )

    def __repr__(self):
        return f"<FamilyMember {self.name} ({self.role})>"

    @property
    def is_parent(self) -> bool:
        return self.role == MemberRole.PARENT

    def as_viewer(self) -> Viewer:
        """Describe this member as a calendar viewer."""
        return Viewer(role=self.role, member_id=self.id)
