from datetime import datetime
from typing import List, Dict, Any
from sqlalchemy import String, DateTime, Boolean, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from .base import Base
from famcal.engine.intervals import ensure_aware
from famcal.engine.types import BaseEvent, Category

DEFAULT_CATEGORY_COLOR = "#8B5CF6"

class EventCategory(Base):
    """Color and icon shared by events of one kind"""

    __tablename__ = "event_category"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    family_id: Mapped[int] = mapped_column(ForeignKey("family.id", ondelete="CASCADE"), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    color: Mapped[str] = mapped_column(String(20), default=DEFAULT_CATEGORY_COLOR)
    icon: Mapped[str | None] = mapped_column(String(16))

    def __repr__(self):
        return f"<EventCategory(id={self.id}, name={self.name})>"

    def to_category(self) -> Category:
        return Category(id=self.id, name=self.name, color=self.color, icon=self.icon)

class EventAssignment(Base):
    """Links an event to a family member it applies to"""

    __tablename__ = "event_assignment"

    id: Mapped[int] = mapped_column(primary_key=True)
    event_id: Mapped[int] = mapped_column(ForeignKey("event.id", ondelete="CASCADE"), nullable=False)
    member_id: Mapped[int] = mapped_column(ForeignKey("family_member.id", ondelete="CASCADE"), nullable=False)

    event: Mapped["Event"] = relationship("Event", back_populates="assignments")

    __table_args__ = (
        UniqueConstraint('event_id', 'member_id', name='uq_event_assignment_event_member'),
        Index('ix_event_assignment_member', 'member_id'),
    )

class Event(Base):
    """Base event as edited by parents; occurrences are derived from it on demand"""

    __tablename__ = "event"

    # Primary key
    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    # Required fields
    family_id: Mapped[int] = mapped_column(ForeignKey("family.id", ondelete="CASCADE"), nullable=False)
    created_by_id: Mapped[int] = mapped_column(ForeignKey("family_member.id", ondelete="CASCADE"), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # Optional fields
    description: Mapped[str | None] = mapped_column(String(1000))
    location: Mapped[str | None] = mapped_column(String(200))
    is_all_day: Mapped[bool] = mapped_column(Boolean, default=False)
    is_recurring: Mapped[bool] = mapped_column(Boolean, default=False)
    recurrence_rule: Mapped[str | None] = mapped_column(String(20))
    category_id: Mapped[int | None] = mapped_column(ForeignKey("event_category.id", ondelete="SET NULL"))

    # Relationships
    category: Mapped["EventCategory | None"] = relationship("EventCategory")
    assignments: Mapped[List["EventAssignment"]] = relationship(
        "EventAssignment",
        back_populates="event",
        cascade="all, delete-orphan"
    )

    # Indexes for efficient querying
    __table_args__ = (
        Index('ix_event_family_start', 'family_id', 'start_time'),
    )

    def __repr__(self):
        return f"<Event(id={self.id}, title={self.title})>"

    @property
    def assigned_member_ids(self) -> List[int]:
        return [assignment.member_id for assignment in self.assignments]

    def to_base_event(self) -> BaseEvent:
        """Hand this row to the projection engine; category and assignments must be loaded."""
        return BaseEvent(
            id=self.id,
            title=self.title,
            start_time=ensure_aware(self.start_time),
            end_time=ensure_aware(self.end_time),
            is_all_day=self.is_all_day,
            is_recurring=self.is_recurring,
            recurrence_rule=self.recurrence_rule,
            category=self.category.to_category() if self.category else None,
            assigned_member_ids=frozenset(self.assigned_member_ids),
            location=self.location,
            description=self.description
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to a plain dictionary for logging."""
        return {
            "id": self.id,
            "family_id": self.family_id,
            "title": self.title,
            "start_time": ensure_aware(self.start_time).isoformat(),
            "end_time": ensure_aware(self.end_time).isoformat(),
            "is_all_day": self.is_all_day,
            "is_recurring": self.is_recurring,
            "recurrence_rule": self.recurrence_rule,
            "category_id": self.category_id
        }
