from .base import Base
from .family import Family, FamilyMember
from .event import Event, EventAssignment, EventCategory

# For convenience, export all models
__all__ = [
    "Base",
    "Family",
    "FamilyMember",
    "Event",
    "EventAssignment",
    "EventCategory",
]
