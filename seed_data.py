#!/usr/bin/env python3
"""
Seed script to create a demo family calendar.
Run this after deployment to populate the database with sample data.
"""
import asyncio
import datetime
from famcal.db.database import AsyncSessionLocal, init_db
from famcal.engine.types import MemberRole, RecurrenceRule
from famcal.models.family import Family, FamilyMember
from famcal.models.event import Event, EventAssignment, EventCategory
from famcal.schemas.event import all_day_span

async def seed_data():
    """Seed the database with a demo family."""
    print("Starting database seeding...")
    await init_db()

    async with AsyncSessionLocal() as session:
        family = Family(name="The Parkers")
        session.add(family)
        await session.commit()
        await session.refresh(family)

        parent = FamilyMember(family_id=family.id, name="Sam", role=MemberRole.PARENT, color="#0EA5E9", avatar_emoji="🧑")
        maya = FamilyMember(family_id=family.id, name="Maya", role=MemberRole.CHILD, color="#EC4899", avatar_emoji="🦄")
        leo = FamilyMember(family_id=family.id, name="Leo", role=MemberRole.CHILD, color="#22C55E", avatar_emoji="🦖")
        session.add_all([parent, maya, leo])

        school = EventCategory(family_id=family.id, name="School", color="#3B82F6", icon="🎒")
        sports = EventCategory(family_id=family.id, name="Sports", color="#22C55E", icon="⚽")
        chores = EventCategory(family_id=family.id, name="Chores", color="#F59E0B", icon="🧹")
        session.add_all([school, sports, chores])
        await session.commit()

        for obj in (parent, maya, leo, school, sports, chores):
            await session.refresh(obj)

        print(f"Created family {family.name}(id={family.id}): parent(id={parent.id}), maya(id={maya.id}), leo(id={leo.id})")

        # Anchor everything on the coming Monday
        today = datetime.datetime.now(datetime.UTC).replace(hour=0, minute=0, second=0, microsecond=0)
        monday = today + datetime.timedelta(days=(7 - today.weekday()) % 7)

        def at(days: int, hour: int, minute: int = 0) -> datetime.datetime:
            return monday + datetime.timedelta(days=days, hours=hour, minutes=minute)

        def event(title, start, end, members, rule=None, category=None, all_day=False, location=None):
            return Event(
                family_id=family.id,
                created_by_id=parent.id,
                title=title,
                start_time=start,
                end_time=end,
                is_all_day=all_day,
                is_recurring=rule is not None,
                recurrence_rule=rule.value if rule else None,
                category_id=category.id if category else None,
                location=location,
                assignments=[EventAssignment(member_id=m.id) for m in members]
            )

        events = [
            event("School run", at(0, 7, 45), at(0, 8, 15), [maya, leo], RecurrenceRule.DAILY, school),
            event("Soccer practice", at(1, 17), at(1, 18, 30), [leo], RecurrenceRule.WEEKLY, sports, location="Riverside field"),
            event("Swimming", at(3, 16), at(3, 17), [maya], RecurrenceRule.BIWEEKLY, sports, location="Community pool"),
            event("Tidy bedrooms", at(5, 10), at(5, 11), [maya, leo], RecurrenceRule.WEEKLY, chores),
            event("Pocket money", at(4, 18), at(4, 18, 15), [maya, leo], RecurrenceRule.MONTHLY),
            event("School trip", *all_day_span(at(2, 0)), [maya], category=school, all_day=True),
            event("Parents' evening", at(2, 19), at(2, 20, 30), [], location="Main hall"),
        ]
        session.add_all(events)
        await session.commit()

        print(f"Created {len(events)} events")

    print("Database seeding completed successfully!")

if __name__ == "__main__":
    asyncio.run(seed_data())
