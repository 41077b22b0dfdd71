import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool
from typing import AsyncGenerator, Callable, Dict
import os
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from datetime import datetime, UTC, timedelta
import sys

# Add the project root to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from famcal.main import app
from famcal.models import Base, Family, FamilyMember, EventCategory
from famcal.db.database import get_db
from famcal.core.config import settings, MEMBER_HEADER
from famcal.core.logging import setup_test_logging
from famcal.engine import BaseEvent, Category, MemberRole

# Let caplog see records from the application loggers
setup_test_logging()

# Use a separate test database
TEST_DATABASE_URL = "sqlite+aiosqlite:///./test.db"

engine = create_async_engine(
    TEST_DATABASE_URL,
    poolclass=NullPool,
    connect_args={"check_same_thread": False}
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False
)

# Override the get_db dependency for testing
async def override_get_db():
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise

# --- Engine fixtures ---

@pytest.fixture
def event_factory() -> Callable[..., BaseEvent]:
    """Build base events with sensible defaults; keyword arguments override them."""
    counter = {"next_id": 1}

    def make(**overrides) -> BaseEvent:
        start = overrides.pop("start_time", datetime(2024, 1, 1, 9, 0, tzinfo=UTC))
        data = {
            "id": counter["next_id"],
            "title": f"Event {counter['next_id']}",
            "start_time": start,
            "end_time": overrides.pop("end_time", start + overrides.pop("duration", timedelta(hours=1))),
        }
        rule = overrides.get("recurrence_rule")
        if rule is not None and "is_recurring" not in overrides:
            data["is_recurring"] = rule != "none"
        data.update(overrides)
        counter["next_id"] += 1
        return BaseEvent(**data)

    return make

@pytest.fixture
def school_category() -> Category:
    return Category(id=1, name="School", color="#3B82F6", icon="🎒")

# --- Database and API fixtures ---

@pytest_asyncio.fixture
async def setup_db() -> AsyncGenerator[None, None]:
    """Start each API test with a clean schema."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

@pytest_asyncio.fixture
async def db_session(setup_db) -> AsyncGenerator[AsyncSession, None]:
    """Get async database session for tests."""
    async with async_session_maker() as session:
        yield session

@pytest_asyncio.fixture
async def test_app(setup_db) -> FastAPI:
    """Configure the application for testing."""
    settings.TESTING = True
    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()

@pytest_asyncio.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
        follow_redirects=True
    ) as ac:
        yield ac

@pytest_asyncio.fixture
async def family(db_session: AsyncSession) -> Family:
    family = Family(name="The Testers")
    db_session.add(family)
    await db_session.commit()
    await db_session.refresh(family)
    return family

async def _add_member(db_session: AsyncSession, family: Family, name: str, role: MemberRole) -> FamilyMember:
    member = FamilyMember(family_id=family.id, name=name, role=role)
    db_session.add(member)
    await db_session.commit()
    await db_session.refresh(member)
    return member

@pytest_asyncio.fixture
async def parent(db_session: AsyncSession, family: Family) -> FamilyMember:
    return await _add_member(db_session, family, "Pat", MemberRole.PARENT)

@pytest_asyncio.fixture
async def child(db_session: AsyncSession, family: Family) -> FamilyMember:
    return await _add_member(db_session, family, "Alex", MemberRole.CHILD)

@pytest_asyncio.fixture
async def other_child(db_session: AsyncSession, family: Family) -> FamilyMember:
    return await _add_member(db_session, family, "Casey", MemberRole.CHILD)

@pytest_asyncio.fixture
async def category(db_session: AsyncSession, family: Family) -> EventCategory:
    category = EventCategory(family_id=family.id, name="Sports", color="#22C55E", icon="⚽")
    db_session.add(category)
    await db_session.commit()
    await db_session.refresh(category)
    return category

def member_headers(member: FamilyMember) -> Dict[str, str]:
    return {MEMBER_HEADER: str(member.id)}

@pytest.fixture
def parent_headers(parent: FamilyMember) -> Dict[str, str]:
    return member_headers(parent)

@pytest.fixture
def child_headers(child: FamilyMember) -> Dict[str, str]:
    return member_headers(child)

@pytest.fixture
def other_child_headers(other_child: FamilyMember) -> Dict[str, str]:
    return member_headers(other_child)
