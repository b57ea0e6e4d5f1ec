import os
import sys
from datetime import date
from pathlib import Path

import pytest

# Ensure project root is on sys.path so `import hostel_attendance` works during test collection
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Provide minimal env vars required by hostel_attendance.core.config.Settings
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret")

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from hostel_attendance.db import base  # noqa: F401
from hostel_attendance.db.session import configure_sqlite, get_session
from hostel_attendance.main import app
from hostel_attendance.models.enums import ProfileRole
from hostel_attendance.models.profile import Profile
from hostel_attendance.models.room import Room
from hostel_attendance.models.student import Student


DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def engine():
    # Fresh in-memory database per test
    engine = create_async_engine(DATABASE_URL, echo=False, future=True, poolclass=StaticPool)
    configure_sqlite(engine)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def async_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def staff(async_session):
    profile = Profile(email="warden@hostel.test", full_name="Night Warden", role=ProfileRole.STAFF)
    async_session.add(profile)
    await async_session.commit()
    await async_session.refresh(profile)
    return profile


@pytest.fixture
async def room(async_session):
    room = Room(room_number="A-101", block="A", capacity=2)
    async_session.add(room)
    await async_session.commit()
    await async_session.refresh(room)
    return room


@pytest.fixture
async def students(async_session, room):
    rows = [
        Student(full_name="Asha Rao", course="BSc", year="2", room_id=room.id),
        Student(full_name="Ben Okafor", course="BSc", year="2", room_id=room.id),
        Student(full_name="Chen Wei", course="MA", year="1"),
    ]
    async_session.add_all(rows)
    await async_session.commit()
    for row in rows:
        await async_session.refresh(row)
    return rows


@pytest.fixture
def march_first():
    return date(2025, 3, 1)


@pytest.fixture
async def client(async_session):
    """Client sharing the test DB session; auth goes through bearer tokens."""

    async def _get_session_override():
        yield async_session

    app.dependency_overrides[get_session] = _get_session_override
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
