import os
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

import clinicbook.db.models  # noqa: F401
from clinicbook.db.models import Doctor
from clinicbook.db.repository import SqlAvailabilityRepository
from clinicbook.db.session import get_session
from clinicbook.main import app
from clinicbook.services.schedule_service import ScheduleService

@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()

@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session

@pytest_asyncio.fixture
async def doctor(session) -> Doctor:
    doctor = Doctor(name="Dr. Claire Martin", specialty="General practice", consult_duration_minutes=30)
    session.add(doctor)
    await session.commit()
    await session.refresh(doctor)
    return doctor

@pytest.fixture
def schedule_service(session) -> ScheduleService:
    return ScheduleService(SqlAvailabilityRepository(session))

@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
