"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) so tests run without
Docker / PostgreSQL.  Every test gets its own engine and a fresh schema;
``StaticPool`` keeps all sessions of one test on the same in-memory
database.
"""

from datetime import date
from typing import AsyncGenerator

import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from travelbuddy.domain.entities import Identity, TripDraft
from travelbuddy.infrastructure import models  # noqa: F401  (registers tables)
from travelbuddy.infrastructure.database import Base
from travelbuddy.services.lifecycle import RequestLifecycle
from travelbuddy.services.projections import ViewProjections
from travelbuddy.services.trips import TripService

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


def draft(
    seats: int = 4,
    origin: str = "Mumbai",
    destination: str = "Goa",
    speed: float = 2.5,
    start: date = date(2026, 11, 1),
    end: date = date(2026, 11, 5),
) -> TripDraft:
    return TripDraft(
        start_location=origin,
        destination=destination,
        start_date=start,
        end_date=end,
        speed=speed,
        total_seats=seats,
    )


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """Create tables on a fresh engine, yield a session factory, dispose."""
    engine = create_async_engine(TEST_DB_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def trip_service(db_session) -> TripService:
    return TripService(db_session)


@pytest_asyncio.fixture
async def lifecycle(db_session) -> RequestLifecycle:
    return RequestLifecycle(db_session)


@pytest_asyncio.fixture
async def projections(db_session) -> ViewProjections:
    return ViewProjections(db_session)


@pytest_asyncio.fixture
async def make_trip(trip_service):
    """Factory: ``await make_trip(host="h", seats=3, destination=...)``."""

    async def _make(host: str = "host-1", **kwargs):
        return await trip_service.create_trip(Identity(host), draft(**kwargs))

    return _make
