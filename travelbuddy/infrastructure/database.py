"""
Async SQLAlchemy engine and session factory.

Production runs on PostgreSQL through ``asyncpg``.  A ``sqlite+aiosqlite``
URL is accepted for local runs; SQLite gets no connection pool sizing.
"""

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from travelbuddy.config import settings


def _engine_options(database_url: str) -> dict:
    options = {"echo": settings.db_echo}
    if make_url(database_url).get_backend_name() != "sqlite":
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=True,
        )
    return options


engine = create_async_engine(
    settings.database_url, **_engine_options(settings.database_url)
)

# Entities are built from rows before commit, so nothing needs reloading.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Declarative base for the trip, join-request and profile tables."""
