"""FastAPI dependency injection helpers."""

from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from travelbuddy.config import settings
from travelbuddy.domain.entities import Identity
from travelbuddy.domain.errors import Unauthenticated
from travelbuddy.infrastructure.database import async_session_factory
from travelbuddy.services.lifecycle import RequestLifecycle
from travelbuddy.services.projections import ViewProjections
from travelbuddy.services.trips import TripService


async def get_db() -> AsyncSession:  # type: ignore[misc]
    """Yield an async DB session; commit on success, rollback on error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_identity(request: Request) -> Optional[Identity]:
    """Resolve the caller from the identity header, ``None`` if absent.

    Token verification happens in front of this service; by the time a
    request gets here the header carries a trusted user id.
    """
    user_id = request.headers.get(settings.identity_header, "").strip()
    return Identity(user_id=user_id) if user_id else None


def require_identity(
    identity: Optional[Identity] = Depends(get_identity),
) -> Identity:
    if identity is None:
        raise Unauthenticated()
    return identity


def get_trip_service(db: AsyncSession = Depends(get_db)) -> TripService:
    return TripService(db)


def get_lifecycle(db: AsyncSession = Depends(get_db)) -> RequestLifecycle:
    return RequestLifecycle(db)


def get_projections(db: AsyncSession = Depends(get_db)) -> ViewProjections:
    return ViewProjections(db)
