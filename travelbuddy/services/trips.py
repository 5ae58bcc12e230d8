"""Trip creation and lookup."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from travelbuddy.domain.entities import Identity, Trip, TripDraft
from travelbuddy.domain.errors import TripNotFound, Unauthenticated
from travelbuddy.infrastructure.repositories import TripRepository

logger = logging.getLogger(__name__)


class TripService:
    def __init__(self, session: AsyncSession, trips: TripRepository | None = None):
        self.session = session
        self.trips = trips or TripRepository(session)

    async def create_trip(self, identity: Optional[Identity], draft: TripDraft) -> Trip:
        """Host a new trip; the host's own seat is taken up front."""
        if identity is None:
            raise Unauthenticated()
        trip = Trip.open(identity.user_id, draft)

        try:
            trip = await self.trips.insert(trip)
        except Exception:
            await self.session.rollback()
            raise

        await self.session.commit()
        logger.info(
            "Trip %s created by %s: %s, %d seats (%d open)",
            trip.id, trip.creator_id, trip.route, trip.total_seats, trip.seats_left,
        )
        return trip

    async def get_trip(self, trip_id: str) -> Trip:
        trip = await self.trips.get_by_id(trip_id, fresh=True)
        if trip is None:
            raise TripNotFound()
        return trip
