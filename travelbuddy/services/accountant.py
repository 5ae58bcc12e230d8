"""
Capacity Accountant
===================

The only writer of ``Trip.seats_left`` and ``Trip.status`` after a trip
is created.  Called by the request lifecycle exactly once per approval.

Concurrency safety
------------------
Two hosts' clients (or two tabs of one host) may approve requests on the
same trip at the same time.  The read-then-write is therefore never a
plain read followed by an unconditional write:

1. Read ``seats_left`` fresh from the store.
2. Compute the new count / status (``domain.capacity.next_capacity``).
3. ``UPDATE ... WHERE seats_left = <value read>``.  Zero rows changed
   means another approval won the race: go back to 1.

After ``max_attempts`` lost races the approval fails with ``Conflict``.
If a re-read shows no seats left it fails with ``NoCapacity`` instead.
"""

from __future__ import annotations

from dataclasses import replace
import logging

from travelbuddy.config import settings
from travelbuddy.domain.capacity import next_capacity
from travelbuddy.domain.entities import Trip
from travelbuddy.domain.errors import Conflict, TripNotFound
from travelbuddy.infrastructure.repositories import TripRepository

logger = logging.getLogger(__name__)


class CapacityAccountant:
    def __init__(self, trips: TripRepository, max_attempts: int | None = None):
        self.trips = trips
        self.max_attempts = max_attempts or settings.seat_update_max_attempts

    async def apply_approval(self, trip_id: str) -> Trip:
        """Take one seat on *trip_id*; returns the trip as written."""
        for attempt in range(1, self.max_attempts + 1):
            trip = await self.trips.get_by_id(trip_id, fresh=True)
            if trip is None:
                raise TripNotFound()

            seats_left, status = next_capacity(trip.seats_left, trip.status)
            if await self.trips.update_seats_and_status(
                trip.id,
                expected_seats=trip.seats_left,
                new_seats=seats_left,
                new_status=status,
            ):
                logger.debug(
                    "Trip %s: seats_left %d -> %d (%s)",
                    trip.id, trip.seats_left, seats_left, status.value,
                )
                return replace(trip, seats_left=seats_left, status=status)

            logger.warning(
                "Seat update conflict on trip %s (attempt %d/%d)",
                trip_id, attempt, self.max_attempts,
            )

        raise Conflict()
