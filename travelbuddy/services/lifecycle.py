"""
Join-request lifecycle
======================

``submit``  -- a traveler asks to join a trip (creates a PENDING request).
``decide``  -- the host approves or rejects a PENDING request.

Each operation owns its transaction: it commits on success and rolls
back on any failure before re-raising, so a failed ``decide`` never leaves
a request APPROVED without its seat taken, or a seat taken for a request
that is still PENDING.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from travelbuddy.domain.entities import (
    DecisionOutcome,
    Identity,
    InvalidStateTransition,
    JoinRequest,
)
from travelbuddy.domain.enums import DECISIONS, RequestStatus, TripStatus
from travelbuddy.domain.errors import (
    AlreadyDecided,
    NotHost,
    RequestNotFound,
    SelfJoinRejected,
    TripClosed,
    TripFull,
    TripNotFound,
    Unauthenticated,
)
from travelbuddy.infrastructure.repositories import (
    JoinRequestRepository,
    TripRepository,
)
from travelbuddy.services.accountant import CapacityAccountant

logger = logging.getLogger(__name__)


class RequestLifecycle:
    def __init__(
        self,
        session: AsyncSession,
        trips: TripRepository | None = None,
        requests: JoinRequestRepository | None = None,
        accountant: CapacityAccountant | None = None,
    ):
        self.session = session
        self.trips = trips or TripRepository(session)
        self.requests = requests or JoinRequestRepository(session)
        self.accountant = accountant or CapacityAccountant(self.trips)

    async def submit(
        self, identity: Optional[Identity], trip_id: str
    ) -> JoinRequest:
        """Create a PENDING join request from *identity* for *trip_id*."""
        if identity is None:
            raise Unauthenticated()

        try:
            trip = await self.trips.get_by_id(trip_id, fresh=True)
            if trip is None:
                raise TripNotFound()
            if trip.is_hosted_by(identity.user_id):
                raise SelfJoinRejected()
            if trip.status == TripStatus.COMPLETED:
                raise TripClosed()
            if trip.seats_left <= 0:
                raise TripFull()

            request = await self.requests.insert(
                JoinRequest.pending(trip.id, identity.user_id)
            )
        except Exception:
            await self.session.rollback()
            raise

        await self.session.commit()
        logger.info(
            "Join request %s: user %s -> trip %s",
            request.id, identity.user_id, trip.id,
        )
        return request

    async def decide(
        self,
        request_id: str,
        decision: RequestStatus | str,
        acting_host: Optional[Identity],
    ) -> DecisionOutcome:
        """Approve or reject a PENDING request on a trip *acting_host* hosts."""
        decision = RequestStatus(decision)
        if decision not in DECISIONS:
            raise ValueError(f"Not a decision: {decision.value}")
        if acting_host is None:
            raise Unauthenticated()

        try:
            request = await self.requests.get_by_id(request_id)
            if request is None:
                raise RequestNotFound()
            trip = await self.trips.get_by_id(request.trip_id, fresh=True)
            if trip is None:
                raise TripNotFound()
            if not trip.is_hosted_by(acting_host.user_id):
                raise NotHost()

            previous = request.status
            try:
                request.transition_to(decision)
            except InvalidStateTransition as exc:
                raise AlreadyDecided() from exc

            if decision == RequestStatus.APPROVED:
                trip = await self.accountant.apply_approval(trip.id)

            if not await self.requests.update_status(
                request.id, expected_status=previous, new_status=decision
            ):
                # Decided by a concurrent call after we read it
                raise AlreadyDecided()
        except Exception:
            await self.session.rollback()
            raise

        await self.session.commit()
        logger.info(
            "Join request %s %s by host %s (trip %s: %d/%d seats left)",
            request.id, decision.value, acting_host.user_id,
            trip.id, trip.seats_left, trip.total_seats,
        )
        return DecisionOutcome(request=request, trip=trip)
