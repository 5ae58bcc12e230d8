"""
Join-request lifecycle against SQLite.

Covers submit preconditions, host decisions, and the seat accounting
that approval drives.
"""

from __future__ import annotations

import pytest
from sqlalchemy import update

from travelbuddy.domain.entities import Identity
from travelbuddy.domain.enums import RequestStatus, TripStatus
from travelbuddy.domain.errors import (
    AlreadyDecided,
    AlreadyRequested,
    NoCapacity,
    NotHost,
    RequestNotFound,
    SelfJoinRejected,
    TripClosed,
    TripFull,
    TripNotFound,
    Unauthenticated,
)
from travelbuddy.infrastructure.models import TripModel
from travelbuddy.infrastructure.repositories import (
    JoinRequestRepository,
    TripRepository,
)

HOST = Identity("host-1")


def traveler(n: int) -> Identity:
    return Identity(f"traveler-{n}")


async def _trip(db_session, trip_id):
    return await TripRepository(db_session).get_by_id(trip_id, fresh=True)


async def _request(db_session, request_id):
    return await JoinRequestRepository(db_session).get_by_id(request_id)


class TestSubmit:
    @pytest.mark.asyncio
    async def test_creates_pending_request(self, make_trip, lifecycle, db_session):
        trip = await make_trip(host=HOST.user_id)

        request = await lifecycle.submit(traveler(1), trip.id)

        assert request.status == RequestStatus.PENDING
        assert request.trip_id == trip.id
        assert request.user_id == "traveler-1"
        stored = await _request(db_session, request.id)
        assert stored.status == RequestStatus.PENDING

    @pytest.mark.asyncio
    async def test_submit_does_not_touch_seats(self, make_trip, lifecycle, db_session):
        trip = await make_trip(host=HOST.user_id, seats=4)
        await lifecycle.submit(traveler(1), trip.id)
        assert (await _trip(db_session, trip.id)).seats_left == 3

    @pytest.mark.asyncio
    async def test_unauthenticated(self, make_trip, lifecycle):
        trip = await make_trip()
        with pytest.raises(Unauthenticated):
            await lifecycle.submit(None, trip.id)

    @pytest.mark.asyncio
    async def test_unknown_trip(self, lifecycle):
        with pytest.raises(TripNotFound):
            await lifecycle.submit(traveler(1), "no-such-trip")

    @pytest.mark.asyncio
    async def test_host_cannot_join_own_trip(self, make_trip, lifecycle, db_session):
        trip = await make_trip(host=HOST.user_id)
        with pytest.raises(SelfJoinRejected):
            await lifecycle.submit(HOST, trip.id)
        assert await JoinRequestRepository(db_session).list_for_trip(trip.id) == []

    @pytest.mark.asyncio
    async def test_duplicate_submit_is_rejected(self, make_trip, lifecycle, db_session):
        trip = await make_trip(host=HOST.user_id)
        await lifecycle.submit(traveler(1), trip.id)

        with pytest.raises(AlreadyRequested):
            await lifecycle.submit(traveler(1), trip.id)

        requests = await JoinRequestRepository(db_session).list_for_trip(trip.id)
        assert len(requests) == 1

    @pytest.mark.asyncio
    async def test_duplicate_after_decision_is_rejected(self, make_trip, lifecycle):
        trip = await make_trip(host=HOST.user_id)
        request = await lifecycle.submit(traveler(1), trip.id)
        await lifecycle.decide(request.id, RequestStatus.REJECTED, HOST)

        with pytest.raises(AlreadyRequested):
            await lifecycle.submit(traveler(1), trip.id)

    @pytest.mark.asyncio
    async def test_failed_duplicate_keeps_session_usable(self, make_trip, lifecycle):
        trip = await make_trip(host=HOST.user_id)
        await lifecycle.submit(traveler(1), trip.id)
        with pytest.raises(AlreadyRequested):
            await lifecycle.submit(traveler(1), trip.id)

        second = await lifecycle.submit(traveler(2), trip.id)
        assert second.status == RequestStatus.PENDING

    @pytest.mark.asyncio
    async def test_full_trip_rejects_new_requests(self, make_trip, lifecycle):
        trip = await make_trip(host=HOST.user_id, seats=1)
        with pytest.raises(TripFull):
            await lifecycle.submit(traveler(1), trip.id)

    @pytest.mark.asyncio
    async def test_completed_trip_rejects_new_requests(
        self, make_trip, lifecycle, db_session
    ):
        trip = await make_trip(host=HOST.user_id)
        await db_session.execute(
            update(TripModel)
            .where(TripModel.id == trip.id)
            .values(status=TripStatus.COMPLETED)
        )
        await db_session.commit()

        with pytest.raises(TripClosed):
            await lifecycle.submit(traveler(1), trip.id)


class TestDecide:
    @pytest.mark.asyncio
    async def test_four_seat_trip_fills_up(self, make_trip, lifecycle, db_session):
        trip = await make_trip(host=HOST.user_id, seats=4)
        assert trip.seats_left == 3
        assert trip.status == TripStatus.ACTIVE

        requests = [await lifecycle.submit(traveler(n), trip.id) for n in range(3)]

        outcomes = [
            await lifecycle.decide(r.id, RequestStatus.APPROVED, HOST) for r in requests
        ]

        assert [o.trip.seats_left for o in outcomes] == [2, 1, 0]
        assert [o.trip.status for o in outcomes] == [
            TripStatus.ACTIVE,
            TripStatus.ACTIVE,
            TripStatus.FULL,
        ]
        stored = await _trip(db_session, trip.id)
        assert stored.seats_left == 0
        assert stored.status == TripStatus.FULL

        with pytest.raises(TripFull):
            await lifecycle.submit(traveler(3), trip.id)

    @pytest.mark.asyncio
    async def test_outcome_matches_stored_state(self, make_trip, lifecycle, db_session):
        trip = await make_trip(host=HOST.user_id, seats=3)
        request = await lifecycle.submit(traveler(1), trip.id)

        outcome = await lifecycle.decide(request.id, "approved", HOST)

        assert outcome.request.status == RequestStatus.APPROVED
        assert outcome.trip == await _trip(db_session, trip.id)
        assert (await _request(db_session, request.id)).status == RequestStatus.APPROVED

    @pytest.mark.asyncio
    async def test_reject_keeps_seats(self, make_trip, lifecycle, db_session):
        trip = await make_trip(host=HOST.user_id, seats=3)
        request = await lifecycle.submit(traveler(1), trip.id)

        outcome = await lifecycle.decide(request.id, RequestStatus.REJECTED, HOST)

        assert outcome.request.status == RequestStatus.REJECTED
        assert outcome.trip.seats_left == 2
        assert (await _trip(db_session, trip.id)).seats_left == 2

    @pytest.mark.asyncio
    async def test_not_host_leaves_request_pending(
        self, make_trip, lifecycle, db_session
    ):
        trip = await make_trip(host=HOST.user_id)
        request = await lifecycle.submit(traveler(1), trip.id)

        with pytest.raises(NotHost):
            await lifecycle.decide(request.id, RequestStatus.APPROVED, traveler(2))

        assert (await _request(db_session, request.id)).status == RequestStatus.PENDING
        assert (await _trip(db_session, trip.id)).seats_left == 3

    @pytest.mark.asyncio
    async def test_requester_cannot_approve_themselves(self, make_trip, lifecycle):
        trip = await make_trip(host=HOST.user_id)
        request = await lifecycle.submit(traveler(1), trip.id)
        with pytest.raises(NotHost):
            await lifecycle.decide(request.id, RequestStatus.APPROVED, traveler(1))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("first", [RequestStatus.APPROVED, RequestStatus.REJECTED])
    @pytest.mark.parametrize("second", [RequestStatus.APPROVED, RequestStatus.REJECTED])
    async def test_decided_request_cannot_be_decided_again(
        self, make_trip, lifecycle, db_session, first, second
    ):
        trip = await make_trip(host=HOST.user_id, seats=4)
        request = await lifecycle.submit(traveler(1), trip.id)
        await lifecycle.decide(request.id, first, HOST)
        seats_after_first = (await _trip(db_session, trip.id)).seats_left

        with pytest.raises(AlreadyDecided):
            await lifecycle.decide(request.id, second, HOST)

        assert (await _request(db_session, request.id)).status == first
        assert (await _trip(db_session, trip.id)).seats_left == seats_after_first

    @pytest.mark.asyncio
    async def test_no_capacity_leaves_request_pending(
        self, make_trip, lifecycle, db_session
    ):
        trip = await make_trip(host=HOST.user_id, seats=2)
        first = await lifecycle.submit(traveler(1), trip.id)
        second = await lifecycle.submit(traveler(2), trip.id)
        await lifecycle.decide(first.id, RequestStatus.APPROVED, HOST)

        with pytest.raises(NoCapacity):
            await lifecycle.decide(second.id, RequestStatus.APPROVED, HOST)

        assert (await _request(db_session, second.id)).status == RequestStatus.PENDING
        stored = await _trip(db_session, trip.id)
        assert stored.seats_left == 0
        assert stored.status == TripStatus.FULL

    @pytest.mark.asyncio
    async def test_request_on_full_trip_can_still_be_rejected(
        self, make_trip, lifecycle
    ):
        trip = await make_trip(host=HOST.user_id, seats=2)
        first = await lifecycle.submit(traveler(1), trip.id)
        second = await lifecycle.submit(traveler(2), trip.id)
        await lifecycle.decide(first.id, RequestStatus.APPROVED, HOST)

        outcome = await lifecycle.decide(second.id, RequestStatus.REJECTED, HOST)
        assert outcome.request.status == RequestStatus.REJECTED
        assert outcome.trip.seats_left == 0

    @pytest.mark.asyncio
    async def test_unauthenticated(self, make_trip, lifecycle):
        trip = await make_trip(host=HOST.user_id)
        request = await lifecycle.submit(traveler(1), trip.id)
        with pytest.raises(Unauthenticated):
            await lifecycle.decide(request.id, RequestStatus.APPROVED, None)

    @pytest.mark.asyncio
    async def test_unknown_request(self, lifecycle):
        with pytest.raises(RequestNotFound):
            await lifecycle.decide("no-such-request", RequestStatus.APPROVED, HOST)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("decision", ["pending", "maybe"])
    async def test_only_approve_or_reject_are_decisions(
        self, make_trip, lifecycle, decision
    ):
        trip = await make_trip(host=HOST.user_id)
        request = await lifecycle.submit(traveler(1), trip.id)
        with pytest.raises(ValueError):
            await lifecycle.decide(request.id, decision, HOST)
