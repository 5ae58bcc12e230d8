"""
View projections
================

Read-only queries that assemble what one traveler sees: the trips they
host, the requests they sent, the requests waiting on their trips, the
explore list, and a trip's participant manifest.

Nothing here writes.  Every projection can be re-run at any time and
reflects the latest committed state; an empty result is an empty list.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from travelbuddy.config import settings
from travelbuddy.domain.entities import (
    Identity,
    IncomingRequestView,
    JoinRequest,
    SentRequestView,
    Traveler,
    Trip,
    TripFilter,
    TripManifest,
)
from travelbuddy.domain.enums import RequestStatus
from travelbuddy.domain.errors import (
    AccessDenied,
    NotHost,
    TripNotFound,
    Unauthenticated,
)
from travelbuddy.domain.search import date_window
from travelbuddy.infrastructure.repositories import (
    JoinRequestRepository,
    ProfileRepository,
    TripRepository,
)


class ViewProjections:
    def __init__(
        self,
        session: AsyncSession,
        trips: TripRepository | None = None,
        requests: JoinRequestRepository | None = None,
        profiles: ProfileRepository | None = None,
    ):
        self.trips = trips or TripRepository(session)
        self.requests = requests or JoinRequestRepository(session)
        self.profiles = profiles or ProfileRepository(session)

    # ── Dashboards ────────────────────────────────────────────────────

    async def hosted_trips(self, user_id: str) -> list[Trip]:
        return await self.trips.list_by_creator(user_id)

    async def sent_requests(self, user_id: str) -> list[SentRequestView]:
        rows = await self.requests.list_sent(user_id)
        return [self._sent_view(request, trip) for request, trip in rows]

    async def joined_trips(self, user_id: str) -> list[SentRequestView]:
        """The user's approved requests -- trips they are a participant of."""
        rows = await self.requests.list_sent(user_id, status=RequestStatus.APPROVED)
        return [self._sent_view(request, trip) for request, trip in rows]

    async def incoming_requests(self, user_id: str) -> list[IncomingRequestView]:
        rows = await self.requests.list_incoming(user_id)
        return await self._incoming_views(rows)

    async def trip_requests(
        self, trip_id: str, viewer: Optional[Identity]
    ) -> list[IncomingRequestView]:
        """All requests on one trip; only its host may look."""
        if viewer is None:
            raise Unauthenticated()
        trip = await self._require_trip(trip_id)
        if not trip.is_hosted_by(viewer.user_id):
            raise NotHost()
        requests = await self.requests.list_for_trip(trip.id)
        return await self._incoming_views([(request, trip) for request in requests])

    # ── Explore / search ──────────────────────────────────────────────

    async def available_trips(self, trip_filter: TripFilter | None = None) -> list[Trip]:
        return await self.trips.query(trip_filter or TripFilter())

    async def search_trips(
        self, departure: str, arrival: str, on_date: date
    ) -> list[Trip]:
        start, end = date_window(on_date, settings.search_window_days)
        return await self.trips.search(departure, arrival, start, end)

    # ── Manifest ──────────────────────────────────────────────────────

    async def trip_manifest(
        self, trip_id: str, viewer: Optional[Identity]
    ) -> TripManifest:
        """Host and approved travelers of a trip.

        Visible to the host and to approved travelers; everyone else is
        refused.
        """
        if viewer is None:
            raise Unauthenticated()
        trip = await self._require_trip(trip_id)

        approved = await self.requests.list_for_trip(
            trip.id, status=RequestStatus.APPROVED
        )
        participant_ids = [
            r.user_id for r in approved if not trip.is_hosted_by(r.user_id)
        ]
        if not trip.is_hosted_by(viewer.user_id) and viewer.user_id not in participant_ids:
            raise AccessDenied()

        profiles = await self.profiles.get_many([trip.creator_id, *participant_ids])
        return TripManifest(
            trip=trip,
            host=Traveler.from_profile(trip.creator_id, profiles.get(trip.creator_id)),
            participants=[
                Traveler.from_profile(uid, profiles.get(uid)) for uid in participant_ids
            ],
        )

    # ── Internals ─────────────────────────────────────────────────────

    async def _require_trip(self, trip_id: str) -> Trip:
        trip = await self.trips.get_by_id(trip_id)
        if trip is None:
            raise TripNotFound()
        return trip

    @staticmethod
    def _sent_view(request: JoinRequest, trip: Trip) -> SentRequestView:
        return SentRequestView(
            request=request, trip_route=trip.route, host_id=trip.creator_id
        )

    async def _incoming_views(
        self, rows: list[tuple[JoinRequest, Trip]]
    ) -> list[IncomingRequestView]:
        profiles = await self.profiles.get_many(request.user_id for request, _ in rows)
        return [
            IncomingRequestView(
                request=request,
                trip_route=trip.route,
                requester=Traveler.from_profile(
                    request.user_id, profiles.get(request.user_id)
                ),
            )
            for request, trip in rows
        ]
