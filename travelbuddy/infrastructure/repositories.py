"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

Each repository receives an ``AsyncSession`` (unit-of-work) and exposes
domain-relevant queries only.  Rows are mapped to domain entities here and
nowhere else.

Conditional writes
------------------
``TripRepository.update_seats_and_status`` and
``JoinRequestRepository.update_status`` are compare-and-set statements:
the ``WHERE`` clause carries the value the caller read, and the method
reports whether a row was actually changed.  Two writers that read the
same value can never both succeed.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .models import JoinRequestModel, ProfileModel, TripModel
from travelbuddy.domain.entities import (
    JoinRequest,
    Profile,
    Trip,
    TripFilter,
    utcnow,
)
from travelbuddy.domain.enums import RequestStatus, TripStatus
from travelbuddy.domain.errors import AlreadyRequested
from travelbuddy.domain.search import normalize_query


# ── Row mapping ───────────────────────────────────────────────────────


def _to_trip(row: TripModel) -> Trip:
    return Trip(
        id=row.id,
        creator_id=row.creator_id,
        start_location=row.start_location,
        destination=row.destination,
        start_date=row.start_date,
        end_date=row.end_date,
        speed=row.speed,
        total_seats=row.total_seats,
        seats_left=row.seats_left,
        status=TripStatus(row.status),
        description=row.description,
        created_at=row.created_at,
    )


def _to_request(row: JoinRequestModel) -> JoinRequest:
    return JoinRequest(
        id=row.id,
        trip_id=row.trip_id,
        user_id=row.user_id,
        status=RequestStatus(row.status),
        created_at=row.created_at,
    )


def _to_profile(row: ProfileModel) -> Profile:
    return Profile(
        id=row.id, name=row.name, email=row.email, created_at=row.created_at
    )


# ── Repositories ──────────────────────────────────────────────────────


class TripRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def insert(self, trip: Trip) -> Trip:
        row = TripModel(
            id=trip.id,
            creator_id=trip.creator_id,
            start_location=trip.start_location,
            destination=trip.destination,
            start_date=trip.start_date,
            end_date=trip.end_date,
            speed=trip.speed,
            total_seats=trip.total_seats,
            seats_left=trip.seats_left,
            status=trip.status,
            description=trip.description,
            created_at=trip.created_at,
        )
        self.session.add(row)
        await self.session.flush()
        return _to_trip(row)

    async def get_by_id(self, trip_id: str, fresh: bool = False) -> Optional[Trip]:
        """Load a trip; ``fresh=True`` bypasses the session identity map."""
        query = select(TripModel).where(TripModel.id == trip_id)
        if fresh:
            query = query.execution_options(populate_existing=True)
        result = await self.session.execute(query)
        row = result.scalar_one_or_none()
        return _to_trip(row) if row is not None else None

    async def update_seats_and_status(
        self,
        trip_id: str,
        expected_seats: int,
        new_seats: int,
        new_status: TripStatus,
    ) -> bool:
        """Set seats/status only if ``seats_left`` still equals *expected_seats*.

        Returns ``False`` on conflict (someone else changed the count first).
        """
        result = await self.session.execute(
            update(TripModel)
            .where(
                TripModel.id == trip_id,
                TripModel.seats_left == expected_seats,
                TripModel.seats_left > 0,
            )
            .values(seats_left=new_seats, status=new_status)
        )
        return result.rowcount == 1

    async def list_by_creator(self, user_id: str) -> list[Trip]:
        result = await self.session.execute(
            select(TripModel)
            .where(TripModel.creator_id == user_id)
            .order_by(TripModel.created_at.desc())
        )
        return [_to_trip(row) for row in result.scalars().all()]

    async def query(self, trip_filter: TripFilter) -> list[Trip]:
        """Trips matching *trip_filter*, newest first."""
        query = select(TripModel)
        text = normalize_query(trip_filter.query)
        if text:
            query = query.where(
                or_(
                    func.lower(TripModel.destination).contains(text, autoescape=True),
                    func.lower(TripModel.start_location).contains(
                        text, autoescape=True
                    ),
                )
            )
        if trip_filter.available_only:
            query = query.where(TripModel.seats_left > 0)
        if trip_filter.min_speed is not None:
            query = query.where(TripModel.speed >= trip_filter.min_speed)
        result = await self.session.execute(
            query.order_by(TripModel.created_at.desc())
        )
        return [_to_trip(row) for row in result.scalars().all()]

    async def search(
        self, departure: str, arrival: str, start: date, end: date
    ) -> list[Trip]:
        """Exact route match (case-insensitive) departing within ``[start, end]``."""
        result = await self.session.execute(
            select(TripModel)
            .where(
                func.lower(TripModel.start_location) == departure.strip().lower(),
                func.lower(TripModel.destination) == arrival.strip().lower(),
                TripModel.start_date.between(start, end),
            )
            .order_by(TripModel.start_date, TripModel.created_at.desc())
        )
        return [_to_trip(row) for row in result.scalars().all()]


class JoinRequestRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def insert(self, request: JoinRequest) -> JoinRequest:
        """Persist a new request; raises ``AlreadyRequested`` on a duplicate pair."""
        row = JoinRequestModel(
            id=request.id,
            trip_id=request.trip_id,
            user_id=request.user_id,
            status=request.status,
            created_at=request.created_at,
        )
        self.session.add(row)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise AlreadyRequested() from exc
        return _to_request(row)

    async def get_by_id(self, request_id: str) -> Optional[JoinRequest]:
        result = await self.session.execute(
            select(JoinRequestModel)
            .where(JoinRequestModel.id == request_id)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return _to_request(row) if row is not None else None

    async def update_status(
        self,
        request_id: str,
        expected_status: RequestStatus,
        new_status: RequestStatus,
    ) -> bool:
        """Set the status only if it still equals *expected_status*."""
        result = await self.session.execute(
            update(JoinRequestModel)
            .where(
                JoinRequestModel.id == request_id,
                JoinRequestModel.status == expected_status,
            )
            .values(status=new_status)
        )
        return result.rowcount == 1

    async def list_for_trip(
        self, trip_id: str, status: RequestStatus | None = None
    ) -> list[JoinRequest]:
        query = select(JoinRequestModel).where(JoinRequestModel.trip_id == trip_id)
        if status is not None:
            query = query.where(JoinRequestModel.status == status)
        result = await self.session.execute(
            query.order_by(JoinRequestModel.created_at.desc())
        )
        return [_to_request(row) for row in result.scalars().all()]

    async def list_sent(
        self, user_id: str, status: RequestStatus | None = None
    ) -> list[tuple[JoinRequest, Trip]]:
        """Requests sent by *user_id*, each paired with its trip, newest first."""
        query = (
            select(JoinRequestModel, TripModel)
            .join(TripModel, TripModel.id == JoinRequestModel.trip_id)
            .where(JoinRequestModel.user_id == user_id)
        )
        if status is not None:
            query = query.where(JoinRequestModel.status == status)
        result = await self.session.execute(
            query.order_by(JoinRequestModel.created_at.desc())
        )
        return [(_to_request(req), _to_trip(trip)) for req, trip in result.all()]

    async def list_incoming(self, host_id: str) -> list[tuple[JoinRequest, Trip]]:
        """Requests on trips hosted by *host_id*, each paired with its trip."""
        result = await self.session.execute(
            select(JoinRequestModel, TripModel)
            .join(TripModel, TripModel.id == JoinRequestModel.trip_id)
            .where(TripModel.creator_id == host_id)
            .order_by(JoinRequestModel.created_at.desc())
        )
        return [(_to_request(req), _to_trip(trip)) for req, trip in result.all()]


class ProfileRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: str) -> Optional[Profile]:
        row = await self.session.get(ProfileModel, user_id)
        return _to_profile(row) if row is not None else None

    async def get_many(self, user_ids: Iterable[str]) -> dict[str, Profile]:
        ids = set(user_ids)
        if not ids:
            return {}
        result = await self.session.execute(
            select(ProfileModel).where(ProfileModel.id.in_(ids))
        )
        return {row.id: _to_profile(row) for row in result.scalars().all()}

    async def upsert(self, profile: Profile) -> Profile:
        row = await self.session.get(ProfileModel, profile.id)
        if row is None:
            row = ProfileModel(
                id=profile.id,
                name=profile.name,
                email=profile.email,
                created_at=profile.created_at or utcnow(),
            )
            self.session.add(row)
        else:
            row.name = profile.name
            row.email = profile.email
        await self.session.flush()
        return _to_profile(row)
