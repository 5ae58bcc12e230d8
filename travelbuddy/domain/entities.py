"""
Domain entities with business logic.

Patterns used
-------------
- **State Pattern** on ``JoinRequest``: enforces valid lifecycle transitions
  (PENDING -> APPROVED | REJECTED, both terminal).
- ``Trip.open`` seeds seat accounting for a new trip (the host takes a seat).
- Repositories map table rows to these types once, at the boundary; the
  services and API only ever see entities.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Optional
import uuid

from .capacity import initial_seats, status_for
from .enums import REQUEST_TRANSITIONS, RequestStatus, TripStatus


class InvalidStateTransition(Exception):
    """Raised when a join-request status change violates the state machine."""


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ── Value Objects ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class Identity:
    """The authenticated caller."""

    user_id: str


@dataclass(frozen=True)
class Traveler:
    """Display identity of a user (host or requester)."""

    id: str
    name: str
    email: Optional[str] = None

    @classmethod
    def from_profile(cls, user_id: str, profile: Optional["Profile"]) -> "Traveler":
        if profile is None:
            return cls(id=user_id, name=f"Traveler {user_id[:5]}")
        return cls(id=user_id, name=profile.name, email=profile.email)


@dataclass(frozen=True)
class TripDraft:
    start_location: str
    destination: str
    start_date: date
    end_date: date
    speed: float
    total_seats: int
    description: Optional[str] = None


@dataclass(frozen=True)
class TripFilter:
    """Explore-page filter: route text, open seats, minimum pace."""

    query: Optional[str] = None
    available_only: bool = False
    min_speed: Optional[float] = None


# ── Entities ──────────────────────────────────────────────────────────


@dataclass
class Profile:
    id: str
    name: str
    email: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass
class Trip:
    id: str
    creator_id: str
    start_location: str
    destination: str
    start_date: date
    end_date: date
    speed: float
    total_seats: int
    seats_left: int
    status: TripStatus = TripStatus.ACTIVE
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def open(cls, creator_id: str, draft: TripDraft) -> "Trip":
        """Create a new trip hosted by *creator_id*."""
        if draft.speed <= 0:
            raise ValueError(f"speed must be positive, got {draft.speed}")
        seats_left = initial_seats(draft.total_seats)
        return cls(
            id=new_id(),
            creator_id=creator_id,
            start_location=draft.start_location,
            destination=draft.destination,
            start_date=draft.start_date,
            end_date=draft.end_date,
            speed=draft.speed,
            total_seats=draft.total_seats,
            seats_left=seats_left,
            status=status_for(seats_left),
            description=draft.description,
            created_at=utcnow(),
        )

    @property
    def route(self) -> str:
        return f"{self.start_location} → {self.destination}"

    def is_hosted_by(self, user_id: str) -> bool:
        return self.creator_id == user_id


@dataclass
class JoinRequest:
    id: str
    trip_id: str
    user_id: str
    status: RequestStatus = RequestStatus.PENDING
    created_at: Optional[datetime] = None

    @classmethod
    def pending(cls, trip_id: str, user_id: str) -> "JoinRequest":
        return cls(
            id=new_id(),
            trip_id=trip_id,
            user_id=user_id,
            status=RequestStatus.PENDING,
            created_at=utcnow(),
        )

    def transition_to(self, new_status: RequestStatus) -> None:
        """Move to *new_status* if the transition is legal, else raise."""
        allowed = REQUEST_TRANSITIONS.get(self.status, set())
        if new_status not in allowed:
            raise InvalidStateTransition(
                f"Cannot transition from {self.status.value} to {new_status.value}"
            )
        self.status = new_status


# ── Read models ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class SentRequestView:
    """A request the viewer sent, with the trip it targets."""

    request: JoinRequest
    trip_route: str
    host_id: str


@dataclass(frozen=True)
class IncomingRequestView:
    """A request on one of the viewer's trips, with who sent it."""

    request: JoinRequest
    trip_route: str
    requester: Traveler


@dataclass(frozen=True)
class TripManifest:
    trip: Trip
    host: Traveler
    participants: list[Traveler] = field(default_factory=list)


@dataclass(frozen=True)
class DecisionOutcome:
    """Authoritative state after a host decision."""

    request: JoinRequest
    trip: Trip
