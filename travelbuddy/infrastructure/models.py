"""
SQLAlchemy ORM models  (maps to PostgreSQL).

Tables
------
* ``profiles``       -- display identity of each traveler
* ``trips``          -- hosted trips with seat accounting
* ``join_requests``  -- one request per (trip, requester)

Constraints
-----------
* ``UNIQUE (trip_id, user_id)`` on ``join_requests`` -- a traveler can
  hold at most one request per trip; duplicates surface as
  ``AlreadyRequested``.
* ``CHECK`` on ``trips`` keeps ``0 <= seats_left <= total_seats`` even if
  a writer bypasses the capacity accountant.

Indexes
-------
* **B-Tree** on ``creator_id``, ``status``, ``created_at`` (trips) and
  ``trip_id``, ``user_id``, ``status`` (join requests) for the dashboard
  projections.
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)

from .database import Base
from travelbuddy.domain.enums import RequestStatus, TripStatus


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class ProfileModel(Base):
    __tablename__ = "profiles"

    id = Column(String(64), primary_key=True)
    name = Column(String(120), nullable=False)
    email = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class TripModel(Base):
    __tablename__ = "trips"

    id = Column(String(36), primary_key=True)
    creator_id = Column(String(64), nullable=False)
    start_location = Column(String(200), nullable=False)
    destination = Column(String(200), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    speed = Column(Float, nullable=False)
    total_seats = Column(Integer, nullable=False)
    seats_left = Column(Integer, nullable=False)
    status = Column(
        Enum(TripStatus, name="tripstatus", values_callable=_enum_values),
        default=TripStatus.ACTIVE,
        nullable=False,
    )
    description = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        CheckConstraint("total_seats >= 1", name="ck_trips_total_seats"),
        CheckConstraint(
            "seats_left >= 0 AND seats_left <= total_seats",
            name="ck_trips_seats_left",
        ),
        CheckConstraint("speed > 0", name="ck_trips_speed"),
        Index("idx_trips_creator", "creator_id"),
        Index("idx_trips_status", "status"),
        Index("idx_trips_created", "created_at"),
    )


class JoinRequestModel(Base):
    __tablename__ = "join_requests"

    id = Column(String(36), primary_key=True)
    trip_id = Column(String(36), ForeignKey("trips.id"), nullable=False)
    user_id = Column(String(64), nullable=False)
    status = Column(
        Enum(RequestStatus, name="requeststatus", values_callable=_enum_values),
        default=RequestStatus.PENDING,
        nullable=False,
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        UniqueConstraint("trip_id", "user_id", name="uq_join_requests_trip_user"),
        Index("idx_join_requests_trip", "trip_id"),
        Index("idx_join_requests_user", "user_id"),
        Index("idx_join_requests_status", "status"),
    )
