"""
Seat arithmetic for trips.

Invariants
----------
* ``0 <= seats_left <= total_seats``
* ``status == FULL``  iff  ``seats_left == 0`` (for trips that are not
  ``COMPLETED``)
* The host occupies one seat from creation, so a new trip starts with
  ``total_seats - 1`` seats left.

These functions are pure; the capacity accountant applies their result
to the store with a conditional update.
"""

from __future__ import annotations

from .enums import TripStatus
from .errors import NoCapacity, TripClosed

HOST_SEATS = 1


def status_for(seats_left: int) -> TripStatus:
    """Status a non-completed trip must have with *seats_left* seats."""
    return TripStatus.FULL if seats_left == 0 else TripStatus.ACTIVE


def initial_seats(total_seats: int) -> int:
    """Seats left on a freshly created trip."""
    if total_seats < HOST_SEATS:
        raise ValueError(f"total_seats must be >= {HOST_SEATS}, got {total_seats}")
    return total_seats - HOST_SEATS


def next_capacity(
    seats_left: int, status: TripStatus
) -> tuple[int, TripStatus]:
    """Seat count and status after approving one more traveler."""
    if status == TripStatus.COMPLETED:
        raise TripClosed()
    if seats_left <= 0:
        raise NoCapacity()
    remaining = seats_left - 1
    return remaining, status_for(remaining)
