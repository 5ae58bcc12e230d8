"""
Error taxonomy for trip and join-request operations.

Every error is a rejected operation: whatever raised it, previously
committed state is left intact.  Each class carries a stable ``code``
for clients and the HTTP status the API layer maps it to.

Only ``Conflict`` is transient -- it is raised after the capacity
accountant has exhausted its conditional-update retries.
"""

from __future__ import annotations


class TripServiceError(Exception):
    code = "trip_service_error"
    status_code = 400
    default_message = "Operation rejected"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class Unauthenticated(TripServiceError):
    code = "unauthenticated"
    status_code = 401
    default_message = "Sign in required"


class SelfJoinRejected(TripServiceError):
    code = "self_join_rejected"
    status_code = 403
    default_message = "Hosts cannot request to join their own trip"


class AlreadyRequested(TripServiceError):
    code = "already_requested"
    status_code = 409
    default_message = "A join request for this trip is already pending"


class NotHost(TripServiceError):
    code = "not_host"
    status_code = 403
    default_message = "Only the trip host can do this"


class AlreadyDecided(TripServiceError):
    code = "already_decided"
    status_code = 409
    default_message = "Join request has already been decided"


class NoCapacity(TripServiceError):
    code = "no_capacity"
    status_code = 409
    default_message = "No seats left on this trip"


class TripFull(TripServiceError):
    code = "trip_full"
    status_code = 409
    default_message = "Trip is full"


class TripClosed(TripServiceError):
    code = "trip_closed"
    status_code = 409
    default_message = "Trip is completed"


class Conflict(TripServiceError):
    code = "conflict"
    status_code = 503
    default_message = "Seat count changed concurrently, try again"


class TripNotFound(TripServiceError):
    code = "trip_not_found"
    status_code = 404
    default_message = "Trip not found"


class RequestNotFound(TripServiceError):
    code = "request_not_found"
    status_code = 404
    default_message = "Join request not found"


class AccessDenied(TripServiceError):
    code = "access_denied"
    status_code = 403
    default_message = "Only the host and approved travelers can view this trip"
