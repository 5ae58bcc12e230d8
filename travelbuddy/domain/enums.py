"""Domain enumerations and state-transition rules."""

import enum


class TripStatus(str, enum.Enum):
    ACTIVE = "active"
    FULL = "full"
    COMPLETED = "completed"


class RequestStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# State machine: maps current status -> set of valid next statuses
REQUEST_TRANSITIONS: dict[RequestStatus, set[RequestStatus]] = {
    RequestStatus.PENDING: {RequestStatus.APPROVED, RequestStatus.REJECTED},
    RequestStatus.APPROVED: set(),
    RequestStatus.REJECTED: set(),
}

# Statuses a host may choose when deciding a request
DECISIONS = frozenset({RequestStatus.APPROVED, RequestStatus.REJECTED})
