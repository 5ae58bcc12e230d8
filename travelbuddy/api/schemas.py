"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from travelbuddy.domain.entities import TripDraft
from travelbuddy.domain.enums import RequestStatus, TripStatus


# ── Requests ──────────────────────────────────────────────────────────


class TripCreateRequest(BaseModel):
    start_location: str = Field(..., min_length=1, max_length=200)
    destination: str = Field(..., min_length=1, max_length=200)
    start_date: date
    end_date: date
    speed: float = Field(..., gt=0, description="Travel pace; higher is faster.")
    seats: int = Field(
        ...,
        ge=1,
        le=100,
        description="Total seats including the host's own.",
    )
    description: Optional[str] = Field(None, max_length=2000)

    def to_draft(self) -> TripDraft:
        return TripDraft(
            start_location=self.start_location.strip(),
            destination=self.destination.strip(),
            start_date=self.start_date,
            end_date=self.end_date,
            speed=self.speed,
            total_seats=self.seats,
            description=self.description,
        )


class ProfileUpdateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    email: Optional[EmailStr] = None


# ── Responses ─────────────────────────────────────────────────────────


class TripResponse(BaseModel):
    id: str
    creator_id: str
    start_location: str
    destination: str
    route: str
    start_date: date
    end_date: date
    speed: float
    total_seats: int
    seats_left: int
    status: TripStatus
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class JoinRequestResponse(BaseModel):
    id: str
    trip_id: str
    user_id: str
    status: RequestStatus
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class TravelerResponse(BaseModel):
    id: str
    name: str
    email: Optional[str] = None

    model_config = {"from_attributes": True}


class SentRequestResponse(BaseModel):
    request: JoinRequestResponse
    trip_route: str
    host_id: str

    model_config = {"from_attributes": True}


class IncomingRequestResponse(BaseModel):
    request: JoinRequestResponse
    trip_route: str
    requester: TravelerResponse

    model_config = {"from_attributes": True}


class DecisionResponse(BaseModel):
    request: JoinRequestResponse
    trip: TripResponse

    model_config = {"from_attributes": True}


class TripManifestResponse(BaseModel):
    trip: TripResponse
    host: TravelerResponse
    participants: list[TravelerResponse] = []

    model_config = {"from_attributes": True}


class ProfileResponse(BaseModel):
    id: str
    name: str
    email: Optional[str] = None

    model_config = {"from_attributes": True}


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    detail: str
    code: str
