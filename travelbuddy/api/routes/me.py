"""
Dashboard endpoints for the calling traveler
============================================

GET /api/v1/me/trips              -- trips I host
GET /api/v1/me/requests/sent      -- join requests I sent
GET /api/v1/me/requests/incoming  -- join requests on trips I host
GET /api/v1/me/joined             -- trips I was approved for

All of these are plain reads; clients may re-fetch them at any time.
"""

from fastapi import APIRouter, Depends, Request

from travelbuddy.api.dependencies import get_projections, require_identity
from travelbuddy.api.middleware import limiter
from travelbuddy.api.schemas import (
    IncomingRequestResponse,
    SentRequestResponse,
    TripResponse,
)
from travelbuddy.config import settings
from travelbuddy.domain.entities import Identity
from travelbuddy.services.projections import ViewProjections

router = APIRouter(prefix="/me", tags=["me"])


@router.get("/trips", response_model=list[TripResponse], summary="Trips I host")
@limiter.limit(settings.rate_limit)
async def my_trips(
    request: Request,
    identity: Identity = Depends(require_identity),
    projections: ViewProjections = Depends(get_projections),
):
    trips = await projections.hosted_trips(identity.user_id)
    return [TripResponse.model_validate(t) for t in trips]


@router.get(
    "/requests/sent",
    response_model=list[SentRequestResponse],
    summary="Join requests I sent",
)
@limiter.limit(settings.rate_limit)
async def my_sent_requests(
    request: Request,
    identity: Identity = Depends(require_identity),
    projections: ViewProjections = Depends(get_projections),
):
    views = await projections.sent_requests(identity.user_id)
    return [SentRequestResponse.model_validate(v) for v in views]


@router.get(
    "/requests/incoming",
    response_model=list[IncomingRequestResponse],
    summary="Join requests on trips I host",
)
@limiter.limit(settings.rate_limit)
async def my_incoming_requests(
    request: Request,
    identity: Identity = Depends(require_identity),
    projections: ViewProjections = Depends(get_projections),
):
    views = await projections.incoming_requests(identity.user_id)
    return [IncomingRequestResponse.model_validate(v) for v in views]


@router.get(
    "/joined",
    response_model=list[SentRequestResponse],
    summary="Trips I was approved for",
)
@limiter.limit(settings.rate_limit)
async def my_joined_trips(
    request: Request,
    identity: Identity = Depends(require_identity),
    projections: ViewProjections = Depends(get_projections),
):
    views = await projections.joined_trips(identity.user_id)
    return [SentRequestResponse.model_validate(v) for v in views]
