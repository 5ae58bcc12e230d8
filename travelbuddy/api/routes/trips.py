"""
Trip endpoints
==============

POST /api/v1/trips                          -- host a new trip
GET  /api/v1/trips                          -- explore list (text / seats / pace filters)
GET  /api/v1/trips/search                   -- route + date search (+/- a few days)
GET  /api/v1/trips/{trip_id}                -- trip details
GET  /api/v1/trips/{trip_id}/participants   -- manifest (host & approved travelers)
GET  /api/v1/trips/{trip_id}/requests       -- all join requests (host only)
POST /api/v1/trips/{trip_id}/join           -- send a join request
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from travelbuddy.api.dependencies import (
    get_identity,
    get_lifecycle,
    get_projections,
    get_trip_service,
)
from travelbuddy.api.middleware import limiter
from travelbuddy.api.schemas import (
    ErrorResponse,
    IncomingRequestResponse,
    JoinRequestResponse,
    TripCreateRequest,
    TripManifestResponse,
    TripResponse,
)
from travelbuddy.config import settings
from travelbuddy.domain.entities import Identity, TripFilter
from travelbuddy.services.lifecycle import RequestLifecycle
from travelbuddy.services.projections import ViewProjections
from travelbuddy.services.trips import TripService

router = APIRouter(prefix="/trips", tags=["trips"])


@router.post(
    "",
    status_code=201,
    response_model=TripResponse,
    summary="Host a new trip",
    responses={401: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit)
async def create_trip(
    request: Request,
    body: TripCreateRequest,
    identity: Optional[Identity] = Depends(get_identity),
    trips: TripService = Depends(get_trip_service),
):
    trip = await trips.create_trip(identity, body.to_draft())
    return TripResponse.model_validate(trip)


@router.get(
    "",
    response_model=list[TripResponse],
    summary="Explore trips, newest first",
)
@limiter.limit(settings.rate_limit)
async def list_trips(
    request: Request,
    q: Optional[str] = Query(None, max_length=200, description="Matches origin or destination."),
    available_only: bool = Query(False, description="Only trips with seats left."),
    min_speed: Optional[float] = Query(None, gt=0),
    high_speed: bool = Query(False, description="Shortcut for the high-pace threshold."),
    projections: ViewProjections = Depends(get_projections),
):
    if high_speed and min_speed is None:
        min_speed = settings.high_speed_threshold
    trips = await projections.available_trips(
        TripFilter(query=q, available_only=available_only, min_speed=min_speed)
    )
    return [TripResponse.model_validate(t) for t in trips]


@router.get(
    "/search",
    response_model=list[TripResponse],
    summary="Search trips by route and departure date",
)
@limiter.limit(settings.rate_limit)
async def search_trips(
    request: Request,
    departure: str = Query(..., min_length=1),
    arrival: str = Query(..., min_length=1),
    on_date: date = Query(..., alias="date"),
    projections: ViewProjections = Depends(get_projections),
):
    trips = await projections.search_trips(departure, arrival, on_date)
    return [TripResponse.model_validate(t) for t in trips]


@router.get(
    "/{trip_id}",
    response_model=TripResponse,
    summary="Get a trip",
    responses={404: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit)
async def get_trip(
    request: Request,
    trip_id: str,
    trips: TripService = Depends(get_trip_service),
):
    return TripResponse.model_validate(await trips.get_trip(trip_id))


@router.get(
    "/{trip_id}/participants",
    response_model=TripManifestResponse,
    summary="Host and approved travelers of a trip",
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit)
async def get_participants(
    request: Request,
    trip_id: str,
    identity: Optional[Identity] = Depends(get_identity),
    projections: ViewProjections = Depends(get_projections),
):
    manifest = await projections.trip_manifest(trip_id, identity)
    return TripManifestResponse.model_validate(manifest)


@router.get(
    "/{trip_id}/requests",
    response_model=list[IncomingRequestResponse],
    summary="All join requests on a trip (host only)",
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit)
async def get_trip_requests(
    request: Request,
    trip_id: str,
    identity: Optional[Identity] = Depends(get_identity),
    projections: ViewProjections = Depends(get_projections),
):
    views = await projections.trip_requests(trip_id, identity)
    return [IncomingRequestResponse.model_validate(v) for v in views]


@router.post(
    "/{trip_id}/join",
    status_code=201,
    response_model=JoinRequestResponse,
    summary="Request to join a trip",
    description=(
        "Creates a PENDING join request. Fails if the caller hosts the trip, "
        "already has a request for it, or no seats are left."
    ),
    responses={
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
@limiter.limit(settings.rate_limit)
async def join_trip(
    request: Request,
    trip_id: str,
    identity: Optional[Identity] = Depends(get_identity),
    lifecycle: RequestLifecycle = Depends(get_lifecycle),
):
    join_request = await lifecycle.submit(identity, trip_id)
    return JoinRequestResponse.model_validate(join_request)
