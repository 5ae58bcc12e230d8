"""
Join-request decision endpoints
===============================

POST /api/v1/requests/{request_id}/approve -- host approves (takes a seat)
POST /api/v1/requests/{request_id}/reject  -- host rejects

Both return the authoritative request *and* trip after the decision, so
clients never need to adjust seat counts locally.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request

from travelbuddy.api.dependencies import get_identity, get_lifecycle
from travelbuddy.api.middleware import limiter
from travelbuddy.api.schemas import DecisionResponse, ErrorResponse
from travelbuddy.config import settings
from travelbuddy.domain.entities import Identity
from travelbuddy.domain.enums import RequestStatus
from travelbuddy.services.lifecycle import RequestLifecycle

router = APIRouter(prefix="/requests", tags=["requests"])

_ERRORS = {
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


@router.post(
    "/{request_id}/approve",
    response_model=DecisionResponse,
    summary="Approve a pending join request",
    responses=_ERRORS,
)
@limiter.limit(settings.rate_limit)
async def approve_request(
    request: Request,
    request_id: str,
    identity: Optional[Identity] = Depends(get_identity),
    lifecycle: RequestLifecycle = Depends(get_lifecycle),
):
    outcome = await lifecycle.decide(request_id, RequestStatus.APPROVED, identity)
    return DecisionResponse.model_validate(outcome)


@router.post(
    "/{request_id}/reject",
    response_model=DecisionResponse,
    summary="Reject a pending join request",
    responses=_ERRORS,
)
@limiter.limit(settings.rate_limit)
async def reject_request(
    request: Request,
    request_id: str,
    identity: Optional[Identity] = Depends(get_identity),
    lifecycle: RequestLifecycle = Depends(get_lifecycle),
):
    outcome = await lifecycle.decide(request_id, RequestStatus.REJECTED, identity)
    return DecisionResponse.model_validate(outcome)
