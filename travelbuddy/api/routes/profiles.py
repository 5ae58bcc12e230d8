"""
Profile endpoints
=================

GET /api/v1/profiles/me -- my display identity
PUT /api/v1/profiles/me -- create or update my display identity
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from travelbuddy.api.dependencies import get_db, require_identity
from travelbuddy.api.middleware import limiter
from travelbuddy.api.schemas import (
    ErrorResponse,
    ProfileResponse,
    ProfileUpdateRequest,
    TravelerResponse,
)
from travelbuddy.config import settings
from travelbuddy.domain.entities import Identity, Profile, Traveler
from travelbuddy.infrastructure.repositories import ProfileRepository

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get(
    "/me",
    response_model=TravelerResponse,
    summary="My display identity",
    responses={401: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit)
async def get_my_profile(
    request: Request,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
):
    profile = await ProfileRepository(db).get_by_id(identity.user_id)
    return TravelerResponse.model_validate(
        Traveler.from_profile(identity.user_id, profile)
    )


@router.put(
    "/me",
    response_model=ProfileResponse,
    summary="Create or update my display identity",
    responses={401: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit)
async def put_my_profile(
    request: Request,
    body: ProfileUpdateRequest,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
):
    profile = await ProfileRepository(db).upsert(
        Profile(id=identity.user_id, name=body.name.strip(), email=body.email)
    )
    return ProfileResponse.model_validate(profile)
