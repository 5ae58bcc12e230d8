"""
FastAPI application factory.

* Registers routes for trips, join-request decisions, dashboards,
  profiles and admin.
* Maps the domain error taxonomy to JSON error responses.
* Applies rate-limiting middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from travelbuddy.api.middleware import limiter
from travelbuddy.api.routes import admin, me, profiles, requests, trips
from travelbuddy.config import settings
from travelbuddy.domain.errors import TripServiceError

logging.basicConfig(level=settings.log_level)

logger = logging.getLogger(__name__)


async def trip_service_error_handler(
    request: Request, exc: TripServiceError
) -> JSONResponse:
    """Render a rejected operation as ``{"detail", "code"}``."""
    logger.info(
        "%s %s rejected: %s (%s)",
        request.method, request.url.path, exc.code, exc.message,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title="Travel Buddy Trip API",
        description=(
            "Hosts publish trips with limited seats; travelers request to "
            "join and hosts approve or reject.  Seat counts stay consistent "
            "under concurrent approvals."
        ),
        version="1.0.0",
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Domain errors
    app.add_exception_handler(TripServiceError, trip_service_error_handler)

    # Routers
    app.include_router(trips.router, prefix="/api/v1")
    app.include_router(requests.router, prefix="/api/v1")
    app.include_router(me.router, prefix="/api/v1")
    app.include_router(profiles.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    return app
