"""
FastAPI application factory.

* Registers routes for pools, drivers and admin.
* Opens the routing-provider HTTP client and the Redis connection via
  lifespan events, and closes them on shutdown.
* Maps ``InvalidInput`` from the domain layer to HTTP 422.
* Applies rate-limiting middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from ridematch.api.middleware import limiter
from ridematch.api.routes import admin, drivers, pools
from ridematch.config import settings
from ridematch.domain.entities import InvalidInput
from ridematch.domain.routing import RouteEstimator
from ridematch.infrastructure.location_store import DriverLocationStore
from ridematch.infrastructure.redis_client import get_redis

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open shared clients on startup; close them on shutdown."""
    http_client = httpx.AsyncClient(timeout=settings.routing_timeout_seconds)
    redis = await get_redis()

    app.state.route_estimator = RouteEstimator(
        api_key=settings.google_maps_api_key,
        client=http_client,
        base_url=settings.routing_base_url,
        timeout_seconds=settings.routing_timeout_seconds,
        minutes_per_km=settings.fallback_minutes_per_km,
    )
    app.state.location_store = DriverLocationStore(redis)
    if not settings.google_maps_api_key:
        logger.info("No routing provider key configured; using local estimates")

    yield

    await http_client.aclose()
    await redis.aclose()


async def _invalid_input_handler(request: Request, exc: InvalidInput):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


def create_app() -> FastAPI:
    app = FastAPI(
        title="Ride Pool Matching API",
        description=(
            "Ranks in-progress trips a new rider can join without exceeding "
            "detour, pickup and capacity limits, splits the pooled fare, and "
            "assigns the nearest available driver to solo requests."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(InvalidInput, _invalid_input_handler)

    # Routers
    app.include_router(pools.router, prefix="/api/v1")
    app.include_router(drivers.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")
    app.include_router(admin.health_router, prefix="/api/v1")

    return app
