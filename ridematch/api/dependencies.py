"""FastAPI dependency injection helpers."""

from fastapi import Depends, Request

from ridematch.config import settings
from ridematch.domain.dispatch import DriverDispatcher
from ridematch.domain.matching import CompatibilityScorer, PoolMatcher
from ridematch.domain.pricing import FareSplitter
from ridematch.domain.routing import RouteEstimator
from ridematch.domain.sequencing import make_sequencer
from ridematch.infrastructure.location_store import DriverLocationStore


def get_route_estimator(request: Request) -> RouteEstimator:
    """Estimator bound to the app-wide HTTP client opened in the lifespan."""
    return request.app.state.route_estimator


def get_location_store(request: Request) -> DriverLocationStore:
    return request.app.state.location_store


def get_pool_matcher(
    estimator: RouteEstimator = Depends(get_route_estimator),
) -> PoolMatcher:
    fares = FareSplitter(
        pool_discount=settings.pool_discount,
        detour_penalty_per_km=settings.detour_penalty_per_km,
        min_fare_ratio=settings.min_fare_ratio,
    )
    return PoolMatcher(
        estimator,
        sequencer=make_sequencer(settings.waypoint_strategy),
        scorer=CompatibilityScorer(settings.pooling_thresholds(), fares),
        pickup_eta_minutes=settings.pickup_eta_minutes,
    )


def get_dispatcher() -> DriverDispatcher:
    return DriverDispatcher(
        radius_km=settings.dispatch_radius_km,
        minutes_per_km=settings.dispatch_minutes_per_km,
    )
