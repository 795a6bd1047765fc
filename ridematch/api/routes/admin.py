"""
Admin / observability endpoints
===============================

GET /api/v1/health        -- simple health check
GET /api/v1/admin/config  -- pooling and dispatch limits currently in force
"""

from fastapi import APIRouter

from ridematch.api.schemas import HealthResponse
from ridematch.config import settings

router = APIRouter(prefix="/admin", tags=["admin"])
health_router = APIRouter(tags=["admin"])


@health_router.get("/health", response_model=HealthResponse, summary="Health check")
async def health():
    return HealthResponse()


@router.get("/config", summary="Active matching limits")
async def matching_config():
    return {
        "max_detour_distance_km": settings.max_detour_distance_km,
        "max_detour_time_minutes": settings.max_detour_time_minutes,
        "max_pickup_distance_km": settings.max_pickup_distance_km,
        "max_pool_size": settings.max_pool_size,
        "dispatch_radius_km": settings.dispatch_radius_km,
        "waypoint_strategy": settings.waypoint_strategy,
        "routing_provider_configured": bool(settings.google_maps_api_key),
    }
