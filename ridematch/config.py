"""Centralised application settings loaded from environment / .env file."""

from typing import Literal, Optional

from pydantic_settings import BaseSettings

from ridematch.domain.matching import PoolingThresholds


class Settings(BaseSettings):
    # Redis (driver location store)
    redis_url: str = "redis://localhost:6379/0"

    # Pooling limits
    max_detour_distance_km: float = 5.0
    max_detour_time_minutes: float = 15.0
    max_pickup_distance_km: float = 3.0
    max_pool_size: int = 4
    pickup_eta_minutes: int = 10  # shown to the joining rider

    # Waypoint ordering: "heuristic" (two-branch) or "exhaustive" (24 orders)
    waypoint_strategy: Literal["heuristic", "exhaustive"] = "heuristic"

    # Routing provider (Google Directions API)
    google_maps_api_key: Optional[str] = None
    routing_base_url: str = "https://maps.googleapis.com/maps/api/directions/json"
    routing_timeout_seconds: float = 5.0
    fallback_minutes_per_km: float = 2.0  # city traffic estimate

    # Fare split
    pool_discount: float = 0.25
    detour_penalty_per_km: float = 10.0
    min_fare_ratio: float = 0.6

    # Driver dispatch
    dispatch_radius_km: float = 10.0
    dispatch_minutes_per_km: float = 3.0

    model_config = {"env_file": ".env", "extra": "ignore"}

    def pooling_thresholds(self) -> PoolingThresholds:
        return PoolingThresholds(
            max_detour_distance_km=self.max_detour_distance_km,
            max_detour_time_minutes=self.max_detour_time_minutes,
            max_pickup_distance_km=self.max_pickup_distance_km,
            max_pool_size=self.max_pool_size,
        )


settings = Settings()
