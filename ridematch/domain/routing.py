"""
Route estimation with graceful degradation.

The estimator asks the routing provider (Google Directions API) for the
best-guess driving distance and duration departing *now*.  Whenever the
provider is not configured, times out, errors or answers with a body we
cannot read, the estimate falls back to great-circle distance at a fixed
city-traffic pace.  ``get_route_details`` therefore never raises.

No retries are attempted here; a single provider call per estimate.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

import httpx

from .distance import distance_km, path_distance_km
from .entities import Coordinate, RouteEstimate
from .enums import RouteSource

logger = logging.getLogger(__name__)

DIRECTIONS_URL = "https://maps.googleapis.com/maps/api/directions/json"


class ProviderUnavailable(Exception):
    """The routing provider could not produce an estimate."""


class RouteEstimator:
    def __init__(
        self,
        api_key: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        base_url: str = DIRECTIONS_URL,
        timeout_seconds: float = 5.0,
        minutes_per_km: float = 2.0,
    ):
        self.api_key = api_key
        self.client = client
        self.base_url = base_url
        self.timeout_seconds = timeout_seconds
        self.minutes_per_km = minutes_per_km

    @property
    def provider_configured(self) -> bool:
        return bool(self.api_key) and self.client is not None

    # ── Public API ────────────────────────────────────────────────────

    async def get_route_details(
        self,
        origin: Coordinate,
        destination: Coordinate,
        timeout: Optional[float] = None,
    ) -> RouteEstimate:
        """Provider estimate if available, otherwise the local fallback."""
        if self.provider_configured:
            try:
                return await self._query_provider(origin, destination, timeout)
            except ProviderUnavailable as exc:
                logger.warning("Routing provider unavailable, using fallback: %s", exc)
        return self.fallback_estimate(origin, destination)

    def fallback_estimate(
        self, origin: Coordinate, destination: Coordinate
    ) -> RouteEstimate:
        distance = distance_km(origin, destination)
        return RouteEstimate(
            distance_km=distance,
            duration_min=distance * self.minutes_per_km,
            source=RouteSource.FALLBACK,
        )

    def estimate_path(self, waypoints: list[Coordinate]) -> RouteEstimate:
        """Local estimate for a multi-stop route visiting *waypoints* in order."""
        distance = path_distance_km(waypoints)
        return RouteEstimate(
            distance_km=distance,
            duration_min=distance * self.minutes_per_km,
            source=RouteSource.FALLBACK,
        )

    # ── Internals ─────────────────────────────────────────────────────

    async def _query_provider(
        self,
        origin: Coordinate,
        destination: Coordinate,
        timeout: Optional[float],
    ) -> RouteEstimate:
        if self.client is None:
            raise ProviderUnavailable("no HTTP client configured")
        params = {
            "origin": f"{origin.latitude},{origin.longitude}",
            "destination": f"{destination.latitude},{destination.longitude}",
            "key": self.api_key,
            "traffic_model": "best_guess",
            "departure_time": "now",
        }
        try:
            response = await self.client.get(
                self.base_url,
                params=params,
                timeout=timeout if timeout is not None else self.timeout_seconds,
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, httpx.InvalidURL, RuntimeError, ValueError) as exc:
            # RuntimeError: the shared client was closed during shutdown
            raise ProviderUnavailable(f"request failed: {exc!r}") from exc

        return self._parse_directions(data)

    @staticmethod
    def _parse_directions(data) -> RouteEstimate:
        if not isinstance(data, dict):
            raise ProviderUnavailable("response body is not an object")
        status = data.get("status", "OK")
        if status != "OK":
            raise ProviderUnavailable(f"provider status {status}")
        try:
            leg = data["routes"][0]["legs"][0]
            meters = float(leg["distance"]["value"])
            seconds = float(leg["duration"]["value"])
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise ProviderUnavailable(f"malformed directions payload: {exc!r}") from exc
        if not (math.isfinite(meters) and math.isfinite(seconds)):
            raise ProviderUnavailable("non-finite distance or duration in payload")
        if meters < 0 or seconds < 0:
            raise ProviderUnavailable("negative distance or duration in payload")

        return RouteEstimate(
            distance_km=meters / 1000,
            duration_min=seconds / 60,
            source=RouteSource.PROVIDER,
        )
