"""
Nearest-driver dispatch for non-pooled requests.

Drivers are ranked strictly by great-circle distance to the pickup; rating
and workload play no part.  Only drivers that are online, have no current
ride and sit within the dispatch radius are considered.

Complexity: O(D log D) for D drivers.
"""

from __future__ import annotations

import logging
from typing import Optional

from .distance import distance_km
from .entities import Driver, DriverAssignment, DriverMatch, RideRequest
from .enums import RideStatus
from .pricing import round_half_up

logger = logging.getLogger(__name__)


class DriverDispatcher:
    def __init__(self, radius_km: float = 10.0, minutes_per_km: float = 3.0):
        self.radius_km = radius_km
        self.minutes_per_km = minutes_per_km

    def find_available_drivers(
        self, request: RideRequest, drivers: list[Driver]
    ) -> list[DriverMatch]:
        """Dispatchable drivers within range, nearest first (stable)."""
        nearby: list[DriverMatch] = []
        for driver in drivers:
            if not driver.is_dispatchable:
                continue
            distance = distance_km(request.pickup, driver.location)
            if distance <= self.radius_km:
                nearby.append(
                    DriverMatch(
                        driver=driver,
                        distance_km=distance,
                        eta_minutes=round_half_up(distance * self.minutes_per_km),
                    )
                )
        nearby.sort(key=lambda m: m.distance_km)
        return nearby

    def assign_optimal_driver(
        self, request: RideRequest, drivers: list[Driver]
    ) -> Optional[DriverAssignment]:
        """The closest dispatchable driver, or ``None`` if nobody is in range."""
        nearby = self.find_available_drivers(request, drivers)
        if not nearby:
            logger.info("No driver within %.1f km of %s", self.radius_km, request.requester_id)
            return None

        best = nearby[0]
        logger.debug("Selected driver %s at %.2f km", best.driver.id, best.distance_km)
        return DriverAssignment(
            driver=best.driver,
            distance_km=best.distance_km,
            eta_minutes=best.eta_minutes,
            estimated_arrival=f"{best.eta_minutes} minutes",
            distance=f"{best.distance_km:.1f} km away",
        )


def status_after_dispatch(assignment: Optional[DriverAssignment]) -> RideStatus:
    """Status a PENDING ride should move to once dispatch has run."""
    if assignment is None:
        return RideStatus.NO_DRIVERS_AVAILABLE
    return RideStatus.DRIVER_ASSIGNED
