"""
Pool Compatibility Matching
===========================

For a new request and a snapshot of in-progress poolable trips:

1. **Eligibility**  -- skip trips that do not allow pooling, whose pool
   already holds ``MAX_POOL_SIZE - 1`` passengers, or that fail the
   female-only rule in either direction.
2. **Sequencing**   -- order the four stops (see ``sequencing``); no
   feasible ordering means the pair is incompatible.
3. **Estimation**   -- solo route of the existing trip from the routing
   provider (or its fallback), combined route from the ordered stops.
4. **Scoring**      -- detour distance / time and pickup distance against
   the limits, plus a 0-100 score for ranking.

Score
-----
  100 - (detour_km / 5) x 40 - (detour_min / 15) x 30 - (pickup_km / 3) x 20
      + max(0, 10 - (combined_km / solo_km - 1) x 50)

clamped to [0, 100] and rounded.

Results are advisory: the candidate set is a snapshot and a competing join
may take the last seat before the caller commits.  Capacity has to be
re-checked atomically at commit time by whoever owns the ride record.

Complexity
----------
O(C) for C candidates, one provider call per eligible candidate.  The
calls are issued concurrently with ``asyncio.gather``.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from .distance import distance_km
from .entities import (
    CompatibilityResult,
    ExistingRide,
    PoolCandidate,
    RideRequest,
    RouteEstimate,
)
from .enums import Gender
from .pricing import FareSplitter, round_half_up
from .routing import RouteEstimator
from .sequencing import HeuristicSequencer, WaypointSequencer, describe_route

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PoolingThresholds:
    max_detour_distance_km: float = 5.0
    max_detour_time_minutes: float = 15.0
    max_pickup_distance_km: float = 3.0
    max_pool_size: int = 4


# ── Eligibility filters ───────────────────────────────────────────────


def has_capacity(existing: ExistingRide, max_pool_size: int = 4) -> bool:
    return len(existing.pool_passengers) < max_pool_size - 1


def gender_compatible(request: RideRequest, existing: ExistingRide) -> bool:
    if existing.female_only and request.gender != Gender.FEMALE:
        return False
    if request.female_only and existing.rider_gender != Gender.FEMALE:
        return False
    return True


def is_eligible(
    request: RideRequest, existing: ExistingRide, max_pool_size: int = 4
) -> bool:
    return (
        existing.allow_pooling
        and has_capacity(existing, max_pool_size)
        and gender_compatible(request, existing)
    )


# ── Scoring ───────────────────────────────────────────────────────────


class CompatibilityScorer:
    def __init__(
        self,
        thresholds: PoolingThresholds = PoolingThresholds(),
        fare_splitter: Optional[FareSplitter] = None,
    ):
        self.thresholds = thresholds
        self.fares = fare_splitter or FareSplitter()

    def within_limits(
        self, detour_km: float, detour_min: float, pickup_km: float
    ) -> bool:
        t = self.thresholds
        return (
            detour_km <= t.max_detour_distance_km
            and detour_min <= t.max_detour_time_minutes
            and pickup_km <= t.max_pickup_distance_km
        )

    def score(
        self,
        detour_km: float,
        detour_min: float,
        pickup_km: float,
        solo_km: float,
        combined_km: float,
    ) -> int:
        t = self.thresholds
        score = 100.0
        score -= (detour_km / t.max_detour_distance_km) * 40
        score -= (detour_min / t.max_detour_time_minutes) * 30
        score -= (pickup_km / t.max_pickup_distance_km) * 20

        # A zero-length solo trip has no meaningful efficiency ratio
        if solo_km > 0:
            score += max(0.0, 10 - (combined_km / solo_km - 1) * 50)

        return max(0, min(100, round_half_up(score)))

    def evaluate(
        self,
        request: RideRequest,
        existing: ExistingRide,
        solo: RouteEstimate,
        combined: RouteEstimate,
        route_description: str,
    ) -> CompatibilityResult:
        detour_km = combined.distance_km - solo.distance_km
        detour_min = combined.duration_min - solo.duration_min
        pickup_km = distance_km(existing.pickup, request.pickup)
        rounded_detour_km = round_half_up(detour_km * 100) / 100

        return CompatibilityResult(
            is_compatible=self.within_limits(detour_km, detour_min, pickup_km),
            score=self.score(
                detour_km, detour_min, pickup_km,
                solo.distance_km, combined.distance_km,
            ),
            detour_distance_km=rounded_detour_km,
            detour_time_min=round_half_up(detour_min),
            pickup_distance_km=pickup_km,
            fare_share=self.fares.fare_share(request.estimated_fare, rounded_detour_km),
            savings=self.fares.savings(request.estimated_fare, existing.estimated_fare),
            route_description=route_description,
        )

    def infeasible(
        self, request: RideRequest, existing: ExistingRide
    ) -> CompatibilityResult:
        """Result for a pair the sequencer could not order."""
        return CompatibilityResult(
            is_compatible=False,
            score=0,
            detour_distance_km=0.0,
            detour_time_min=0,
            pickup_distance_km=distance_km(existing.pickup, request.pickup),
            fare_share=self.fares.fare_share(request.estimated_fare, 0.0),
            savings=self.fares.savings(request.estimated_fare, existing.estimated_fare),
            route_description="",
        )


# ── Orchestration ─────────────────────────────────────────────────────


class PoolMatcher:
    """Ranks the existing trips a new rider could join."""

    def __init__(
        self,
        estimator: RouteEstimator,
        sequencer: Optional[WaypointSequencer] = None,
        scorer: Optional[CompatibilityScorer] = None,
        pickup_eta_minutes: int = 10,
    ):
        self.estimator = estimator
        self.sequencer = sequencer or HeuristicSequencer()
        self.scorer = scorer or CompatibilityScorer()
        self.pickup_eta_minutes = pickup_eta_minutes

    @property
    def thresholds(self) -> PoolingThresholds:
        return self.scorer.thresholds

    async def evaluate(
        self,
        request: RideRequest,
        existing: ExistingRide,
        timeout: Optional[float] = None,
    ) -> CompatibilityResult:
        order = self.sequencer.sequence(existing, request)
        if order is None:
            return self.scorer.infeasible(request, existing)

        solo = await self.estimator.get_route_details(
            existing.pickup, existing.destination, timeout=timeout
        )
        combined = self.estimator.estimate_path([w.point for w in order])
        return self.scorer.evaluate(
            request, existing, solo, combined, describe_route(order)
        )

    async def find_available_pools(
        self,
        request: RideRequest,
        candidates: list[ExistingRide],
        timeout: Optional[float] = None,
    ) -> list[PoolCandidate]:
        """Compatible pools for *request*, best score first."""
        eligible = [
            c for c in candidates
            if is_eligible(request, c, self.thresholds.max_pool_size)
        ]
        results = await asyncio.gather(
            *(self.evaluate(request, c, timeout) for c in eligible)
        )

        pools = [
            self._to_candidate(existing, result)
            for existing, result in zip(eligible, results)
            if result.is_compatible
        ]
        # list.sort is stable, so equal scores keep input order
        pools.sort(key=lambda p: p.compatibility_score, reverse=True)

        logger.info(
            "Pool search for %s: %d candidates, %d eligible, %d compatible",
            request.requester_id, len(candidates), len(eligible), len(pools),
        )
        return pools

    def _to_candidate(
        self, existing: ExistingRide, result: CompatibilityResult
    ) -> PoolCandidate:
        return PoolCandidate(
            pool_id=existing.ride_id,
            driver_id=existing.driver.id,
            driver_name=existing.driver.name,
            driver_rating=existing.driver.rating,
            vehicle=existing.driver.vehicle,
            current_pickup=existing.pickup.name,
            current_destination=existing.destination.name,
            current_passenger=existing.rider_name,
            estimated_pickup_time=f"{self.pickup_eta_minutes} mins",
            route_description=result.route_description,
            detour_distance_km=result.detour_distance_km,
            detour_time_min=result.detour_time_min,
            pickup_distance_km=result.pickup_distance_km,
            compatibility_score=result.score,
            fare_share=result.fare_share,
            savings=result.savings,
        )
