"""Unit tests for eligibility, compatibility scoring and pool ranking."""

import math

import httpx
import pytest

from ridematch.domain.matching import (
    CompatibilityScorer,
    PoolingThresholds,
    PoolMatcher,
    gender_compatible,
    has_capacity,
    is_eligible,
)
from ridematch.domain.routing import RouteEstimator
from ridematch.domain.sequencing import ExhaustiveSequencer
from tests.conftest import DROP, PICKUP, east_of, north_of


def _offset(point, km, bearing_deg):
    bearing = math.radians(bearing_deg)
    return north_of(east_of(point, km * math.sin(bearing)), km * math.cos(bearing))


def _directions_payload(meters: int, seconds: int) -> dict:
    return {
        "status": "OK",
        "routes": [
            {"legs": [{"distance": {"value": meters}, "duration": {"value": seconds}}]}
        ],
    }


class TestEligibility:
    def test_capacity(self, make_existing):
        assert has_capacity(make_existing(passengers=("a", "b")), max_pool_size=4)
        assert not has_capacity(make_existing(passengers=("a", "b", "c")), max_pool_size=4)

    def test_female_only_existing_rejects_male_rider(self, make_request, make_existing):
        existing = make_existing(female_only=True)
        assert not gender_compatible(make_request(gender="male"), existing)
        assert gender_compatible(make_request(gender="female"), existing)

    def test_female_only_request_rejects_male_host(self, make_request, make_existing):
        request = make_request(female_only=True)
        assert not gender_compatible(request, make_existing(rider_gender="male"))
        assert gender_compatible(request, make_existing(rider_gender="female"))

    def test_no_preference_matches_anyone(self, make_request, make_existing):
        assert gender_compatible(
            make_request(gender="male"), make_existing(rider_gender="other")
        )

    def test_pooling_disabled(self, make_request, make_existing):
        assert not is_eligible(make_request(), make_existing(allow_pooling=False))


class TestCompatibilityScorer:
    def setup_method(self):
        self.scorer = CompatibilityScorer()

    def test_no_detour_scores_full_marks(self):
        assert self.scorer.score(0, 0, 0, solo_km=8.5, combined_km=8.5) == 100

    def test_score_floors_at_zero(self):
        assert self.scorer.score(50, 100, 20, solo_km=5, combined_km=55) == 0

    def test_penalties(self):
        # 100 - 16 - 10 - 10 + max(0, 10 - 0.2*50) = 64
        assert self.scorer.score(2.0, 5.0, 1.5, solo_km=10, combined_km=12) == 64

    def test_zero_length_solo_trip_has_no_bonus(self):
        assert self.scorer.score(1.0, 2.0, 0.0, solo_km=0.0, combined_km=1.0) == 88

    def test_limits_are_inclusive(self):
        assert self.scorer.within_limits(5.0, 15.0, 3.0)
        assert not self.scorer.within_limits(5.01, 15.0, 3.0)
        assert not self.scorer.within_limits(5.0, 15.5, 3.0)
        assert not self.scorer.within_limits(5.0, 15.0, 3.01)

    def test_custom_thresholds(self):
        scorer = CompatibilityScorer(PoolingThresholds(max_pickup_distance_km=1.0))
        assert not scorer.within_limits(0.0, 0.0, 1.5)


class TestPoolMatcher:
    def setup_method(self):
        self.matcher = PoolMatcher(RouteEstimator())

    @pytest.mark.asyncio
    async def test_identical_trips_are_a_perfect_match(self, make_request, make_existing):
        pools = await self.matcher.find_available_pools(make_request(), [make_existing()])
        assert len(pools) == 1
        pool = pools[0]
        assert pool.compatibility_score == 100
        assert pool.detour_distance_km == pytest.approx(0.0, abs=1e-9)
        assert pool.detour_time_min == 0
        assert pool.fare_share == 150.0
        assert pool.savings == 50

    @pytest.mark.asyncio
    async def test_nearby_request_scores_high(self, make_request, make_existing):
        request = make_request(
            pickup=north_of(PICKUP, 0.3), destination=north_of(DROP, 0.3)
        )
        result = await self.matcher.evaluate(request, make_existing())
        assert result.is_compatible
        assert result.score >= 80

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bearing", range(0, 360, 45))
    async def test_half_kilometre_offsets_still_score_high(
        self, make_request, make_existing, bearing
    ):
        # Detour is at most three offsets here, which bottoms out at a score of 80
        for drop_bearing in range(0, 360, 45):
            request = make_request(
                pickup=_offset(PICKUP, 0.499, bearing),
                destination=_offset(DROP, 0.499, drop_bearing),
            )
            result = await self.matcher.evaluate(request, make_existing())
            assert result.is_compatible, (bearing, drop_bearing)
            assert result.score >= 80, (bearing, drop_bearing, result.score)

    @pytest.mark.asyncio
    async def test_distant_pickup_is_incompatible(self, make_request, make_existing):
        request = make_request(pickup=east_of(PICKUP, 20), destination=DROP)
        result = await self.matcher.evaluate(request, make_existing())
        assert not result.is_compatible
        assert await self.matcher.find_available_pools(request, [make_existing()]) == []

    @pytest.mark.asyncio
    async def test_pickup_beyond_limit_fails_even_when_ordered(
        self, make_request, make_existing
    ):
        # The exhaustive sequencer always finds an order; the pickup limit still applies
        matcher = PoolMatcher(RouteEstimator(), sequencer=ExhaustiveSequencer())
        request = make_request(pickup=north_of(PICKUP, 3.5), destination=DROP)
        result = await matcher.evaluate(request, make_existing())
        assert result.pickup_distance_km > 3
        assert not result.is_compatible

    @pytest.mark.asyncio
    async def test_full_pool_is_never_offered(self, make_request, make_existing):
        full = make_existing("full", passengers=("a", "b", "c"))
        roomy = make_existing("roomy", passengers=("a", "b"))
        pools = await self.matcher.find_available_pools(make_request(), [full, roomy])
        assert [p.pool_id for p in pools] == ["roomy"]

    @pytest.mark.asyncio
    async def test_female_only_excludes_despite_geometry(self, make_request, make_existing):
        request = make_request(gender="male")
        pools = await self.matcher.find_available_pools(
            request, [make_existing(female_only=True)]
        )
        assert pools == []

    @pytest.mark.asyncio
    async def test_sorted_by_score_with_stable_ties(self, make_request, make_existing):
        candidates = [
            make_existing("a"),
            make_existing("b", pickup=north_of(PICKUP, 1.0)),
            make_existing("c"),
        ]
        pools = await self.matcher.find_available_pools(make_request(), candidates)
        assert [p.pool_id for p in pools] == ["a", "c", "b"]
        scores = [p.compatibility_score for p in pools]
        assert all(x >= y for x, y in zip(scores, scores[1:]))

    @pytest.mark.asyncio
    async def test_empty_candidates(self, make_request):
        assert await self.matcher.find_available_pools(make_request(), []) == []

    @pytest.mark.asyncio
    async def test_candidate_projection(self, make_request, make_existing):
        pools = await self.matcher.find_available_pools(make_request(), [make_existing()])
        pool = pools[0]
        assert pool.driver_id == "driver-ride-1"
        assert pool.driver_name == "Ravi"
        assert pool.vehicle == "KA01 Swift"
        assert pool.current_pickup == "Existing pickup"
        assert pool.current_destination == "Existing drop"
        assert pool.current_passenger == "Asha"
        assert pool.estimated_pickup_time == "10 mins"
        assert pool.route_description == "Via New pickup, Existing drop"


class TestProviderFanOut:
    @pytest.mark.asyncio
    async def test_provider_called_only_for_feasible_eligible_candidates(
        self, make_request, make_existing
    ):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json=_directions_payload(8600, 1000))

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            matcher = PoolMatcher(RouteEstimator(api_key="key", client=client))
            candidates = [
                make_existing("ok"),
                make_existing("full", passengers=("a", "b", "c")),
                make_existing("far", pickup=east_of(PICKUP, 20)),
            ]
            await matcher.find_available_pools(make_request(), candidates)

        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_provider_outage_still_matches(self, make_request, make_existing):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, text="unavailable")

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            matcher = PoolMatcher(RouteEstimator(api_key="key", client=client))
            pools = await matcher.find_available_pools(make_request(), [make_existing()])

        assert [p.compatibility_score for p in pools] == [100]
