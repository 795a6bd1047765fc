"""
Shared test fixtures.

Snapshots are built around a reference trip in Bengaluru,
(12.90, 77.58) -> (12.95, 77.64), roughly 8.6 km apart.  Redis is replaced
by a small in-memory double so tests run without a server.
"""

from __future__ import annotations

import math

import pytest

from ridematch.domain.entities import (
    Coordinate,
    Driver,
    DriverSummary,
    ExistingRide,
    NamedPoint,
    RideRequest,
)

KM_PER_DEGREE_LAT = 6_371.0 * math.pi / 180

PICKUP = (12.90, 77.58)
DROP = (12.95, 77.64)


def north_of(point: tuple[float, float], km: float) -> tuple[float, float]:
    return (point[0] + km / KM_PER_DEGREE_LAT, point[1])


def east_of(point: tuple[float, float], km: float) -> tuple[float, float]:
    scale = KM_PER_DEGREE_LAT * math.cos(math.radians(point[0]))
    return (point[0], point[1] + km / scale)


class FakeRedis:
    """Just enough of the hash commands for ``DriverLocationStore``."""

    def __init__(self):
        self.hashes: dict[str, dict[str, str]] = {}

    async def hset(self, key, field, value):
        self.hashes.setdefault(key, {})[field] = value
        return 1

    async def hget(self, key, field):
        return self.hashes.get(key, {}).get(field)

    async def hmget(self, key, fields):
        bucket = self.hashes.get(key, {})
        return [bucket.get(f) for f in fields]

    async def hdel(self, key, *fields):
        bucket = self.hashes.get(key, {})
        return sum(1 for f in fields if bucket.pop(f, None) is not None)


# ── Snapshot factories ────────────────────────────────────────────────


@pytest.fixture
def make_request():
    def _make(
        pickup=PICKUP,
        destination=DROP,
        fare: int = 200,
        gender="female",
        female_only: bool = False,
        requester_id: str = "rider-new",
    ) -> RideRequest:
        return RideRequest(
            requester_id=requester_id,
            pickup=NamedPoint(*pickup, name="New pickup"),
            destination=NamedPoint(*destination, name="New drop"),
            departure_time="2026-10-17T09:00:00Z",
            estimated_fare=fare,
            gender=gender,
            allow_pooling=True,
            female_only=female_only,
        )

    return _make


@pytest.fixture
def make_existing():
    def _make(
        ride_id: str = "ride-1",
        pickup=PICKUP,
        destination=DROP,
        fare: int = 200,
        passengers=(),
        allow_pooling: bool = True,
        female_only: bool = False,
        rider_gender="female",
    ) -> ExistingRide:
        return ExistingRide(
            ride_id=ride_id,
            rider_name="Asha",
            pickup=NamedPoint(*pickup, name="Existing pickup"),
            destination=NamedPoint(*destination, name="Existing drop"),
            estimated_fare=fare,
            driver=DriverSummary(
                id=f"driver-{ride_id}", name="Ravi", rating=4.8, vehicle="KA01 Swift"
            ),
            rider_gender=rider_gender,
            pool_passengers=passengers,
            allow_pooling=allow_pooling,
            female_only=female_only,
        )

    return _make


@pytest.fixture
def make_driver():
    def _make(
        driver_id: str,
        location=PICKUP,
        status="online",
        current_ride=None,
        rating: float = 5.0,
    ) -> Driver:
        return Driver(
            id=driver_id,
            status=status,
            location=Coordinate(*location),
            current_ride=current_ride,
            rating=rating,
        )

    return _make


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()
