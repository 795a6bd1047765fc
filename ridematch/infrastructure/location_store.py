"""
Redis-backed driver location store.

Latest known position of each driver lives in a single Redis hash, one
field per driver.  ``HSET`` / ``HGET`` / ``HMGET`` are atomic, so many API
processes can record and read positions concurrently without sharing a
process-wide dict.

Value layout: JSON ``{"latitude": .., "longitude": .., "updated_at": ..}``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional

import redis.asyncio as aioredis

from ridematch.domain.entities import Coordinate, Driver


@dataclass(frozen=True)
class DriverLocation:
    driver_id: str
    location: Coordinate
    updated_at: datetime


class DriverLocationStore:
    def __init__(self, client: aioredis.Redis, key: str = "driver_locations"):
        self.redis = client
        self.key = key

    async def update(
        self,
        driver_id: str,
        location: Coordinate,
        updated_at: Optional[datetime] = None,
    ) -> DriverLocation:
        stamp = updated_at or datetime.now(timezone.utc)
        payload = json.dumps(
            {
                "latitude": location.latitude,
                "longitude": location.longitude,
                "updated_at": stamp.isoformat(),
            }
        )
        await self.redis.hset(self.key, driver_id, payload)
        return DriverLocation(driver_id, location, stamp)

    async def get(self, driver_id: str) -> Optional[DriverLocation]:
        raw = await self.redis.hget(self.key, driver_id)
        if raw is None:
            return None
        return self._decode(driver_id, raw)

    async def remove(self, driver_id: str) -> None:
        await self.redis.hdel(self.key, driver_id)

    async def apply_to(self, drivers: list[Driver]) -> list[Driver]:
        """Return copies of *drivers* carrying their latest stored position."""
        if not drivers:
            return []
        raws = await self.redis.hmget(self.key, [d.id for d in drivers])
        updated: list[Driver] = []
        for driver, raw in zip(drivers, raws):
            stored = self._decode(driver.id, raw) if raw is not None else None
            updated.append(
                replace(driver, location=stored.location) if stored else driver
            )
        return updated

    @staticmethod
    def _decode(driver_id: str, raw) -> DriverLocation:
        if isinstance(raw, bytes):
            raw = raw.decode()
        data = json.loads(raw)
        return DriverLocation(
            driver_id=driver_id,
            location=Coordinate(data["latitude"], data["longitude"]),
            updated_at=datetime.fromisoformat(data["updated_at"]),
        )
