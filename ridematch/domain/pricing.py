"""
Pooled fare split
=================

Formula
-------
fare_share = max(round(base_fare x (1 - Pool_Discount) + detour_km x Detour_Penalty),
                 Min_Fare_Ratio x base_fare)

savings    = round(((new_fare + existing_fare) / 2) x Pool_Discount)

* **Pool_Discount** = 25 %
* **Detour_Penalty** = 10 per km of detour the pooled route adds
* **Min_Fare_Ratio** = 0.6 -- the share never drops below 60 % of the solo fare

The floor is applied to the discounted fare literally; with a large detour
the penalty can push the share above the solo fare, the floor never pulls
it back down.

Fares are integers in the minor-unit-agnostic currency of the caller.
Complexity: O(1) per call.
"""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity."""
    return math.floor(value + 0.5)


class FareSplitter:
    """Fare figures for a rider joining an existing trip."""

    def __init__(
        self,
        pool_discount: float = 0.25,
        detour_penalty_per_km: float = 10.0,
        min_fare_ratio: float = 0.6,
    ):
        self.pool_discount = pool_discount
        self.detour_penalty_per_km = detour_penalty_per_km
        self.min_fare_ratio = min_fare_ratio

    def fare_share(self, base_fare: int, detour_distance_km: float) -> float:
        discounted = round_half_up(
            base_fare * (1 - self.pool_discount)
            + detour_distance_km * self.detour_penalty_per_km
        )
        return float(max(discounted, base_fare * self.min_fare_ratio))

    def savings(self, new_fare: int, existing_fare: int) -> int:
        average = (new_fare + existing_fare) / 2
        return round_half_up(average * self.pool_discount)
