"""
Waypoint sequencing  (Strategy Pattern)
=======================================

Combining an existing trip with a new request yields four stops: the
existing pickup / drop and the new pickup / drop.  A sequencer orders them
or answers ``None`` when it finds no acceptable ordering.

* ``HeuristicSequencer`` (default) -- two geographic branches, O(1):

  1. Pickups within 2 km: visit both pickups, then both drops; if the
     drops are more than 2 km apart the new rider is dropped first.
  2. Pickups further apart: accept only if the new pickup lies within
     1 km of extra distance on the existing direct route.

  **Limitation:** this does not search the 24 permutations and does not
  guarantee the minimal-distance ordering.

* ``ExhaustiveSequencer`` -- brute force over every ordering in which each
  rider is picked up before being dropped (6 of the 24), keeping the
  shortest.  Same interface, never returns ``None``.
"""

from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from .distance import distance_km, path_distance_km
from .entities import ExistingRide, NamedPoint, RideRequest

PICKUP = "pickup"
DROP = "drop"
EXISTING = "existing"
NEW = "new"


@dataclass(frozen=True)
class Waypoint:
    point: NamedPoint
    kind: str
    passenger: str


def trip_waypoints(
    existing: ExistingRide, request: RideRequest
) -> tuple[Waypoint, Waypoint, Waypoint, Waypoint]:
    """Return (existing pickup, new pickup, existing drop, new drop)."""
    return (
        Waypoint(existing.pickup, PICKUP, EXISTING),
        Waypoint(request.pickup, PICKUP, NEW),
        Waypoint(existing.destination, DROP, EXISTING),
        Waypoint(request.destination, DROP, NEW),
    )


def route_length_km(order: list[Waypoint]) -> float:
    return path_distance_km([w.point for w in order])


def describe_route(order: list[Waypoint]) -> str:
    """Human-readable summary naming the intermediate stops."""
    return "Via " + ", ".join(w.point.name for w in order[1:-1])


# ── Strategy hierarchy ────────────────────────────────────────────────


class WaypointSequencer(ABC):
    @abstractmethod
    def sequence(
        self, existing: ExistingRide, request: RideRequest
    ) -> Optional[list[Waypoint]]: ...


class HeuristicSequencer(WaypointSequencer):
    def __init__(
        self,
        close_pickup_km: float = 2.0,
        close_drop_km: float = 2.0,
        max_on_route_detour_km: float = 1.0,
    ):
        self.close_pickup_km = close_pickup_km
        self.close_drop_km = close_drop_km
        self.max_on_route_detour_km = max_on_route_detour_km

    def sequence(
        self, existing: ExistingRide, request: RideRequest
    ) -> Optional[list[Waypoint]]:
        e_pickup, n_pickup, e_drop, n_drop = trip_waypoints(existing, request)

        pickup_gap = distance_km(e_pickup.point, n_pickup.point)
        drop_gap = distance_km(e_drop.point, n_drop.point)

        if pickup_gap < self.close_pickup_km:
            if drop_gap < self.close_drop_km:
                return [e_pickup, n_pickup, e_drop, n_drop]
            return [e_pickup, n_pickup, n_drop, e_drop]

        # Pickups far apart: is the new pickup on the way?
        direct = distance_km(e_pickup.point, e_drop.point)
        via_new_pickup = pickup_gap + distance_km(n_pickup.point, e_drop.point)
        if via_new_pickup - direct < self.max_on_route_detour_km:
            return [e_pickup, n_pickup, e_drop, n_drop]
        return None


class ExhaustiveSequencer(WaypointSequencer):
    def sequence(
        self, existing: ExistingRide, request: RideRequest
    ) -> Optional[list[Waypoint]]:
        best: Optional[list[Waypoint]] = None
        best_length = 0.0
        for order in itertools.permutations(trip_waypoints(existing, request)):
            if not _pickups_first(order):
                continue
            length = route_length_km(list(order))
            if best is None or length < best_length:
                best, best_length = list(order), length
        return best


def _pickups_first(order: tuple[Waypoint, ...]) -> bool:
    seen: set[str] = set()
    for w in order:
        if w.kind == PICKUP:
            seen.add(w.passenger)
        elif w.passenger not in seen:
            return False
    return True


def make_sequencer(strategy: str = "heuristic") -> WaypointSequencer:
    if strategy == "exhaustive":
        return ExhaustiveSequencer()
    if strategy == "heuristic":
        return HeuristicSequencer()
    raise ValueError(f"Unknown waypoint strategy: {strategy}")
