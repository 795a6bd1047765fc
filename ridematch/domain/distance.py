"""
Distance calculation using the Haversine formula.

Great-circle distance is the engine's local ground truth: the sequencer,
the scorer and the dispatcher all measure with it, and the route estimator
falls back to it whenever the routing provider cannot answer.

Complexity: O(1) per call.
"""

import math

from .entities import Coordinate, validate_coordinate

EARTH_RADIUS_KM = 6_371.0


def haversine_km(
    lat1: float, lng1: float, lat2: float, lng2: float
) -> float:
    """Return the great-circle distance in **km** between two points.

    Raises ``InvalidInput`` for non-finite or out-of-range degrees.
    """
    validate_coordinate(lat1, lng1)
    validate_coordinate(lat2, lng2)

    lat1_r, lat2_r = math.radians(lat1), math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlng / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(a)))


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """Haversine distance between two coordinate snapshots."""
    return haversine_km(a.latitude, a.longitude, b.latitude, b.longitude)


def path_distance_km(points: list[Coordinate]) -> float:
    """Sum of the legs between consecutive points."""
    return sum(distance_km(a, b) for a, b in zip(points, points[1:]))
