"""
Domain entities consumed and produced by the matching engine.

Every entity is a frozen snapshot: the caller owns the authoritative ride
and driver records, the engine only reads what it is handed for the
duration of one call.  Construction validates the input so that bad data
is rejected before any geometry is computed.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from .enums import DriverStatus, Gender, RouteSource


class InvalidInput(ValueError):
    """Raised when a snapshot handed to the engine is malformed."""


# ── Validation helpers ────────────────────────────────────────────────


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_coordinate(latitude, longitude) -> None:
    """Reject non-numeric, non-finite or out-of-range degrees."""
    if not (_is_number(latitude) and _is_number(longitude)):
        raise InvalidInput(
            f"Coordinate components must be numbers, got ({latitude!r}, {longitude!r})"
        )
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        raise InvalidInput(f"Coordinate is not finite: ({latitude}, {longitude})")
    if not -90.0 <= latitude <= 90.0:
        raise InvalidInput(f"Latitude {latitude} outside [-90, 90]")
    if not -180.0 <= longitude <= 180.0:
        raise InvalidInput(f"Longitude {longitude} outside [-180, 180]")


def _check_flag(name: str, value) -> None:
    if not isinstance(value, bool):
        raise InvalidInput(f"{name} must be a boolean, got {value!r}")


def _check_fare(value) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidInput(f"Estimated fare must be a positive integer, got {value!r}")


def _parse_enum(enum_cls, value, label: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidInput(f"Unknown {label}: {value!r}") from None


# ── Value Objects ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        validate_coordinate(self.latitude, self.longitude)


@dataclass(frozen=True)
class NamedPoint(Coordinate):
    name: str = ""


@dataclass(frozen=True)
class RouteEstimate:
    distance_km: float
    duration_min: float
    source: RouteSource


# ── Snapshots handed in by the caller ─────────────────────────────────


@dataclass(frozen=True)
class RideRequest:
    requester_id: str
    pickup: NamedPoint
    destination: NamedPoint
    departure_time: str
    estimated_fare: int
    gender: Gender
    allow_pooling: bool = False
    female_only: bool = False
    passenger_count: int = 1

    def __post_init__(self) -> None:
        _check_fare(self.estimated_fare)
        _check_flag("allow_pooling", self.allow_pooling)
        _check_flag("female_only", self.female_only)
        if (
            isinstance(self.passenger_count, bool)
            or not isinstance(self.passenger_count, int)
            or self.passenger_count < 1
        ):
            raise InvalidInput(
                f"Passenger count must be at least 1, got {self.passenger_count!r}"
            )
        object.__setattr__(self, "gender", _parse_enum(Gender, self.gender, "gender"))


@dataclass(frozen=True)
class DriverSummary:
    id: str
    name: str
    rating: float
    vehicle: str


@dataclass(frozen=True)
class ExistingRide:
    ride_id: str
    rider_name: str
    pickup: NamedPoint
    destination: NamedPoint
    estimated_fare: int
    driver: DriverSummary
    rider_gender: Gender
    pool_passengers: tuple[str, ...] = ()
    allow_pooling: bool = True
    female_only: bool = False

    def __post_init__(self) -> None:
        _check_fare(self.estimated_fare)
        _check_flag("allow_pooling", self.allow_pooling)
        _check_flag("female_only", self.female_only)
        object.__setattr__(
            self, "rider_gender", _parse_enum(Gender, self.rider_gender, "gender")
        )
        object.__setattr__(self, "pool_passengers", tuple(self.pool_passengers))


@dataclass(frozen=True)
class Driver:
    id: str
    status: DriverStatus
    location: Coordinate
    current_ride: Optional[str] = None
    rating: float = 5.0
    name: Optional[str] = None
    vehicle: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "status", _parse_enum(DriverStatus, self.status, "driver status")
        )
        if not isinstance(self.location, Coordinate):
            raise InvalidInput(
                f"Driver location must be a Coordinate, got {self.location!r}"
            )
        if not (
            _is_number(self.rating)
            and math.isfinite(self.rating)
            and 0 <= self.rating <= 5
        ):
            raise InvalidInput(f"Driver rating must be within [0, 5], got {self.rating!r}")

    @property
    def is_dispatchable(self) -> bool:
        return self.status == DriverStatus.ONLINE and not self.current_ride


# ── Engine output ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class CompatibilityResult:
    is_compatible: bool
    score: int
    detour_distance_km: float
    detour_time_min: float
    pickup_distance_km: float
    fare_share: float
    savings: int
    route_description: str


@dataclass(frozen=True)
class PoolCandidate:
    pool_id: str
    driver_id: str
    driver_name: str
    driver_rating: float
    vehicle: str
    current_pickup: str
    current_destination: str
    current_passenger: str
    estimated_pickup_time: str
    route_description: str
    detour_distance_km: float
    detour_time_min: float
    pickup_distance_km: float
    compatibility_score: int
    fare_share: float
    savings: int


@dataclass(frozen=True)
class DriverMatch:
    driver: Driver
    distance_km: float
    eta_minutes: int


@dataclass(frozen=True)
class DriverAssignment:
    driver: Driver
    distance_km: float
    eta_minutes: int
    estimated_arrival: str
    distance: str
