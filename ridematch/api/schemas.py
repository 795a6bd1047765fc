"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ridematch.domain.entities import (
    Coordinate,
    Driver,
    DriverSummary,
    ExistingRide,
    NamedPoint,
    RideRequest,
)
from ridematch.domain.enums import DriverStatus, Gender, RideStatus


# ── Shared ────────────────────────────────────────────────────────────


class LocationIn(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)

    def to_domain(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)


class PointIn(LocationIn):
    name: str = Field(..., min_length=1, max_length=200)

    def to_domain(self) -> NamedPoint:
        return NamedPoint(self.latitude, self.longitude, self.name)


# ── Requests ──────────────────────────────────────────────────────────


class RideRequestIn(BaseModel):
    requester_id: str
    pickup_location: PointIn
    destination_location: PointIn
    departure_time: str
    estimated_fare: int = Field(..., gt=0)
    gender: Gender
    allow_pooling: bool = False
    female_only: bool = False
    passenger_count: int = Field(1, ge=1)

    def to_domain(self) -> RideRequest:
        return RideRequest(
            requester_id=self.requester_id,
            pickup=self.pickup_location.to_domain(),
            destination=self.destination_location.to_domain(),
            departure_time=self.departure_time,
            estimated_fare=self.estimated_fare,
            gender=self.gender,
            allow_pooling=self.allow_pooling,
            female_only=self.female_only,
            passenger_count=self.passenger_count,
        )


class DriverSummaryIn(BaseModel):
    id: str
    name: str
    rating: float = Field(5.0, ge=0, le=5)
    vehicle: str = ""


class ExistingRideIn(BaseModel):
    ride_id: str
    rider_name: str
    pickup_location: PointIn
    destination_location: PointIn
    estimated_fare: int = Field(..., gt=0)
    driver: DriverSummaryIn
    rider_gender: Gender
    pool_passengers: list[str] = []
    allow_pooling: bool = True
    female_only: bool = False

    def to_domain(self) -> ExistingRide:
        return ExistingRide(
            ride_id=self.ride_id,
            rider_name=self.rider_name,
            pickup=self.pickup_location.to_domain(),
            destination=self.destination_location.to_domain(),
            estimated_fare=self.estimated_fare,
            driver=DriverSummary(**self.driver.model_dump()),
            rider_gender=self.rider_gender,
            pool_passengers=tuple(self.pool_passengers),
            allow_pooling=self.allow_pooling,
            female_only=self.female_only,
        )


class PoolSearchRequest(BaseModel):
    request: RideRequestIn
    candidates: list[ExistingRideIn] = []


class DriverIn(BaseModel):
    id: str
    status: DriverStatus
    location: LocationIn
    current_ride: Optional[str] = None
    rating: float = Field(5.0, ge=0, le=5)
    name: Optional[str] = None
    vehicle: Optional[str] = None

    def to_domain(self) -> Driver:
        return Driver(
            id=self.id,
            status=self.status,
            location=self.location.to_domain(),
            current_ride=self.current_ride,
            rating=self.rating,
            name=self.name,
            vehicle=self.vehicle,
        )


class DriverAssignRequest(BaseModel):
    request: RideRequestIn
    drivers: list[DriverIn] = []


# ── Responses ─────────────────────────────────────────────────────────


class PoolCandidateResponse(BaseModel):
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

    model_config = {"from_attributes": True}


class DriverResponse(BaseModel):
    id: str
    status: DriverStatus
    latitude: float
    longitude: float
    rating: float
    name: Optional[str] = None
    vehicle: Optional[str] = None

    @classmethod
    def from_domain(cls, driver: Driver) -> "DriverResponse":
        return cls(
            id=driver.id,
            status=driver.status,
            latitude=driver.location.latitude,
            longitude=driver.location.longitude,
            rating=driver.rating,
            name=driver.name,
            vehicle=driver.vehicle,
        )


class DriverAssignmentResponse(BaseModel):
    ride_status: RideStatus
    driver: Optional[DriverResponse] = None
    distance_km: Optional[float] = None
    eta_minutes: Optional[int] = None
    estimated_arrival: Optional[str] = None
    distance: Optional[str] = None


class DriverLocationResponse(BaseModel):
    driver_id: str
    latitude: float
    longitude: float
    updated_at: datetime


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    detail: str
