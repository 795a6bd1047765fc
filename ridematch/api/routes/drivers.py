"""
Driver endpoints
================

POST /api/v1/drivers/assign                 -- pick the nearest eligible driver
PUT  /api/v1/drivers/{driver_id}/location   -- record a driver position
GET  /api/v1/drivers/{driver_id}/location   -- latest recorded position
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request

from ridematch.api.dependencies import get_dispatcher, get_location_store
from ridematch.api.middleware import limiter
from ridematch.api.schemas import (
    DriverAssignmentResponse,
    DriverAssignRequest,
    DriverLocationResponse,
    DriverResponse,
    ErrorResponse,
    LocationIn,
)
from ridematch.domain.dispatch import DriverDispatcher, status_after_dispatch
from ridematch.infrastructure.location_store import DriverLocationStore

router = APIRouter(prefix="/drivers", tags=["drivers"])


@router.post(
    "/assign",
    response_model=DriverAssignmentResponse,
    summary="Assign the nearest available driver",
    responses={422: {"model": ErrorResponse}},
    description=(
        "Positions recorded through the location endpoint take precedence "
        "over the ones in the submitted snapshot."
    ),
)
@limiter.limit("100/minute")
async def assign_driver(
    request: Request,
    body: DriverAssignRequest,
    dispatcher: DriverDispatcher = Depends(get_dispatcher),
    store: DriverLocationStore = Depends(get_location_store),
):
    ride_request = body.request.to_domain()
    drivers = await store.apply_to([d.to_domain() for d in body.drivers])

    assignment = dispatcher.assign_optimal_driver(ride_request, drivers)
    ride_status = status_after_dispatch(assignment)
    if assignment is None:
        return DriverAssignmentResponse(ride_status=ride_status)

    return DriverAssignmentResponse(
        ride_status=ride_status,
        driver=DriverResponse.from_domain(assignment.driver),
        distance_km=assignment.distance_km,
        eta_minutes=assignment.eta_minutes,
        estimated_arrival=assignment.estimated_arrival,
        distance=assignment.distance,
    )


@router.put(
    "/{driver_id}/location",
    response_model=DriverLocationResponse,
    summary="Record a driver's current position",
)
@limiter.limit("600/minute")
async def update_location(
    request: Request,
    driver_id: str,
    body: LocationIn,
    store: DriverLocationStore = Depends(get_location_store),
):
    stored = await store.update(driver_id, body.to_domain())
    return DriverLocationResponse(
        driver_id=stored.driver_id,
        latitude=stored.location.latitude,
        longitude=stored.location.longitude,
        updated_at=stored.updated_at,
    )


@router.get(
    "/{driver_id}/location",
    response_model=DriverLocationResponse,
    summary="Latest recorded driver position",
    responses={404: {"model": ErrorResponse}},
)
@limiter.limit("600/minute")
async def get_location(
    request: Request,
    driver_id: str,
    store: DriverLocationStore = Depends(get_location_store),
):
    stored = await store.get(driver_id)
    if stored is None:
        raise HTTPException(status_code=404, detail="Driver location not found")
    return DriverLocationResponse(
        driver_id=stored.driver_id,
        latitude=stored.location.latitude,
        longitude=stored.location.longitude,
        updated_at=stored.updated_at,
    )
