"""Domain enumerations and lifecycle transition tables.

The ride and pool-request lifecycles are driven by the caller; the engine
only publishes the states and the legal moves between them.
"""

import enum


class RideStatus(str, enum.Enum):
    PENDING = "PENDING"
    DRIVER_ASSIGNED = "DRIVER_ASSIGNED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    NO_DRIVERS_AVAILABLE = "NO_DRIVERS_AVAILABLE"


# State machine: maps current status -> set of valid next statuses
RIDE_TRANSITIONS: dict[RideStatus, set[RideStatus]] = {
    RideStatus.PENDING: {
        RideStatus.DRIVER_ASSIGNED,
        RideStatus.NO_DRIVERS_AVAILABLE,
        RideStatus.CANCELLED,
    },
    RideStatus.DRIVER_ASSIGNED: {RideStatus.IN_PROGRESS, RideStatus.CANCELLED},
    RideStatus.IN_PROGRESS: {RideStatus.COMPLETED, RideStatus.CANCELLED},
    RideStatus.COMPLETED: set(),
    RideStatus.CANCELLED: set(),
    RideStatus.NO_DRIVERS_AVAILABLE: set(),
}


class PoolRequestStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


POOL_REQUEST_TRANSITIONS: dict[PoolRequestStatus, set[PoolRequestStatus]] = {
    PoolRequestStatus.PENDING: {
        PoolRequestStatus.ACCEPTED,
        PoolRequestStatus.REJECTED,
    },
    PoolRequestStatus.ACCEPTED: set(),
    PoolRequestStatus.REJECTED: set(),
}


class DriverStatus(str, enum.Enum):
    ONLINE = "online"
    OFFLINE = "offline"
    BUSY = "busy"


class Gender(str, enum.Enum):
    FEMALE = "female"
    MALE = "male"
    OTHER = "other"


class RouteSource(str, enum.Enum):
    PROVIDER = "provider"
    FALLBACK = "fallback"
