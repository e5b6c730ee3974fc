"""
Purpose: Core data models for the drivers domain.
What it does:
Defines the structure of a Driver, their approval status and the offer a rider
sees for them, without relying on any ORM.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

LatLon = Tuple[float, float]


class DriverStatus(str, Enum):
    """
    Account approval state. Being online is tracked separately (is_online).
    """
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    SUSPENDED = "suspended"


@dataclass(frozen=True)
class Driver:
    """
    A purely stateless representation of a Driver at a specific point in time.
    """
    id: str
    user_id: str
    vehicle_type: str
    status: DriverStatus
    is_online: bool = False
    location: Optional[LatLon] = None

    name: str = "Driver"
    rating: float = 4.5
    completed_rides: int = 0
    gender: Optional[str] = None

    @property
    def has_location(self) -> bool:
        return self.location is not None

    @classmethod
    def new(
        cls,
        driver_id: str,
        vehicle_type: str,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        status: str | DriverStatus = DriverStatus.APPROVED,
        is_online: bool = True,
        user_id: Optional[str] = None,
        name: str = "Driver",
        rating: Optional[float] = None,
        completed_rides: int = 0,
        gender: Optional[str] = None,
    ) -> Driver:
        if isinstance(status, str):
            status = DriverStatus(status)

        location = (lat, lng) if lat is not None and lng is not None else None

        return cls(
            id=driver_id,
            user_id=user_id or driver_id,
            vehicle_type=vehicle_type,
            status=status,
            is_online=is_online,
            location=location,
            name=name,
            rating=4.5 if rating is None else rating, # unrated drivers show 4.5
            completed_rides=completed_rides,
            gender=gender,
        )


@dataclass(frozen=True)
class DriverOffer:
    """
    One row of the rider's "choose a driver" list.
    """
    driver_id: str
    user_id: str
    name: str
    vehicle_type: str
    rating: float
    total_rides: int
    distance_away: float # km, 1 decimal
    eta_minutes: int
    base_fare: float
    bid_amount: float
    fare: float


@dataclass(frozen=True)
class DriverSearchResult:
    drivers: List[DriverOffer] = field(default_factory=list)
    trip_distance: float = 0.0
    estimated_duration: int = 0
    search_radius: float = 0.0
    bid_percentage: int = 0

    @property
    def drivers_found(self) -> int:
        return len(self.drivers)
