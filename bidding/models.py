"""
Purpose: Domain models for ride requests and fare negotiation.
What it does:
- Defines core data structures:
- RideRequest (rider, pickup/dropoff, pricing fields, bidding fields, timestamps, status)
- RideBid (a driver's price offer on a ride request, plus the rider's counter)

Defines enums/constants:
- RideStatus = PENDING | SEARCHING | DRIVER_ASSIGNED | ACCEPTED | STARTED | COMPLETED | CANCELLED
- NegotiationStatus = NONE | OPEN | LOCKED | COMPLETED
- BidStatus = PENDING | COUNTERED | ACCEPTED | REJECTED | WITHDRAWN | EXPIRED
- ServiceType = CITY | INTERCITY | DELIVERY | FREIGHT

Rule: No pricing math, no transitions. Models only.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple
import uuid

LatLon = Tuple[float, float]


class RideStatus(str, Enum):
    PENDING = "pending"
    SEARCHING = "searching"
    DRIVER_ASSIGNED = "driver_assigned"
    ACCEPTED = "accepted"
    STARTED = "started"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class NegotiationStatus(str, Enum):
    NONE = "none"
    OPEN = "open"
    LOCKED = "locked"
    COMPLETED = "completed"


class BidStatus(str, Enum):
    PENDING = "pending"
    COUNTERED = "countered"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"
    EXPIRED = "expired"


class ServiceType(str, Enum):
    CITY = "city"
    INTERCITY = "intercity"
    DELIVERY = "delivery"
    FREIGHT = "freight"


def new_id() -> str:
    return str(uuid.uuid4())


@dataclass
class RideRequest:
    """
    A rider's request for a trip, including the rider-side bidding state
    (bid_percentage on top of base_fare) and the final settlement amounts.
    """

    id: str
    rider_id: str
    pickup: LatLon
    dropoff: LatLon
    pickup_address: Optional[str] = None
    drop_address: Optional[str] = None

    seats: int = 1
    vehicle_type: str = "car"
    city: Optional[str] = None
    service_type: ServiceType = ServiceType.CITY
    is_intercity: bool = False

    status: RideStatus = RideStatus.PENDING
    driver_id: Optional[str] = None

    #pricing
    distance_km: Optional[float] = None
    base_fare: Optional[float] = None
    estimated_price: Optional[float] = None
    final_fare: Optional[float] = None
    actual_price: Optional[float] = None
    tip_amount: float = 0.0
    commission_amount: Optional[float] = None
    driver_earning: Optional[float] = None

    #rider side bidding ("raise my fare by 10/20/30/50 %")
    is_bidding: bool = False
    bid_amount: float = 0.0
    bid_percentage: float = 0.0
    bid_count: int = 0
    last_bid_at: Optional[datetime] = None
    priority_score: float = 0.0

    #driver side bidding / negotiation
    is_bidding_enabled: bool = False
    negotiation_status: NegotiationStatus = NegotiationStatus.NONE

    payment_method: Optional[str] = None
    notes: Optional[str] = None

    created_at: datetime = field(default_factory=datetime.now)
    scheduled_at: Optional[datetime] = None
    accepted_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    cancelled_by: Optional[str] = None

    @property
    def current_fare(self) -> Optional[float]:
        """What the rider is currently offering / will pay."""
        if self.final_fare is not None:
            return self.final_fare
        if self.estimated_price is not None:
            return self.estimated_price
        return self.base_fare


@dataclass
class RideBid:
    """
    A driver's price for a ride request. The rider may counter it once;
    the driver then accepts the counter or lets it lapse.
    """

    id: str
    ride_request_id: str
    driver_id: str
    bid_amount: float
    eta_minutes: int
    expires_at: datetime
    note: Optional[str] = None
    status: BidStatus = BidStatus.PENDING
    counter_amount: Optional[float] = None
    counter_message: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now
