"""
Purpose: Domain models for shared (carpool) rides.
What it does:
- SharedRide: a driver-posted trip with seats for sale at a fixed price per seat
- SharedRideBooking: one passenger's seat reservation on it

Seat math that only reads the ride's own bookings lives here as properties;
booking transitions live in carpool/booking.py.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple

LatLon = Tuple[float, float]


class SharedRideStatus(str, Enum):
    OPEN = "open"
    FULL = "full"
    STARTED = "started"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PICKED_UP = "picked_up"
    DROPPED_OFF = "dropped_off"
    CANCELLED = "cancelled"
    REJECTED = "rejected"


#bookings that hold a seat
SEAT_HOLDING_STATUSES = (BookingStatus.CONFIRMED, BookingStatus.PICKED_UP, BookingStatus.DROPPED_OFF)


@dataclass
class SharedRideBooking:
    id: str
    shared_ride_id: str
    passenger_id: str
    seats_booked: int
    amount: float
    status: BookingStatus = BookingStatus.PENDING
    pickup_address: Optional[str] = None
    drop_address: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)


@dataclass
class SharedRide:
    id: str
    driver_id: str
    origin: LatLon
    destination: LatLon
    departure_time: datetime
    total_seats: int
    price_per_seat: float
    from_address: Optional[str] = None
    to_address: Optional[str] = None
    vehicle_type: str = "car"
    women_only: bool = False
    status: SharedRideStatus = SharedRideStatus.OPEN
    available_seats: Optional[int] = None
    bookings: List[SharedRideBooking] = field(default_factory=list)

    def __post_init__(self):
        if self.available_seats is None:
            self.available_seats = self.total_seats

    @property
    def booked_seats(self) -> int:
        return sum(
            booking.seats_booked for booking in self.bookings
            if booking.status in SEAT_HOLDING_STATUSES
        )

    @property
    def remaining_seats(self) -> int:
        return self.total_seats - self.booked_seats

    def is_full(self) -> bool:
        return self.remaining_seats <= 0

    def can_book(self, seats: int = 1, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now()
        return (
            self.status == SharedRideStatus.OPEN
            and self.remaining_seats >= seats
            and self.departure_time > now
        )
