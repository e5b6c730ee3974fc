"""
Carpool (shared rides) package.

Public API:
- Domain models: SharedRide, SharedRideBooking, SharedRideStatus, BookingStatus
- Booking: book_seats, confirm_booking, reject_booking, cancel_booking, update_availability
- Search: nearby_shared_rides
"""
from .models import SharedRide, SharedRideBooking, SharedRideStatus, BookingStatus
from .booking import (
    BookingException,
    book_seats,
    confirm_booking,
    reject_booking,
    cancel_booking,
    update_availability,
    nearby_shared_rides,
)

__all__ = [
    "SharedRide",
    "SharedRideBooking",
    "SharedRideStatus",
    "BookingStatus",
    "BookingException",
    "book_seats",
    "confirm_booking",
    "reject_booking",
    "cancel_booking",
    "update_availability",
    "nearby_shared_rides",
]
