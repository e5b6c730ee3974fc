#Purpose: Seat booking on shared rides and the "rides near me" search.
#A passenger requests seats (pending), the driver confirms; confirmed seats
#count against the ride and flip it between OPEN and FULL.

from datetime import datetime
from typing import List, Optional, Sequence, Tuple
import logging
import uuid

from routing.distance import haversine_km

from .models import BookingStatus, SharedRide, SharedRideBooking, SharedRideStatus

logger = logging.getLogger(__name__)

DEFAULT_NEARBY_RADIUS_KM = 10


class BookingException(Exception):
    """Raised when seats cannot be booked or a booking cannot change state."""
    pass


def update_availability(ride: SharedRide) -> SharedRide:
    """
    Recount seats from confirmed bookings. A ride with no seats left becomes
    FULL; a FULL ride that gets seats back (cancellation) reopens.
    """
    ride.available_seats = ride.total_seats - ride.booked_seats

    if ride.available_seats <= 0:
        ride.status = SharedRideStatus.FULL
    elif ride.status == SharedRideStatus.FULL:
        ride.status = SharedRideStatus.OPEN

    return ride


def book_seats(
    ride: SharedRide,
    passenger_id: str,
    seats: int = 1,
    now: Optional[datetime] = None,
    pickup_address: Optional[str] = None,
    drop_address: Optional[str] = None,
) -> SharedRideBooking:
    if seats < 1:
        raise BookingException("seats must be at least 1")

    if passenger_id == ride.driver_id:
        raise BookingException("Drivers cannot book their own ride")

    if not ride.can_book(seats, now):
        raise BookingException(f"Ride {ride.id} cannot take {seats} more seat(s)")

    booking = SharedRideBooking(
        id=str(uuid.uuid4()),
        shared_ride_id=ride.id,
        passenger_id=passenger_id,
        seats_booked=seats,
        amount=round(seats * ride.price_per_seat, 2),
        pickup_address=pickup_address,
        drop_address=drop_address,
    )
    ride.bookings.append(booking)
    return booking


def confirm_booking(ride: SharedRide, booking: SharedRideBooking) -> SharedRideBooking:
    if booking.status != BookingStatus.PENDING:
        raise BookingException(f"Booking {booking.id} is not PENDING. Current: {booking.status}")

    if ride.remaining_seats < booking.seats_booked:
        raise BookingException(f"Ride {ride.id} no longer has {booking.seats_booked} seat(s) free")

    booking.status = BookingStatus.CONFIRMED
    update_availability(ride)
    logger.info("Booking %s confirmed on shared ride %s", booking.id, ride.id)
    return booking


def reject_booking(ride: SharedRide, booking: SharedRideBooking) -> SharedRideBooking:
    if booking.status != BookingStatus.PENDING:
        raise BookingException(f"Booking {booking.id} is not PENDING. Current: {booking.status}")

    booking.status = BookingStatus.REJECTED
    return booking


def cancel_booking(ride: SharedRide, booking: SharedRideBooking) -> SharedRideBooking:
    if booking.status not in (BookingStatus.PENDING, BookingStatus.CONFIRMED):
        raise BookingException(f"Booking {booking.id} cannot be cancelled from {booking.status}")

    booking.status = BookingStatus.CANCELLED
    update_availability(ride)
    return booking


def nearby_shared_rides(
    rides: Sequence[SharedRide],
    lat: float,
    lng: float,
    radius_km: float = DEFAULT_NEARBY_RADIUS_KM,
    now: Optional[datetime] = None,
) -> List[Tuple[SharedRide, float]]:
    """
    Open, upcoming rides whose origin is within radius_km, closest first.
    """
    now = now or datetime.now()
    found = []
    for ride in rides:
        if ride.status != SharedRideStatus.OPEN or ride.departure_time <= now:
            continue
        distance = haversine_km(lat, lng, ride.origin[0], ride.origin[1])
        if distance < radius_km:
            found.append((ride, distance))

    found.sort(key=lambda pair: pair[1])
    return found
