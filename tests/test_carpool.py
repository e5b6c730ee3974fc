from datetime import datetime, timedelta

import pytest

from carpool.booking import (
    BookingException,
    book_seats,
    cancel_booking,
    confirm_booking,
    nearby_shared_rides,
    reject_booking,
)
from carpool.models import BookingStatus, SharedRide, SharedRideStatus

LAHORE = (31.5204, 74.3587)
ISLAMABAD = (33.6844, 73.0479)


@pytest.fixture
def now():
    return datetime(2026, 3, 5, 9, 0)


def make_ride(now, ride_id="sr-1", origin=LAHORE, **kwargs):
    return SharedRide(
        id=ride_id,
        driver_id="driver-1",
        origin=origin,
        destination=ISLAMABAD,
        departure_time=kwargs.pop("departure_time", now + timedelta(days=1)),
        total_seats=kwargs.pop("total_seats", 3),
        price_per_seat=1500,
        **kwargs,
    )


@pytest.fixture
def ride(now):
    return make_ride(now)


def test_pending_booking_does_not_hold_seats(ride, now):
    booking = book_seats(ride, "passenger-1", seats=2, now=now)

    assert booking.status == BookingStatus.PENDING
    assert booking.amount == 3000
    assert ride.remaining_seats == 3


def test_confirm_fills_the_ride(ride, now):
    first = book_seats(ride, "passenger-1", seats=2, now=now)
    confirm_booking(ride, first)

    assert ride.remaining_seats == 1
    assert ride.available_seats == 1
    assert ride.status == SharedRideStatus.OPEN

    with pytest.raises(BookingException):
        book_seats(ride, "passenger-2", seats=2, now=now)

    second = book_seats(ride, "passenger-2", seats=1, now=now)
    confirm_booking(ride, second)

    assert ride.is_full()
    assert ride.status == SharedRideStatus.FULL


def test_cancel_reopens_a_full_ride(now):
    ride = make_ride(now, total_seats=1)
    booking = book_seats(ride, "passenger-1", now=now)
    confirm_booking(ride, booking)
    assert ride.status == SharedRideStatus.FULL

    cancel_booking(ride, booking)

    assert ride.status == SharedRideStatus.OPEN
    assert ride.available_seats == 1


def test_confirm_checks_seats_again(now):
    ride = make_ride(now, total_seats=1)
    first = book_seats(ride, "passenger-1", now=now)
    second = book_seats(ride, "passenger-2", now=now)
    confirm_booking(ride, first)

    with pytest.raises(BookingException):
        confirm_booking(ride, second)


def test_booking_rules(ride, now):
    with pytest.raises(BookingException):
        book_seats(ride, "driver-1", now=now)

    with pytest.raises(BookingException):
        book_seats(ride, "passenger-1", seats=0, now=now)

    # departed
    with pytest.raises(BookingException):
        book_seats(ride, "passenger-1", now=now + timedelta(days=2))


def test_reject_only_pending(ride, now):
    booking = book_seats(ride, "passenger-1", now=now)
    reject_booking(ride, booking)

    assert booking.status == BookingStatus.REJECTED
    with pytest.raises(BookingException):
        confirm_booking(ride, booking)
    with pytest.raises(BookingException):
        cancel_booking(ride, booking)


def test_nearby_shared_rides(now):
    near = make_ride(now, "near", origin=(LAHORE[0] + 0.01, LAHORE[1]))
    nearer = make_ride(now, "nearer", origin=(LAHORE[0] + 0.005, LAHORE[1]))
    far = make_ride(now, "far", origin=(LAHORE[0] + 0.2, LAHORE[1]))
    gone = make_ride(now, "gone", departure_time=now - timedelta(minutes=5))
    full = make_ride(now, "full", status=SharedRideStatus.FULL)

    found = nearby_shared_rides([near, far, gone, full, nearer], LAHORE[0], LAHORE[1], now=now)

    assert [ride.id for ride, _ in found] == ["nearer", "near"]
    assert found[0][1] == pytest.approx(0.556, abs=0.01)
