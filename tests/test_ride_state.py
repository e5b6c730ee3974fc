from datetime import datetime, timedelta

import pytest

from bidding.models import NegotiationStatus, RideStatus, ServiceType
from bidding.state_machines.ride_state import (
    RideStateException,
    assign_driver,
    cancel_ride,
    complete_ride,
    create_intercity_request,
    create_ride_request,
    start_ride,
)
from pricing.commission import CommissionSetting

LAHORE = (31.5204, 74.3587)
ISLAMABAD = (33.6844, 73.0479)


@pytest.fixture
def now():
    return datetime(2026, 3, 5, 9, 0)


@pytest.fixture
def ride():
    return create_ride_request("rider-1", LAHORE, (31.5497, 74.3436), 200, city="Lahore")


def test_create_ride_request(ride):
    assert ride.status == RideStatus.PENDING
    assert ride.base_fare == 200
    assert ride.estimated_price == 200
    assert ride.negotiation_status == NegotiationStatus.NONE
    assert ride.current_fare == 200


def test_create_ride_request_validation():
    with pytest.raises(ValueError):
        create_ride_request("rider-1", LAHORE, ISLAMABAD, 40)

    with pytest.raises(ValueError):
        create_ride_request("rider-1", LAHORE, ISLAMABAD, 200, seats=5)


def test_intercity_request(now):
    ride = create_intercity_request("rider-1", LAHORE, ISLAMABAD, now + timedelta(days=1), seats=6, estimated_fare=4500)

    assert ride.service_type == ServiceType.INTERCITY
    assert ride.is_intercity
    assert ride.is_bidding_enabled
    assert ride.negotiation_status == NegotiationStatus.OPEN
    assert ride.base_fare == 4500

    with pytest.raises(ValueError):
        create_intercity_request("rider-1", LAHORE, ISLAMABAD, now, seats=7)


def test_intercity_fare_defaults_to_formula(now):
    same_spot = create_intercity_request("rider-1", LAHORE, LAHORE, now)
    assert same_spot.estimated_price == 200

    long_trip = create_intercity_request("rider-1", LAHORE, ISLAMABAD, now)
    assert long_trip.estimated_price > 4000


def test_full_lifecycle(ride, now):
    assign_driver(ride, "driver-1", now=now)
    assert ride.status == RideStatus.DRIVER_ASSIGNED

    start_ride(ride, now=now + timedelta(minutes=5))
    assert ride.status == RideStatus.STARTED

    complete_ride(ride, tip_amount=30, now=now + timedelta(minutes=25))

    # default 10% commission, tip goes to the driver
    assert ride.status == RideStatus.COMPLETED
    assert ride.final_fare == 200
    assert ride.commission_amount == 20
    assert ride.driver_earning == 210
    assert ride.completed_at == now + timedelta(minutes=25)


def test_complete_uses_commission_rows_and_actual_price(ride, now):
    settings = [CommissionSetting("Lahore", "percentage", 15, city="Lahore")]
    assign_driver(ride, "driver-1", now=now)
    start_ride(ride, now=now)

    complete_ride(ride, settings, actual_price=260, now=now)

    assert ride.actual_price == 260
    assert ride.commission_amount == 39
    assert ride.driver_earning == 221


def test_cannot_start_a_pending_ride(ride):
    with pytest.raises(RideStateException):
        start_ride(ride)


def test_cannot_complete_twice(ride, now):
    assign_driver(ride, "driver-1", now=now)
    start_ride(ride, now=now)
    complete_ride(ride, now=now)

    with pytest.raises(RideStateException):
        complete_ride(ride, now=now)


def test_cancel_locks_open_negotiation(now):
    ride = create_ride_request("rider-1", LAHORE, ISLAMABAD, 300, is_bidding_enabled=True)

    cancel_ride(ride, reason="Changed plans", cancelled_by="rider", now=now)

    assert ride.status == RideStatus.CANCELLED
    assert ride.negotiation_status == NegotiationStatus.LOCKED
    assert ride.cancellation_reason == "Changed plans"
    assert ride.cancelled_at == now

    with pytest.raises(RideStateException):
        cancel_ride(ride)
