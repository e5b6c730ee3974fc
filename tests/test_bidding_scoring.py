from datetime import datetime, timedelta

import pytest

from bidding.models import RideStatus
from bidding.scoring import (
    bid_options,
    calculate_priority_score,
    increase_bid,
    rank_ride_requests,
)
from bidding.state_machines.ride_state import RideStateException, create_ride_request

PICKUP = (31.5204, 74.3587)
DROPOFF = (31.5497, 74.3436)


@pytest.fixture
def now():
    return datetime(2026, 3, 5, 9, 0)


@pytest.fixture
def ride():
    return create_ride_request("rider-1", PICKUP, DROPOFF, 200)


def test_fresh_ride_has_no_priority(ride):
    assert calculate_priority_score(ride) == 0


def test_increase_bid(ride, now):
    increase_bid(ride, 20, now=now)

    assert ride.bid_amount == pytest.approx(40)
    assert ride.estimated_price == pytest.approx(240)
    assert ride.is_bidding
    assert ride.bid_count == 1
    assert ride.last_bid_at == now
    # 2 * 20 + 5 * 1
    assert ride.priority_score == pytest.approx(45)


def test_bids_do_not_compound(ride, now):
    increase_bid(ride, 20, now=now)
    increase_bid(ride, 10, now=now + timedelta(minutes=1))

    assert ride.base_fare == 200
    assert ride.estimated_price == pytest.approx(220)
    assert ride.bid_count == 2
    assert ride.priority_score == pytest.approx(30)


def test_invalid_percentage(ride):
    with pytest.raises(ValueError):
        increase_bid(ride, 15)


def test_cannot_bid_once_the_trip_started(ride):
    ride.status = RideStatus.STARTED
    with pytest.raises(RideStateException):
        increase_bid(ride, 10)


def test_bid_options(ride, now):
    increase_bid(ride, 30, now=now)
    options = bid_options(ride)

    assert [o["percentage"] for o in options] == [10, 20, 30, 50]
    assert [o["new_fare"] for o in options] == [220, 240, 260, 300]
    assert [o["is_selected"] for o in options] == [False, False, True, False]
    assert options[3]["label"] == "+50%"
    assert options[3]["description"] == "Maximum priority - Instant matching"


def test_feed_ranking(now):
    early = create_ride_request("rider-a", PICKUP, DROPOFF, 200)
    quiet = create_ride_request("rider-b", PICKUP, DROPOFF, 200)
    late = create_ride_request("rider-c", PICKUP, DROPOFF, 200)

    increase_bid(late, 20, now=now + timedelta(minutes=2))
    increase_bid(early, 20, now=now)

    ranked = rank_ride_requests([quiet, late, early])

    # equal score -> whoever bid first
    assert ranked == [early, late, quiet]
