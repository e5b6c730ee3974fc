#Purpose: Rider-side bidding and ranking (the "who gets seen first" layer).
#A rider can raise their fare by a fixed percentage of the base fare.
#Produces:
#the raised fare and bid amount
#a priority score per ride request (bigger bid, more attempts -> higher)
#the bid option list shown in the app
#ride requests ordered for the driver feed

from datetime import datetime
from typing import Dict, List, Optional, Sequence
import logging

from pricing.fare import round_half_up

from .models import RideRequest, RideStatus
from .state_machines.ride_state import RideStateException

logger = logging.getLogger(__name__)

#percentages above the base fare a rider can offer
BID_INCREMENTS = (10, 20, 30, 50)

BID_DESCRIPTIONS: Dict[int, str] = {
    10: "Show to more drivers nearby",
    20: "Priority visibility to drivers",
    30: "High priority - Faster matching",
    50: "Maximum priority - Instant matching",
}

#a rider can only raise the fare while nobody is driving to them yet
BIDDABLE_STATUSES = (RideStatus.SEARCHING, RideStatus.PENDING, RideStatus.DRIVER_ASSIGNED)

PERCENTAGE_WEIGHT = 2
BID_COUNT_WEIGHT = 5


def calculate_priority_score(ride: RideRequest) -> float:
    """
    score = 2 * bid_percentage (if bidding) + 5 * bid_count
    """
    score = 0

    # higher bid = higher priority
    if ride.bid_percentage and ride.bid_percentage > 0:
        score += ride.bid_percentage * PERCENTAGE_WEIGHT

    # more bid attempts = slightly higher priority (shows urgency)
    score += ride.bid_count * BID_COUNT_WEIGHT

    return score


def bid_description(percentage: int) -> str:
    return BID_DESCRIPTIONS.get(percentage, "Increase visibility")


def increase_bid(ride: RideRequest, percentage: int, now: Optional[datetime] = None) -> RideRequest:
    """
    Raise the rider's offer to base_fare * (1 + percentage / 100).

    The percentage always applies to the original base fare, so going from
    +10% to +20% does not compound. The priority score is recomputed from the
    updated bid percentage and bid count.
    """
    if percentage not in BID_INCREMENTS:
        raise ValueError(f"bid percentage must be one of {BID_INCREMENTS}, got {percentage}")

    if ride.status not in BIDDABLE_STATUSES:
        raise RideStateException(f"Cannot raise the fare on ride {ride.id} in status {ride.status}")

    # base fare defaults to the first estimate the rider saw
    if not ride.base_fare:
        if ride.estimated_price is None:
            raise RideStateException(f"Ride {ride.id} has no fare to bid on")
        ride.base_fare = ride.estimated_price

    now = now or datetime.now()

    ride.bid_percentage = percentage
    ride.bid_amount = ride.base_fare * (percentage / 100)
    ride.estimated_price = ride.base_fare + ride.bid_amount
    ride.is_bidding = True
    ride.bid_count += 1
    ride.last_bid_at = now
    ride.priority_score = calculate_priority_score(ride)

    logger.info(
        "Ride %s bid raised to +%s%% (fare %.2f, priority %.1f)",
        ride.id, percentage, ride.estimated_price, ride.priority_score,
    )
    return ride


def bid_options(ride: RideRequest) -> List[dict]:
    """
    The "+10% / +20% / +30% / +50%" buttons with the fare each would produce.
    """
    base_fare = ride.base_fare if ride.base_fare is not None else ride.estimated_price
    if base_fare is None:
        return []

    options = []
    for percentage in BID_INCREMENTS:
        bid_amount = base_fare * (percentage / 100)
        options.append({
            "percentage": percentage,
            "label": f"+{percentage}%",
            "bid_amount": round_half_up(bid_amount),
            "new_fare": round_half_up(base_fare + bid_amount),
            "is_selected": ride.bid_percentage == percentage,
            "description": bid_description(percentage),
        })
    return options


def rank_ride_requests(rides: Sequence[RideRequest]) -> List[RideRequest]:
    """
    Driver feed order: highest priority first; among equal scores the ride
    that has been waiting longest (earliest bid, else earliest creation) wins.
    """
    return sorted(
        rides,
        key=lambda ride: (
            -calculate_priority_score(ride),
            ride.last_bid_at or ride.created_at,
        ),
    )
