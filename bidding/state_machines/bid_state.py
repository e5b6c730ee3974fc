from datetime import datetime, timedelta
from typing import List, Optional, Sequence
import logging

from bidding.models import (
    BidStatus,
    NegotiationStatus,
    RideBid,
    RideRequest,
    RideStatus,
    new_id,
)

logger = logging.getLogger(__name__)

MIN_DRIVER_BID = 50
MIN_COUNTER_AMOUNT = 1
MIN_ETA_MINUTES = 1
MAX_ETA_MINUTES = 120
MAX_NOTE_LENGTH = 500
BID_TTL = timedelta(minutes=15)

#bids the rider can still act on
OPEN_BID_STATUSES = (BidStatus.PENDING, BidStatus.COUNTERED)


class BidStateException(Exception):
    """Raised when an invalid bid transition is attempted."""
    pass


class UnauthorizedBidAction(BidStateException):
    """Raised when someone acts on a bid or ride they do not own."""
    pass


def _check_text(text: Optional[str], label: str) -> None:
    if text is not None and len(text) > MAX_NOTE_LENGTH:
        raise BidStateException(f"{label} must be at most {MAX_NOTE_LENGTH} characters")


def _require_same_ride(ride: RideRequest, bid: RideBid) -> None:
    if bid.ride_request_id != ride.id:
        raise BidStateException(f"Bid {bid.id} does not belong to ride {ride.id}")


def _reject_others(bid: RideBid, all_bids: Sequence[RideBid]) -> List[RideBid]:
    rejected = []
    for other in all_bids:
        if other.id == bid.id or other.ride_request_id != bid.ride_request_id:
            continue
        if other.status in OPEN_BID_STATUSES:
            other.status = BidStatus.REJECTED
            rejected.append(other)
    return rejected


def place_bid(
    ride: RideRequest,
    existing_bids: Sequence[RideBid],
    driver_id: str,
    bid_amount: float,
    eta_minutes: int,
    note: Optional[str] = None,
    now: Optional[datetime] = None,
) -> RideBid:
    """
    A driver offers their own price on a negotiable ride.
    A driver holds at most one pending bid per ride and every bid lapses after 15 minutes.
    """
    if not ride.is_bidding_enabled or ride.status != RideStatus.PENDING:
        raise BidStateException(f"Ride {ride.id} is not open for bids")

    for existing in existing_bids:
        if (
            existing.ride_request_id == ride.id
            and existing.driver_id == driver_id
            and existing.status == BidStatus.PENDING
        ):
            raise BidStateException("You already have a pending bid on this ride")

    if bid_amount < MIN_DRIVER_BID:
        raise BidStateException(f"Bid must be at least Rs. {MIN_DRIVER_BID}")

    if not MIN_ETA_MINUTES <= eta_minutes <= MAX_ETA_MINUTES:
        raise BidStateException(f"ETA must be between {MIN_ETA_MINUTES} and {MAX_ETA_MINUTES} minutes")

    _check_text(note, "note")

    now = now or datetime.now()
    bid = RideBid(
        id=new_id(),
        ride_request_id=ride.id,
        driver_id=driver_id,
        bid_amount=float(bid_amount),
        eta_minutes=eta_minutes,
        note=note,
        status=BidStatus.PENDING,
        expires_at=now + BID_TTL,
        created_at=now,
    )

    if ride.negotiation_status == NegotiationStatus.NONE:
        ride.negotiation_status = NegotiationStatus.OPEN

    logger.info("Driver %s bid %.2f on ride %s", driver_id, bid.bid_amount, ride.id)
    return bid


def bids_for_ride(bids: Sequence[RideBid], ride_id: str, now: Optional[datetime] = None) -> List[RideBid]:
    """
    What the rider sees: pending, unexpired bids, cheapest first.
    """
    now = now or datetime.now()
    live = [
        bid for bid in bids
        if bid.ride_request_id == ride_id
        and bid.status == BidStatus.PENDING
        and not bid.is_expired(now)
    ]
    return sorted(live, key=lambda bid: bid.bid_amount)


def expire_stale_bids(bids: Sequence[RideBid], now: Optional[datetime] = None) -> List[RideBid]:
    """
    Flip every open bid past its expiry to EXPIRED. Returns the bids that changed.
    """
    now = now or datetime.now()
    expired = []
    for bid in bids:
        if bid.status in OPEN_BID_STATUSES and bid.is_expired(now):
            bid.status = BidStatus.EXPIRED
            expired.append(bid)
    return expired


def accept_bid(
    ride: RideRequest,
    bid: RideBid,
    all_bids: Sequence[RideBid],
    rider_id: str,
    now: Optional[datetime] = None,
) -> RideBid:
    """
    The rider takes a driver's price. Every other open bid on the ride is rejected
    and the ride is locked to that driver at that fare.
    """
    _require_same_ride(ride, bid)

    if ride.rider_id != rider_id:
        raise UnauthorizedBidAction("Unauthorized")

    now = now or datetime.now()
    if bid.status != BidStatus.PENDING or bid.is_expired(now):
        raise BidStateException(f"Bid {bid.id} is not PENDING. Current: {bid.status}")

    if ride.status != RideStatus.PENDING:
        raise BidStateException(f"Ride {ride.id} is no longer accepting bids")

    bid.status = BidStatus.ACCEPTED
    _reject_others(bid, all_bids)

    ride.driver_id = bid.driver_id
    ride.status = RideStatus.ACCEPTED
    ride.final_fare = bid.bid_amount
    ride.negotiation_status = NegotiationStatus.COMPLETED
    ride.accepted_at = now

    logger.info("Ride %s accepted bid %s from driver %s at %.2f", ride.id, bid.id, bid.driver_id, bid.bid_amount)
    return bid


def reject_bid(ride: RideRequest, bid: RideBid, rider_id: str) -> RideBid:
    _require_same_ride(ride, bid)

    if ride.rider_id != rider_id:
        raise UnauthorizedBidAction("Unauthorized")

    if bid.status != BidStatus.PENDING:
        raise BidStateException(f"Bid {bid.id} is not PENDING. Current: {bid.status}")

    bid.status = BidStatus.REJECTED
    return bid


def withdraw_bid(bid: RideBid, driver_id: str) -> RideBid:
    if bid.driver_id != driver_id:
        raise UnauthorizedBidAction("Unauthorized")

    if bid.status != BidStatus.PENDING:
        raise BidStateException(f"Bid {bid.id} is not PENDING. Current: {bid.status}")

    bid.status = BidStatus.WITHDRAWN
    return bid


def counter_offer(
    ride: RideRequest,
    bid: RideBid,
    rider_id: str,
    counter_amount: float,
    message: Optional[str] = None,
) -> RideBid:
    """
    The rider answers a driver's bid with their own price.
    """
    _require_same_ride(ride, bid)

    if ride.rider_id != rider_id:
        raise UnauthorizedBidAction("Unauthorized")

    if bid.status != BidStatus.PENDING:
        raise BidStateException(f"Bid {bid.id} is not PENDING. Current: {bid.status}")

    if counter_amount < MIN_COUNTER_AMOUNT:
        raise BidStateException(f"Counter offer must be at least {MIN_COUNTER_AMOUNT}")

    _check_text(message, "message")

    bid.status = BidStatus.COUNTERED
    bid.counter_amount = float(counter_amount)
    bid.counter_message = message

    logger.info("Rider %s countered bid %s with %.2f", rider_id, bid.id, bid.counter_amount)
    return bid


def accept_counter(
    ride: RideRequest,
    bid: RideBid,
    all_bids: Sequence[RideBid],
    driver_id: str,
    now: Optional[datetime] = None,
) -> RideBid:
    """
    The driver agrees to the rider's counter price. Same outcome as accept_bid,
    but at the counter amount.
    """
    _require_same_ride(ride, bid)

    if bid.driver_id != driver_id:
        raise UnauthorizedBidAction("Unauthorized")

    if bid.status != BidStatus.COUNTERED:
        raise BidStateException(f"Bid {bid.id} is not COUNTERED. Current: {bid.status}")

    if ride.status != RideStatus.PENDING:
        raise BidStateException(f"Ride {ride.id} is no longer accepting bids")

    now = now or datetime.now()

    bid.status = BidStatus.ACCEPTED
    bid.bid_amount = bid.counter_amount
    _reject_others(bid, all_bids)

    ride.driver_id = bid.driver_id
    ride.status = RideStatus.ACCEPTED
    ride.final_fare = bid.counter_amount
    ride.negotiation_status = NegotiationStatus.COMPLETED
    ride.accepted_at = now

    logger.info("Driver %s accepted counter on ride %s at %.2f", driver_id, ride.id, bid.counter_amount)
    return bid
