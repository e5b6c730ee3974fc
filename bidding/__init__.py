#Expose the negotiation pieces:
#Ride request / bid models
#Rider-side fare raising and priority scoring
#Ride and bid state machines

from .models import RideRequest, RideBid, RideStatus, BidStatus, NegotiationStatus, ServiceType
from .scoring import (
    BID_INCREMENTS,
    calculate_priority_score,
    increase_bid,
    bid_options,
    rank_ride_requests,
)
from .state_machines.ride_state import (
    RideStateException,
    create_ride_request,
    create_intercity_request,
    assign_driver,
    start_ride,
    complete_ride,
    cancel_ride,
)
from .state_machines.bid_state import (
    BidStateException,
    UnauthorizedBidAction,
    place_bid,
    bids_for_ride,
    expire_stale_bids,
    accept_bid,
    reject_bid,
    withdraw_bid,
    counter_offer,
    accept_counter,
)

__all__ = [
    "RideRequest",
    "RideBid",
    "RideStatus",
    "BidStatus",
    "NegotiationStatus",
    "ServiceType",
    "BID_INCREMENTS",
    "calculate_priority_score",
    "increase_bid",
    "bid_options",
    "rank_ride_requests",
    "RideStateException",
    "create_ride_request",
    "create_intercity_request",
    "assign_driver",
    "start_ride",
    "complete_ride",
    "cancel_ride",
    "BidStateException",
    "UnauthorizedBidAction",
    "place_bid",
    "bids_for_ride",
    "expire_stale_bids",
    "accept_bid",
    "reject_bid",
    "withdraw_bid",
    "counter_offer",
    "accept_counter",
]
