from datetime import datetime
from typing import Optional, Sequence
import logging

from pricing.commission import CommissionSetting, settle_earnings
from pricing.fare import calculate_intercity_fare, round_half_up
from pricing.policy import PricingPolicy
from bidding.models import (
    LatLon,
    NegotiationStatus,
    RideRequest,
    RideStatus,
    ServiceType,
    new_id,
)

logger = logging.getLogger(__name__)

MIN_OFFERED_PRICE = 50
MAX_CITY_SEATS = 4
MAX_INTERCITY_SEATS = 6

TERMINAL_STATUSES = (RideStatus.COMPLETED, RideStatus.CANCELLED)


class RideStateException(Exception):
    """Raised when an invalid ride transition is attempted."""
    pass


def create_ride_request(
    rider_id: str,
    pickup: LatLon,
    dropoff: LatLon,
    offered_price: float,
    *,
    seats: int = 1,
    vehicle_type: str = "car",
    city: Optional[str] = None,
    pickup_address: Optional[str] = None,
    drop_address: Optional[str] = None,
    scheduled_at: Optional[datetime] = None,
    is_bidding_enabled: bool = False,
    notes: Optional[str] = None,
) -> RideRequest:
    """
    A rider posts a trip with the price they are willing to pay.
    That price becomes both the base fare and the current estimate.
    """
    if offered_price < MIN_OFFERED_PRICE:
        raise ValueError(f"offered price must be at least {MIN_OFFERED_PRICE}")

    if not 1 <= seats <= MAX_CITY_SEATS:
        raise ValueError(f"seats must be between 1 and {MAX_CITY_SEATS}")

    return RideRequest(
        id=new_id(),
        rider_id=rider_id,
        pickup=pickup,
        dropoff=dropoff,
        pickup_address=pickup_address,
        drop_address=drop_address,
        seats=seats,
        vehicle_type=vehicle_type,
        city=city,
        base_fare=float(offered_price),
        estimated_price=float(offered_price),
        scheduled_at=scheduled_at,
        is_bidding_enabled=is_bidding_enabled,
        negotiation_status=NegotiationStatus.OPEN if is_bidding_enabled else NegotiationStatus.NONE,
        notes=notes,
    )


def create_intercity_request(
    rider_id: str,
    pickup: LatLon,
    dropoff: LatLon,
    departure_at: datetime,
    *,
    seats: int = 1,
    estimated_fare: Optional[float] = None,
    city: Optional[str] = None,
    pickup_address: Optional[str] = None,
    drop_address: Optional[str] = None,
    policy: Optional[PricingPolicy] = None,
) -> RideRequest:
    """
    Intercity trips are always negotiable. Without a rider price the
    intercity formula (200 base, 15 per km) is used.
    """
    if not 1 <= seats <= MAX_INTERCITY_SEATS:
        raise ValueError(f"seats must be between 1 and {MAX_INTERCITY_SEATS}")

    if estimated_fare is not None and estimated_fare < 1:
        raise ValueError("estimated fare must be at least 1")

    fare = estimated_fare if estimated_fare is not None else calculate_intercity_fare(pickup, dropoff, policy)

    return RideRequest(
        id=new_id(),
        rider_id=rider_id,
        pickup=pickup,
        dropoff=dropoff,
        pickup_address=pickup_address,
        drop_address=drop_address,
        seats=seats,
        city=city,
        service_type=ServiceType.INTERCITY,
        is_intercity=True,
        base_fare=float(fare),
        estimated_price=float(fare),
        scheduled_at=departure_at,
        is_bidding_enabled=True,
        negotiation_status=NegotiationStatus.OPEN,
    )


def assign_driver(ride: RideRequest, driver_id: str, now: Optional[datetime] = None) -> RideRequest:
    """
    Called when matching (or the scheduled ride processor) picks a driver
    for a ride that is still looking for one.
    """
    if ride.status not in (RideStatus.PENDING, RideStatus.SEARCHING):
        raise RideStateException(f"Cannot assign a driver to ride {ride.id} in status {ride.status}")

    ride.driver_id = driver_id
    ride.status = RideStatus.DRIVER_ASSIGNED
    ride.accepted_at = now or datetime.now()
    return ride


def start_ride(ride: RideRequest, now: Optional[datetime] = None) -> RideRequest:
    if ride.status not in (RideStatus.ACCEPTED, RideStatus.DRIVER_ASSIGNED):
        raise RideStateException(f"Ride {ride.id} cannot start from {ride.status}")

    if not ride.driver_id:
        raise RideStateException(f"Ride {ride.id} has no driver")

    ride.status = RideStatus.STARTED
    ride.started_at = now or datetime.now()
    return ride


def complete_ride(
    ride: RideRequest,
    commission_settings: Sequence[CommissionSetting] = (),
    *,
    driver_ride_count: int = 0,
    actual_price: Optional[float] = None,
    tip_amount: float = 0.0,
    now: Optional[datetime] = None,
    policy: Optional[PricingPolicy] = None,
) -> RideRequest:
    """
    Close the trip and split the fare.
    The charged fare is the metered actual price if given, else the agreed final
    fare, else the current estimate. Tips go to the driver untouched.
    """
    if ride.status != RideStatus.STARTED:
        raise RideStateException(f"Ride {ride.id} is not STARTED. Current: {ride.status}")

    fare = actual_price if actual_price is not None else ride.current_fare
    if fare is None:
        raise RideStateException(f"Ride {ride.id} has no fare to settle")

    settlement = settle_earnings(
        fare, ride.city, ride.vehicle_type, commission_settings, driver_ride_count, policy
    )

    ride.actual_price = settlement.fare
    ride.final_fare = settlement.fare
    ride.commission_amount = settlement.commission
    ride.tip_amount = tip_amount
    ride.driver_earning = round_half_up(settlement.driver_earning + tip_amount, 2)
    ride.status = RideStatus.COMPLETED
    ride.completed_at = now or datetime.now()

    logger.info(
        "Ride %s completed: fare %.2f, commission %.2f, driver earning %.2f",
        ride.id, settlement.fare, settlement.commission, ride.driver_earning,
    )
    return ride


def cancel_ride(
    ride: RideRequest,
    *,
    reason: Optional[str] = None,
    cancelled_by: Optional[str] = None,
    now: Optional[datetime] = None,
) -> RideRequest:
    if ride.status in TERMINAL_STATUSES:
        raise RideStateException(f"Cannot cancel ride {ride.id} in status {ride.status}")

    ride.status = RideStatus.CANCELLED
    ride.cancelled_at = now or datetime.now()
    ride.cancellation_reason = reason
    ride.cancelled_by = cancelled_by

    if ride.negotiation_status == NegotiationStatus.OPEN:
        ride.negotiation_status = NegotiationStatus.LOCKED

    logger.info("Ride %s cancelled by %s: %s", ride.id, cancelled_by, reason)
    return ride
