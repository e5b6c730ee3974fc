"""
Purpose: Time rules for scheduled rides.
What it does:

- booking validation: at least 30 minutes and at most 7 days ahead
- fare estimate at booking time (vehicle rate table, rounded up to 10)
- the windows the processor works on:
    ready to book    : now - 10 min <= scheduled_at <= now + 5 min
    30 min reminder  : now + 25 min <= scheduled_at <= now + 35 min
    10 min reminder  : now + 8 min  <= scheduled_at <= now + 12 min
- display text ("Today at 03:30 PM")

Rule: Rules answer questions about a ride; the processor decides what to do.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Tuple
import uuid

from pricing.fare import calculate_fare
from pricing.policy import PricingPolicy
from routing.distance import LatLon, distance_between

from .models import ScheduledRide, ScheduledRideStatus

MIN_LEAD_TIME = timedelta(minutes=30)
MAX_LEAD_TIME = timedelta(days=7)

BOOK_AHEAD = timedelta(minutes=5)
BOOK_GRACE = timedelta(minutes=10) #rides this late are still tried

REMINDER_30_WINDOW = (timedelta(minutes=25), timedelta(minutes=35))
REMINDER_10_WINDOW = (timedelta(minutes=8), timedelta(minutes=12))

ACTIVE_STATUSES = (ScheduledRideStatus.PENDING, ScheduledRideStatus.PROCESSING)


class ScheduleValidationError(Exception):
    """Raised when a scheduled time is outside the bookable range."""
    pass


class ScheduledRideStateException(Exception):
    """Raised when an invalid scheduled ride transition is attempted."""
    pass


def validate_schedule_time(scheduled_at: datetime, now: Optional[datetime] = None) -> None:
    now = now or datetime.now()

    if scheduled_at < now + MIN_LEAD_TIME:
        raise ScheduleValidationError("Scheduled time must be at least 30 minutes from now")

    if scheduled_at > now + MAX_LEAD_TIME:
        raise ScheduleValidationError("Rides can only be scheduled up to 7 days in advance")


def estimate_scheduled_fare(ride: ScheduledRide, policy: Optional[PricingPolicy] = None) -> float:
    distance = ride.distance_km if ride.distance_km is not None else distance_between(ride.pickup, ride.dropoff)
    return calculate_fare(ride.vehicle_type, distance, policy)


def schedule_ride(
    user_id: str,
    pickup: LatLon,
    dropoff: LatLon,
    scheduled_at: datetime,
    *,
    vehicle_type: str = "car",
    payment_method: str = "cash",
    pickup_address: Optional[str] = None,
    drop_address: Optional[str] = None,
    notes: Optional[str] = None,
    now: Optional[datetime] = None,
    policy: Optional[PricingPolicy] = None,
) -> ScheduledRide:
    validate_schedule_time(scheduled_at, now)

    ride = ScheduledRide(
        id=str(uuid.uuid4()),
        user_id=user_id,
        pickup=pickup,
        dropoff=dropoff,
        scheduled_at=scheduled_at,
        vehicle_type=vehicle_type,
        pickup_address=pickup_address,
        drop_address=drop_address,
        payment_method=payment_method,
        notes=notes,
        distance_km=round(distance_between(pickup, dropoff), 2),
    )
    ride.estimated_fare = estimate_scheduled_fare(ride, policy)
    return ride


def reschedule_ride(
    ride: ScheduledRide,
    scheduled_at: datetime,
    *,
    vehicle_type: Optional[str] = None,
    now: Optional[datetime] = None,
    policy: Optional[PricingPolicy] = None,
) -> ScheduledRide:
    """
    Move a pending ride. Reminders are re-armed for the new time.
    """
    if ride.status != ScheduledRideStatus.PENDING:
        raise ScheduledRideStateException(f"Only pending rides can be changed, ride {ride.id} is {ride.status}")

    validate_schedule_time(scheduled_at, now)

    ride.scheduled_at = scheduled_at
    ride.reminder_30min_sent = False
    ride.reminder_10min_sent = False

    if vehicle_type and vehicle_type != ride.vehicle_type:
        ride.vehicle_type = vehicle_type
        ride.estimated_fare = estimate_scheduled_fare(ride, policy)

    return ride


def cancel_scheduled_ride(ride: ScheduledRide) -> ScheduledRide:
    if ride.status not in ACTIVE_STATUSES:
        raise ScheduledRideStateException(f"Cannot cancel scheduled ride {ride.id} in status {ride.status}")

    ride.status = ScheduledRideStatus.CANCELLED
    return ride


def is_upcoming(ride: ScheduledRide, now: Optional[datetime] = None) -> bool:
    now = now or datetime.now()
    return ride.status == ScheduledRideStatus.PENDING and ride.scheduled_at > now


def is_ready_to_book(ride: ScheduledRide, now: Optional[datetime] = None) -> bool:
    now = now or datetime.now()
    return (
        ride.status == ScheduledRideStatus.PENDING
        and now - BOOK_GRACE <= ride.scheduled_at <= now + BOOK_AHEAD
    )


def _in_window(ride: ScheduledRide, now: datetime, window: Tuple[timedelta, timedelta]) -> bool:
    start, end = window
    return now + start <= ride.scheduled_at <= now + end


def needs_30min_reminder(ride: ScheduledRide, now: Optional[datetime] = None) -> bool:
    now = now or datetime.now()
    return (
        ride.status == ScheduledRideStatus.PENDING
        and not ride.reminder_30min_sent
        and _in_window(ride, now, REMINDER_30_WINDOW)
    )


def needs_10min_reminder(ride: ScheduledRide, now: Optional[datetime] = None) -> bool:
    now = now or datetime.now()
    return (
        ride.status == ScheduledRideStatus.PENDING
        and not ride.reminder_10min_sent
        and _in_window(ride, now, REMINDER_10_WINDOW)
    )


def formatted_schedule(ride: ScheduledRide, now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    at = ride.scheduled_at
    time_text = at.strftime("%I:%M %p")

    if at.date() == now.date():
        return f"Today at {time_text}"
    if at.date() == (now + timedelta(days=1)).date():
        return f"Tomorrow at {time_text}"

    return f"{at:%a}, {at:%b} {at.day} at {time_text}"


def split_upcoming_and_past(rides: Sequence[ScheduledRide]) -> Tuple[List[ScheduledRide], List[ScheduledRide]]:
    upcoming = [ride for ride in rides if ride.status in ACTIVE_STATUSES]
    past = [ride for ride in rides if ride.status not in ACTIVE_STATUSES]
    return upcoming, past
