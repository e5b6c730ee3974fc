"""
Purpose: The scheduled ride "heartbeat" (meant to run once a minute from cron / a task queue).
What it does:
Sends the 30 minute and 10 minute reminders, then tries to auto book every ride
whose pickup is due with the nearest matching driver, retrying a few cycles
before giving up.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from typing import List, Optional, Sequence, Tuple
import logging

from bidding.models import RideRequest, RideStatus, new_id
from drivers.models import Driver
from drivers.policy import SearchPolicy, default_search_policy
from drivers.selection import nearest_driver

from .models import ScheduledRide, ScheduledRideStatus
from .rules import is_ready_to_book, needs_10min_reminder, needs_30min_reminder

logger = logging.getLogger(__name__)

SCHEDULED_NOTE = "[Scheduled Ride]"


class LoggingNotifier:
    """
    Default notifier: writes the message to the log instead of a device.
    Any object with send_to_user(user_id, title, body, data) can replace it.
    """
    def send_to_user(self, user_id: str, title: str, body: str, data: Optional[dict] = None) -> None:
        logger.info("notify %s: %s - %s %s", user_id, title, body, data or {})


@dataclass
class CycleReport:
    reminders_30min: List[str] = field(default_factory=list)
    reminders_10min: List[str] = field(default_factory=list)
    booked: List[Tuple[ScheduledRide, RideRequest]] = field(default_factory=list)
    retried: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


def _restore(ride: ScheduledRide, snapshot: ScheduledRide) -> None:
    for ride_field in fields(ride):
        setattr(ride, ride_field.name, getattr(snapshot, ride_field.name))


class ScheduledRideProcessor:
    """
    Reads the scheduled rides, compares them against the time windows
    and turns due ones into real ride requests.
    """
    def __init__(self, notifier=None, max_retries: int = 3, search_policy: Optional[SearchPolicy] = None):
        self.notifier = notifier or LoggingNotifier()
        self.max_retries = max_retries
        self.search_policy = search_policy or default_search_policy()

    def run_cycle(
        self,
        rides: Sequence[ScheduledRide],
        drivers: Sequence[Driver],
        now: Optional[datetime] = None,
    ) -> CycleReport:
        """
        1. 30 minute reminders
        2. 10 minute reminders
        3. auto booking for rides due within the next 5 minutes (or up to 10 minutes late)
        """
        now = now or datetime.now()
        report = CycleReport()

        self._send_reminders(rides, now, report)
        self._process_ready_rides(rides, drivers, now, report)

        return report

    # --- reminders ---

    def _send_reminders(self, rides: Sequence[ScheduledRide], now: datetime, report: CycleReport) -> None:
        for ride in rides:
            if not needs_30min_reminder(ride, now):
                continue
            try:
                self.notifier.send_to_user(
                    ride.user_id,
                    "Upcoming Ride Reminder",
                    f"Your scheduled ride to {ride.drop_address} is in 30 minutes.",
                    {"type": "scheduled_ride_reminder", "scheduled_ride_id": ride.id, "minutes": 30},
                )
            except Exception:
                logger.exception("Failed to send 30-min reminder for ride #%s", ride.id)
                report.errors.append(ride.id)
                continue
            ride.reminder_30min_sent = True
            report.reminders_30min.append(ride.id)

        for ride in rides:
            if not needs_10min_reminder(ride, now):
                continue
            try:
                self.notifier.send_to_user(
                    ride.user_id,
                    "Ride Starting Soon",
                    f"Your scheduled ride to {ride.drop_address} is in 10 minutes. "
                    "We're finding a driver for you.",
                    {"type": "scheduled_ride_reminder", "scheduled_ride_id": ride.id, "minutes": 10},
                )
            except Exception:
                logger.exception("Failed to send 10-min reminder for ride #%s", ride.id)
                report.errors.append(ride.id)
                continue
            ride.reminder_10min_sent = True
            report.reminders_10min.append(ride.id)

    # --- booking ---

    def _process_ready_rides(
        self,
        rides: Sequence[ScheduledRide],
        drivers: Sequence[Driver],
        now: datetime,
        report: CycleReport,
    ) -> None:
        for ride in rides:
            if not is_ready_to_book(ride, now):
                continue

            logger.info("Processing scheduled ride #%s", ride.id)
            snapshot = replace(ride)

            try:
                ride.status = ScheduledRideStatus.PROCESSING

                driver = nearest_driver(
                    ride.pickup,
                    drivers,
                    vehicle_type=ride.vehicle_type,
                    radius_km=self.search_policy.scheduled_booking_radius_km,
                )

                if driver is not None:
                    ride_request = self._book(ride, driver, now)
                    report.booked.append((ride, ride_request))
                else:
                    self._retry_or_fail(ride, now, report)
            except Exception:
                # leave the ride exactly as it was so the next cycle can try again
                _restore(ride, snapshot)
                logger.exception("Failed to process scheduled ride #%s", ride.id)
                report.errors.append(ride.id)

    def _book(self, ride: ScheduledRide, driver: Driver, now: datetime) -> RideRequest:
        ride_request = create_ride_request_from_schedule(ride, driver, now)

        ride.status = ScheduledRideStatus.BOOKED
        ride.ride_request_id = ride_request.id
        ride.booking_notification_sent = True

        self.notifier.send_to_user(
            ride.user_id,
            "Driver Found!",
            f"A driver has been assigned for your scheduled ride. Driver: {driver.name}",
            {
                "type": "scheduled_ride_booked",
                "scheduled_ride_id": ride.id,
                "ride_request_id": ride_request.id,
                "driver_id": driver.id,
            },
        )
        self.notifier.send_to_user(
            driver.user_id,
            "New Ride Request",
            f"You have a new scheduled ride request to {ride.drop_address}",
            {"type": "new_ride_request", "ride_request_id": ride_request.id},
        )

        logger.info("Ride #%s booked with driver #%s", ride.id, driver.id)
        return ride_request

    def _retry_or_fail(self, ride: ScheduledRide, now: datetime, report: CycleReport) -> None:
        ride.retry_count += 1
        ride.last_retry_at = now

        if ride.retry_count >= self.max_retries:
            ride.status = ScheduledRideStatus.FAILED
            ride.failure_reason = f"No drivers available after {self.max_retries} attempts"

            self.notifier.send_to_user(
                ride.user_id,
                "Scheduled Ride Failed",
                "Sorry, we couldn't find a driver for your scheduled ride. Please try booking manually.",
                {"type": "scheduled_ride_failed", "scheduled_ride_id": ride.id},
            )
            logger.warning("Ride #%s failed after %s retries", ride.id, self.max_retries)
            report.failed.append(ride.id)
        else:
            ride.status = ScheduledRideStatus.PENDING # picked up again next cycle
            logger.info("Ride #%s - no driver found, will retry (attempt %s)", ride.id, ride.retry_count)
            report.retried.append(ride.id)


def create_ride_request_from_schedule(ride: ScheduledRide, driver: Driver, now: Optional[datetime] = None) -> RideRequest:
    notes = f"{ride.notes} {SCHEDULED_NOTE}" if ride.notes else SCHEDULED_NOTE

    return RideRequest(
        id=new_id(),
        rider_id=ride.user_id,
        driver_id=driver.user_id,
        pickup=ride.pickup,
        dropoff=ride.dropoff,
        pickup_address=ride.pickup_address,
        drop_address=ride.drop_address,
        seats=1,
        vehicle_type=ride.vehicle_type,
        distance_km=ride.distance_km,
        estimated_price=ride.estimated_fare,
        payment_method=ride.payment_method,
        notes=notes,
        status=RideStatus.DRIVER_ASSIGNED,
        scheduled_at=ride.scheduled_at,
        accepted_at=now,
    )
