from datetime import datetime, timedelta

import pytest

from bidding.models import RideStatus
from drivers.models import Driver
from scheduling.models import ScheduledRide, ScheduledRideStatus
from scheduling.processor import ScheduledRideProcessor
from scheduling.rules import (
    ScheduledRideStateException,
    ScheduleValidationError,
    cancel_scheduled_ride,
    formatted_schedule,
    is_ready_to_book,
    is_upcoming,
    needs_10min_reminder,
    needs_30min_reminder,
    reschedule_ride,
    schedule_ride,
    split_upcoming_and_past,
)

PICKUP = (31.5204, 74.3587)
DROPOFF = (31.5497, 74.3436)


class RecordingNotifier:
    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail

    def send_to_user(self, user_id, title, body, data=None):
        if self.fail:
            raise RuntimeError("push gateway down")
        self.sent.append((user_id, title, data or {}))


@pytest.fixture
def now():
    # a Thursday
    return datetime(2026, 3, 5, 12, 0)


def ride_at(scheduled_at, **kwargs):
    return ScheduledRide(
        id=kwargs.pop("id", "sr-1"),
        user_id="rider-1",
        pickup=PICKUP,
        dropoff=DROPOFF,
        scheduled_at=scheduled_at,
        drop_address="Liberty Market",
        **kwargs,
    )


@pytest.fixture
def nearby_driver():
    return Driver.new("drv-1", "car", PICKUP[0] + 0.01, PICKUP[1], user_id="user-drv-1", name="Asif")


# --- booking rules ---

def test_schedule_ride(now):
    ride = schedule_ride("rider-1", PICKUP, PICKUP, now + timedelta(hours=2), now=now)

    assert ride.status == ScheduledRideStatus.PENDING
    assert ride.distance_km == 0
    assert ride.estimated_fare == 100
    assert is_upcoming(ride, now)


@pytest.mark.parametrize("ahead", [timedelta(minutes=20), timedelta(days=8)])
def test_schedule_time_limits(now, ahead):
    with pytest.raises(ScheduleValidationError):
        schedule_ride("rider-1", PICKUP, DROPOFF, now + ahead, now=now)


def test_reschedule_rearms_reminders(now):
    ride = schedule_ride("rider-1", PICKUP, PICKUP, now + timedelta(hours=2), now=now)
    ride.reminder_30min_sent = True
    ride.reminder_10min_sent = True

    reschedule_ride(ride, now + timedelta(hours=5), vehicle_type="bike", now=now)

    assert ride.scheduled_at == now + timedelta(hours=5)
    assert not ride.reminder_30min_sent
    assert not ride.reminder_10min_sent
    assert ride.vehicle_type == "bike"
    assert ride.estimated_fare == 30


def test_only_pending_rides_can_change(now):
    ride = ride_at(now + timedelta(hours=2), status=ScheduledRideStatus.BOOKED)

    with pytest.raises(ScheduledRideStateException):
        reschedule_ride(ride, now + timedelta(hours=3), now=now)
    with pytest.raises(ScheduledRideStateException):
        cancel_scheduled_ride(ride)


def test_cancel(now):
    ride = ride_at(now + timedelta(hours=2))
    cancel_scheduled_ride(ride)

    assert ride.status == ScheduledRideStatus.CANCELLED
    assert not is_upcoming(ride, now)


# --- windows ---

@pytest.mark.parametrize(
    "offset_minutes, ready",
    [(3, True), (5, True), (-9, True), (-10, True), (-11, False), (6, False)],
)
def test_ready_to_book_window(now, offset_minutes, ready):
    ride = ride_at(now + timedelta(minutes=offset_minutes))
    assert is_ready_to_book(ride, now) is ready


def test_reminder_windows(now):
    half_hour = ride_at(now + timedelta(minutes=30))
    ten = ride_at(now + timedelta(minutes=10))

    assert needs_30min_reminder(half_hour, now)
    assert not needs_10min_reminder(half_hour, now)
    assert needs_10min_reminder(ten, now)
    assert not needs_30min_reminder(ten, now)

    half_hour.reminder_30min_sent = True
    assert not needs_30min_reminder(half_hour, now)


def test_formatted_schedule(now):
    assert formatted_schedule(ride_at(datetime(2026, 3, 5, 15, 30)), now) == "Today at 03:30 PM"
    assert formatted_schedule(ride_at(datetime(2026, 3, 6, 8, 0)), now) == "Tomorrow at 08:00 AM"
    assert formatted_schedule(ride_at(datetime(2026, 3, 7, 9, 5)), now) == "Sat, Mar 7 at 09:05 AM"


def test_split_upcoming_and_past(now):
    pending = ride_at(now + timedelta(hours=1), id="a")
    booked = ride_at(now + timedelta(hours=1), id="b", status=ScheduledRideStatus.BOOKED)
    failed = ride_at(now - timedelta(hours=1), id="c", status=ScheduledRideStatus.FAILED)

    upcoming, past = split_upcoming_and_past([pending, booked, failed])

    assert upcoming == [pending]
    assert past == [booked, failed]


# --- processor ---

def test_due_ride_is_booked_with_nearest_driver(now, nearby_driver):
    notifier = RecordingNotifier()
    far_driver = Driver.new("drv-2", "car", PICKUP[0] + 0.03, PICKUP[1])
    bike = Driver.new("drv-3", "bike", PICKUP[0], PICKUP[1])
    ride = ride_at(now + timedelta(minutes=3), estimated_fare=180, notes="Gate 2")

    report = ScheduledRideProcessor(notifier=notifier).run_cycle([ride], [far_driver, bike, nearby_driver], now)

    assert ride.status == ScheduledRideStatus.BOOKED
    assert ride.booking_notification_sent
    assert len(report.booked) == 1

    _, ride_request = report.booked[0]
    assert ride.ride_request_id == ride_request.id
    assert ride_request.status == RideStatus.DRIVER_ASSIGNED
    assert ride_request.driver_id == "user-drv-1"
    assert ride_request.estimated_price == 180
    assert ride_request.notes == "Gate 2 [Scheduled Ride]"

    recipients = [user_id for user_id, _, _ in notifier.sent]
    assert recipients == ["rider-1", "user-drv-1"]


def test_no_driver_retries_then_fails(now):
    notifier = RecordingNotifier()
    processor = ScheduledRideProcessor(notifier=notifier)
    ride = ride_at(now + timedelta(minutes=2))

    first = processor.run_cycle([ride], [], now)
    assert first.retried == [ride.id]
    assert ride.status == ScheduledRideStatus.PENDING
    assert ride.retry_count == 1

    processor.run_cycle([ride], [], now + timedelta(minutes=1))
    third = processor.run_cycle([ride], [], now + timedelta(minutes=2))

    assert third.failed == [ride.id]
    assert ride.status == ScheduledRideStatus.FAILED
    assert ride.failure_reason == "No drivers available after 3 attempts"
    assert notifier.sent[-1][2]["type"] == "scheduled_ride_failed"

    # failed rides are left alone
    assert processor.run_cycle([ride], [], now + timedelta(minutes=3)).failed == []


def test_reminders_are_sent_once(now):
    notifier = RecordingNotifier()
    processor = ScheduledRideProcessor(notifier=notifier)
    ride = ride_at(now + timedelta(minutes=30))

    report = processor.run_cycle([ride], [], now)
    again = processor.run_cycle([ride], [], now + timedelta(minutes=1))

    assert report.reminders_30min == [ride.id]
    assert again.reminders_30min == []
    assert ride.reminder_30min_sent
    assert notifier.sent[0][2]["minutes"] == 30


def test_failed_booking_is_rolled_back(now, nearby_driver):
    ride = ride_at(now + timedelta(minutes=3))

    report = ScheduledRideProcessor(notifier=RecordingNotifier(fail=True)).run_cycle([ride], [nearby_driver], now)

    assert report.errors == [ride.id]
    assert report.booked == []
    assert ride.status == ScheduledRideStatus.PENDING
    assert ride.ride_request_id is None
    assert ride.retry_count == 0
