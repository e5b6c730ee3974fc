"""
Scheduling domain package.

Public API:
- Domain models: ScheduledRide, ScheduledRideStatus
- Rules: schedule_ride, validate_schedule_time, reminder / booking windows
- Processor: ScheduledRideProcessor (one call per cron tick)
"""
from .models import ScheduledRide, ScheduledRideStatus
from .rules import (
    ScheduleValidationError,
    ScheduledRideStateException,
    validate_schedule_time,
    schedule_ride,
    reschedule_ride,
    cancel_scheduled_ride,
    estimate_scheduled_fare,
    is_upcoming,
    is_ready_to_book,
    needs_30min_reminder,
    needs_10min_reminder,
    formatted_schedule,
    split_upcoming_and_past,
)
from .processor import ScheduledRideProcessor, CycleReport, LoggingNotifier

__all__ = [
    "ScheduledRide",
    "ScheduledRideStatus",
    "ScheduleValidationError",
    "ScheduledRideStateException",
    "validate_schedule_time",
    "schedule_ride",
    "reschedule_ride",
    "cancel_scheduled_ride",
    "estimate_scheduled_fare",
    "is_upcoming",
    "is_ready_to_book",
    "needs_30min_reminder",
    "needs_10min_reminder",
    "formatted_schedule",
    "split_upcoming_and_past",
    "ScheduledRideProcessor",
    "CycleReport",
    "LoggingNotifier",
]
