"""
Purpose: Domain models for rides booked ahead of time.
What it does:
- ScheduledRide (who, where, when, vehicle, fare estimate, retry/reminder bookkeeping)
- ScheduledRideStatus = PENDING | PROCESSING | BOOKED | COMPLETED | CANCELLED | FAILED

Rule: No time-window rules, no booking. Models only.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

LatLon = Tuple[float, float]


class ScheduledRideStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    BOOKED = "booked"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass
class ScheduledRide:
    id: str
    user_id: str
    pickup: LatLon
    dropoff: LatLon
    scheduled_at: datetime
    vehicle_type: str = "car"
    pickup_address: Optional[str] = None
    drop_address: Optional[str] = None
    payment_method: str = "cash"

    estimated_fare: Optional[float] = None
    distance_km: Optional[float] = None

    status: ScheduledRideStatus = ScheduledRideStatus.PENDING
    ride_request_id: Optional[str] = None
    notes: Optional[str] = None

    #auto booking bookkeeping
    retry_count: int = 0
    last_retry_at: Optional[datetime] = None
    failure_reason: Optional[str] = None

    reminder_30min_sent: bool = False
    reminder_10min_sent: bool = False
    booking_notification_sent: bool = False

    created_at: datetime = field(default_factory=datetime.now)
