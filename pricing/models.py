"""
Purpose: Domain models for the Pricing capability.
What it does:
- Defines core data structures:
- FareRate (base, per_km) for the built-in rate table
- FareSetting (admin configured rate row per vehicle type)
- SurgePricing (time boxed multiplier)
- FareBreakdown / FareQuote (estimation output)

Defines enums/constants:
- VehicleType = BIKE | RICKSHAW | CAR | AC_CAR | CAR_ECONOMY | CAR_PREMIUM | VAN

Rule: No fare math here. Models only.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class VehicleType(str, Enum):
    BIKE = "bike"
    RICKSHAW = "rickshaw"
    CAR = "car"
    AC_CAR = "ac_car"
    CAR_ECONOMY = "car_economy"
    CAR_PREMIUM = "car_premium"
    VAN = "van"


@dataclass(frozen=True)
class FareRate:
    base: float
    per_km: float


@dataclass
class FareSetting:
    """
    Admin configured fare row. When an active one exists for a vehicle type it
    replaces the built-in rate table during estimation.
    """

    vehicle_type: str
    base_fare: float
    per_km_rate: float
    per_minute_rate: float = 0.0
    booking_fee: float = 0.0
    cancellation_fee: float = 50.0
    minimum_fare: float = 80.0
    is_active: bool = True


@dataclass
class SurgePricing:
    multiplier: float
    reason: Optional[str] = None
    is_active: bool = True
    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None

    def is_current(self, now: datetime) -> bool:
        if not self.is_active:
            return False
        if self.starts_at is not None and self.starts_at > now:
            return False
        if self.ends_at is not None and self.ends_at < now:
            return False
        return True


@dataclass(frozen=True)
class FareBreakdown:
    base_fare: float
    distance_charge: float
    time_charge: float
    booking_fee: float
    zone_multiplier: float = 1.0
    zone_amount: float = 0.0
    surge_multiplier: float = 1.0
    surge_amount: float = 0.0
    surge_reason: Optional[str] = None
    cancellation_fee: float = 50.0


@dataclass(frozen=True)
class FareQuote:
    """
    Output of fare estimation, shaped like the estimate endpoint payload.
    """

    distance_km: float
    duration_minutes: int
    total_fare: float
    vehicle_type: str
    breakdown: FareBreakdown = field(default_factory=lambda: FareBreakdown(0, 0, 0, 0))

    def as_dict(self) -> dict:
        return asdict(self)
