"""
Purpose: Platform commission on completed rides.
What it does:

Resolves which CommissionSetting row applies to a ride:

- only active rows
- city specific rows beat city-less (global) rows
- vehicle specific rows beat vehicle_type == "all" rows

Applies the row:

- volume discount: once a driver has min_rides_for_discount rides, discounted_value replaces value
- percentage rows take value% of the fare, fixed rows take value as-is
- no row at all: 10% of the fare

Splits the fare into commission + driver earning.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

import pandas as pd

from .fare import round_half_up
from .policy import PricingPolicy, default_pricing_policy

ALL_VEHICLES = "all"


class CommissionType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


@dataclass
class CommissionSetting:
    name: str
    type: str
    value: float
    city: Optional[str] = None
    vehicle_type: str = ALL_VEHICLES
    min_rides_for_discount: Optional[float] = None
    discounted_value: Optional[float] = None
    is_active: bool = True

    def applies_to(self, city: Optional[str], vehicle_type: str) -> bool:
        if not self.is_active:
            return False
        if self.city is not None and self.city != city:
            return False
        if self.vehicle_type != ALL_VEHICLES and self.vehicle_type != vehicle_type:
            return False
        return True

    def rate_for(self, driver_ride_count: int) -> float:
        rate = self.value
        if self.min_rides_for_discount and driver_ride_count >= self.min_rides_for_discount:
            if self.discounted_value is not None:
                rate = self.discounted_value
        return float(rate)


@dataclass(frozen=True)
class Settlement:
    fare: float
    commission: float
    driver_earning: float


def resolve_commission_setting(
    settings: Sequence[CommissionSetting],
    city: Optional[str],
    vehicle_type: str,
) -> Optional[CommissionSetting]:
    """
    Most specific matching row, or None.
    Ties keep the input order (sorted() is stable).
    """
    matching = [setting for setting in settings if setting.applies_to(city, vehicle_type)]
    if not matching:
        return None

    matching = sorted(
        matching,
        key=lambda setting: (setting.city is None, setting.vehicle_type == ALL_VEHICLES),
    )
    return matching[0]


def calculate_commission(
    fare_amount: float,
    city: Optional[str],
    vehicle_type: str,
    settings: Sequence[CommissionSetting],
    driver_ride_count: int = 0,
    policy: Optional[PricingPolicy] = None,
) -> float:
    setting = resolve_commission_setting(settings, city, vehicle_type)

    if setting is None:
        policy = policy or default_pricing_policy()
        return fare_amount * policy.default_commission_rate

    rate = setting.rate_for(driver_ride_count)

    if setting.type == CommissionType.PERCENTAGE or setting.type == CommissionType.PERCENTAGE.value:
        return fare_amount * (rate / 100)

    return rate # fixed amount


def settle_earnings(
    fare_amount: float,
    city: Optional[str],
    vehicle_type: str,
    settings: Sequence[CommissionSetting],
    driver_ride_count: int = 0,
    policy: Optional[PricingPolicy] = None,
) -> Settlement:
    """
    Split a fare into commission and driver earning, both half-up to 2 dp.
    The earning is derived from the rounded commission so the parts add up to the fare.
    """
    commission = calculate_commission(
        fare_amount, city, vehicle_type, settings, driver_ride_count, policy
    )
    fare = round_half_up(fare_amount, 2)
    commission = round_half_up(commission, 2)
    return Settlement(
        fare=fare,
        commission=commission,
        driver_earning=round_half_up(fare - commission, 2),
    )


def _none_if_blank(value):
    if value is None or pd.isna(value):
        return None
    if isinstance(value, str) and value.strip() == "":
        return None
    return value


def _as_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "y")
    return bool(value)


def load_commission_settings(path) -> List[CommissionSetting]:
    """
    Load commission rows from a CSV export.

    Expected columns: name, type, value, city, vehicle_type,
    min_rides_for_discount, discounted_value, is_active.
    Blank city / discount cells mean "not set".
    """
    df = pd.read_csv(path)

    settings: List[CommissionSetting] = []
    for _, row in df.iterrows():
        min_rides = _none_if_blank(row.get("min_rides_for_discount"))
        discounted = _none_if_blank(row.get("discounted_value"))
        city = _none_if_blank(row.get("city"))
        vehicle_type = _none_if_blank(row.get("vehicle_type")) or ALL_VEHICLES
        is_active = _none_if_blank(row.get("is_active"))

        settings.append(
            CommissionSetting(
                name=str(row["name"]),
                type=str(row["type"]),
                value=float(row["value"]),
                city=str(city) if city is not None else None,
                vehicle_type=str(vehicle_type),
                min_rides_for_discount=float(min_rides) if min_rides is not None else None,
                discounted_value=float(discounted) if discounted is not None else None,
                is_active=True if is_active is None else _as_bool(is_active),
            )
        )
    return settings
