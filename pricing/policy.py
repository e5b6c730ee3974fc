"""
Purpose: Central configuration for fares and commission (single source of truth).
What it does:

Stores all tunable pricing constants:

RATE_TABLE = bike 30/12, rickshaw 50/18, car 100/25, ac_car 150/35 (base / per km, PKR)

ROUNDING_STEP = 10

MINIMUM_FARE = 80, CANCELLATION_FEE = 50

INTERCITY = 200 base, 15 per km

DEFAULT_COMMISSION_RATE = 10%

Rule: No logic here, just parameters so you can tune without rewriting code.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict
import os

from dotenv import load_dotenv

from .models import FareRate, VehicleType


def _default_rate_table() -> Dict[str, FareRate]:
    return {
        VehicleType.BIKE.value: FareRate(base=30, per_km=12),
        VehicleType.RICKSHAW.value: FareRate(base=50, per_km=18),
        VehicleType.CAR.value: FareRate(base=100, per_km=25),
        VehicleType.AC_CAR.value: FareRate(base=150, per_km=35),
    }


@dataclass(frozen=True)
class PricingPolicy:
    """
    Central configuration for fare estimation and commission.

    Notes:
    - rate_table is looked up by vehicle type; anything missing falls back to
      fallback_vehicle_type ("car").
    - Fares are rounded UP to rounding_step, so 123 becomes 130.
    """

    # --- Per vehicle type rates (PKR) ---
    rate_table: Dict[str, FareRate] = field(default_factory=_default_rate_table)
    fallback_vehicle_type: str = VehicleType.CAR.value

    # --- Rounding / floors ---
    rounding_step: int = 10
    minimum_fare: float = 80
    cancellation_fee: float = 50

    # --- Split of the table fare shown in the breakdown when no FareSetting exists ---
    base_share: float = 0.4
    distance_share: float = 0.5
    time_share: float = 0.1

    # --- Passenger-posted request estimate (unrounded) ---
    simple_base_fare: float = 100
    simple_per_km_rate: float = 30

    # --- Intercity ---
    intercity_base_fare: float = 200
    intercity_per_km_rate: float = 15

    # --- Commission fallback when no CommissionSetting matches ---
    default_commission_rate: float = 0.10

    def rate_for(self, vehicle_type) -> FareRate:
        key = vehicle_type.value if isinstance(vehicle_type, VehicleType) else vehicle_type
        return self.rate_table.get(key) or self.rate_table[self.fallback_vehicle_type]

    def validate(self) -> None:
        """
        Basic sanity checks.
        """
        if self.fallback_vehicle_type not in self.rate_table:
            raise ValueError("fallback_vehicle_type must exist in rate_table")

        for vehicle_type, rate in self.rate_table.items():
            if rate.base < 0 or rate.per_km < 0:
                raise ValueError(f"rates for {vehicle_type} must be >= 0")

        if self.rounding_step <= 0:
            raise ValueError("rounding_step must be > 0")

        if self.minimum_fare < 0 or self.cancellation_fee < 0:
            raise ValueError("minimum_fare and cancellation_fee must be >= 0")

        if abs(self.base_share + self.distance_share + self.time_share - 1.0) > 1e-9:
            raise ValueError("breakdown shares must add up to 1.0")

        if not 0 <= self.default_commission_rate <= 1:
            raise ValueError("default_commission_rate must be between 0 and 1")


def default_pricing_policy() -> PricingPolicy:
    """
    Convenience factory for the default policy.
    """
    p = PricingPolicy()
    p.validate()
    return p


def pricing_policy_from_env() -> PricingPolicy:
    """
    Default policy with overrides from the environment / .env file.

    SHAREIDE_ROUNDING_STEP=10
    SHAREIDE_MINIMUM_FARE=80
    SHAREIDE_CANCELLATION_FEE=50
    SHAREIDE_DEFAULT_COMMISSION_RATE=0.10
    SHAREIDE_INTERCITY_BASE_FARE=200
    SHAREIDE_INTERCITY_PER_KM_RATE=15
    """
    load_dotenv()

    overrides = {}
    env_fields = {
        "SHAREIDE_ROUNDING_STEP": ("rounding_step", int),
        "SHAREIDE_MINIMUM_FARE": ("minimum_fare", float),
        "SHAREIDE_CANCELLATION_FEE": ("cancellation_fee", float),
        "SHAREIDE_DEFAULT_COMMISSION_RATE": ("default_commission_rate", float),
        "SHAREIDE_INTERCITY_BASE_FARE": ("intercity_base_fare", float),
        "SHAREIDE_INTERCITY_PER_KM_RATE": ("intercity_per_km_rate", float),
    }
    for env_name, (field_name, cast) in env_fields.items():
        raw = os.getenv(env_name)
        if raw is not None and raw != "":
            overrides[field_name] = cast(raw)

    p = replace(PricingPolicy(), **overrides)
    p.validate()
    return p
