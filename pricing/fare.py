"""
Purpose: Fare estimation (the "how much" layer).
What it does:

Computes ride prices from distance:

table fare      = ceil_to_10(base + per_km * distance) per vehicle type

estimate        = table fare or admin FareSetting (+ time + booking fee),
                  then zone surcharge, then surge, then the minimum fare floor

intercity fare  = max(200, 200 + 15 * distance)

simple estimate = 100 + 30 * distance (passenger posted requests, unrounded)

Rule: Pricing reads distances and zones; it never filters drivers or touches ride state.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Sequence
import math

from routing.distance import (
    DistanceProvider,
    LatLon,
    estimate_duration_minutes,
    haversine_provider,
)
from routing.geofence import ServiceZone, zone_fare_multiplier

from .models import FareBreakdown, FareQuote, FareSetting, SurgePricing, VehicleType
from .policy import PricingPolicy, default_pricing_policy


def round_up_to_step(amount: float, step: int = 10) -> float:
    """
    Round UP to the next multiple of step: 121 -> 130, 130 -> 130.
    """
    # round first so float noise like 130.00000000001 does not jump a whole step
    return float(math.ceil(round(amount / step, 9)) * step)


def round_half_up(value: float, digits: int = 0) -> float:
    """Half-away-from-zero rounding (2.5 -> 3), the way amounts are displayed."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def _vehicle_key(vehicle_type) -> str:
    return vehicle_type.value if isinstance(vehicle_type, VehicleType) else str(vehicle_type)


def calculate_fare(vehicle_type, distance_km: float, policy: Optional[PricingPolicy] = None) -> float:
    """
    Table fare for a vehicle type: base + per_km * distance, rounded up to 10.
    Unknown vehicle types are priced as a car.
    """
    policy = policy or default_pricing_policy()
    rate = policy.rate_for(_vehicle_key(vehicle_type))
    fare = rate.base + (rate.per_km * distance_km)
    return round_up_to_step(fare, policy.rounding_step)


def calculate_simple_estimate(
    pickup: LatLon,
    dropoff: LatLon,
    policy: Optional[PricingPolicy] = None,
    distance_provider: Optional[DistanceProvider] = None,
) -> float:
    """Flat base + per km estimate used on passenger posted requests. Not rounded."""
    policy = policy or default_pricing_policy()
    distance = (distance_provider or haversine_provider)(pickup, dropoff)
    return policy.simple_base_fare + (distance * policy.simple_per_km_rate)


def calculate_intercity_fare(
    pickup: LatLon,
    dropoff: LatLon,
    policy: Optional[PricingPolicy] = None,
    distance_provider: Optional[DistanceProvider] = None,
) -> float:
    policy = policy or default_pricing_policy()
    distance = (distance_provider or haversine_provider)(pickup, dropoff)
    fare = round_half_up(policy.intercity_base_fare + (distance * policy.intercity_per_km_rate))
    return max(policy.intercity_base_fare, fare)


def find_fare_setting(fare_settings: Sequence[FareSetting], vehicle_type) -> Optional[FareSetting]:
    key = _vehicle_key(vehicle_type)
    for setting in fare_settings:
        if setting.is_active and _vehicle_key(setting.vehicle_type) == key:
            return setting
    return None


def find_current_surge(surges: Sequence[SurgePricing], now: datetime) -> Optional[SurgePricing]:
    for surge in surges:
        if surge.is_current(now):
            return surge
    return None


def estimate_fare(
    pickup: LatLon,
    dropoff: LatLon,
    vehicle_type=VehicleType.CAR,
    *,
    fare_settings: Sequence[FareSetting] = (),
    surges: Sequence[SurgePricing] = (),
    zones: Sequence[ServiceZone] = (),
    now: Optional[datetime] = None,
    distance_provider: Optional[DistanceProvider] = None,
    policy: Optional[PricingPolicy] = None,
) -> FareQuote:
    """
    Full pre-booking estimate with a price breakdown.

    Steps:
      1) distance (haversine unless a road distance provider is given) and duration (~2.5 min/km)
      2) subtotal from the active FareSetting for the vehicle type, else the rate table
      3) zone surcharge from the highest multiplier zone around the pickup
      4) surge surcharge from the first current surge window
      5) total = max(round_up_to_10(subtotal + surcharges), minimum fare)
    """
    policy = policy or default_pricing_policy()
    now = now or datetime.now()
    vehicle_key = _vehicle_key(vehicle_type)

    distance = (distance_provider or haversine_provider)(pickup, dropoff)
    duration = estimate_duration_minutes(distance)

    fare_setting = find_fare_setting(fare_settings, vehicle_key)
    if fare_setting is not None:
        base_fare = float(fare_setting.base_fare)
        distance_charge = distance * float(fare_setting.per_km_rate)
        time_charge = duration * float(fare_setting.per_minute_rate)
        booking_fee = float(fare_setting.booking_fee)
        cancellation_fee = float(fare_setting.cancellation_fee)
        subtotal = base_fare + distance_charge + time_charge + booking_fee
        minimum_fare = float(fare_setting.minimum_fare)
    else:
        subtotal = calculate_fare(vehicle_key, distance, policy)
        base_fare = subtotal * policy.base_share
        distance_charge = subtotal * policy.distance_share
        time_charge = subtotal * policy.time_share
        booking_fee = 0.0
        cancellation_fee = policy.cancellation_fee
        minimum_fare = policy.minimum_fare

    zone_multiplier = zone_fare_multiplier(zones, pickup[0], pickup[1]) if zones else 1.0
    zone_amount = round_half_up(subtotal * (zone_multiplier - 1)) if zone_multiplier != 1.0 else 0.0

    surge = find_current_surge(surges, now)
    surge_multiplier = float(surge.multiplier) if surge else 1.0
    surge_amount = round_half_up(subtotal * (surge_multiplier - 1)) if surge else 0.0

    total_fare = max(
        round_up_to_step(subtotal + zone_amount + surge_amount, policy.rounding_step),
        minimum_fare,
    )

    return FareQuote(
        distance_km=round_half_up(distance, 1),
        duration_minutes=duration,
        total_fare=total_fare,
        vehicle_type=vehicle_key,
        breakdown=FareBreakdown(
            base_fare=round_half_up(base_fare),
            distance_charge=round_half_up(distance_charge),
            time_charge=round_half_up(time_charge),
            booking_fee=round_half_up(booking_fee),
            zone_multiplier=zone_multiplier,
            zone_amount=zone_amount,
            surge_multiplier=surge_multiplier,
            surge_amount=surge_amount,
            surge_reason=surge.reason if surge else None,
            cancellation_fee=round_half_up(cancellation_fee),
        ),
    )


def quote_all_vehicle_types(
    pickup: LatLon,
    dropoff: LatLon,
    *,
    fare_settings: Sequence[FareSetting] = (),
    surges: Sequence[SurgePricing] = (),
    zones: Sequence[ServiceZone] = (),
    now: Optional[datetime] = None,
    distance_provider: Optional[DistanceProvider] = None,
    policy: Optional[PricingPolicy] = None,
) -> List[FareQuote]:
    """
    One estimate per vehicle type in the rate table, cheapest first.
    The distance is resolved once and reused for every vehicle.
    """
    policy = policy or default_pricing_policy()
    distance = (distance_provider or haversine_provider)(pickup, dropoff)

    quotes = [
        estimate_fare(
            pickup,
            dropoff,
            vehicle_type,
            fare_settings=fare_settings,
            surges=surges,
            zones=zones,
            now=now,
            distance_provider=lambda _pickup, _dropoff: distance,
            policy=policy,
        )
        for vehicle_type in policy.rate_table
    ]
    quotes.sort(key=lambda quote: quote.total_fare)
    return quotes
