"""
Purpose: Business rules and distance math for finding drivers near a pickup.
What it does:
Accepts a pickup and a pool of drivers, filters out ineligible drivers,
keeps the ones inside the search radius (wider when the rider bids more),
ranks them closest first and prices an offer for each.
"""

from typing import List, Optional, Sequence, Tuple

import numpy as np

from pricing.fare import calculate_fare, round_half_up
from pricing.policy import PricingPolicy
from routing.distance import (
    LatLon,
    distance_between,
    estimate_duration_minutes,
    estimate_eta_minutes,
    haversine_km_many,
)

from .models import Driver, DriverOffer, DriverSearchResult, DriverStatus
from .policy import SearchPolicy, default_search_policy


def filter_eligible_drivers(drivers: Sequence[Driver], vehicle_type: Optional[str] = None) -> List[Driver]:
    """
    Returns only drivers who are online, approved, have reported a location
    and (if asked) drive the requested vehicle type.
    """
    eligible = []

    for driver in drivers:
        if not driver.is_online:
            continue

        if driver.status != DriverStatus.APPROVED:
            continue

        if not driver.has_location:
            continue

        if vehicle_type and driver.vehicle_type != vehicle_type:
            continue

        eligible.append(driver)

    return eligible


def search_radius_km(bid_percentage: int = 0, policy: Optional[SearchPolicy] = None) -> float:
    policy = policy or default_search_policy()
    return policy.base_radius_km + policy.radius_bonus_km.get(bid_percentage, 0.0)


def max_drivers_for_bid(bid_percentage: int = 0, policy: Optional[SearchPolicy] = None) -> int:
    policy = policy or default_search_policy()
    if bid_percentage >= policy.priority_bid_threshold:
        return policy.priority_max_drivers
    if bid_percentage >= policy.boosted_bid_threshold:
        return policy.boosted_max_drivers
    return policy.default_max_drivers


def drivers_within_radius(
    pickup: LatLon,
    drivers: Sequence[Driver],
    radius_km: float,
    vehicle_type: Optional[str] = None,
) -> List[Tuple[Driver, float]]:
    """
    (driver, km to pickup) pairs inside the radius, closest first.
    Drivers at the same distance keep their input order.
    """
    eligible = filter_eligible_drivers(drivers, vehicle_type)
    if not eligible:
        return []

    # one vectorised pass over the whole pool instead of a python loop per driver
    distances = haversine_km_many(pickup, [driver.location for driver in eligible])
    order = np.argsort(distances, kind="stable")

    nearby = []
    for index in order:
        distance = float(distances[index])
        if distance <= radius_km:
            nearby.append((eligible[index], distance))
    return nearby


def find_nearby_drivers(
    pickup: LatLon,
    drivers: Sequence[Driver],
    radius_km: float,
    vehicle_type: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[Driver]:
    nearby = [driver for driver, _ in drivers_within_radius(pickup, drivers, radius_km, vehicle_type)]
    if limit is not None:
        nearby = nearby[:limit]
    return nearby


def nearest_driver(
    pickup: LatLon,
    drivers: Sequence[Driver],
    vehicle_type: Optional[str] = None,
    radius_km: float = 5.0,
) -> Optional[Driver]:
    nearby = drivers_within_radius(pickup, drivers, radius_km, vehicle_type)
    return nearby[0][0] if nearby else None


def search_drivers(
    pickup: LatLon,
    dropoff: LatLon,
    drivers: Sequence[Driver],
    vehicle_type: Optional[str] = None,
    bid_percentage: int = 0,
    policy: Optional[SearchPolicy] = None,
    pricing_policy: Optional[PricingPolicy] = None,
) -> DriverSearchResult:
    """
    The rider's "available drivers" list.

    - radius = 5 km + bonus for the bid (0/10/20/30/50 %)
    - each offer is priced on the driver's own vehicle type for the full trip
    - the bid is added on top of that base fare
    - the list is capped at 10 / 15 / 20 drivers depending on the bid
    """
    policy = policy or default_search_policy()

    if bid_percentage not in policy.radius_bonus_km:
        raise ValueError(
            f"bid_percentage must be one of {sorted(policy.radius_bonus_km)}, got {bid_percentage}"
        )

    radius = search_radius_km(bid_percentage, policy)
    trip_distance = distance_between(pickup, dropoff)

    nearby = drivers_within_radius(pickup, drivers, radius, vehicle_type)
    nearby = nearby[:max_drivers_for_bid(bid_percentage, policy)]

    offers: List[DriverOffer] = []
    for driver, distance in nearby:
        base_fare = calculate_fare(driver.vehicle_type, trip_distance, pricing_policy)
        bid_amount = base_fare * (bid_percentage / 100)

        offers.append(
            DriverOffer(
                driver_id=driver.id,
                user_id=driver.user_id,
                name=driver.name,
                vehicle_type=driver.vehicle_type,
                rating=float(driver.rating),
                total_rides=driver.completed_rides,
                distance_away=round_half_up(distance, 1),
                eta_minutes=estimate_eta_minutes(distance),
                base_fare=base_fare,
                bid_amount=round_half_up(bid_amount),
                fare=round_half_up(base_fare + bid_amount),
            )
        )

    return DriverSearchResult(
        drivers=offers,
        trip_distance=round_half_up(trip_distance, 1),
        estimated_duration=estimate_duration_minutes(trip_distance),
        search_radius=radius,
        bid_percentage=bid_percentage,
    )
