"""
Drivers domain package.

Public API:
- Domain models: Driver, DriverStatus, DriverOffer, DriverSearchResult
- Search: search_drivers, find_nearby_drivers, nearest_driver
- Policy: SearchPolicy, default_search_policy
"""
from .models import Driver, DriverStatus, DriverOffer, DriverSearchResult
from .policy import SearchPolicy, default_search_policy
from .selection import (
    filter_eligible_drivers,
    search_radius_km,
    max_drivers_for_bid,
    find_nearby_drivers,
    nearest_driver,
    search_drivers,
)

__all__ = [
    "Driver",
    "DriverStatus",
    "DriverOffer",
    "DriverSearchResult",
    "SearchPolicy",
    "default_search_policy",
    "filter_eligible_drivers",
    "search_radius_km",
    "max_drivers_for_bid",
    "find_nearby_drivers",
    "nearest_driver",
    "search_drivers",
]
