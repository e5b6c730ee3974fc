#Marks routing as a package.
#Re-exports the public distance and zone APIs so other modules import from routing
#without knowing internal file names.
#No business logic.

from .distance import (
    LatLon,
    haversine_km,
    distance_between,
    haversine_km_many,
    estimate_duration_minutes,
    estimate_eta_minutes,
    haversine_provider,
)
from .geofence import (
    ServiceZone,
    ZoneType,
    ServiceAreaError,
    find_zones_for_location,
    zone_fare_multiplier,
    is_serviceable,
    require_serviceable,
)

__all__ = [
    "LatLon",
    "haversine_km",
    "distance_between",
    "haversine_km_many",
    "estimate_duration_minutes",
    "estimate_eta_minutes",
    "haversine_provider",
    "ServiceZone",
    "ZoneType",
    "ServiceAreaError",
    "find_zones_for_location",
    "zone_fare_multiplier",
    "is_serviceable",
    "require_serviceable",
]
