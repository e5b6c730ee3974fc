#Purpose: Straight-line distance math used across pricing, search and scheduling.
#Great-circle (Haversine) distance between two lat/lng points in kilometers,
#plus the flat minute-per-km heuristics the apps show as trip duration and driver ETA.
#Pure functions only: no HTTP, no zone rules, no fare rules.

from typing import Callable, Sequence, Tuple
import math

import numpy as np

#internal coordinate type :(lat,lng)
LatLon = Tuple[float, float]

EARTH_RADIUS_KM = 6371.0

TRIP_MINUTES_PER_KM = 2.5 #rider-facing trip duration estimate
DRIVER_ETA_MINUTES_PER_KM = 3.0 #driver -> pickup, slower because of city traffic


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Great-circle distance between two points in kilometers.
    """
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)

    a = (
        math.sin(d_lat / 2) * math.sin(d_lat / 2)
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2))
        * math.sin(d_lng / 2) * math.sin(d_lng / 2)
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def distance_between(origin: LatLon, destination: LatLon) -> float:
    return haversine_km(origin[0], origin[1], destination[0], destination[1])


def haversine_km_many(origin: LatLon, points: Sequence[LatLon]) -> np.ndarray:
    """
    Vectorised haversine from one origin to many points.
    Same formula as haversine_km, used when scanning a whole driver pool at once.
    """
    if len(points) == 0:
        return np.zeros(0)

    coords = np.radians(np.asarray(points, dtype=float))
    lat1 = math.radians(origin[0])
    lng1 = math.radians(origin[1])
    lat2 = coords[:, 0]
    lng2 = coords[:, 1]

    a = (
        np.sin((lat2 - lat1) / 2) ** 2
        + math.cos(lat1) * np.cos(lat2) * np.sin((lng2 - lng1) / 2) ** 2
    )
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def estimate_duration_minutes(distance_km: float) -> int:
    """Trip duration shown to the rider (~2.5 min per km)."""
    return int(math.ceil(distance_km * TRIP_MINUTES_PER_KM))


def estimate_eta_minutes(distance_km: float) -> int:
    """Driver arrival estimate (~3 min per km)."""
    return int(math.ceil(distance_km * DRIVER_ETA_MINUTES_PER_KM))


#a distance provider takes (pickup, dropoff) and returns kilometers.
#fare estimation accepts any provider so road distance (OSRM) can replace straight-line distance.
DistanceProvider = Callable[[LatLon, LatLon], float]


def haversine_provider(pickup: LatLon, dropoff: LatLon) -> float:
    return distance_between(pickup, dropoff)
