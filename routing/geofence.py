#Purpose: Polygon geofencing for service zones.
#A zone is a named polygon (city service area, restricted area, high demand area, airport...)
#Typical responsibilities:
#point-in-polygon test (ray casting) for a single zone
#find every active zone containing a point
#fare multiplier for a point (high demand / airport surcharges)
#eligibility: is a pickup/dropoff allowed at all
#Output: zone lists, a multiplier or a yes/no. No fare math here.

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence


class ZoneType(str, Enum):
    SERVICE_AREA = "service_area"
    RESTRICTED = "restricted"
    HIGH_DEMAND = "high_demand"
    AIRPORT = "airport"
    SPECIAL = "special"


ZONE_TYPE_COLORS: Dict[str, str] = {
    ZoneType.SERVICE_AREA.value: "green",
    ZoneType.RESTRICTED.value: "red",
    ZoneType.HIGH_DEMAND.value: "orange",
    ZoneType.AIRPORT.value: "blue",
    ZoneType.SPECIAL.value: "purple",
}


class ServiceAreaError(Exception):
    """Raised when a pickup or dropoff falls outside where we operate."""
    pass


@dataclass
class ServiceZone:
    """
    A named polygon on the map.

    coordinates is the ordered vertex ring as dicts {"lat": .., "lng": ..},
    the same shape the admin map editor saves. The ring does not need to be closed.
    """

    id: str
    name: str
    city: Optional[str]
    type: str
    coordinates: List[Dict[str, float]] = field(default_factory=list)
    fare_multiplier: float = 1.0
    description: Optional[str] = None
    is_active: bool = True

    def contains_point(self, lat: float, lng: float) -> bool:
        """
        Ray casting: walk every edge (i, j) and flip `inside` each time a ray
        from the point crosses it. x is latitude, y is longitude.
        """
        vertices = self.coordinates
        n = len(vertices)
        if n < 3: #not a polygon
            return False

        inside = False
        j = n - 1
        for i in range(n):
            xi = vertices[i]["lat"]
            yi = vertices[i]["lng"]
            xj = vertices[j]["lat"]
            yj = vertices[j]["lng"]

            if ((yi > lng) != (yj > lng)) and (
                lat < (xj - xi) * (lng - yi) / (yj - yi) + xi
            ):
                inside = not inside
            j = i

        return inside

    @property
    def type_color(self) -> str:
        zone_type = self.type.value if isinstance(self.type, ZoneType) else self.type
        return ZONE_TYPE_COLORS.get(zone_type, "gray")

    def is_type(self, zone_type: ZoneType) -> bool:
        return self.type == zone_type or self.type == zone_type.value


def find_zones_for_location(zones: Sequence[ServiceZone], lat: float, lng: float) -> List[ServiceZone]:
    """
    Active zones containing the point, in the order they were given.
    """
    return [zone for zone in zones if zone.is_active and zone.contains_point(lat, lng)]


def zone_fare_multiplier(zones: Sequence[ServiceZone], lat: float, lng: float) -> float:
    """
    Highest multiplier among the zones containing the point.
    Overlapping zones do not stack.
    """
    containing = find_zones_for_location(zones, lat, lng)
    if not containing:
        return 1.0
    return max(float(zone.fare_multiplier) for zone in containing)


def is_serviceable(zones: Sequence[ServiceZone], lat: float, lng: float) -> bool:
    """
    A point is serviceable when it is not inside a restricted zone and,
    if any service area is defined at all, it is inside one of them.
    """
    active = [zone for zone in zones if zone.is_active]

    for zone in active:
        if zone.is_type(ZoneType.RESTRICTED) and zone.contains_point(lat, lng):
            return False

    service_areas = [zone for zone in active if zone.is_type(ZoneType.SERVICE_AREA)]
    if not service_areas:
        return True

    return any(zone.contains_point(lat, lng) for zone in service_areas)


def require_serviceable(zones: Sequence[ServiceZone], lat: float, lng: float, label: str = "location") -> None:
    if not is_serviceable(zones, lat, lng):
        raise ServiceAreaError(f"{label} ({lat}, {lng}) is outside the service area")
