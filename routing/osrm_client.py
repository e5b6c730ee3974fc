#Purpose: The OSRM "adapter/client".
#Sole responsibility: talk to OSRM via HTTP and return normalized outputs.
#Encapsulates OSRM-specific details:
#coordinate formatting (lng,lat)
#URL construction (/route)
#timeouts and error handling
#parsing response JSON into kilometers / minutes
#It should not contain fare rules or driver search.


from dotenv import load_dotenv
import logging
import os
from typing import Dict, List, Tuple
import requests

# Read OSRM base URL from environment
# Example in .env:
# OSRM_BASE_URL=http://router.project-osrm.org
load_dotenv()

logger = logging.getLogger(__name__)

# Internal coordinate type: (lat, lng)
LatLon = Tuple[float, float]


class OSRMError(Exception):
    """Custom exception for OSRM client errors."""
    pass


class OSRMClient:
    """
    OSRM Adapter / Client

    Sole responsibility:
    - Talk to OSRM via HTTP
    - Convert internal (lat, lng) → OSRM (lng,lat)
    - Return road distance in km and duration in minutes

    """
    def __init__(self, profile: str = "driving", timeout: int = 5, base_url: str = None):
        self.base_url = base_url or os.getenv("OSRM_BASE_URL")
        self.timeout = timeout #seconds to wait for OSRM before giving up
        self.profile = profile #driving, walking, cycling

        if not self.base_url:
            raise ValueError("OSRM base URL not set. Please set OSRM_BASE_URL in the .env file.")

    def format_coordinates(self, coords: List[LatLon]) -> str:
        """Convert list of (lat, lng) to OSRM format 'lng,lat;lng,lat;...'"""
        return ';'.join([f"{lng},{lat}" for lat, lng in coords])

    def compute_route(self, coordinates: List[LatLon]) -> Dict[str, float]:
        """
        Calls the OSRM /route endpoint and returns road distance/duration.

        Returns:
            {
                "distance_km": float,
                "duration_minutes": float,
            }
        """
        if len(coordinates) < 2:
            raise ValueError("At least two coordinates are required to compute a route.")

        url = f"{self.base_url}/route/v1/{self.profile}/{self.format_coordinates(coordinates)}"

        try:
            response = requests.get(
                url,
                params={"overview": "false"}, # we don't need the geometry of the route
                timeout=self.timeout,
            )
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise OSRMError(f"OSRM request failed: {exc}") from exc

        if data.get("code") != "Ok":
            raise OSRMError(f"OSRM error: {data.get('message', 'Unknown error')}")

        route = data["routes"][0] #first route is the recommended one

        return {
            "distance_km": route["distance"] / 1000.0,
            "duration_minutes": route["duration"] / 60.0,
        }


class RoadDistanceProvider:
    """
    Adapts OSRMClient to the DistanceProvider signature used by fare estimation:
    (pickup, dropoff) -> km.
    """
    def __init__(self, osrm_client: OSRMClient):
        self.osrm_client = osrm_client

    def __call__(self, pickup: LatLon, dropoff: LatLon) -> float:
        route = self.osrm_client.compute_route([pickup, dropoff])
        logger.debug("OSRM road distance %.2f km for %s -> %s", route["distance_km"], pickup, dropoff)
        return route["distance_km"]
