#Purpose: HTTP adapter for the OSRM routing server.
#Turns (lat, lon) waypoints into /route and /table calls and hands back
#plain dicts in meters/seconds. Transport timeouts become ProviderTimeout,
#every other failure (no route, bad JSON, HTTP error) becomes OSRMError.
#Unit conversion and rounding live in route_service, not here.


from dotenv import load_dotenv
import logging
import os
from typing import List, Tuple, Dict, Any, Optional
import requests

from dispatch.errors import ProviderTimeout

# .env example:
# OSRM_BASE_URL=https://router.project-osrm.org
load_dotenv()
OSRM_BASE_URL = os.getenv("OSRM_BASE_URL")

LatLon = Tuple[float, float]

logger = logging.getLogger(__name__)


class OSRMError(Exception):
    """OSRM answered but had no usable route, or the HTTP call failed."""
    pass


class OSRMClient:
    """
    Thin OSRM client. Geometry comes back as (lat, lon) like every other
    coordinate in the engine; OSRM itself speaks lon,lat.
    """

    provider_name = "osrm"

    def __init__(self, base_url: Optional[str] = None, profile: str = "driving", timeout: float = 5):
        self.base_url = (base_url or OSRM_BASE_URL or "").rstrip("/")
        self.timeout = timeout #the time to wait for a response from OSRM before giving up
        self.profile = profile #the mode of transportation (driving, walking, cycling)

        if not self.base_url:
            raise ValueError("OSRM base URL not set. Please set OSRM_BASE_URL in the .env file.")

    #----------------
    # Internal helpers
    #----------------
    def format_coordinates(self, coords: List[LatLon]) -> str:
        """Convert list of (lat, lon) to OSRM format 'lon,lat;lon,lat;...'"""
        return ';'.join([f"{lon},{lat}" for lat, lon in coords])

    def _get(self, url: str, params: Dict[str, str]) -> Dict[str, Any]:
        try:
            response = requests.get(url, params=params, timeout=self.timeout)
        except requests.Timeout as exc:
            logger.warning(f"OSRM request timed out after {self.timeout}s: {url}")
            raise ProviderTimeout(self.provider_name) from exc
        except requests.RequestException as exc:
            raise OSRMError(f"OSRM request failed: {exc}") from exc

        try:
            data = response.json() #OSRM answers JSON even for errors (code != "Ok")
        except ValueError as exc:
            raise OSRMError(f"OSRM returned non-JSON response (HTTP {response.status_code})") from exc

        if data.get("code") != "Ok":
            raise OSRMError(f"OSRM error: {data.get('message', data.get('code', 'Unknown error'))}")

        return data

    #----------------
    # route service
    #----------------
    def compute_route(self, coordinates: List[LatLon]) -> Dict[str, Any]:
        """
        calls the OSRM /route endpoint with the given ordered coordinates.

        Returns:
            {
                "distance": float, # in meters
                "duration": float, # in seconds
                "geometry": [(lat, lon), ...],
                "legs": [{"distance": float, "duration": float}, ...], # one per consecutive pair
            }
        """
        if len(coordinates) < 2:
            raise ValueError("At least two coordinates are required to compute a route.")

        url = f"{self.base_url}/route/v1/{self.profile}/{self.format_coordinates(coordinates)}"

        data = self._get(
            url,
            params={
                "overview": "full",
                "geometries": "geojson",
            },
        )

        routes = data.get("routes") or []
        if not routes:
            raise OSRMError("OSRM returned no routes")

        route = routes[0] #take the first route (OSRM may return alternatives)

        try:
            #geojson is [lon, lat]; flip back to internal (lat, lon)
            geometry = [(lat, lon) for lon, lat in route.get("geometry", {}).get("coordinates", [])]
            legs = [
                {"distance": leg["distance"], "duration": leg["duration"]}
                for leg in route.get("legs", [])
            ]

            return {
                "distance": route["distance"],
                "duration": route["duration"],
                "geometry": geometry,
                "legs": legs,
            }
        except (KeyError, TypeError, ValueError) as exc:
            raise OSRMError("OSRM returned a malformed route") from exc

    #----------------
    # table service (pairwise matrix)
    #----------------
    def compute_table(self, coordinates: List[LatLon]) -> Dict[str, List[List[Optional[float]]]]:
        """
        calls OSRM /table endpoint for a symmetric NxN matrix.
        used for stop-order optimization (distance between every pair of stops).

        returns :
        {
            "durations": [[seconds, ...], ...],
            "distances": [[meters, ...], ...],
        }
        unreachable pairs come back as None.
        """
        if not coordinates:
            return {"durations": [], "distances": []}

        url = f"{self.base_url}/table/v1/{self.profile}/{self.format_coordinates(coordinates)}"
        data = self._get(url, params={"annotations": "duration,distance"})

        return {
            "durations": data.get("durations", []),
            "distances": data.get("distances", []),
        }
