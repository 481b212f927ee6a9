#Purpose: Route computation for downstream use.
#Returns the “best route” information needed by:
#assignment ETA (vehicle -> pickup)
#ride distance/duration for pricing
#map display / polyline geometry
#distance breakdowns (legs)
#Uses OSRM /route. When OSRM has no path we fail with RouteUnavailable instead of
#guessing; callers that want a rough number use estimate_route().

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Tuple

from dispatch.errors import RouteUnavailable
from routing.osrm_client import OSRMClient, OSRMError

LatLon = Tuple[float, float]

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class RouteResult:
    """
    A drivable path through ordered waypoints.
    distance_km keeps one decimal, duration_min is unrounded minutes.
    """

    geometry: List[LatLon]
    distance_km: float
    duration_min: float
    legs_km: List[float] = field(default_factory=list)
    legs_min: List[float] = field(default_factory=list)


def meters_to_km(meters: float) -> float:
    return round(meters / 1000.0, 1)


def seconds_to_minutes(seconds: float) -> float:
    return seconds / 60.0


class RouteCalculator:
    """
    Shapes requests for the routing provider and converts its units.
    """

    def __init__(self, client: OSRMClient):
        self.client = client

    def compute_route(self, waypoints: List[LatLon]) -> RouteResult:
        if len(waypoints) < 2:
            raise ValueError("At least two waypoints are required to compute a route.")

        try:
            raw = self.client.compute_route(list(waypoints))
        except OSRMError as exc:
            logger.warning(f"No route {waypoints[0]} -> {waypoints[-1]}: {exc}")
            raise RouteUnavailable(waypoints[0], waypoints[-1], reason=str(exc)) from exc

        legs = raw.get("legs") or []
        legs_km = [meters_to_km(leg["distance"]) for leg in legs]
        legs_min = [seconds_to_minutes(leg["duration"]) for leg in legs]

        #legs are rounded one by one so the total matches their sum
        distance_km = round(sum(legs_km), 1) if legs_km else meters_to_km(raw["distance"])

        return RouteResult(
            geometry=list(raw.get("geometry") or []),
            distance_km=distance_km,
            duration_min=seconds_to_minutes(raw["duration"]),
            legs_km=legs_km,
            legs_min=legs_min,
        )


def haversine_km(origin: LatLon, destination: LatLon) -> float:
    """Great-circle distance between two (lat, lon) points."""
    lat1, lon1 = map(math.radians, origin)
    lat2, lon2 = map(math.radians, destination)
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


def estimate_route(waypoints: List[LatLon], average_speed_kmh: float = 50.0) -> RouteResult:
    """
    Straight-line estimate for callers that got RouteUnavailable and still want a number.
    The geometry is just the waypoints.
    """
    if len(waypoints) < 2:
        raise ValueError("At least two waypoints are required to estimate a route.")
    if average_speed_kmh <= 0:
        raise ValueError("average_speed_kmh must be > 0")

    legs_km = [round(haversine_km(a, b), 1) for a, b in zip(waypoints[:-1], waypoints[1:])]
    legs_min = [distance / average_speed_kmh * 60.0 for distance in legs_km]

    return RouteResult(
        geometry=list(waypoints),
        distance_km=round(sum(legs_km), 1),
        duration_min=sum(legs_min),
        legs_km=legs_km,
        legs_min=legs_min,
    )
