#Marks routing as a package.
#Re-exports the public routing API (OSRMClient, RouteCalculator, eta helpers,
#geofences) so other modules import from routing without knowing internal file names.
#No business logic.

from .osrm_client import OSRMClient, OSRMError
from .route_service import RouteCalculator, RouteResult, estimate_route, haversine_km
from .eta_service import eta_minutes, busy_until_ms
from .geofence import BoundingBox, SERVICE_AREA, COUNTRY
from .matrix_adapter import distance_matrix_provider_from_osrm_client
from .navigation import NavigationApp, navigation_url

__all__ = [
    "OSRMClient",
    "OSRMError",
    "RouteCalculator",
    "RouteResult",
    "estimate_route",
    "haversine_km",
    "eta_minutes",
    "busy_until_ms",
    "BoundingBox",
    "SERVICE_AREA",
    "COUNTRY",
    "distance_matrix_provider_from_osrm_client",
    "NavigationApp",
    "navigation_url",
]
