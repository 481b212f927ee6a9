from geocoding.cache import AddressCache
from geocoding.resolver import AddressResolver
from routing.geofence import SERVICE_AREA
from routing.matrix_adapter import distance_matrix_provider_from_osrm_client
from routing.osrm_client import OSRMClient
from routing.route_service import RouteCalculator, estimate_route


def main():
    # Needs OSRM_BASE_URL (and optionally GOOGLE_MAPS_API_KEY) in the environment or .env
    osrm = OSRMClient(profile="driving", timeout=10)
    resolver = AddressResolver.default(cache=AddressCache(), timeout=10)

    addresses = [
        "Náměstí, Mikulov",
        "Dukelské náměstí, Hustopeče",
        "Pavlov",
    ]

    coords = []
    for address in addresses:
        coordinate = resolver.resolve(address, "cs")
        inside = "inside" if SERVICE_AREA.contains(coordinate) else "OUTSIDE"
        print(f"{address}: {coordinate[0]:.5f}, {coordinate[1]:.5f} ({inside} service area)")
        coords.append(coordinate)

    route = RouteCalculator(osrm).compute_route(coords)
    rough = estimate_route(coords)
    print(f"\nRoute: {route.distance_km:.1f} km, {route.duration_min:.1f} min over {len(route.geometry)} points")
    print(f"Legs: {route.legs_km} km / {route.legs_min} min")
    print(f"Straight-line estimate: {rough.distance_km:.1f} km, {rough.duration_min:.1f} min")

    matrix = distance_matrix_provider_from_osrm_client(osrm)(coords)
    print("\nDistance matrix (km):")
    for row in matrix:
        print("  " + "  ".join(f"{cell:6.1f}" for cell in row))


if __name__ == "__main__":
    main()
