from __future__ import annotations

from typing import Callable, Dict, List, Tuple

from routing.osrm_client import OSRMClient

LatLon = Tuple[float, float]

# Signature stop-order optimization depends on:
# (coords) -> NxN road distance matrix in km, same order as coords.
DistanceMatrixProvider = Callable[[List[LatLon]], List[List[float]]]


class CachingDistanceMatrixProvider:
    """
    Adapts routing.osrm_client.OSRMClient into a distance-matrix provider
    for stop-order optimization. Pairs already seen are served from memory;
    a single /table call fills in whatever is missing.
    """
    def __init__(self, osrm_client: OSRMClient):
        self.osrm_client = osrm_client
        self._cache = {}  # type: Dict[Tuple[float, float, float, float], float]

    def _store(self, coordinates: List[LatLon], distances: List[List[float]]) -> None:
        for src_idx, src in enumerate(coordinates):
            if src_idx >= len(distances): break
            for dest_idx, dest in enumerate(coordinates):
                if dest_idx >= len(distances[src_idx]): break
                distance = distances[src_idx][dest_idx]
                if distance is not None:
                    self._cache[(src[0], src[1], dest[0], dest[1])] = float(distance) / 1000.0

    def __call__(self, coordinates: List[LatLon]) -> List[List[float]]:
        num_coordinates = len(coordinates)
        if num_coordinates == 0:
            return []

        keys = [[(src[0], src[1], dest[0], dest[1]) for dest in coordinates] for src in coordinates]

        if any(key not in self._cache for row in keys for key in row):
            table = self.osrm_client.compute_table(coordinates)
            self._store(coordinates, table.get("distances", []))

        # pairs OSRM could not route stay infinitely far apart
        return [[self._cache.get(key, float('inf')) for key in row] for row in keys]


def distance_matrix_provider_from_osrm_client(osrm_client: OSRMClient) -> CachingDistanceMatrixProvider:
    return CachingDistanceMatrixProvider(osrm_client)
