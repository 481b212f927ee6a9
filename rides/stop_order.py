# rides/stop_order.py

from __future__ import annotations

from dataclasses import dataclass
from itertools import permutations
from typing import List, Sequence, Tuple

from routing.matrix_adapter import DistanceMatrixProvider

LatLon = Tuple[float, float]


@dataclass(frozen=True)
class StopOrderResult:
    """
    Output of stop-order optimization.
    `order` holds indices into the original stop list; order[0] and order[-1]
    are always the original pickup and destination.
    """
    order: List[int]
    total_distance_km: float

    # Diagnostics
    explored_sequences: int = 0
    exhaustive: bool = True


def optimize_stop_order(
    coordinates: Sequence[LatLon],
    distance_matrix_provider: DistanceMatrixProvider,
    max_exhaustive_waypoints: int = 6,
) -> StopOrderResult:
    """
    Reorder intermediate stops to minimize total road distance, keeping the
    pickup first and the destination last.

    Notes:
    - Up to `max_exhaustive_waypoints` intermediates every ordering is tried
      ((k)! routes, 720 at k=6). Ties keep the earliest ordering in
      lexicographic index order, so the submitted order wins a tie.
    - Beyond that cap a nearest-neighbour walk is used.
    - One distance-matrix call either way.
    """
    n = len(coordinates)
    if n < 2:
        raise ValueError("At least two stops are required")

    identity = list(range(n))
    if n == 2:
        return StopOrderResult(identity, 0.0, explored_sequences=0)

    distances = distance_matrix_provider(list(coordinates))
    if not distances or len(distances) != n or any(len(row) != n for row in distances):
        raise ValueError("invalid distance matrix shape")

    first, last = 0, n - 1
    waypoints = list(range(1, n - 1))

    if len(waypoints) > max_exhaustive_waypoints:
        order = _nearest_neighbour(first, last, waypoints, distances)
        return StopOrderResult(order, _sequence_km(order, distances), explored_sequences=1, exhaustive=False)

    best_km = float("inf")
    best_order = identity
    explored = 0

    for perm in permutations(waypoints):
        explored += 1
        order = [first, *perm, last]
        km = _sequence_km(order, distances)
        if km < best_km:
            best_km = km
            best_order = order

    return StopOrderResult(best_order, best_km, explored_sequences=explored)


# -------------------------
# Internal helpers
# -------------------------

def _sequence_km(order: Sequence[int], distances: List[List[float]]) -> float:
    """
    Sum distances for consecutive legs along the sequence.
    """
    total = 0.0
    for a, b in zip(order[:-1], order[1:]):
        total += float(distances[a][b])
    return total


def _nearest_neighbour(first: int, last: int, waypoints: List[int],
                       distances: List[List[float]]) -> List[int]:
    order = [first]
    remaining = list(waypoints)
    current = first

    while remaining:
        # min() keeps the lowest index on equal distances
        nearest = min(remaining, key=lambda idx: distances[current][idx])
        order.append(nearest)
        remaining.remove(nearest)
        current = nearest

    order.append(last)
    return order


def apply_order(items: Sequence, order: Sequence[int]) -> List:
    return [items[i] for i in order]
