import random

import pytest

from conftest import FakeOSRM, PLACES
from rides.stop_order import apply_order, optimize_stop_order
from routing.matrix_adapter import CachingDistanceMatrixProvider


@pytest.fixture
def provider():
    return CachingDistanceMatrixProvider(FakeOSRM())


def test_two_stops_need_no_matrix():
    def explode(coords):
        raise AssertionError("matrix should not be requested")

    result = optimize_stop_order([(48.8, 16.6), (48.9, 16.7)], explode)
    assert result.order == [0, 1]


def test_waypoints_reordered_and_endpoints_fixed(provider):
    # pickup at 0 km, waypoints at 20 km and 10 km, destination at 30 km on one line
    coords = [(48.80, 16.60), (48.80, 16.80), (48.80, 16.70), (48.80, 16.90)]

    result = optimize_stop_order(coords, provider)

    assert result.order == [0, 2, 1, 3]
    assert result.total_distance_km == pytest.approx(30.0)
    assert result.exhaustive
    assert result.explored_sequences == 2


def test_tie_keeps_submitted_order(provider):
    # corners of a 1 km square: both orderings are 4 km, keep the caller's
    coords = [(48.80, 16.60), (48.81, 16.60), (48.80, 16.61), (48.81, 16.61)]

    result = optimize_stop_order(coords, provider)

    assert result.order == [0, 1, 2, 3]
    assert result.total_distance_km == pytest.approx(4.0)


def test_endpoints_fixed_for_random_layouts(provider):
    rng = random.Random(7)
    for _ in range(20):
        coords = [(48.7 + rng.random() * 0.5, 16.3 + rng.random() * 0.8) for _ in range(rng.randint(3, 7))]
        result = optimize_stop_order(coords, provider)

        assert result.order[0] == 0
        assert result.order[-1] == len(coords) - 1
        assert sorted(result.order) == list(range(len(coords)))


def test_nearest_neighbour_beyond_cap(provider):
    coords = [(48.80, 16.60)] + [(48.80, 16.60 + 0.01 * k) for k in (5, 3, 1, 4, 2)] + [(48.80, 17.00)]

    result = optimize_stop_order(coords, provider, max_exhaustive_waypoints=3)

    assert not result.exhaustive
    assert result.order == [0, 3, 5, 2, 4, 1, 6]


def test_apply_order():
    stops = ["A", "B", "C", "D"]
    assert apply_order(stops, [0, 2, 1, 3]) == ["A", "C", "B", "D"]


def test_optimize_with_named_places(provider):
    stops = ["Náměstí, Mikulov", "Pavlov", "Zámek, Mikulov", "Nádraží, Mikulov"]
    coords = [PLACES[s] for s in stops]

    result = optimize_stop_order(coords, provider)
    optimized = apply_order(stops, result.order)

    assert optimized[0] == stops[0]
    assert optimized[-1] == stops[-1]
    assert optimized == ["Náměstí, Mikulov", "Zámek, Mikulov", "Pavlov", "Nádraží, Mikulov"]
