import threading
from datetime import datetime

import pytest

from dispatch.ranker import VehicleRanker
from fleet.models import Vehicle
from fleet.policy import DispatchPolicy
from geocoding.cache import AddressCache
from geocoding.providers import GeocodingProvider
from geocoding.resolver import AddressResolver
from routing.osrm_client import OSRMError
from routing.route_service import RouteCalculator
from tariffs.models import FlatRateRule, Tariff

# Fake geography around Mikulov. With FakeOSRM, 0.01 degree = 1 km = 1 minute.
PLACES = {
    "Náměstí, Mikulov": (48.80, 16.60),
    "Nádraží, Mikulov": (48.81, 16.60),
    "Zámek, Mikulov": (48.80, 16.61),
    "Svatý kopeček, Mikulov": (48.82, 16.60),
    "Hustopeče": (48.94, 16.73),
    "Depot A": (48.80, 16.65),
    "Depot B": (48.80, 16.70),
    "Depot C": (48.80, 16.55),
    "Pavlov": (48.87, 16.67),
}


class FakeGeocoder(GeocodingProvider):
    """Answers from a dict and records every call."""

    def __init__(self, name="fake", known=None, error=None):
        self.name = name
        self.known = dict(known or {})
        self.error = error
        self.calls = []
        self._lock = threading.Lock()

    def geocode(self, address, locale):
        with self._lock:
            self.calls.append((address, locale))
        if self.error is not None:
            raise self.error
        return self.known.get(address)


def manhattan_km(a, b):
    return round((abs(a[0] - b[0]) + abs(a[1] - b[1])) * 100, 6)


class FakeOSRM:
    """
    Pretends roads are a grid: 0.01 degree = 1 km, driven at 1 km per minute.
    Coordinates listed in `unreachable` have no road connection.
    """

    provider_name = "osrm"

    def __init__(self, unreachable=()):
        self.unreachable = set(unreachable)
        self.route_calls = []
        self.table_calls = []
        self._lock = threading.Lock()

    def compute_route(self, coordinates):
        with self._lock:
            self.route_calls.append(list(coordinates))
        if any(c in self.unreachable for c in coordinates):
            raise OSRMError("OSRM error: No route found")

        legs = []
        for a, b in zip(coordinates[:-1], coordinates[1:]):
            km = manhattan_km(a, b)
            legs.append({"distance": km * 1000, "duration": km * 60})

        return {
            "distance": sum(leg["distance"] for leg in legs),
            "duration": sum(leg["duration"] for leg in legs),
            "geometry": list(coordinates),
            "legs": legs,
        }

    def compute_table(self, coordinates):
        with self._lock:
            self.table_calls.append(list(coordinates))
        distances = [[manhattan_km(a, b) * 1000 for b in coordinates] for a in coordinates]
        durations = [[manhattan_km(a, b) * 60 for b in coordinates] for a in coordinates]
        return {"durations": durations, "distances": distances}


@pytest.fixture
def geocoder():
    return FakeGeocoder("primary", PLACES)


@pytest.fixture
def osrm():
    return FakeOSRM()


@pytest.fixture
def resolver(geocoder):
    return AddressResolver([geocoder], cache=AddressCache())


@pytest.fixture
def ranker(resolver, osrm):
    return VehicleRanker(resolver, RouteCalculator(osrm), policy=DispatchPolicy(max_parallel_lookups=4))


@pytest.fixture
def tariff():
    return Tariff(
        starting_fee=50,
        price_per_km_car=40,
        price_per_km_van=60,
        flat_rates=[FlatRateRule(name="Mikulov", price_car=100, price_van=150)],
    )


@pytest.fixture
def plain_tariff():
    return Tariff(starting_fee=50, price_per_km_car=40, price_per_km_van=60)


@pytest.fixture
def now():
    return datetime(2026, 10, 19, 14, 0)


@pytest.fixture
def now_ms(now):
    return int(now.timestamp() * 1000)


@pytest.fixture
def car():
    def build(vehicle_id, location="Depot A", **kwargs):
        return Vehicle.new(vehicle_id, f"Car {vehicle_id}", location, vehicle_class="CAR", **kwargs)
    return build


@pytest.fixture
def van():
    def build(vehicle_id, location="Depot A", **kwargs):
        return Vehicle.new(vehicle_id, f"Van {vehicle_id}", location, vehicle_class="VAN", **kwargs)
    return build
