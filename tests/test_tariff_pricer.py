from datetime import datetime, time

import pytest

from fleet.models import VehicleClass
from tariffs.models import FlatRateRule, Tariff, TimeBasedTariff, parse_clock
from tariffs.pricer import charged_class, find_flat_rate, price

AFTERNOON = datetime(2026, 10, 19, 14, 0)


@pytest.fixture
def layered_tariff():
    return Tariff(
        starting_fee=50,
        price_per_km_car=40,
        price_per_km_van=60,
        flat_rates=[
            FlatRateRule(name="V rámci Mikulova", price_car=100, price_van=150, keyword="Mikulov"),
            FlatRateRule(name="Zaječí - diskotéka Retro", price_car=200, price_van=300,
                         endpoints=("Zaječí", "Retro")),
        ],
        time_based_tariffs=[
            TimeBasedTariff.new("Noc", "22:00", "06:00", starting_fee=80, price_per_km_car=50, price_per_km_van=70),
        ],
    )


def test_flat_rate_ignores_distance(tariff):
    stops = ["Náměstí, Mikulov", "Nádraží, Mikulov"]

    assert price(stops, VehicleClass.CAR, 1.0, AFTERNOON, tariff) == 100
    assert price(stops, VehicleClass.CAR, 87.3, AFTERNOON, tariff) == 100
    assert price(stops, VehicleClass.VAN, 87.3, AFTERNOON, tariff) == 150


def test_flat_rate_is_case_insensitive(tariff):
    assert price(["náměstí, MIKULOV", "nádraží, mikulov"], VehicleClass.CAR, 3, AFTERNOON, tariff) == 100


def test_flat_rate_needs_both_ends_in_town(tariff):
    # 50 + 10 * 40
    assert price(["Náměstí, Mikulov", "Hustopeče"], VehicleClass.CAR, 10, AFTERNOON, tariff) == 450


def test_flat_rate_uses_pickup_and_final_stop_only(tariff):
    stops = ["Náměstí, Mikulov", "Pavlov", "Nádraží, Mikulov"]
    assert price(stops, VehicleClass.CAR, 25, AFTERNOON, tariff) == 100


def test_two_endpoint_flat_rate_matches_either_direction(layered_tariff):
    there = ["Hlavní 3, Zaječí", "Retro music club, Velké Bílovice"]
    back = list(reversed(there))

    assert price(there, VehicleClass.CAR, 9, AFTERNOON, layered_tariff) == 200
    assert price(back, VehicleClass.CAR, 9, AFTERNOON, layered_tariff) == 200
    rule = find_flat_rate(layered_tariff, "Hlavní 3, Zaječí", "Nádraží, Zaječí")
    assert rule is None


def test_flat_rate_beats_time_window(layered_tariff):
    night = datetime(2026, 10, 19, 23, 30)
    assert price(["Zámek, Mikulov", "Nádraží, Mikulov"], VehicleClass.CAR, 2, night, layered_tariff) == 100


@pytest.mark.parametrize("clock, expected", [
    (time(22, 0), 80 + 10 * 50),
    (time(23, 59), 80 + 10 * 50),
    (time(0, 0), 80 + 10 * 50),
    (time(5, 59), 80 + 10 * 50),
    (time(6, 0), 50 + 10 * 40),
    (time(21, 59), 50 + 10 * 40),
])
def test_time_window_wraps_midnight(layered_tariff, clock, expected):
    assert price(["Pavlov", "Hustopeče"], VehicleClass.CAR, 10, clock, layered_tariff) == expected


def test_daytime_window():
    window = TimeBasedTariff.new("Den", "06:00", "22:00", 40, 30, 45)
    assert window.is_active(time(6, 0))
    assert window.is_active(time(21, 59))
    assert not window.is_active(time(22, 0))
    assert not TimeBasedTariff.new("Nic", "10:00", "10:00", 0, 0, 0).is_active(time(10, 0))


def test_default_tariff_rounds_half_up(plain_tariff):
    # 50 + 2.5 * 41 = 152.5 -> 153 (round() would give 152)
    tariff = Tariff(starting_fee=50, price_per_km_car=41, price_per_km_van=60)
    assert price(["Pavlov", "Hustopeče"], VehicleClass.CAR, 2.5, AFTERNOON, tariff) == 153
    assert price(["Pavlov", "Hustopeče"], VehicleClass.VAN, 2.5, AFTERNOON, plain_tariff) == 200


def test_large_party_pays_van_price_in_a_car(tariff):
    stops = ["Pavlov", "Hustopeče"]
    assert price(stops, VehicleClass.CAR, 10, AFTERNOON, tariff, passengers=5) == 50 + 10 * 60
    assert price(stops, VehicleClass.CAR, 10, AFTERNOON, tariff, passengers=4) == 50 + 10 * 40
    assert charged_class(VehicleClass.CAR, 6, van_passenger_threshold=6) == VehicleClass.CAR


def test_price_rejects_bad_input(tariff):
    with pytest.raises(ValueError):
        price(["Pavlov"], VehicleClass.CAR, 1, AFTERNOON, tariff)
    with pytest.raises(ValueError):
        price(["Pavlov", "Hustopeče"], VehicleClass.CAR, -1, AFTERNOON, tariff)


def test_parse_clock():
    assert parse_clock("06:30") == time(6, 30)
    assert parse_clock(time(7, 0)) == time(7, 0)


def test_tariff_validate():
    with pytest.raises(ValueError):
        Tariff(starting_fee=-1, price_per_km_car=40, price_per_km_van=60).validate()
    with pytest.raises(ValueError):
        Tariff(50, 40, 60, flat_rates=[FlatRateRule("x", -5, 10)]).validate()
