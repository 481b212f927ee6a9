from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta

import pytest

from dispatch.errors import AddressNotFound, NoEligibleVehicle, NoEligibleVehicleReason
from dispatch.models import ErrorResult
from fleet.costs import (
    check_service_required,
    fuel_cost,
    record_odometer,
    ride_distance_from_mileage,
    vehicle_fuel_cost,
)
from fleet.models import FuelType, Vehicle, VehicleClass, VehicleStatus
from fleet.policy import DispatchPolicy, default_dispatch_policy
from rides.models import IMMEDIATE, RideRequest

NOW = datetime(2026, 10, 19, 14, 0)


def test_ride_request_defaults_to_immediate():
    request = RideRequest.new(["Náměstí, Mikulov", "Hustopeče"])

    assert request.pickup_time == IMMEDIATE
    assert request.is_immediate
    assert request.scheduled_at is None
    assert request.pickup == "Náměstí, Mikulov"
    assert request.destination == "Hustopeče"


def test_ride_request_is_immutable():
    stops = ["Náměstí, Mikulov", "Hustopeče"]
    request = RideRequest.new(stops)
    stops.append("Brno")

    assert request.stops == ("Náměstí, Mikulov", "Hustopeče")
    with pytest.raises(FrozenInstanceError):
        request.passengers = 3


def test_scheduled_pickup_must_be_in_future():
    later = NOW + timedelta(hours=2)
    request = RideRequest.new(["A", "B"], pickup_time=later, now=NOW)
    assert request.scheduled_at == later

    with pytest.raises(ValueError):
        RideRequest.new(["A", "B"], pickup_time=NOW - timedelta(minutes=1), now=NOW)


@pytest.mark.parametrize("kwargs", [
    {"stops": ["Only pickup"]},
    {"stops": ["A", "  "]},
    {"stops": ["A", "B"], "passengers": 0},
    {"stops": ["A", "B"], "pickup_time": "tomorrow-ish"},
])
def test_invalid_ride_requests(kwargs):
    with pytest.raises(ValueError):
        RideRequest.new(**kwargs)


def test_vehicle_capacity_follows_class():
    assert Vehicle.new("1", "Octavia", "Mikulov", vehicle_class="car").capacity == 4
    van = Vehicle.new("2", "Transit", "Mikulov", vehicle_class=VehicleClass.VAN, status="busy")
    assert van.capacity == 8
    assert van.status == VehicleStatus.BUSY


def test_error_result_carries_structure():
    missing = ErrorResult.from_error(AddressNotFound("xyz123nonsense"))
    assert missing.kind == "address_not_found"
    assert missing.address == "xyz123nonsense"
    assert "xyz123nonsense" in missing.detail

    full = ErrorResult.from_error(NoEligibleVehicle(NoEligibleVehicleReason.INSUFFICIENT_CAPACITY, 7))
    assert full.reason == "insufficient_capacity"
    assert full.required_capacity == 7


def test_policy_validation():
    assert default_dispatch_policy().busy_buffer_minutes == 5
    with pytest.raises(ValueError):
        DispatchPolicy(max_parallel_lookups=0).validate()
    with pytest.raises(ValueError):
        DispatchPolicy(provider_timeout_seconds=0).validate()


def test_fuel_cost():
    assert fuel_cost(100, 8.5, 38.9) == 330.65
    assert fuel_cost(0, 8.5, 38.9) == 0.0
    assert fuel_cost(10, None, 38.9) == 0.0

    vehicle = Vehicle.new("1", "Octavia", "Mikulov", fuel_type="diesel", fuel_consumption=6.0)
    assert vehicle_fuel_cost(vehicle, 50, {FuelType.DIESEL: 40.0}) == 120.0


def test_ride_distance_from_mileage():
    assert ride_distance_from_mileage(45000, 45032) == 32
    assert ride_distance_from_mileage(45032, 45000) is None
    assert ride_distance_from_mileage(None, 45000) is None


def test_service_check():
    vehicle = Vehicle(
        id="1", name="Octavia", license_plate="1AX 8910", vehicle_class=VehicleClass.CAR,
        location="Mikulov", mileage=56000, service_interval=15000, last_service_mileage=40000,
    )
    check = check_service_required(vehicle)
    assert check.required
    assert check.km_overdue == 1000

    serviced = record_odometer(Vehicle.new("2", "Transit", "Mikulov"), 1000)
    assert serviced.mileage == 1000
    assert check_service_required(serviced) is None

    with pytest.raises(ValueError):
        record_odometer(serviced, 900)
