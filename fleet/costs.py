"""
Purpose: Per-ride cost reporting for the fleet.
What it does:
Fuel cost of a ride, distance from odometer readings and the service-due
check. Only used for reporting, never for ranking or pricing.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from .models import Vehicle


def ride_distance_from_mileage(start_mileage: Optional[int], end_mileage: Optional[int]) -> Optional[int]:
    if not start_mileage or not end_mileage or end_mileage < start_mileage:
        return None
    return end_mileage - start_mileage


def fuel_cost(distance_km: float, fuel_consumption: Optional[float], fuel_price: float) -> float:
    """
    distance * L/100km / 100 * price per litre, to two decimals.
    Missing inputs cost nothing.
    """
    if not distance_km or not fuel_consumption or not fuel_price:
        return 0.0
    litres = distance_km * fuel_consumption / 100.0
    return round(litres * fuel_price, 2)


def vehicle_fuel_cost(vehicle: Vehicle, distance_km: float, fuel_prices: dict) -> float:
    """fuel_prices maps FuelType -> price per litre."""
    if vehicle.fuel_type is None:
        return 0.0
    return fuel_cost(distance_km, vehicle.fuel_consumption, fuel_prices.get(vehicle.fuel_type, 0.0))


def record_odometer(vehicle: Vehicle, end_mileage: int) -> Vehicle:
    """New snapshot with the odometer moved to end_mileage."""
    if vehicle.mileage is not None and end_mileage < vehicle.mileage:
        raise ValueError(f"Odometer cannot go backwards: {end_mileage} < {vehicle.mileage}")
    return replace(vehicle, mileage=end_mileage)


@dataclass(frozen=True)
class ServiceCheck:
    required: bool
    km_overdue: int
    km_remaining: Optional[int] = None


def check_service_required(vehicle: Vehicle) -> Optional[ServiceCheck]:
    """
    None when the vehicle lacks mileage/service data.
    """
    if not vehicle.mileage or not vehicle.service_interval or vehicle.last_service_mileage is None:
        return None

    since_service = vehicle.mileage - vehicle.last_service_mileage
    overdue = since_service - vehicle.service_interval

    if overdue > 0:
        return ServiceCheck(required=True, km_overdue=overdue, km_remaining=0)

    return ServiceCheck(required=False, km_overdue=0, km_remaining=-overdue)
