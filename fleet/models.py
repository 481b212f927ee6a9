"""
Purpose: Core data models for the fleet domain.
What it does:
Defines the structure of a Vehicle, its class and availability status,
without relying on any storage layer. The engine receives these as a
snapshot from the caller.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class VehicleClass(str, Enum):
    CAR = "CAR"
    VAN = "VAN"


# fixed seating per class
CLASS_CAPACITY = {
    VehicleClass.CAR: 4,
    VehicleClass.VAN: 8,
}


class VehicleStatus(str, Enum):
    """
    Operational availability of a vehicle.
    Busy and OutOfService may carry a free_at timer; the others are operator-driven only.
    """
    AVAILABLE = "AVAILABLE"
    BUSY = "BUSY"
    OUT_OF_SERVICE = "OUT_OF_SERVICE"
    BREAK = "BREAK"
    NOT_DRIVING_TODAY = "NOT_DRIVING_TODAY"


# statuses that expire on their own once free_at has passed
TIMED_STATUSES = frozenset({VehicleStatus.BUSY, VehicleStatus.OUT_OF_SERVICE})


class FuelType(str, Enum):
    DIESEL = "DIESEL"
    PETROL = "PETROL"


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class Vehicle:
    """
    A stateless snapshot of one vehicle at a specific point in time.
    """
    id: str
    name: str
    license_plate: str
    vehicle_class: VehicleClass
    location: str  # free text address, resolved by the engine
    status: VehicleStatus = VehicleStatus.AVAILABLE

    # epoch millis when a Busy/OutOfService vehicle is free again
    free_at: Optional[int] = None

    # cost reporting only
    fuel_type: Optional[FuelType] = None
    fuel_consumption: Optional[float] = None  # L/100km
    mileage: Optional[int] = None
    service_interval: Optional[int] = None  # km
    last_service_mileage: Optional[int] = None

    # weak reference, the engine never loads the driver
    driver_id: Optional[str] = None

    @property
    def capacity(self) -> int:
        return CLASS_CAPACITY[self.vehicle_class]

    @classmethod
    def new(
        cls,
        vehicle_id: str,
        name: str,
        location: str,
        vehicle_class: str | VehicleClass = VehicleClass.CAR,
        status: str | VehicleStatus = VehicleStatus.AVAILABLE,
        license_plate: str = "",
        free_at: Optional[int] = None,
        driver_id: Optional[str] = None,
        fuel_type: str | FuelType | None = None,
        fuel_consumption: Optional[float] = None,
    ) -> Vehicle:
        if isinstance(vehicle_class, str):
            vehicle_class = VehicleClass(vehicle_class.upper())
        if isinstance(status, str):
            status = VehicleStatus(status.upper())
        if isinstance(fuel_type, str):
            fuel_type = FuelType(fuel_type.upper())

        return cls(
            id=str(vehicle_id),
            name=name,
            license_plate=license_plate,
            vehicle_class=vehicle_class,
            location=location,
            status=status,
            free_at=free_at,
            driver_id=driver_id,
            fuel_type=fuel_type,
            fuel_consumption=fuel_consumption,
        )
