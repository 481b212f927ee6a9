"""
Purpose: Hard eligibility rules for choosing vehicles.
What it does:
Accepts a fleet snapshot and a passenger count, reconciles expired
Busy/OutOfService timers, and keeps only vehicles that are available
and large enough. Ranking by ETA happens later in dispatch.ranker.
"""

from typing import List, Optional

from dispatch.errors import NoEligibleVehicle, NoEligibleVehicleReason
from dispatch.state_machines.vehicle_state import reconcile
from .models import Vehicle, VehicleStatus


def filter_eligible_vehicles(vehicles: List[Vehicle], required_capacity: int = 1,
                             now: Optional[int] = None) -> List[Vehicle]:
    """
    Returns reconciled vehicles that are available and have enough seats.

    Raises NoEligibleVehicle when nothing is left, telling apart
    "nobody is available" from "nobody available is big enough".
    """
    available = []

    for vehicle in vehicles:
        current = reconcile(vehicle, now)
        if current.status != VehicleStatus.AVAILABLE:
            continue

        available.append(current)

    if not available:
        raise NoEligibleVehicle(NoEligibleVehicleReason.NONE_IN_SERVICE)

    eligible = [vehicle for vehicle in available if vehicle.capacity >= required_capacity]

    if not eligible:
        raise NoEligibleVehicle(NoEligibleVehicleReason.INSUFFICIENT_CAPACITY, required_capacity=required_capacity)

    return eligible
