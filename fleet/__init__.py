"""
Fleet domain: vehicle snapshot models, eligibility rules, dispatch policy
and cost reporting.

Public API:
- Vehicle, VehicleClass, VehicleStatus, FuelType
- DispatchPolicy, default_dispatch_policy
"""

from .models import Vehicle, VehicleClass, VehicleStatus, FuelType, CLASS_CAPACITY, now_ms
from .policy import DispatchPolicy, default_dispatch_policy

__all__ = [
    "Vehicle",
    "VehicleClass",
    "VehicleStatus",
    "FuelType",
    "CLASS_CAPACITY",
    "now_ms",
    "DispatchPolicy",
    "default_dispatch_policy",
]
