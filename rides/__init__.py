"""
Rides domain: the incoming request and stop-order optimization.

Public API:
- RideRequest, IMMEDIATE
- optimize_stop_order, StopOrderResult
"""

from .models import RideRequest, IMMEDIATE
from .stop_order import optimize_stop_order, StopOrderResult, apply_order

__all__ = [
    "RideRequest",
    "IMMEDIATE",
    "optimize_stop_order",
    "StopOrderResult",
    "apply_order",
]
