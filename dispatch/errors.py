"""
Purpose: Error taxonomy of the dispatch engine.
What it does:
Every failure the engine can surface derives from DispatchError and carries
the structured detail a caller needs to render a specific message
(the offending address, the required capacity, the provider name).

Rule: No I/O here, exceptions only.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple

LatLon = Tuple[float, float]


class DispatchError(Exception):
    """Base class for every typed engine failure."""

    #stable machine readable code, copied onto ErrorResult.kind
    kind: str = "dispatch_error"

    @property
    def detail(self) -> str:
        return str(self)


class AddressNotFound(DispatchError):
    """Every geocoding fallback step failed for one address."""

    kind = "address_not_found"

    def __init__(self, address: str):
        self.address = address
        super().__init__(f"Could not find coordinates for address: {address}")


class RouteUnavailable(DispatchError):
    """The routing provider returned no path between two resolved coordinates."""

    kind = "route_unavailable"

    def __init__(self, origin: LatLon, destination: LatLon, reason: Optional[str] = None):
        self.origin = origin
        self.destination = destination
        self.reason = reason
        message = f"No route from {origin} to {destination}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class NoEligibleVehicleReason(str, Enum):
    NONE_IN_SERVICE = "none_in_service"
    INSUFFICIENT_CAPACITY = "insufficient_capacity"


class NoEligibleVehicle(DispatchError):
    """
    The eligibility filter emptied the fleet.
    The two causes are kept apart so the caller can say "fleet full"
    or "need a bigger vehicle".
    """

    kind = "no_eligible_vehicle"

    def __init__(self, reason: NoEligibleVehicleReason, required_capacity: Optional[int] = None):
        self.reason = reason
        self.required_capacity = required_capacity
        if reason == NoEligibleVehicleReason.INSUFFICIENT_CAPACITY:
            message = f"No available vehicle can seat {required_capacity} passengers"
        else:
            message = "No vehicles in service"
        super().__init__(message)


class ProviderTimeout(DispatchError):
    """An external call exceeded its time bound."""

    kind = "provider_timeout"

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"Provider '{provider}' timed out")


class CancellationRequested(DispatchError):
    """The caller abandoned the request mid-flight."""

    kind = "cancelled"

    def __init__(self, message: str = "Dispatch request was cancelled"):
        super().__init__(message)
