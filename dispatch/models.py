"""
Purpose: Output models of the dispatch engine.
What it does:
- AssignmentAlternative: one ranked candidate (vehicle, ETA, price, distances)
- AssignmentResult: primary pick + the full ranked list (primary included at index 0)
- ErrorResult: typed failure with the structured detail of its DispatchError

Rule: Built fresh per request, never persisted by the engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from fleet.models import Vehicle
from rides.models import RideRequest
from .errors import (
    AddressNotFound,
    DispatchError,
    NoEligibleVehicle,
    ProviderTimeout,
    RouteUnavailable,
)

LatLon = Tuple[float, float]


@dataclass(frozen=True)
class AssignmentAlternative:
    vehicle: Vehicle
    eta_min: int
    price: int
    approach_distance_km: float  # vehicle location -> pickup
    total_distance_km: float  # approach + ride, the priced distance
    vehicle_coordinates: LatLon


@dataclass(frozen=True)
class AssignmentResult:
    request: RideRequest
    stops: Tuple[str, ...]  # possibly reordered, endpoints unchanged
    stop_coordinates: Tuple[LatLon, ...]
    ride_distance_km: float  # first stop -> last stop
    ride_duration_min: int
    route_geometry: List[LatLon]
    alternatives: List[AssignmentAlternative]
    stops_reordered: bool = False

    @property
    def primary(self) -> AssignmentAlternative:
        return self.alternatives[0]

    @property
    def vehicle(self) -> Vehicle:
        return self.primary.vehicle

    @property
    def eta_min(self) -> int:
        return self.primary.eta_min

    @property
    def price(self) -> int:
        return self.primary.price

    @property
    def total_distance_km(self) -> float:
        return self.primary.total_distance_km

    def alternative_for(self, vehicle_id: str) -> Optional[AssignmentAlternative]:
        """Lookup used when the dispatcher re-selects a different vehicle."""
        for alternative in self.alternatives:
            if alternative.vehicle.id == vehicle_id:
                return alternative
        return None


@dataclass(frozen=True)
class ErrorResult:
    kind: str
    detail: str
    address: Optional[str] = None
    required_capacity: Optional[int] = None
    reason: Optional[str] = None
    provider: Optional[str] = None
    origin: Optional[LatLon] = None
    destination: Optional[LatLon] = None

    @classmethod
    def from_error(cls, error: DispatchError) -> ErrorResult:
        fields = {}
        if isinstance(error, AddressNotFound):
            fields["address"] = error.address
        elif isinstance(error, NoEligibleVehicle):
            fields["reason"] = error.reason.value
            fields["required_capacity"] = error.required_capacity
        elif isinstance(error, ProviderTimeout):
            fields["provider"] = error.provider
        elif isinstance(error, RouteUnavailable):
            fields["origin"] = error.origin
            fields["destination"] = error.destination
            fields["reason"] = error.reason

        return cls(kind=error.kind, detail=error.detail, **fields)
