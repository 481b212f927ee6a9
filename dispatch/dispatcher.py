"""
Purpose: Orchestrator / decision pipeline (the "glue").
What it does:
Accepts a RideRequest plus the caller's fleet snapshot and tariff, runs the
ranking pipeline, and hands back an AssignmentResult or ErrorResult.
It also applies the caller's ride lifecycle events (confirmed, completed,
cancelled) to vehicles through the availability state machine. Persisting
the results, notifying drivers and rendering are the caller's job.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Sequence, Union

from fleet.models import Vehicle
from fleet.policy import DispatchPolicy, default_dispatch_policy
from geocoding.cache import AddressCache
from geocoding.resolver import AddressResolver
from rides.models import RideRequest
from routing.navigation import NavigationApp, navigation_url
from routing.osrm_client import OSRMClient
from routing.route_service import RouteCalculator
from tariffs.models import Tariff
from .cancellation import CancellationToken
from .models import AssignmentResult, ErrorResult
from .ranker import VehicleRanker
from .state_machines import vehicle_state

logger = logging.getLogger(__name__)


class Dispatcher:
    """
    Coordinates one request/response cycle of vehicle assignment.
    """
    def __init__(self, ranker: VehicleRanker, policy: Optional[DispatchPolicy] = None, locale: str = "cs"):
        self.ranker = ranker
        self.policy = policy or ranker.policy
        self.locale = locale

    @classmethod
    def from_environment(
        cls,
        cache: Optional[AddressCache] = None,
        policy: Optional[DispatchPolicy] = None,
        locale: str = "cs",
    ) -> Dispatcher:
        """
        Wires the production providers from environment settings (.env).
        Pass a long-lived `cache` to share resolved addresses across requests.
        """
        policy = policy or default_dispatch_policy()
        timeout = policy.provider_timeout_seconds

        resolver = AddressResolver.default(cache=cache, timeout=timeout)
        routes = RouteCalculator(OSRMClient(timeout=timeout))
        return cls(VehicleRanker(resolver, routes, policy=policy), policy=policy, locale=locale)

    def dispatch_ride(
        self,
        request: RideRequest,
        fleet: Sequence[Vehicle],
        tariff: Tariff,
        optimize_stops: bool = False,
        *,
        now: Optional[datetime] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Union[AssignmentResult, ErrorResult]:
        logger.info(
            f"Dispatching ride for {request.passengers} passenger(s), {len(request.stops)} stops, "
            f"fleet of {len(fleet)}"
        )
        return self.ranker.rank(
            request,
            fleet,
            tariff,
            optimize_stops,
            locale=self.locale,
            now=now,
            cancel_token=cancel_token,
        )

    # -------------------------
    # Ride lifecycle events from the caller
    # -------------------------

    def confirm_assignment(
        self,
        result: AssignmentResult,
        vehicle: Optional[Vehicle] = None,
        now: Optional[datetime] = None,
    ) -> Vehicle:
        """
        The dispatcher accepted `vehicle` (default: the primary pick) for this ride.
        Returns the vehicle snapshot in BUSY with its free_at timer set.
        """
        vehicle = vehicle or result.vehicle
        alternative = result.alternative_for(vehicle.id)
        if alternative is None:
            raise vehicle_state.VehicleStateException(
                f"Vehicle {vehicle.id} was not among the ranked alternatives"
            )

        return vehicle_state.confirm_assignment(
            vehicle,
            eta_min=alternative.eta_min,
            ride_duration_min=result.ride_duration_min,
            buffer_min=self.policy.busy_buffer_minutes,
            destination=result.stops[-1],
            now=_to_ms(now),
        )

    def complete_ride(self, vehicle: Vehicle, now: Optional[datetime] = None) -> Vehicle:
        return vehicle_state.complete_ride(vehicle, now=_to_ms(now))

    def cancel_ride(self, vehicle: Vehicle, now: Optional[datetime] = None) -> Vehicle:
        return vehicle_state.cancel_ride(vehicle, now=_to_ms(now))

    def navigation_link(self, result: AssignmentResult, app: NavigationApp = NavigationApp.GOOGLE) -> str:
        return navigation_url(list(result.stop_coordinates), app)


def replace_vehicle(fleet: Sequence[Vehicle], updated: Vehicle) -> List[Vehicle]:
    """
    New fleet snapshot with `updated` swapped in by id.
    """
    return [updated if vehicle.id == updated.id else vehicle for vehicle in fleet]


def _to_ms(now: Optional[datetime]) -> Optional[int]:
    if now is None:
        return None
    return int(now.timestamp() * 1000)
