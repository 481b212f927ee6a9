"""
Purpose: Vehicle Ranker (the “who is best” layer).
What it does:
Accepts a RideRequest and a fleet snapshot, then:

1. filters vehicles by reconciled availability and capacity
2. optionally reorders intermediate stops (endpoints fixed)
3. computes the ride route once
4. fans out per-vehicle ETA lookups (vehicle location -> pickup) on a thread pool
5. prices every candidate and sorts by (ETA, vehicle id)

Vehicles whose ETA cannot be computed are dropped from the ranking, never
kept as "available but slow". The sort happens after every lookup is back,
so thread timing never changes the order.
"""

from __future__ import annotations

import logging
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple, Union

from fleet.models import Vehicle
from fleet.policy import DispatchPolicy, default_dispatch_policy
from fleet.selection import filter_eligible_vehicles
from geocoding.resolver import AddressResolver
from rides.models import RideRequest
from rides.stop_order import apply_order, optimize_stop_order
from routing.eta_service import eta_minutes
from routing.matrix_adapter import DistanceMatrixProvider, distance_matrix_provider_from_osrm_client
from routing.osrm_client import OSRMError
from routing.route_service import RouteCalculator, RouteResult
from tariffs.models import Tariff
from tariffs.pricer import price
from .cancellation import CancellationToken
from .errors import (
    AddressNotFound,
    CancellationRequested,
    DispatchError,
    ProviderTimeout,
    RouteUnavailable,
)
from .models import AssignmentAlternative, AssignmentResult, ErrorResult

LatLon = Tuple[float, float]

logger = logging.getLogger(__name__)

# how often the collector wakes up to look at the cancellation token
CANCEL_POLL_SECONDS = 0.05

# failures that exclude one vehicle instead of failing the request
_PER_VEHICLE_FAILURES = (AddressNotFound, RouteUnavailable, ProviderTimeout)


class VehicleRanker:
    def __init__(
        self,
        resolver: AddressResolver,
        routes: RouteCalculator,
        distance_matrix_provider: Optional[DistanceMatrixProvider] = None,
        policy: Optional[DispatchPolicy] = None,
    ):
        self.resolver = resolver
        self.routes = routes
        self.distance_matrix_provider = distance_matrix_provider
        self.policy = policy or default_dispatch_policy()
        self.policy.validate()

    def rank(
        self,
        request: RideRequest,
        fleet: Sequence[Vehicle],
        tariff: Tariff,
        optimize_stops: bool = False,
        *,
        locale: str = "cs",
        now: Optional[datetime] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Union[AssignmentResult, ErrorResult]:
        """
        One full ranking pass. Every engine failure comes back as an ErrorResult;
        the result is never partial.
        """
        try:
            return self.rank_or_raise(
                request, fleet, tariff, optimize_stops,
                locale=locale, now=now, cancel_token=cancel_token,
            )
        except DispatchError as exc:
            logger.info(f"Dispatch failed ({exc.kind}): {exc.detail}")
            return ErrorResult.from_error(exc)

    def rank_or_raise(
        self,
        request: RideRequest,
        fleet: Sequence[Vehicle],
        tariff: Tariff,
        optimize_stops: bool = False,
        *,
        locale: str = "cs",
        now: Optional[datetime] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> AssignmentResult:
        cancel_token = cancel_token or CancellationToken()
        now = now or datetime.now()
        now_ms = int(now.timestamp() * 1000)

        cancel_token.raise_if_cancelled()

        # 1) hard eligibility, in id order so failures are reported deterministically
        eligible = sorted(
            filter_eligible_vehicles(list(fleet), request.passengers, now=now_ms),
            key=lambda vehicle: vehicle.id,
        )

        # 2) stops -> coordinates, optional reordering
        stops = list(request.stops)
        stop_coordinates = [self._resolve(stop, locale, cancel_token) for stop in stops]

        reordered = False
        if optimize_stops and len(stops) > 2:
            stops, stop_coordinates, reordered = self._optimize(stops, stop_coordinates, cancel_token)

        # 3) the ride itself, shared by every candidate
        cancel_token.raise_if_cancelled()
        ride_route = self.routes.compute_route(stop_coordinates)

        # 4) per-vehicle approach legs
        approaches = self._approach_routes(eligible, stop_coordinates[0], locale, cancel_token)

        # 5) price and sort once everything is collected
        alternatives = []
        for vehicle in eligible:
            if vehicle.id not in approaches:
                continue
            vehicle_coordinates, approach = approaches[vehicle.id]
            total_km = round(approach.distance_km + ride_route.distance_km, 1)
            alternatives.append(
                AssignmentAlternative(
                    vehicle=vehicle,
                    eta_min=eta_minutes(approach.duration_min),
                    price=price(
                        stops,
                        vehicle.vehicle_class,
                        total_km,
                        now,
                        tariff,
                        passengers=request.passengers,
                        van_passenger_threshold=self.policy.van_passenger_threshold,
                    ),
                    approach_distance_km=approach.distance_km,
                    total_distance_km=total_km,
                    vehicle_coordinates=vehicle_coordinates,
                )
            )

        alternatives.sort(key=lambda alternative: (alternative.eta_min, alternative.vehicle.id))

        primary = alternatives[0]
        logger.info(
            f"Ranked {len(alternatives)}/{len(eligible)} eligible vehicles; "
            f"primary {primary.vehicle.id} eta={primary.eta_min}min price={primary.price}"
        )

        return AssignmentResult(
            request=request,
            stops=tuple(stops),
            stop_coordinates=tuple(stop_coordinates),
            ride_distance_km=ride_route.distance_km,
            ride_duration_min=eta_minutes(ride_route.duration_min),
            route_geometry=ride_route.geometry,
            alternatives=alternatives,
            stops_reordered=reordered,
        )

    # -------------------------
    # Internal helpers
    # -------------------------

    def _resolve(self, address: str, locale: str, cancel_token: CancellationToken) -> LatLon:
        cancel_token.raise_if_cancelled()
        return self.resolver.resolve(address, locale, cancel_token=cancel_token)

    def _optimize(
        self,
        stops: List[str],
        stop_coordinates: List[LatLon],
        cancel_token: CancellationToken,
    ) -> Tuple[List[str], List[LatLon], bool]:
        cancel_token.raise_if_cancelled()

        provider = self.distance_matrix_provider
        if provider is None:
            provider = distance_matrix_provider_from_osrm_client(self.routes.client)
            self.distance_matrix_provider = provider

        try:
            result = optimize_stop_order(
                stop_coordinates,
                provider,
                max_exhaustive_waypoints=self.policy.max_optimized_waypoints,
            )
        except OSRMError as exc:
            logger.warning(f"Distance matrix for stop reordering failed: {exc}")
            raise RouteUnavailable(stop_coordinates[0], stop_coordinates[-1], reason=str(exc)) from exc

        if not result.exhaustive:
            logger.info(
                f"{len(stops) - 2} waypoints exceed the exhaustive cap of "
                f"{self.policy.max_optimized_waypoints}, used nearest-neighbour ordering"
            )

        reordered = result.order != list(range(len(stops)))
        return apply_order(stops, result.order), apply_order(stop_coordinates, result.order), reordered

    def _approach(self, vehicle: Vehicle, pickup: LatLon, locale: str,
                  cancel_token: CancellationToken) -> Tuple[LatLon, RouteResult]:
        vehicle_coordinates = self._resolve(vehicle.location, locale, cancel_token)
        cancel_token.raise_if_cancelled()
        return vehicle_coordinates, self.routes.compute_route([vehicle_coordinates, pickup])

    def _approach_routes(
        self,
        eligible: List[Vehicle],
        pickup: LatLon,
        locale: str,
        cancel_token: CancellationToken,
    ) -> Dict[str, Tuple[LatLon, RouteResult]]:
        """
        vehicle id -> (vehicle coordinates, approach route) for every vehicle
        whose ETA could be computed.
        """
        workers = min(len(eligible), self.policy.max_parallel_lookups)
        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="eta")
        try:
            futures: List[Future] = [
                executor.submit(self._approach, vehicle, pickup, locale, cancel_token)
                for vehicle in eligible
            ]

            pending = set(futures)
            while pending:
                _, pending = wait(pending, timeout=CANCEL_POLL_SECONDS, return_when=FIRST_COMPLETED)
                if cancel_token.cancelled:
                    raise CancellationRequested()
        finally:
            # drop queued lookups; running ones stop at their next token check
            executor.shutdown(wait=False, cancel_futures=True)

        approaches: Dict[str, Tuple[LatLon, RouteResult]] = {}
        first_failure: Optional[DispatchError] = None

        for vehicle, future in zip(eligible, futures):
            try:
                approaches[vehicle.id] = future.result()
            except _PER_VEHICLE_FAILURES as exc:
                logger.warning(f"Excluding vehicle {vehicle.id} from ranking: {exc.detail}")
                if first_failure is None:
                    first_failure = exc

        if not approaches:
            # nothing rankable; surface why the first vehicle could not be reached
            raise first_failure

        return approaches
