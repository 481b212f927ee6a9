"""
Purpose: Tariff Pricer, route + vehicle class + time of day -> integer price.
What it does:
Evaluates three layers in a fixed order, first match wins:

1. flat-rate override (route identity, distance ignored)
2. time-based tariff whose window contains `now`
3. default tariff: starting fee + km * rate

Parties larger than the van threshold are charged the Van price/rate even
when a Car drives them.
"""

from __future__ import annotations

import logging
from datetime import datetime, time
from typing import Optional, Sequence

from fleet.models import VehicleClass
from routing.eta_service import round_half_up
from .models import FlatRateRule, Tariff

logger = logging.getLogger(__name__)

DEFAULT_VAN_PASSENGER_THRESHOLD = 4


def _contains(text: str, needle: str) -> bool:
    return needle.casefold() in text.casefold()


def flat_rate_matches(rule: FlatRateRule, pickup: str, destination: str) -> bool:
    if rule.endpoints:
        a, b = rule.endpoints
        return (_contains(pickup, a) and _contains(destination, b)) or (
            _contains(pickup, b) and _contains(destination, a)
        )

    keyword = (rule.keyword or rule.name).strip()
    if not keyword:
        return False
    return _contains(pickup, keyword) and _contains(destination, keyword)


def find_flat_rate(tariff: Tariff, pickup: str, destination: str) -> Optional[FlatRateRule]:
    for rule in tariff.flat_rates:
        if flat_rate_matches(rule, pickup, destination):
            return rule
    return None


def charged_class(vehicle_class: VehicleClass, passengers: Optional[int],
                  van_passenger_threshold: int = DEFAULT_VAN_PASSENGER_THRESHOLD) -> VehicleClass:
    if passengers is not None and passengers > van_passenger_threshold:
        return VehicleClass.VAN
    return vehicle_class


def _clock(now: datetime | time) -> time:
    if isinstance(now, datetime):
        return now.time()
    return now


def price(
    stops: Sequence[str],
    vehicle_class: VehicleClass,
    distance_km: float,
    now: datetime | time,
    tariff: Tariff,
    passengers: Optional[int] = None,
    van_passenger_threshold: int = DEFAULT_VAN_PASSENGER_THRESHOLD,
) -> int:
    if len(stops) < 2:
        raise ValueError("A priced ride needs at least a pickup and a destination")
    if distance_km < 0:
        raise ValueError("distance_km must be >= 0")

    billed_class = charged_class(vehicle_class, passengers, van_passenger_threshold)
    pickup, destination = stops[0], stops[-1]

    # 1) flat rate
    rule = find_flat_rate(tariff, pickup, destination)
    if rule is not None:
        logger.debug(f"Flat rate '{rule.name}' applies to {pickup!r} -> {destination!r}")
        return int(rule.price_for(billed_class))

    # 2) time window
    clock = _clock(now)
    for window in tariff.time_based_tariffs:
        if window.is_active(clock):
            logger.debug(f"Time tariff '{window.name}' active at {clock}")
            return round_half_up(window.starting_fee + distance_km * window.rate_for(billed_class))

    # 3) default
    return round_half_up(tariff.starting_fee + distance_km * tariff.rate_for(billed_class))
