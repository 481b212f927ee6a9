"""
Purpose: Tariff configuration models.
What it does:
- Tariff: default starting fee + per-km rates per vehicle class
- FlatRateRule: named route with a fixed Car/Van price
- TimeBasedTariff: its own fee/rates inside a time-of-day window

Rule: No pricing logic here. Models only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time
from typing import List, Optional, Tuple

from fleet.models import VehicleClass


def parse_clock(value: str | time) -> time:
    """'HH:MM' -> datetime.time"""
    if isinstance(value, time):
        return value
    hours, minutes = value.strip().split(":")
    return time(int(hours), int(minutes))


@dataclass(frozen=True)
class FlatRateRule:
    """
    A fixed-price route. Matches on route identity, never on distance.

    Without endpoints the rule is a "within town" rate: pickup and destination
    must both mention `keyword` (defaults to `name`). With endpoints (a, b) the
    ride must connect a and b, in either direction.
    """
    name: str
    price_car: int
    price_van: int
    keyword: Optional[str] = None
    endpoints: Optional[Tuple[str, str]] = None

    def price_for(self, vehicle_class: VehicleClass) -> int:
        return self.price_van if vehicle_class == VehicleClass.VAN else self.price_car


@dataclass(frozen=True)
class TimeBasedTariff:
    """
    Active for start_time <= t < end_time. start > end wraps over midnight (22:00-06:00).
    """
    name: str
    start_time: time
    end_time: time
    starting_fee: float
    price_per_km_car: float
    price_per_km_van: float

    @classmethod
    def new(cls, name: str, start_time: str | time, end_time: str | time,
            starting_fee: float, price_per_km_car: float, price_per_km_van: float) -> TimeBasedTariff:
        return cls(
            name=name,
            start_time=parse_clock(start_time),
            end_time=parse_clock(end_time),
            starting_fee=starting_fee,
            price_per_km_car=price_per_km_car,
            price_per_km_van=price_per_km_van,
        )

    def is_active(self, at: time) -> bool:
        start, end = self.start_time, self.end_time
        if start == end:
            # zero-length window
            return False
        if start < end:
            return start <= at < end
        return at >= start or at < end

    def rate_for(self, vehicle_class: VehicleClass) -> float:
        return self.price_per_km_van if vehicle_class == VehicleClass.VAN else self.price_per_km_car


@dataclass(frozen=True)
class Tariff:
    starting_fee: float
    price_per_km_car: float
    price_per_km_van: float
    flat_rates: List[FlatRateRule] = field(default_factory=list)
    time_based_tariffs: List[TimeBasedTariff] = field(default_factory=list)

    def rate_for(self, vehicle_class: VehicleClass) -> float:
        return self.price_per_km_van if vehicle_class == VehicleClass.VAN else self.price_per_km_car

    def validate(self) -> None:
        if self.starting_fee < 0 or self.price_per_km_car < 0 or self.price_per_km_van < 0:
            raise ValueError("tariff fees and rates must be >= 0")
        for rule in self.flat_rates:
            if rule.price_car < 0 or rule.price_van < 0:
                raise ValueError(f"flat rate '{rule.name}' has a negative price")
        for window in self.time_based_tariffs:
            if window.starting_fee < 0 or window.price_per_km_car < 0 or window.price_per_km_van < 0:
                raise ValueError(f"time tariff '{window.name}' has a negative fee or rate")
