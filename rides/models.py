"""
Purpose: Domain model for an incoming ride request.
What it does:
- RideRequest (customer, ordered stops, passengers, pickup time, notes)
- IMMEDIATE pickup sentinel

Rule: No routing, no pricing. Models + construction-time validation only.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence, Tuple

# pickup_time value for "as soon as possible"
IMMEDIATE = "ihned"


@dataclass(frozen=True)
class RideRequest:
    """
    Immutable once handed to the engine.
    stops[0] is the pickup, stops[-1] the destination, anything between is a waypoint.
    """

    customer_name: str
    customer_phone: str
    stops: Tuple[str, ...]
    passengers: int = 1
    pickup_time: str = IMMEDIATE
    notes: str = ""

    def __post_init__(self):
        # accept any sequence but store a tuple so the request stays immutable
        object.__setattr__(self, "stops", tuple(self.stops))

        if len(self.stops) < 2:
            raise ValueError("A ride needs at least a pickup and a destination stop")
        if any(not stop or not stop.strip() for stop in self.stops):
            raise ValueError("Stops must be non-empty addresses")
        if self.passengers < 1:
            raise ValueError("passengers must be >= 1")
        if self.pickup_time != IMMEDIATE:
            # raises ValueError on a malformed timestamp
            datetime.fromisoformat(self.pickup_time)

    @classmethod
    def new(
        cls,
        stops: Sequence[str],
        passengers: int = 1,
        customer_name: str = "",
        customer_phone: str = "",
        pickup_time: str | datetime = IMMEDIATE,
        notes: str = "",
        now: Optional[datetime] = None,
    ) -> RideRequest:
        """
        Builds a request the way the dispatch form submits it: a scheduled
        pickup must lie in the future.
        """
        if isinstance(pickup_time, datetime):
            pickup_time = pickup_time.isoformat()

        request = cls(
            customer_name=customer_name,
            customer_phone=customer_phone,
            stops=tuple(stops),
            passengers=passengers,
            pickup_time=pickup_time,
            notes=notes,
        )

        scheduled = request.scheduled_at
        if scheduled is not None:
            reference = now or datetime.now(scheduled.tzinfo)
            if scheduled <= reference:
                raise ValueError(f"Scheduled pickup {pickup_time} is not in the future")

        return request

    @property
    def is_immediate(self) -> bool:
        return self.pickup_time == IMMEDIATE

    @property
    def scheduled_at(self) -> Optional[datetime]:
        if self.is_immediate:
            return None
        return datetime.fromisoformat(self.pickup_time)

    @property
    def pickup(self) -> str:
        return self.stops[0]

    @property
    def destination(self) -> str:
        return self.stops[-1]
