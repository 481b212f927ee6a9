"""
Purpose: Central configuration for vehicle ranking and assignment.
What it does:

Stores all tunable thresholds/caps for dispatching a ride:

BUSY_BUFFER_MINUTES = 5
MAX_OPTIMIZED_WAYPOINTS = 6
MAX_PARALLEL_LOOKUPS = 8
PROVIDER_TIMEOUT_SECONDS = 5
VAN_PASSENGER_THRESHOLD = 4

Rule: No logic here, just parameters so you can tune without rewriting code.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DispatchPolicy:
    """
    Central configuration for the dispatch engine.
    """

    # --- Busy timer ---
    # Added on top of ETA + ride duration when a vehicle is marked Busy,
    # absorbs dispatch/handoff latency.
    busy_buffer_minutes: int = 5

    # --- Stop-order optimization ---
    # Up to this many intermediate stops every ordering is tried (6! = 720 routes).
    # Beyond it a nearest-neighbour ordering is used instead.
    max_optimized_waypoints: int = 6

    # --- Fan-out ---
    # Max concurrent per-vehicle ETA lookups for one request.
    max_parallel_lookups: int = 8

    # --- External calls ---
    provider_timeout_seconds: float = 5

    # --- Pricing ---
    # Parties larger than this pay the van price even in a car.
    van_passenger_threshold: int = 4

    def validate(self) -> None:
        """
        Basic sanity checks.
        """
        if self.busy_buffer_minutes < 0:
            raise ValueError("busy_buffer_minutes must be >= 0")

        if self.max_optimized_waypoints < 0:
            raise ValueError("max_optimized_waypoints must be >= 0")

        if self.max_parallel_lookups < 1:
            raise ValueError("max_parallel_lookups must be >= 1")

        if self.provider_timeout_seconds <= 0:
            raise ValueError("provider_timeout_seconds must be > 0")

        if self.van_passenger_threshold < 1:
            raise ValueError("van_passenger_threshold must be >= 1")


def default_dispatch_policy() -> DispatchPolicy:
    """
    Convenience factory for the default policy.
    """
    p = DispatchPolicy()
    p.validate()
    return p
