#Purpose: ETA estimation policy.
#Converts routing outputs into the whole-minute numbers used by:
#customer-facing “arrives in X”
#dispatch ranking
#the Busy -> Available timer (freeAt)
#Keeps ETA rounding rules separate from route computation.

import math

MILLIS_PER_MINUTE = 60 * 1000


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def eta_minutes(duration_min: float) -> int:
    """
    Whole minutes, rounded to nearest.
    A non-zero trip never shows as 0 minutes.
    """
    if duration_min <= 0:
        return 0
    return max(1, round_half_up(duration_min))


def busy_until_ms(now_ms: int, eta_min: int, ride_duration_min: int, buffer_min: int) -> int:
    """
    Epoch millis when a vehicle that accepts a ride now becomes free again:
    drive to pickup + ride + handoff buffer.
    """
    total_busy_min = eta_min + ride_duration_min + buffer_min
    return now_ms + total_busy_min * MILLIS_PER_MINUTE
