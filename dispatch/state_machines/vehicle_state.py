"""
Vehicle availability state machine.

    AVAILABLE -> BUSY               assignment confirmed (free_at = now + eta + ride + buffer)
    BUSY -> AVAILABLE               ride completed / cancelled, or free_at passed
    AVAILABLE -> OUT_OF_SERVICE     operator, optionally for N minutes
    OUT_OF_SERVICE -> AVAILABLE     maintenance complete, or free_at passed
    AVAILABLE <-> BREAK             operator only
    AVAILABLE <-> NOT_DRIVING_TODAY operator only

There is no terminal state. Vehicles are frozen dataclasses, so every
transition returns a new instance.

Readers never trust a stored BUSY/OUT_OF_SERVICE blindly: effective_status()
treats an expired timer as AVAILABLE without waiting for anybody to write it.
"""

import logging
from dataclasses import replace
from typing import Optional

from fleet.models import TIMED_STATUSES, Vehicle, VehicleStatus, now_ms
from routing.eta_service import MILLIS_PER_MINUTE, busy_until_ms

logger = logging.getLogger(__name__)


class VehicleStateException(Exception):
    """Raised when an invalid vehicle transition is attempted."""
    pass


def effective_status(vehicle: Vehicle, now: Optional[int] = None) -> VehicleStatus:
    """
    The status a reader must act on at epoch millis `now`.
    """
    now = now_ms() if now is None else now
    if vehicle.status in TIMED_STATUSES and vehicle.free_at is not None and vehicle.free_at < now:
        return VehicleStatus.AVAILABLE
    return vehicle.status


def reconcile(vehicle: Vehicle, now: Optional[int] = None) -> Vehicle:
    """
    Materialize an expired timer: same vehicle, AVAILABLE, free_at cleared.
    Vehicles whose status is still current come back unchanged.
    """
    status = effective_status(vehicle, now)
    if status == vehicle.status:
        return vehicle
    return replace(vehicle, status=status, free_at=None)


def _require(vehicle: Vehicle, expected: VehicleStatus, action: str, now: Optional[int]) -> Vehicle:
    current = reconcile(vehicle, now)
    if current.status != expected:
        raise VehicleStateException(
            f"Cannot {action} vehicle {vehicle.id}: status is {current.status.value}, expected {expected.value}"
        )
    return current


def _log_transition(before: Vehicle, after: Vehicle) -> None:
    logger.info(f"Vehicle {after.id}: {before.status.value} -> {after.status.value}")


def confirm_assignment(
    vehicle: Vehicle,
    eta_min: int,
    ride_duration_min: int,
    buffer_min: int = 5,
    destination: Optional[str] = None,
    now: Optional[int] = None,
) -> Vehicle:
    """
    Called when the dispatcher confirms a ride for this vehicle.
    The vehicle ends up at the ride's last stop, so its location moves there.
    """
    now = now_ms() if now is None else now
    current = _require(vehicle, VehicleStatus.AVAILABLE, "assign", now)

    busy = replace(
        current,
        status=VehicleStatus.BUSY,
        free_at=busy_until_ms(now, eta_min, ride_duration_min, buffer_min),
        location=destination if destination else current.location,
    )
    _log_transition(vehicle, busy)
    return busy


def complete_ride(vehicle: Vehicle, now: Optional[int] = None) -> Vehicle:
    """
    Ride finished or cancelled: BUSY -> AVAILABLE.
    A vehicle whose timer already expired is simply returned reconciled.
    """
    current = reconcile(vehicle, now)
    if current.status == VehicleStatus.AVAILABLE:
        return current
    if current.status != VehicleStatus.BUSY:
        raise VehicleStateException(
            f"Cannot complete ride for vehicle {vehicle.id}: status is {current.status.value}"
        )
    available = replace(current, status=VehicleStatus.AVAILABLE, free_at=None)
    _log_transition(vehicle, available)
    return available


# cancelling a confirmed ride frees the vehicle exactly like completing it
cancel_ride = complete_ride


def mark_out_of_service(vehicle: Vehicle, minutes: Optional[int] = None, now: Optional[int] = None) -> Vehicle:
    """
    Operator takes the vehicle off the road. With `minutes`, it returns on its own.
    """
    now = now_ms() if now is None else now
    current = _require(vehicle, VehicleStatus.AVAILABLE, "take out of service", now)
    if minutes is not None and minutes <= 0:
        raise ValueError("minutes must be > 0")

    free_at = now + minutes * MILLIS_PER_MINUTE if minutes is not None else None
    out = replace(current, status=VehicleStatus.OUT_OF_SERVICE, free_at=free_at)
    _log_transition(vehicle, out)
    return out


def return_to_service(vehicle: Vehicle, now: Optional[int] = None) -> Vehicle:
    current = reconcile(vehicle, now)
    if current.status == VehicleStatus.AVAILABLE:
        return current
    current = _require(current, VehicleStatus.OUT_OF_SERVICE, "return to service", now)
    available = replace(current, status=VehicleStatus.AVAILABLE, free_at=None)
    _log_transition(vehicle, available)
    return available


def _operator_toggle(vehicle: Vehicle, source: VehicleStatus, target: VehicleStatus,
                     action: str, now: Optional[int]) -> Vehicle:
    current = _require(vehicle, source, action, now)
    toggled = replace(current, status=target, free_at=None)
    _log_transition(vehicle, toggled)
    return toggled


def start_break(vehicle: Vehicle, now: Optional[int] = None) -> Vehicle:
    return _operator_toggle(vehicle, VehicleStatus.AVAILABLE, VehicleStatus.BREAK, "start break for", now)


def end_break(vehicle: Vehicle, now: Optional[int] = None) -> Vehicle:
    return _operator_toggle(vehicle, VehicleStatus.BREAK, VehicleStatus.AVAILABLE, "end break for", now)


def mark_not_driving_today(vehicle: Vehicle, now: Optional[int] = None) -> Vehicle:
    return _operator_toggle(
        vehicle, VehicleStatus.AVAILABLE, VehicleStatus.NOT_DRIVING_TODAY, "stand down", now
    )


def mark_driving_today(vehicle: Vehicle, now: Optional[int] = None) -> Vehicle:
    return _operator_toggle(
        vehicle, VehicleStatus.NOT_DRIVING_TODAY, VehicleStatus.AVAILABLE, "bring back", now
    )
