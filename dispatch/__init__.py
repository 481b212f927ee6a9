#Expose the engine-wide pieces every other package depends on:
#Error taxonomy
#Cancellation token
#The ranker and Dispatcher orchestrator live in dispatch.ranker / dispatch.dispatcher
#and are imported from there (they depend on routing/geocoding, which depend on this package).

from .errors import (
    DispatchError,
    AddressNotFound,
    RouteUnavailable,
    NoEligibleVehicle,
    NoEligibleVehicleReason,
    ProviderTimeout,
    CancellationRequested,
)
from .cancellation import CancellationToken

__all__ = [
    "DispatchError",
    "AddressNotFound",
    "RouteUnavailable",
    "NoEligibleVehicle",
    "NoEligibleVehicleReason",
    "ProviderTimeout",
    "CancellationRequested",
    "CancellationToken",
]
