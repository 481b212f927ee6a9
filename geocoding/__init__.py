#Address resolution for the dispatch engine.
#AddressResolver walks an ordered chain of GeocodingProvider strategies and
#remembers every hit in an AddressCache owned by the caller.

from .cache import AddressCache
from .providers import (
    GeocodingError,
    GeocodingProvider,
    GoogleGeocoder,
    CityLevelFallback,
    NominatimGeocoder,
    default_providers,
)
from .resolver import AddressResolver, clean_address

__all__ = [
    "AddressCache",
    "AddressResolver",
    "clean_address",
    "GeocodingError",
    "GeocodingProvider",
    "GoogleGeocoder",
    "CityLevelFallback",
    "NominatimGeocoder",
    "default_providers",
]
