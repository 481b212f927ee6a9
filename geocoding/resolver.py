"""
Purpose: Address Resolver, free text address -> (lat, lon).
What it does:
- cleans the address (stored addresses sometimes carry "|timestamp" suffixes)
- serves repeats from the injected AddressCache
- otherwise walks the ordered provider chain; the first coordinate wins and is cached
- raises AddressNotFound with the original address when every step fails

A timeout or transport error in one step counts as that step failing; the
next step runs. Nothing is retried in place.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from dispatch.cancellation import CancellationToken
from dispatch.errors import AddressNotFound, ProviderTimeout
from .cache import AddressCache
from .providers import GeocodingError, GeocodingProvider, default_providers

LatLon = Tuple[float, float]

logger = logging.getLogger(__name__)


def clean_address(address: str) -> str:
    return address.split("|", 1)[0].strip()


class AddressResolver:
    def __init__(self, providers: Sequence[GeocodingProvider], cache: Optional[AddressCache] = None):
        if not providers:
            raise ValueError("AddressResolver needs at least one geocoding provider")
        self.providers: List[GeocodingProvider] = list(providers)
        self.cache = cache if cache is not None else AddressCache()

    @classmethod
    def default(cls, cache: Optional[AddressCache] = None, timeout: float = 5) -> "AddressResolver":
        return cls(default_providers(timeout=timeout), cache=cache)

    def resolve(self, address: str, locale: str,
                cancel_token: Optional[CancellationToken] = None) -> LatLon:
        cleaned = clean_address(address)
        if cleaned != address:
            logger.debug(f"Cleaned malformed address: {address!r} -> {cleaned!r}")

        if not cleaned:
            raise AddressNotFound(address)

        cached = self.cache.get(cleaned, locale)
        if cached is not None:
            return cached

        for provider in self.providers:
            if cancel_token is not None:
                cancel_token.raise_if_cancelled()

            try:
                coordinate = provider.geocode(cleaned, locale)
            except ProviderTimeout:
                logger.warning(f"Geocoder '{provider.name}' timed out for '{cleaned}', trying next")
                continue
            except GeocodingError as exc:
                logger.warning(f"Geocoder '{provider.name}' failed for '{cleaned}': {exc}")
                continue

            if coordinate is not None:
                logger.debug(f"Resolved '{cleaned}' via {provider.name}: {coordinate}")
                self.cache.put(cleaned, locale, coordinate)
                return coordinate

            logger.info(f"Geocoder '{provider.name}' found nothing for '{cleaned}'")

        raise AddressNotFound(address)
