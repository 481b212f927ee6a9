"""
Purpose: Geocoding provider adapters (the fallback chain's strategies).
What it does:
Each provider turns one address + locale into a (lat, lon) or None.
- GoogleGeocoder: primary, restricted to the service area, locale weighted.
- CityLevelFallback: re-asks a provider with only the trailing
  comma-separated component (the city) of the address.
- NominatimGeocoder: last resort, global search, results ranked by geofence.

Rule: A provider never raises for "no match" (returns None). Transport
problems raise GeocodingError, timeouts raise ProviderTimeout; the resolver
treats all three the same way and moves to the next step.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional, Sequence, Tuple

import requests
from dotenv import load_dotenv

from dispatch.errors import ProviderTimeout
from routing.geofence import COUNTRY, SERVICE_AREA, BoundingBox, pick_preferred

load_dotenv()
GOOGLE_MAPS_API_KEY = os.getenv("GOOGLE_MAPS_API_KEY")
NOMINATIM_BASE_URL = os.getenv("NOMINATIM_BASE_URL", "https://nominatim.openstreetmap.org")

GOOGLE_GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"

LatLon = Tuple[float, float]

logger = logging.getLogger(__name__)


class GeocodingError(Exception):
    """A provider could not be queried (HTTP error, malformed answer)."""
    pass


class GeocodingProvider:
    """
    One step of the fallback chain.
    """

    name = "provider"

    def geocode(self, address: str, locale: str) -> Optional[LatLon]:
        raise NotImplementedError


def _get_json(provider: str, url: str, params: Dict[str, Any], timeout: float,
              headers: Optional[Dict[str, str]] = None) -> Any:
    try:
        response = requests.get(url, params=params, headers=headers, timeout=timeout)
        response.raise_for_status()
    except requests.Timeout as exc:
        raise ProviderTimeout(provider) from exc
    except requests.RequestException as exc:
        raise GeocodingError(f"{provider} request failed: {exc}") from exc

    try:
        return response.json()
    except ValueError as exc:
        raise GeocodingError(f"{provider} returned non-JSON response") from exc


class GoogleGeocoder(GeocodingProvider):
    """
    Google Maps Geocoding API, biased to a regional bounding box and the caller's language.
    """

    name = "google"

    def __init__(self, api_key: Optional[str] = None, bounds: BoundingBox = SERVICE_AREA,
                 region: str = "cz", timeout: float = 5, url: str = GOOGLE_GEOCODE_URL):
        self.api_key = api_key if api_key is not None else GOOGLE_MAPS_API_KEY
        self.bounds = bounds
        self.region = region
        self.timeout = timeout
        self.url = url

    def geocode(self, address: str, locale: str) -> Optional[LatLon]:
        if not self.api_key:
            logger.warning("Google Maps API key not configured, skipping primary geocoder")
            return None

        data = _get_json(
            self.name,
            self.url,
            params={
                "address": address,
                "key": self.api_key,
                "language": locale,
                "region": self.region,
                "bounds": self.bounds.as_google_bounds(),
            },
            timeout=self.timeout,
        )

        status = data.get("status")
        results = data.get("results") or []
        if status != "OK" or not results:
            if status not in ("OK", "ZERO_RESULTS"):
                logger.warning(f"Google geocoding failed for '{address}': {status} {data.get('error_message', '')}")
            return None

        try:
            location = results[0]["geometry"]["location"]
            return (float(location["lat"]), float(location["lng"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise GeocodingError(f"{self.name} returned a malformed result for '{address}'") from exc


class CityLevelFallback(GeocodingProvider):
    """
    Retries `inner` with only the last comma-separated part of the address.
    Users type building or street names the geocoder cannot parse, but the
    trailing city name always resolves.
    """

    def __init__(self, inner: GeocodingProvider):
        self.inner = inner
        self.name = f"{inner.name}-city"

    @staticmethod
    def city_of(address: str) -> Optional[str]:
        if "," not in address:
            return None
        city = address.rsplit(",", 1)[1].strip()
        return city or None

    def geocode(self, address: str, locale: str) -> Optional[LatLon]:
        city = self.city_of(address)
        if city is None:
            # nothing shorter to try, the full address already failed
            return None
        return self.inner.geocode(city, locale)


class NominatimGeocoder(GeocodingProvider):
    """
    OpenStreetMap Nominatim search without a regional restriction.
    Among its answers, the first inside `preference[0]` wins, then `preference[1]`, ...
    """

    name = "nominatim"

    def __init__(self, base_url: Optional[str] = None, timeout: float = 5,
                 preference: Sequence[BoundingBox] = (SERVICE_AREA, COUNTRY),
                 limit: int = 10, user_agent: str = "taxi-dispatch-engine"):
        self.base_url = (base_url or NOMINATIM_BASE_URL).rstrip("/")
        self.timeout = timeout
        self.preference = tuple(preference)
        self.limit = limit
        self.user_agent = user_agent

    def geocode(self, address: str, locale: str) -> Optional[LatLon]:
        data = _get_json(
            self.name,
            f"{self.base_url}/search",
            params={
                "q": address,
                "format": "json",
                "limit": self.limit,
                "accept-language": locale,
                # preference hint only, results outside still come back
                "viewbox": self.preference[0].as_viewbox() if self.preference else None,
            },
            timeout=self.timeout,
            headers={"User-Agent": self.user_agent},
        )

        if not isinstance(data, list) or not data:
            return None

        try:
            coordinates = [(float(item["lat"]), float(item["lon"])) for item in data]
        except (KeyError, TypeError, ValueError) as exc:
            raise GeocodingError(f"{self.name} returned a malformed result for '{address}'") from exc
        return pick_preferred(coordinates, self.preference)


def default_providers(timeout: float = 5):
    """
    The production chain: primary, primary on city only, secondary.
    """
    primary = GoogleGeocoder(timeout=timeout)
    return [
        primary,
        CityLevelFallback(primary),
        NominatimGeocoder(timeout=timeout),
    ]
