from __future__ import annotations

import threading
from typing import Dict, Optional, Tuple

LatLon = Tuple[float, float]
CacheKey = Tuple[str, str]  # (address, locale)


class AddressCache:
    """
    Process-wide address -> coordinate store shared by concurrent requests.
    No expiry: addresses do not move. Racing writers for the same key store
    the same coordinate, so last write wins harmlessly.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._entries: Dict[CacheKey, LatLon] = {}

    def get(self, address: str, locale: str) -> Optional[LatLon]:
        with self._lock:
            return self._entries.get((address, locale))

    def put(self, address: str, locale: str, coordinate: LatLon) -> None:
        with self._lock:
            self._entries[(address, locale)] = coordinate

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: CacheKey) -> bool:
        with self._lock:
            return key in self._entries
