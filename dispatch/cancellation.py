"""
Purpose: Cooperative cancellation for an in-flight dispatch request.
What it does:
The caller keeps a CancellationToken per request and calls cancel() when a
newer request supersedes it. Workers check the token before every external
call, so in-flight lookups stop spending provider quota.
"""

from __future__ import annotations

import threading

from .errors import CancellationRequested


class CancellationToken:
    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise CancellationRequested()

