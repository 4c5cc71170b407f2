"""Base protocol for works registries, plus request pacing."""

import asyncio
import time
from typing import Protocol

from pubboard.models import Publication


class WorksRegistry(Protocol):
    """Protocol that all works-registry backends must implement."""

    async def fetch_publications(self, identifier: str) -> list[Publication]:
        """Fetch the publications claimed under one author identifier.

        Args:
            identifier: Registry-specific author identifier (e.g. ORCID).

        Returns:
            Publications in the order the registry lists them.

        Raises:
            RegistryError: If the request or response decoding fails.
        """
        ...


class RateLimiter:
    """Enforces a minimum interval between successive requests.

    Callers await :meth:`acquire` before each request. The limiter never
    runs requests concurrently; it only delays the next one.
    """

    def __init__(self, min_interval: float) -> None:
        self.min_interval = min_interval
        self._last: float | None = None
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        """Sleep until at least ``min_interval`` has passed since the last call."""
        async with self._lock:
            now = time.monotonic()
            if self._last is not None:
                wait = self.min_interval - (now - self._last)
                if wait > 0:
                    await asyncio.sleep(wait)
                    now = time.monotonic()
            self._last = now
