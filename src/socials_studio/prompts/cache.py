"""Short-lived cache of prompt-layer settings.

Settings are read from the store at most once per TTL. The clock is
injectable so expiry can be driven explicitly in tests.
"""

from __future__ import annotations

import time
from typing import Callable

SettingsLoader = Callable[[], dict[str, str]]


class SettingsCache:
    """Key/value settings with a time-to-live.

    Usage:
        cache = SettingsCache(loader, ttl_seconds=5.0)
        voice = cache.get("master_voice_prompt")
        cache.invalidate()  # after a setting is saved
    """

    def __init__(
        self,
        loader: SettingsLoader,
        ttl_seconds: float = 5.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._loader = loader
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._values: dict[str, str] | None = None
        self._loaded_at = 0.0

    def _fresh(self, now: float) -> dict[str, str]:
        if self._values is None or now - self._loaded_at >= self.ttl_seconds:
            self._values = dict(self._loader())
            self._loaded_at = now
        return self._values

    def get(self, key: str, now: float | None = None) -> str | None:
        """Value for ``key``, reloading everything if the TTL has elapsed."""
        return self._fresh(self._clock() if now is None else now).get(key)

    def all(self, now: float | None = None) -> dict[str, str]:
        """Copy of every cached setting."""
        return dict(self._fresh(self._clock() if now is None else now))

    def invalidate(self) -> None:
        """Force the next read to reload."""
        self._values = None
        self._loaded_at = 0.0
