"""In-memory secret store with expiry, for development and tests."""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable

from otp_gateway.store.base import TTL_MISSING, TTL_NO_EXPIRY, SecretStore

logger = logging.getLogger(__name__)


class MemorySecretStore(SecretStore):
    """Process-local :class:`SecretStore`.

    Each entry maps ``key → (value, expires_at)`` where ``expires_at`` is
    ``None`` for keys without expiry.  Expired entries are lazily purged on
    access.  The *clock* is injectable so tests can move time forward.

    Every method body runs without awaiting, so each call is atomic with
    respect to other coroutines on the same event loop.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._data: dict[str, tuple[str, float | None]] = {}

    def _live(self, key: str) -> tuple[str, float | None] | None:
        entry = self._data.get(key)
        if entry is None:
            return None
        _, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            self._data.pop(key, None)
            return None
        return entry

    async def get(self, key: str) -> str | None:
        entry = self._live(key)
        return entry[0] if entry else None

    async def set(self, key: str, value: str, ttl: int) -> None:
        self._data[key] = (value, self._clock() + ttl)

    async def delete(self, *keys: str) -> None:
        for key in keys:
            self._data.pop(key, None)

    async def incr(
        self, key: str, ttl: int | None = None, existing_only: bool = False
    ) -> int | None:
        entry = self._live(key)
        if entry is None:
            if existing_only:
                return None
            expires_at = self._clock() + ttl if ttl is not None else None
            entry = ("0", expires_at)
        value, expires_at = entry
        new_value = int(value) + 1
        self._data[key] = (str(new_value), expires_at)
        return new_value

    async def ttl(self, key: str) -> int:
        entry = self._live(key)
        if entry is None:
            return TTL_MISSING
        _, expires_at = entry
        if expires_at is None:
            return TTL_NO_EXPIRY
        return math.ceil(expires_at - self._clock())

    async def scan(self, prefix: str) -> list[str]:
        return [key for key in list(self._data) if key.startswith(prefix) and self._live(key)]

    def __len__(self) -> int:
        return sum(1 for key in list(self._data) if self._live(key))
