"""Secret store: abstract key-value interface with per-key expiry."""

from abc import ABC, abstractmethod

# Values returned by ``ttl`` for keys without a remaining lifetime.
TTL_NO_EXPIRY = -1
TTL_MISSING = -2


class SecretStore(ABC):
    """Key-value store with TTLs and atomic increments.

    Every method is a single round-trip and raises
    :class:`~otp_gateway.errors.StoreError` on failure.  Implementations must
    be safe to share across concurrent request handlers.
    """

    #: Whether two keys written with the same TTL back-to-back are
    #: guaranteed to expire together.  When ``False`` the verifier treats a
    #: code record found without its attempt counter as expired.
    synchronized_ttl: bool = True

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the value stored at *key*, or ``None`` if absent/expired."""

    @abstractmethod
    async def set(self, key: str, value: str, ttl: int) -> None:
        """Store *value* at *key* with a lifetime of *ttl* seconds, overwriting."""

    @abstractmethod
    async def delete(self, *keys: str) -> None:
        """Remove *keys*; missing keys are ignored."""

    @abstractmethod
    async def incr(
        self, key: str, ttl: int | None = None, existing_only: bool = False
    ) -> int | None:
        """Atomically increment the integer at *key* and return the new value.

        Parameters
        ----------
        ttl:
            When the key is absent it is seeded at 0 with this lifetime
            before incrementing.  An existing key keeps its remaining TTL.
        existing_only:
            Only increment a key that already exists.  Returns ``None``
            (and creates nothing) when the key is absent.
        """

    @abstractmethod
    async def ttl(self, key: str) -> int:
        """Remaining lifetime of *key* in seconds.

        Returns ``TTL_NO_EXPIRY`` for a key without expiry and
        ``TTL_MISSING`` for an absent key.
        """

    @abstractmethod
    async def scan(self, prefix: str) -> list[str]:
        """List live keys starting with *prefix* (operational tooling only)."""

    async def close(self) -> None:
        """Release any connections held by the store."""
