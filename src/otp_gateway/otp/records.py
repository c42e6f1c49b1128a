"""OTP record manager: owns the per-identifier code, attempt and rate records.

Store layout
------------
``otp:code:<identifier>``
    SHA-256 hex digest of the issued code.  TTL = code lifetime.
``otp:attempts:<identifier>``
    Failed verification count, seeded at 0.  TTL = code lifetime.
``otp:ratelimit:<identifier>``
    Issuances in the current rate window.  TTL = rate window.

Each record kind has its own top-level prefix so inspection tooling can
classify keys by prefix alone.  The rate counter is never deleted here; it
only expires.
"""

from __future__ import annotations

import hashlib
import logging

from otp_gateway.config import OTPPolicy
from otp_gateway.store.base import SecretStore

logger = logging.getLogger(__name__)

CODE_PREFIX = "otp:code:"
ATTEMPTS_PREFIX = "otp:attempts:"
RATE_PREFIX = "otp:ratelimit:"


def code_key(identifier: str) -> str:
    return f"{CODE_PREFIX}{identifier}"


def attempts_key(identifier: str) -> str:
    return f"{ATTEMPTS_PREFIX}{identifier}"


def rate_key(identifier: str) -> str:
    return f"{RATE_PREFIX}{identifier}"


def hash_code(code: str) -> str:
    """One-way digest of a raw code, as stored in the code record."""
    return hashlib.sha256(code.encode("utf-8")).hexdigest()


class OTPRecordManager:
    """Reads and writes the three OTP records for an identifier.

    Store failures propagate as :class:`~otp_gateway.errors.StoreError`; no
    write is retried or rolled back.
    """

    def __init__(self, store: SecretStore, policy: OTPPolicy) -> None:
        self._store = store
        self._policy = policy

    @property
    def store(self) -> SecretStore:
        return self._store

    # ── Issuance ─────────────────────────────────────────

    async def issue(self, identifier: str, raw_code: str) -> None:
        """Persist a freshly generated code for *identifier*.

        Replaces any live code, resets the attempt counter and charges one
        issuance against the rate counter, in that order.  The first failing
        write aborts the sequence.
        """
        ttl = self._policy.code_ttl_seconds
        await self._store.set(code_key(identifier), hash_code(raw_code), ttl)
        await self._store.set(attempts_key(identifier), "0", ttl)
        await self.increment_rate(identifier)
        logger.debug("Stored OTP record for %s (ttl=%ss)", identifier, ttl)

    async def increment_rate(self, identifier: str) -> int:
        """Charge one issuance; the window starts at the first one."""
        count = await self._store.incr(
            rate_key(identifier), ttl=self._policy.rate_window_seconds
        )
        return int(count)

    # ── Reads ────────────────────────────────────────────

    async def lookup(self, identifier: str) -> str | None:
        """Stored code hash, or ``None`` when no live code exists."""
        return await self._store.get(code_key(identifier))

    async def attempt_count(self, identifier: str) -> int | None:
        """Failed attempts so far, or ``None`` when the counter is absent."""
        value = await self._store.get(attempts_key(identifier))
        if value is None:
            return None
        return max(0, int(value))

    async def rate_count(self, identifier: str) -> int:
        value = await self._store.get(rate_key(identifier))
        return int(value) if value is not None else 0

    # ── Mutations used by verification ───────────────────

    async def record_failed_attempt(self, identifier: str) -> int | None:
        """Increment the attempt counter without touching its TTL.

        Returns ``None`` if the counter expired in the meantime; it is never
        re-created.
        """
        return await self._store.incr(attempts_key(identifier), existing_only=True)

    async def invalidate(self, identifier: str) -> None:
        """Delete the code record and attempt counter (rate counter untouched)."""
        await self._store.delete(code_key(identifier), attempts_key(identifier))
        logger.debug("Invalidated OTP record for %s", identifier)
