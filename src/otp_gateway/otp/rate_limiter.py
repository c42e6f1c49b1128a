"""Per-identifier issuance rate limiting."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from otp_gateway.config import OTPPolicy
from otp_gateway.otp.records import OTPRecordManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateDecision:
    """Outcome of a rate-limit check."""

    allowed: bool
    message: str = ""


class RateLimiter:
    """Allows at most ``max_per_window`` issuances per identifier per window.

    The window is fixed and anchored at the first issuance: the counter is
    created with the window TTL and later increments leave the TTL alone.
    A burst at the end of one window followed by another at the start of
    the next can therefore exceed the nominal cap over an adjacent interval.
    This approximation is accepted.

    :meth:`check` is read-only; the counter is charged by
    :meth:`OTPRecordManager.issue` so a check that is never followed by
    issuance costs nothing.
    """

    def __init__(self, records: OTPRecordManager, policy: OTPPolicy) -> None:
        self._records = records
        self._policy = policy

    async def check(self, identifier: str) -> RateDecision:
        count = await self._records.rate_count(identifier)
        if count >= self._policy.max_per_window:
            logger.info(
                "Rate limit reached for %s (%d/%d)",
                identifier,
                count,
                self._policy.max_per_window,
            )
            return RateDecision(
                allowed=False,
                message=(
                    f"Rate limit exceeded. Maximum {self._policy.max_per_window} OTPs "
                    f"per {self._policy.rate_window_minutes} minutes."
                ),
            )
        return RateDecision(allowed=True)
