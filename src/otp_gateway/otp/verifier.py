"""OTP verification state machine.

States are implicit in the store:

* **NoCode**: no code record (never issued, already used, or expired).
* **Active(n)**: code record present with ``n < max_attempts`` failures.
* **Exhausted**: code record present with ``n >= max_attempts``.  Detected
  on read and collapsed to NoCode by invalidating the record.
"""

from __future__ import annotations

import hmac
import logging

from otp_gateway.config import OTPPolicy
from otp_gateway.otp.records import OTPRecordManager, hash_code
from otp_gateway.otp.results import VerifyResult, VerifyStatus

logger = logging.getLogger(__name__)

MSG_NOT_FOUND = "OTP expired or not found"
MSG_ATTEMPTS_EXCEEDED = "Maximum verification attempts exceeded"
MSG_VERIFIED = "OTP verified successfully"


class Verifier:
    """Checks a submitted code against the stored hash for an identifier."""

    def __init__(self, records: OTPRecordManager, policy: OTPPolicy) -> None:
        self._records = records
        self._policy = policy

    async def verify(self, identifier: str, submitted_code: str) -> VerifyResult:
        stored_hash = await self._records.lookup(identifier)
        if stored_hash is None:
            logger.info("No live OTP for %s", identifier)
            return VerifyResult(VerifyStatus.NOT_FOUND, MSG_NOT_FOUND)

        attempts = await self._records.attempt_count(identifier)
        if attempts is None:
            if not self._records.store.synchronized_ttl:
                # Code outlived its attempt counter: treat the pair as expired.
                await self._records.invalidate(identifier)
                logger.info("OTP for %s found without attempt counter", identifier)
                return VerifyResult(VerifyStatus.NOT_FOUND, MSG_NOT_FOUND)
            attempts = 0

        if attempts >= self._policy.max_attempts:
            await self._records.invalidate(identifier)
            logger.info("OTP attempts exhausted for %s", identifier)
            return VerifyResult(VerifyStatus.ATTEMPTS_EXCEEDED, MSG_ATTEMPTS_EXCEEDED)

        if hmac.compare_digest(hash_code(submitted_code), stored_hash):
            await self._records.invalidate(identifier)
            logger.info("OTP verified for %s", identifier)
            return VerifyResult(VerifyStatus.VERIFIED, MSG_VERIFIED)

        failed = await self._records.record_failed_attempt(identifier)
        if failed is None:
            # Counter gone: the code must not outlive it, or guesses go uncounted.
            await self._records.invalidate(identifier)
            logger.info("OTP for %s expired during verification", identifier)
            return VerifyResult(VerifyStatus.NOT_FOUND, MSG_NOT_FOUND)

        remaining = max(0, self._policy.max_attempts - failed)
        logger.info("Invalid OTP for %s, %d attempt(s) remaining", identifier, remaining)
        return VerifyResult(
            VerifyStatus.MISMATCH,
            f"Invalid OTP. {remaining} attempt(s) remaining",
            remaining=remaining,
        )
