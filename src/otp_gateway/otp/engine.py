"""OTP engine: issues codes through a channel and verifies them.

Issue flow
----------
rate check → generate → store (charges the rate counter) → resolve channel
→ deliver.  The channel is resolved after the records are written, so a
request for an unconfigured modality still consumes a rate-limit slot.
A delivery failure never rolls back the stored code or the rate counter.

Verify flow
-----------
See :mod:`otp_gateway.otp.verifier`.

Store failures abort the current request and come back as
``STORE_ERROR`` results; nothing is retried.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from otp_gateway.channels.messages import render_otp_message
from otp_gateway.channels.registry import ChannelRegistry
from otp_gateway.config import OTPPolicy
from otp_gateway.errors import StoreError
from otp_gateway.otp.generator import generate_code
from otp_gateway.otp.rate_limiter import RateLimiter
from otp_gateway.otp.records import OTPRecordManager
from otp_gateway.otp.results import IssueResult, IssueStatus, VerifyResult, VerifyStatus
from otp_gateway.otp.verifier import Verifier
from otp_gateway.store.base import SecretStore

logger = logging.getLogger(__name__)

STORE_FAILURE_MESSAGE = "OTP service temporarily unavailable"


class OTPEngine:
    """Entry point used by the HTTP layer.

    Parameters
    ----------
    store:
        Shared secret store holding every OTP record.
    registry:
        Channel registry consulted once per issuance.
    policy:
        Code lifetime, attempt and rate limits.
    brand_name:
        Default brand shown in rendered messages.
    code_factory:
        Source of raw codes; defaults to :func:`generate_code`.
    """

    def __init__(
        self,
        store: SecretStore,
        registry: ChannelRegistry,
        policy: OTPPolicy | None = None,
        brand_name: str = "BlazeSend",
        code_factory: Callable[[int], str] = generate_code,
    ) -> None:
        self.policy = policy or OTPPolicy()
        self.store = store
        self.registry = registry
        self.records = OTPRecordManager(store, self.policy)
        self.rate_limiter = RateLimiter(self.records, self.policy)
        self.verifier = Verifier(self.records, self.policy)
        self._brand_name = brand_name
        self._code_factory = code_factory

    async def issue(
        self, channel: str, identifier: str, brand_name: str | None = None
    ) -> IssueResult:
        """Generate, store and deliver a new code for *identifier*."""
        try:
            decision = await self.rate_limiter.check(identifier)
            if not decision.allowed:
                return IssueResult(IssueStatus.RATE_LIMITED, decision.message)

            code = self._code_factory(self.policy.code_length)
            await self.records.issue(identifier, code)
        except StoreError as exc:
            logger.error("OTP issuance aborted for %s: %s", identifier, exc)
            return IssueResult(IssueStatus.STORE_ERROR, STORE_FAILURE_MESSAGE, detail=str(exc))

        backend = self.registry.resolve(channel)
        if backend is None:
            logger.error("No %s provider configured; OTP for %s not delivered", channel, identifier)
            return IssueResult(
                IssueStatus.NOT_CONFIGURED, f"No {channel} provider configured"
            )

        message = render_otp_message(
            code, brand_name or self._brand_name, self.policy.code_ttl_minutes
        )
        outcome = await backend.deliver(identifier, message)
        if not outcome.success:
            logger.warning(
                "OTP delivery to %s via %s failed: %s", identifier, backend.name, outcome.diagnostic
            )
            return IssueResult(IssueStatus.DELIVERY_FAILED, outcome.diagnostic, backend.name)

        logger.info("OTP issued to %s via %s (%s)", identifier, channel, backend.name)
        return IssueResult(
            IssueStatus.ACCEPTED, f"OTP sent successfully via {channel}", backend.name
        )

    async def verify(self, identifier: str, code: str) -> VerifyResult:
        """Check *code* against the live OTP for *identifier*."""
        try:
            return await self.verifier.verify(identifier, code)
        except StoreError as exc:
            logger.error("OTP verification aborted for %s: %s", identifier, exc)
            return VerifyResult(VerifyStatus.STORE_ERROR, STORE_FAILURE_MESSAGE, detail=str(exc))
