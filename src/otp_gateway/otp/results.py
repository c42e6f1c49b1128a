"""Typed results returned by the OTP engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class IssueStatus(str, Enum):
    ACCEPTED = "accepted"
    RATE_LIMITED = "rate_limited"
    NOT_CONFIGURED = "not_configured"
    DELIVERY_FAILED = "delivery_failed"
    STORE_ERROR = "store_error"


class VerifyStatus(str, Enum):
    VERIFIED = "verified"
    NOT_FOUND = "not_found"
    ATTEMPTS_EXCEEDED = "attempts_exceeded"
    MISMATCH = "mismatch"
    STORE_ERROR = "store_error"


@dataclass(frozen=True)
class IssueResult:
    """Outcome of an issuance request.

    ``message`` is safe to show to the caller; ``provider`` names the
    channel backend that handled delivery, when one was resolved.
    ``detail`` carries the underlying store error for diagnostics only.
    """

    status: IssueStatus
    message: str
    provider: str | None = None
    detail: str | None = None

    @property
    def accepted(self) -> bool:
        return self.status is IssueStatus.ACCEPTED


@dataclass(frozen=True)
class VerifyResult:
    """Outcome of a verification request.

    ``remaining`` is only set for :attr:`VerifyStatus.MISMATCH`.
    ``detail`` carries the underlying store error for diagnostics only.
    """

    status: VerifyStatus
    message: str
    remaining: int | None = None
    detail: str | None = None

    @property
    def verified(self) -> bool:
        return self.status is VerifyStatus.VERIFIED
