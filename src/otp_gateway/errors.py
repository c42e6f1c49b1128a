"""Exception hierarchy for the OTP gateway."""

from __future__ import annotations


class OTPGatewayError(Exception):
    """Base class for all gateway errors."""


class StoreError(OTPGatewayError):
    """A secret-store operation failed (connection, timeout, protocol).

    Carries the operation name and the store key it was acting on. Keys embed
    the identifier, never the raw code.
    """

    def __init__(self, operation: str, key: str, cause: BaseException | None = None) -> None:
        self.operation = operation
        self.key = key
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Store operation '{operation}' failed for {key}{detail}")


class ChannelConfigError(OTPGatewayError):
    """Channel credentials are missing or malformed."""
