"""Shared fixtures: fake clock, in-memory store, recording channels."""

from __future__ import annotations

import pytest

from otp_gateway.channels.base import BaseChannel, DeliveryOutcome, OutboundMessage
from otp_gateway.channels.registry import EMAIL, SMS, ChannelRegistry
from otp_gateway.config import OTPPolicy
from otp_gateway.otp.engine import OTPEngine
from otp_gateway.store.memory import MemorySecretStore

FIXED_CODE = "048213"


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingChannel(BaseChannel):
    """Channel that remembers what it was asked to deliver."""

    def __init__(self, name: str = "Recorder", succeed: bool = True) -> None:
        self._name = name
        self._succeed = succeed
        self.sent: list[tuple[str, OutboundMessage]] = []

    @property
    def name(self) -> str:
        return self._name

    async def deliver(self, identifier: str, message: OutboundMessage) -> DeliveryOutcome:
        self.sent.append((identifier, message))
        if self._succeed:
            return DeliveryOutcome(True, f"Delivered via {self._name}")
        return DeliveryOutcome(False, f"{self._name} Error: destination unreachable")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> MemorySecretStore:
    return MemorySecretStore(clock=clock)


@pytest.fixture
def policy() -> OTPPolicy:
    return OTPPolicy()


@pytest.fixture
def sms_channel() -> RecordingChannel:
    return RecordingChannel("SMSRecorder")


@pytest.fixture
def email_channel() -> RecordingChannel:
    return RecordingChannel("EmailRecorder")


@pytest.fixture
def registry(sms_channel: RecordingChannel, email_channel: RecordingChannel) -> ChannelRegistry:
    reg = ChannelRegistry()
    reg.set_channel(SMS, sms_channel)
    reg.set_channel(EMAIL, email_channel)
    return reg


@pytest.fixture
def engine(store: MemorySecretStore, registry: ChannelRegistry, policy: OTPPolicy) -> OTPEngine:
    """Engine whose generator always yields ``FIXED_CODE``."""
    return OTPEngine(store, registry, policy, code_factory=lambda length: FIXED_CODE)
