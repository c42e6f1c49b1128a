"""Channel registry and provider factory.

The registry holds one active channel per modality (``"sms"``,
``"email"``).  It is built once at startup and may be switched at runtime;
readers take a reference to the current channel, so a switch only affects
sends dispatched afterwards.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from otp_gateway.channels.base import BaseChannel
from otp_gateway.channels.email import SMTPChannel, SMTPConfig
from otp_gateway.channels.sms import (
    ArkeselChannel,
    ArkeselConfig,
    HubtelChannel,
    HubtelConfig,
    MnotifyChannel,
    MnotifyConfig,
    TwilioChannel,
    TwilioConfig,
)
from otp_gateway.config import Settings
from otp_gateway.errors import ChannelConfigError

logger = logging.getLogger(__name__)

SMS = "sms"
EMAIL = "email"
MODALITIES = (SMS, EMAIL)

_SMS_PROVIDERS = {
    "hubtel": (HubtelChannel, HubtelConfig),
    "twilio": (TwilioChannel, TwilioConfig),
    "mnotify": (MnotifyChannel, MnotifyConfig),
    "arkesel": (ArkeselChannel, ArkeselConfig),
}


class ChannelRegistry:
    """Lookup table of the active channel for each modality."""

    def __init__(self) -> None:
        self._channels: dict[str, BaseChannel] = {}
        self._lock = threading.Lock()

    def resolve(self, modality: str) -> BaseChannel | None:
        """Return the active channel for *modality*, or ``None`` if not configured."""
        return self._channels.get(modality)

    def set_channel(self, modality: str, channel: BaseChannel) -> None:
        if modality not in MODALITIES:
            raise ValueError(f"Unknown modality: {modality!r}")
        with self._lock:
            channels = dict(self._channels)
            channels[modality] = channel
            self._channels = channels
        logger.info("%s provider set to: %s", modality.upper(), channel.name)

    def active_providers(self) -> dict[str, str]:
        """Provider name per modality, ``"None"`` where nothing is configured."""
        channels = self._channels
        return {m: channels[m].name if m in channels else "None" for m in MODALITIES}


# ── Factory ──────────────────────────────────────────────

def create_sms_channel(provider: str, credentials: Mapping[str, Any]) -> BaseChannel | None:
    """Build the SMS channel named *provider*.

    Returns ``None`` for an unknown provider name and raises
    :class:`ChannelConfigError` when the credentials do not validate.
    """
    entry = _SMS_PROVIDERS.get(provider.lower())
    if entry is None:
        return None
    channel_cls, config_cls = entry
    try:
        config = config_cls(**credentials)
    except ValidationError as exc:
        raise ChannelConfigError(f"Invalid credentials for {provider}: {exc}") from exc
    return channel_cls(config)


def create_email_channel(provider: str, credentials: Mapping[str, Any]) -> BaseChannel | None:
    if provider.lower() != "smtp":
        return None
    try:
        return SMTPChannel(SMTPConfig(**credentials))
    except ValidationError as exc:
        raise ChannelConfigError(f"Invalid credentials for {provider}: {exc}") from exc


def build_registry(s: Settings) -> ChannelRegistry:
    """Populate a registry from the providers named in configuration."""
    registry = ChannelRegistry()

    if s.sms_provider:
        sms_channel = create_sms_channel(s.sms_provider, s.sms_credentials())
        if sms_channel is None:
            logger.warning("Unknown SMS provider %r; SMS delivery disabled", s.sms_provider)
        else:
            registry.set_channel(SMS, sms_channel)

    if s.email_provider:
        email_channel = create_email_channel(s.email_provider, s.smtp_credentials())
        if email_channel is None:
            logger.warning("Unknown email provider %r; email delivery disabled", s.email_provider)
        else:
            registry.set_channel(EMAIL, email_channel)

    return registry
