"""Base channel: abstract interface every delivery backend must implement."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class OutboundMessage:
    """Rendered message handed to a channel.

    SMS backends send ``text`` only; email backends also use ``subject``
    and the optional ``html`` alternative.
    """

    text: str
    subject: str = ""
    html: str | None = None


@dataclass
class DeliveryOutcome:
    """Value object returned by a channel after a delivery attempt."""

    success: bool
    diagnostic: str
    data: dict[str, Any] = field(default_factory=dict)


class BaseChannel(ABC):
    """Abstract base class for all delivery channels.

    A channel makes exactly one outbound call per :meth:`deliver` and never
    retries.  Transport failures are reported as an unsuccessful
    :class:`DeliveryOutcome` rather than raised.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable provider name (used in logs and API responses)."""

    @abstractmethod
    async def deliver(self, identifier: str, message: OutboundMessage) -> DeliveryOutcome:
        """Send *message* to *identifier* (phone number or email address)."""
