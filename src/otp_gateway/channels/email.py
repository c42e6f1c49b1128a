"""Email channel: sends messages via async SMTP."""

from __future__ import annotations

import logging
from email.message import EmailMessage
from email.utils import formataddr

import aiosmtplib
from pydantic import BaseModel

from otp_gateway.channels.base import BaseChannel, DeliveryOutcome, OutboundMessage

logger = logging.getLogger(__name__)


class SMTPConfig(BaseModel):
    host: str = "localhost"
    port: int = 587
    username: str = ""
    password: str = ""
    from_email: str = "noreply@example.com"
    from_name: str = "BlazeSend"
    use_tls: bool = False


class SMTPChannel(BaseChannel):
    """Sends transactional email using the configured SMTP server.

    Port 465 uses implicit TLS; other ports upgrade with STARTTLS when
    ``use_tls`` is set.
    """

    def __init__(self, config: SMTPConfig) -> None:
        self._config = config

    @property
    def name(self) -> str:
        return "SMTP"

    async def deliver(self, identifier: str, message: OutboundMessage) -> DeliveryOutcome:
        msg = EmailMessage()
        msg["Subject"] = message.subject
        msg["From"] = formataddr((self._config.from_name, self._config.from_email))
        msg["To"] = identifier
        msg.set_content(message.text)
        if message.html:
            msg.add_alternative(message.html, subtype="html")

        implicit_tls = self._config.port == 465
        logger.info("Sending email to %s via %s:%s", identifier, self._config.host, self._config.port)
        try:
            errors, response = await aiosmtplib.send(
                msg,
                hostname=self._config.host,
                port=self._config.port,
                username=self._config.username or None,
                password=self._config.password or None,
                use_tls=implicit_tls,
                start_tls=self._config.use_tls and not implicit_tls,
            )
        except (aiosmtplib.SMTPException, OSError) as exc:
            logger.error("SMTP send to %s failed: %s", identifier, exc)
            return DeliveryOutcome(False, f"SMTP Error: {exc}")

        logger.info("Email sent to %s", identifier)
        return DeliveryOutcome(
            True,
            "Email sent successfully via SMTP",
            {"response": response, "refused": {k: str(v) for k, v in errors.items()}},
        )
