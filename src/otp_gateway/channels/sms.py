"""SMS channels: one outbound HTTP call per message, no retry.

Supported vendors: Hubtel, Twilio, Mnotify, Arkesel.
"""

from __future__ import annotations

import logging
from abc import abstractmethod
from typing import Any

import httpx
from pydantic import BaseModel

from otp_gateway.channels.base import BaseChannel, DeliveryOutcome, OutboundMessage

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 10.0


# ── Provider credentials ─────────────────────────────────

class HubtelConfig(BaseModel):
    client_id: str
    client_secret: str
    sender_id: str


class TwilioConfig(BaseModel):
    account_sid: str
    auth_token: str
    from_number: str


class MnotifyConfig(BaseModel):
    api_key: str
    sender_id: str


class ArkeselConfig(BaseModel):
    api_key: str
    sender_id: str


# ── Shared HTTP plumbing ─────────────────────────────────

class HttpSmsChannel(BaseChannel):
    """Common request/response handling for HTTP SMS vendors.

    Subclasses build the request in :meth:`_send` and may override
    :meth:`_accepted` when the vendor reports failures with HTTP 200.
    An ``httpx.AsyncClient`` may be injected (tests use a mock transport);
    otherwise a short-lived client is opened per message.
    """

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._client = client

    async def deliver(self, identifier: str, message: OutboundMessage) -> DeliveryOutcome:
        try:
            if self._client is not None:
                resp = await self._send(self._client, identifier, message.text)
            else:
                async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT) as client:
                    resp = await self._send(client, identifier, message.text)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            detail = _error_detail(exc.response)
            logger.error("%s rejected SMS to %s: %s", self.name, identifier, detail)
            return DeliveryOutcome(False, f"{self.name} Error: {detail}")
        except httpx.HTTPError as exc:
            logger.error("%s request error for %s: %s", self.name, identifier, exc)
            return DeliveryOutcome(False, f"{self.name} Error: {exc}")

        data = _json_or_text(resp)
        if not self._accepted(data):
            detail = data.get("message") if isinstance(data, dict) else data
            logger.error("%s rejected SMS to %s: %s", self.name, identifier, detail)
            return DeliveryOutcome(False, f"{self.name} Error: {detail}")

        logger.info("SMS sent to %s via %s", identifier, self.name)
        payload = data if isinstance(data, dict) else {"response": data}
        return DeliveryOutcome(True, f"SMS sent successfully via {self.name}", payload)

    @abstractmethod
    async def _send(self, client: httpx.AsyncClient, to: str, text: str) -> httpx.Response:
        """Issue the vendor request for one message."""

    def _accepted(self, data: Any) -> bool:
        return True


def _json_or_text(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text


def _error_detail(resp: httpx.Response) -> str:
    data = _json_or_text(resp)
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return f"HTTP {resp.status_code}"


# ── Vendors ──────────────────────────────────────────────

class HubtelChannel(HttpSmsChannel):
    """Hubtel SMS gateway (Ghana)."""

    URL = "https://smsc.hubtel.com/v1/messages/send"

    def __init__(self, config: HubtelConfig, client: httpx.AsyncClient | None = None) -> None:
        super().__init__(client)
        self._config = config

    @property
    def name(self) -> str:
        return "Hubtel"

    async def _send(self, client: httpx.AsyncClient, to: str, text: str) -> httpx.Response:
        return await client.post(
            self.URL,
            json={"From": self._config.sender_id, "To": to, "Content": text},
            auth=(self._config.client_id, self._config.client_secret),
        )


class TwilioChannel(HttpSmsChannel):
    """Twilio programmable SMS."""

    def __init__(self, config: TwilioConfig, client: httpx.AsyncClient | None = None) -> None:
        super().__init__(client)
        self._config = config

    @property
    def name(self) -> str:
        return "Twilio"

    async def _send(self, client: httpx.AsyncClient, to: str, text: str) -> httpx.Response:
        url = (
            "https://api.twilio.com/2010-04-01/Accounts/"
            f"{self._config.account_sid}/Messages.json"
        )
        return await client.post(
            url,
            data={"From": self._config.from_number, "To": to, "Body": text},
            auth=(self._config.account_sid, self._config.auth_token),
        )


class MnotifyChannel(HttpSmsChannel):
    """Mnotify quick-SMS API (Ghana)."""

    URL = "https://api.mnotify.com/api/sms/quick"

    def __init__(self, config: MnotifyConfig, client: httpx.AsyncClient | None = None) -> None:
        super().__init__(client)
        self._config = config

    @property
    def name(self) -> str:
        return "Mnotify"

    async def _send(self, client: httpx.AsyncClient, to: str, text: str) -> httpx.Response:
        return await client.post(
            self.URL,
            json={
                "key": self._config.api_key,
                "to": [to],
                "msg": text,
                "sender_id": self._config.sender_id,
            },
        )


class ArkeselChannel(HttpSmsChannel):
    """Arkesel SMS API (Ghana).

    Arkesel takes its parameters in the query string and may answer HTTP 200
    with a plain-text or JSON body describing a failure.
    """

    URL = "https://sms.arkesel.com/sms/api"

    def __init__(self, config: ArkeselConfig, client: httpx.AsyncClient | None = None) -> None:
        super().__init__(client)
        self._config = config

    @property
    def name(self) -> str:
        return "Arkesel"

    async def _send(self, client: httpx.AsyncClient, to: str, text: str) -> httpx.Response:
        return await client.get(
            self.URL,
            params={
                "action": "send-sms",
                "api_key": self._config.api_key,
                "to": to,
                "from": self._config.sender_id,
                "sms": text,
            },
        )

    def _accepted(self, data: Any) -> bool:
        if isinstance(data, dict):
            return str(data.get("code")) == "200" or data.get("status") == "success" or (
                "success" in str(data.get("message", "")).lower()
            )
        return "success" in str(data).lower()
