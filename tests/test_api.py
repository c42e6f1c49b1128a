"""Tests for the HTTP API, driven through FastAPI's TestClient."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from otp_gateway.channels.registry import ChannelRegistry, SMS
from otp_gateway.config import settings
from otp_gateway.errors import StoreError
from otp_gateway.main import create_app
from otp_gateway.otp.engine import STORE_FAILURE_MESSAGE, OTPEngine
from otp_gateway.store.memory import MemorySecretStore

from conftest import FIXED_CODE, RecordingChannel

PHONE = "+233201234567"


@pytest.fixture
def client(engine):
    with TestClient(create_app(engine)) as c:
        yield c


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "healthy"
    assert body["providers"] == {"sms": "SMSRecorder", "email": "EmailRecorder"}


def test_send_and_verify_flow(client, sms_channel):
    resp = client.post("/api/otp/send", json={"channel": "sms", "identifier": PHONE})
    assert resp.status_code == 200
    assert resp.json() == {
        "success": True,
        "message": "OTP sent successfully via sms",
        "status": "accepted",
        "provider": "SMSRecorder",
    }
    assert sms_channel.sent[0][0] == PHONE

    resp = client.post("/api/otp/verify", json={"identifier": PHONE, "otp": "000000"})
    assert resp.status_code == 400
    assert resp.json()["status"] == "mismatch"
    assert resp.json()["remaining"] == 2

    resp = client.post("/api/otp/verify", json={"identifier": PHONE, "otp": FIXED_CODE})
    assert resp.status_code == 200
    assert resp.json()["success"] is True
    assert "remaining" not in resp.json()

    resp = client.post("/api/otp/verify", json={"identifier": PHONE, "otp": FIXED_CODE})
    assert resp.status_code == 400
    assert resp.json()["status"] == "not_found"


def test_phone_whitespace_is_normalized(client, sms_channel):
    resp = client.post("/api/otp/send", json={"channel": "sms", "identifier": "+233 20 123 4567"})
    assert resp.status_code == 200
    assert sms_channel.sent[0][0] == PHONE

    resp = client.post("/api/otp/verify", json={"identifier": "+233 20 123 4567", "otp": FIXED_CODE})
    assert resp.status_code == 200


def test_rate_limited_send_returns_429(client):
    payload = {"channel": "email", "identifier": "user@example.com"}
    for _ in range(3):
        assert client.post("/api/otp/send", json=payload).status_code == 200

    resp = client.post("/api/otp/send", json=payload)
    assert resp.status_code == 429
    assert resp.json()["status"] == "rate_limited"


@pytest.mark.parametrize(
    "payload",
    [
        {"channel": "sms", "identifier": "not-a-phone"},
        {"channel": "email", "identifier": "no-at-sign"},
        {"channel": "fax", "identifier": PHONE},
        {"identifier": PHONE},
    ],
)
def test_send_validation(client, payload):
    assert client.post("/api/otp/send", json=payload).status_code == 422


def test_verify_rejects_malformed_code(client):
    resp = client.post("/api/otp/verify", json={"identifier": PHONE, "otp": "12ab56"})
    assert resp.status_code == 422


def test_unconfigured_channel_returns_503(store, policy):
    engine = OTPEngine(store, ChannelRegistry(), policy)
    with TestClient(create_app(engine)) as c:
        resp = c.post("/api/otp/send", json={"channel": "sms", "identifier": PHONE})
    assert resp.status_code == 503
    assert resp.json()["status"] == "not_configured"


def test_delivery_failure_returns_502(store, policy):
    registry = ChannelRegistry()
    registry.set_channel(SMS, RecordingChannel("Flaky", succeed=False))
    with TestClient(create_app(OTPEngine(store, registry, policy))) as c:
        resp = c.post("/api/otp/send", json={"channel": "sms", "identifier": PHONE})
    assert resp.status_code == 502
    assert resp.json()["status"] == "delivery_failed"
    assert resp.json()["provider"] == "Flaky"


def test_switch_sms_provider(client):
    resp = client.post(
        "/api/providers/sms/switch",
        json={
            "provider": "twilio",
            "credentials": {"account_sid": "AC1", "auth_token": "t", "from_number": "+1555"},
        },
    )
    assert resp.status_code == 200
    assert resp.json()["active_provider"] == "Twilio"

    providers = client.get("/api/providers").json()["providers"]
    assert providers == {"sms": "Twilio", "email": "EmailRecorder"}


def test_switch_unknown_provider(client):
    resp = client.post("/api/providers/sms/switch", json={"provider": "nope", "credentials": {}})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Unknown SMS provider: nope"


def test_switch_with_bad_credentials(client):
    resp = client.post("/api/providers/sms/switch", json={"provider": "hubtel", "credentials": {}})
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_raw_sms_send(client, sms_channel):
    resp = client.post("/api/sms/send", json={"to": PHONE, "message": "hello"})
    assert resp.status_code == 200
    assert resp.json()["provider"] == "SMSRecorder"
    assert sms_channel.sent[0][1].text == "hello"


def test_raw_email_send(client, email_channel):
    resp = client.post(
        "/api/email/send",
        json={"to": "user@example.com", "subject": "Hi", "html_body": "<p>Hi</p>"},
    )
    assert resp.status_code == 200
    identifier, message = email_channel.sent[0]
    assert identifier == "user@example.com"
    assert message.subject == "Hi"
    assert message.html == "<p>Hi</p>"


class UnreachableStore(MemorySecretStore):
    async def get(self, key):
        raise StoreError("get", key, ConnectionError("connection refused"))


def test_store_error_detail_hidden_outside_debug(registry, policy, monkeypatch):
    monkeypatch.setattr(settings, "debug", False)
    with TestClient(create_app(OTPEngine(UnreachableStore(), registry, policy))) as c:
        resp = c.post("/api/otp/verify", json={"identifier": PHONE, "otp": FIXED_CODE})
    assert resp.status_code == 500
    assert resp.json()["status"] == "store_error"
    assert resp.json()["message"] == STORE_FAILURE_MESSAGE


def test_store_error_detail_shown_in_debug(registry, policy, monkeypatch):
    monkeypatch.setattr(settings, "debug", True)
    with TestClient(create_app(OTPEngine(UnreachableStore(), registry, policy))) as c:
        resp = c.post("/api/otp/send", json={"channel": "sms", "identifier": PHONE})
    assert resp.status_code == 500
    message = resp.json()["message"]
    assert message.startswith(STORE_FAILURE_MESSAGE)
    assert "connection refused" in message
    assert f"otp:ratelimit:{PHONE}" in message
