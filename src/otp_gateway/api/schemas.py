"""Request / response models for the HTTP API."""

from __future__ import annotations

import re
from typing import Any, Literal

from pydantic import BaseModel, field_validator, model_validator

PHONE_RE = re.compile(r"^[\d+]{10,15}$")
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
OTP_RE = re.compile(r"^\d{6}$")


def normalize_phone(value: str) -> str:
    phone = re.sub(r"\s", "", value)
    if not PHONE_RE.match(phone):
        raise ValueError("Invalid phone number format")
    return phone


def check_email(value: str) -> str:
    if not EMAIL_RE.match(value):
        raise ValueError("Invalid email address format")
    return value


# ── OTP ──────────────────────────────────────────────────

class OTPSendRequest(BaseModel):
    channel: Literal["sms", "email"]
    identifier: str
    brand_name: str | None = None

    @model_validator(mode="after")
    def _check_identifier(self) -> OTPSendRequest:
        if self.channel == "sms":
            self.identifier = normalize_phone(self.identifier)
        else:
            check_email(self.identifier)
        return self


class OTPVerifyRequest(BaseModel):
    identifier: str
    otp: str

    @field_validator("identifier")
    @classmethod
    def _strip_phone_spaces(cls, value: str) -> str:
        # Phone identifiers are stored without whitespace.
        return value if "@" in value else re.sub(r"\s", "", value)

    @field_validator("otp")
    @classmethod
    def _check_otp(cls, value: str) -> str:
        if not OTP_RE.match(value):
            raise ValueError("Invalid OTP format. Must be 6 digits")
        return value


class OTPResponse(BaseModel):
    success: bool
    message: str
    status: str
    remaining: int | None = None
    provider: str | None = None


# ── Raw sends ────────────────────────────────────────────

class SMSSendRequest(BaseModel):
    to: str
    message: str

    @field_validator("to")
    @classmethod
    def _check_to(cls, value: str) -> str:
        return normalize_phone(value)


class EmailSendRequest(BaseModel):
    to: str
    subject: str
    html_body: str
    text_body: str = ""

    @field_validator("to")
    @classmethod
    def _check_to(cls, value: str) -> str:
        return check_email(value)


class SendResponse(BaseModel):
    success: bool
    message: str
    provider: str | None = None
    data: dict[str, Any] | None = None


# ── Providers ────────────────────────────────────────────

class ProviderSwitchRequest(BaseModel):
    provider: str
    credentials: dict[str, Any]


class ProvidersResponse(BaseModel):
    success: bool = True
    providers: dict[str, str]


class ProviderSwitchResponse(BaseModel):
    success: bool
    message: str
    active_provider: str | None = None
