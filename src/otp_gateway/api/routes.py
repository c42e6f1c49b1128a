"""OTP gateway HTTP routes.

Endpoints
---------
GET  /api/providers              → active provider per modality
POST /api/providers/sms/switch   → replace the active SMS provider
POST /api/otp/send               → issue and deliver an OTP
POST /api/otp/verify             → verify a submitted OTP
POST /api/sms/send               → raw SMS through the active provider
POST /api/email/send             → raw email through the active provider
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response, status

from otp_gateway.api.schemas import (
    EmailSendRequest,
    OTPResponse,
    OTPSendRequest,
    OTPVerifyRequest,
    ProviderSwitchRequest,
    ProviderSwitchResponse,
    ProvidersResponse,
    SendResponse,
    SMSSendRequest,
)
from otp_gateway.channels.base import OutboundMessage
from otp_gateway.channels.registry import EMAIL, SMS, create_sms_channel
from otp_gateway.config import settings
from otp_gateway.errors import ChannelConfigError
from otp_gateway.otp.engine import OTPEngine
from otp_gateway.otp.results import IssueResult, IssueStatus, VerifyResult, VerifyStatus

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["otp"])

_ISSUE_STATUS_CODES = {
    IssueStatus.ACCEPTED: status.HTTP_200_OK,
    IssueStatus.RATE_LIMITED: status.HTTP_429_TOO_MANY_REQUESTS,
    IssueStatus.NOT_CONFIGURED: status.HTTP_503_SERVICE_UNAVAILABLE,
    IssueStatus.DELIVERY_FAILED: status.HTTP_502_BAD_GATEWAY,
    IssueStatus.STORE_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

_VERIFY_STATUS_CODES = {
    VerifyStatus.VERIFIED: status.HTTP_200_OK,
    VerifyStatus.NOT_FOUND: status.HTTP_400_BAD_REQUEST,
    VerifyStatus.ATTEMPTS_EXCEEDED: status.HTTP_400_BAD_REQUEST,
    VerifyStatus.MISMATCH: status.HTTP_400_BAD_REQUEST,
    VerifyStatus.STORE_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def get_engine(request: Request) -> OTPEngine:
    """Engine created during application startup."""
    return request.app.state.engine


def _public_message(result: IssueResult | VerifyResult) -> str:
    """Store error details are only exposed in debug mode."""
    if settings.debug and result.detail:
        return f"{result.message}: {result.detail}"
    return result.message


# ── Providers ────────────────────────────────────────────

@router.get("/providers", response_model=ProvidersResponse)
async def list_providers(engine: OTPEngine = Depends(get_engine)):
    return ProvidersResponse(providers=engine.registry.active_providers())


@router.post("/providers/sms/switch", response_model=ProviderSwitchResponse)
async def switch_sms_provider(
    body: ProviderSwitchRequest, response: Response, engine: OTPEngine = Depends(get_engine)
):
    """Replace the active SMS provider; in-flight sends keep the old one."""
    try:
        channel = create_sms_channel(body.provider, body.credentials)
    except ChannelConfigError as exc:
        response.status_code = status.HTTP_400_BAD_REQUEST
        return ProviderSwitchResponse(success=False, message=str(exc))

    if channel is None:
        response.status_code = status.HTTP_400_BAD_REQUEST
        return ProviderSwitchResponse(
            success=False, message=f"Unknown SMS provider: {body.provider}"
        )

    engine.registry.set_channel(SMS, channel)
    return ProviderSwitchResponse(
        success=True, message=f"Switched to {channel.name}", active_provider=channel.name
    )


# ── OTP ──────────────────────────────────────────────────

@router.post("/otp/send", response_model=OTPResponse, response_model_exclude_none=True)
async def send_otp(
    body: OTPSendRequest, response: Response, engine: OTPEngine = Depends(get_engine)
):
    result = await engine.issue(body.channel, body.identifier, body.brand_name)
    response.status_code = _ISSUE_STATUS_CODES[result.status]
    return OTPResponse(
        success=result.accepted,
        message=_public_message(result),
        status=result.status.value,
        provider=result.provider,
    )


@router.post("/otp/verify", response_model=OTPResponse, response_model_exclude_none=True)
async def verify_otp(
    body: OTPVerifyRequest, response: Response, engine: OTPEngine = Depends(get_engine)
):
    result = await engine.verify(body.identifier, body.otp)
    response.status_code = _VERIFY_STATUS_CODES[result.status]
    return OTPResponse(
        success=result.verified,
        message=_public_message(result),
        status=result.status.value,
        remaining=result.remaining,
    )


# ── Raw sends ────────────────────────────────────────────

async def _send_raw(
    engine: OTPEngine, modality: str, to: str, message: OutboundMessage, response: Response
) -> SendResponse:
    channel = engine.registry.resolve(modality)
    if channel is None:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return SendResponse(success=False, message=f"No {modality} provider configured")

    outcome = await channel.deliver(to, message)
    if not outcome.success:
        response.status_code = status.HTTP_502_BAD_GATEWAY
        return SendResponse(success=False, message=outcome.diagnostic, provider=channel.name)
    return SendResponse(
        success=True, message=outcome.diagnostic, provider=channel.name, data=outcome.data
    )


@router.post("/sms/send", response_model=SendResponse)
async def send_sms(
    body: SMSSendRequest, response: Response, engine: OTPEngine = Depends(get_engine)
):
    return await _send_raw(engine, SMS, body.to, OutboundMessage(text=body.message), response)


@router.post("/email/send", response_model=SendResponse)
async def send_email(
    body: EmailSendRequest, response: Response, engine: OTPEngine = Depends(get_engine)
):
    message = OutboundMessage(text=body.text_body, subject=body.subject, html=body.html_body)
    return await _send_raw(engine, EMAIL, body.to, message, response)
