"""Rendering of OTP messages for SMS and email delivery."""

from __future__ import annotations

from html import escape

from otp_gateway.channels.base import OutboundMessage


def render_otp_message(code: str, brand_name: str, ttl_minutes: int) -> OutboundMessage:
    """Build the SMS text, email subject and email HTML for *code*."""
    text = (
        f"Your {brand_name} verification code is: {code}. "
        f"Valid for {ttl_minutes} minutes. Do not share this code with anyone."
    )
    return OutboundMessage(
        text=text,
        subject=f"{brand_name} - Verification Code",
        html=_render_html(code, escape(brand_name), ttl_minutes),
    )


def _render_html(code: str, brand: str, ttl_minutes: int) -> str:
    return f"""\
<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>Verification Code</title>
</head>
<body style="margin: 0; padding: 20px 0; font-family: Arial, sans-serif; background-color: #f4f4f4;">
  <table width="600" align="center" cellpadding="0" cellspacing="0" style="background-color: #ffffff; border-radius: 8px;">
    <tr>
      <td style="background-color: #667eea; padding: 32px 20px; text-align: center; border-radius: 8px 8px 0 0;">
        <h1 style="margin: 0; color: #ffffff; font-size: 28px;">{brand}</h1>
      </td>
    </tr>
    <tr>
      <td style="padding: 40px 30px; text-align: center;">
        <h2 style="margin: 0 0 20px 0; color: #333333;">Verification Code</h2>
        <p style="color: #666666; font-size: 16px;">Please use the following code to complete your verification:</p>
        <div style="display: inline-block; padding: 20px; border: 2px dashed #667eea; border-radius: 8px;">
          <span style="font-size: 36px; font-weight: bold; letter-spacing: 8px; color: #667eea; font-family: 'Courier New', monospace;">{code}</span>
        </div>
        <p style="margin-top: 30px; color: #666666; font-size: 14px;">This code will expire in <strong>{ttl_minutes} minutes</strong>.</p>
        <p style="color: #999999; font-size: 13px;">If you didn't request this code, please ignore this email.</p>
      </td>
    </tr>
    <tr>
      <td style="background-color: #f8f9fa; padding: 20px 30px; text-align: center; border-radius: 0 0 8px 8px;">
        <p style="margin: 0; color: #999999; font-size: 12px;">This is an automated message from {brand}. Please do not reply to this email.</p>
      </td>
    </tr>
  </table>
</body>
</html>
"""
