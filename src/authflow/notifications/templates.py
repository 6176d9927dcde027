from __future__ import annotations

from html import escape

from ..core.constants import OTP_TTL_MINUTES

OTP_SUBJECT = "Verify Your Email - OTP Code"


def render_otp_email(first_name: str, otp: str) -> tuple[str, str]:
    """Subject and HTML body for an OTP message."""
    body = f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #333;">Email Verification</h2>
  <p>Hello {escape(first_name)},</p>
  <p>Please use the following OTP to verify your email address:</p>
  <div style="background-color: #f4f4f4; padding: 20px; text-align: center; margin: 20px 0;">
    <h1 style="color: #007bff; font-size: 32px; margin: 0;">{escape(otp)}</h1>
  </div>
  <p>This OTP will expire in {OTP_TTL_MINUTES} minutes.</p>
  <p>If you didn't request this code, please ignore this email.</p>
</div>
"""
    return OTP_SUBJECT, body
