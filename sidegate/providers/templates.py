"""Verification email content shared by the relay and direct mail providers."""

from html import escape


OTP_EXPIRY_MINUTES = 10


def otp_subject(app_name: str) -> str:
    return f"Verification Code - {app_name}"


def render_relay_message(code: str, app_name: str) -> str:
    """Body text interpolated into the relay template's `message` param."""

    return (
        f"Your verification code is: {code}\n\n"
        f"This code will expire in {OTP_EXPIRY_MINUTES} minutes.\n\n"
        "If you did not request this code, please ignore this email.\n\n"
        f"Best regards,\n{app_name} Team"
    )


def render_text(code: str, app_name: str) -> str:
    return (
        f"{otp_subject(app_name)}\n\n"
        "Hello,\n\n"
        f"Your verification code is: {code}\n\n"
        f"This code will expire in {OTP_EXPIRY_MINUTES} minutes.\n\n"
        "If you did not request this code, please ignore this email.\n\n"
        f"Best regards,\n{app_name} Team\n"
    )


def render_html(code: str, app_name: str) -> str:
    code = escape(code)
    app_name = escape(app_name)
    return f"""\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #333;">Verification Code</h2>
  <p>Hello,</p>
  <p>Your verification code for {app_name} is:</p>
  <div style="background-color: #f4f4f4; padding: 20px; text-align: center; margin: 20px 0;">
    <h1 style="color: #007bff; font-size: 32px; margin: 0;">{code}</h1>
  </div>
  <p>This code will expire in {OTP_EXPIRY_MINUTES} minutes.</p>
  <p>If you did not request this code, please ignore this email.</p>
  <hr style="margin: 20px 0;">
  <p style="color: #666; font-size: 12px;">Best regards,<br>{app_name} Team</p>
</div>
"""
