"""Transactional email through the Brevo HTTP API."""

from __future__ import annotations

import logging
import re
from html import escape

import requests

from pragatibook.settings import settings

logger = logging.getLogger(__name__)

BREVO_API_URL = "https://api.brevo.com/v3"

_TAG_RE = re.compile(r"<[^>]*>")

OTP_EMAIL_HTML = """\
<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>Password Reset OTP</title></head>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
  <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
    <h1 style="color: #f97316;">{app_name} - Password Reset</h1>
    <h2>Hello {user_name},</h2>
    <p>We received a request to reset the password for your {app_name} account.
    Use the code below to continue.</p>
    <p style="font-size: 32px; font-weight: bold; letter-spacing: 5px; color: #f97316;">{code}</p>
    <p><small>This code expires in {expiry_minutes} minutes.</small></p>
    <ul>
      <li>Do not share this code with anyone.</li>
      <li>If you didn't request this, you can ignore this email.</li>
    </ul>
    <p><small>This is an automated email. Please do not reply.</small></p>
  </div>
</body>
</html>
"""


class BrevoMailer:
    def __init__(self, api_key: str, sender_email: str, sender_name: str, timeout: float = 10) -> None:
        self.api_key = api_key
        self.sender_email = sender_email
        self.sender_name = sender_name
        self.timeout = timeout

    def send_email(self, to: str, subject: str, html_content: str, text_content: str | None = None) -> bool:
        """Send one email. Returns False, after logging, on any delivery failure."""
        payload = {
            "sender": {"name": self.sender_name, "email": self.sender_email},
            "to": [{"email": to}],
            "subject": subject,
            "htmlContent": html_content,
            "textContent": text_content or _TAG_RE.sub("", html_content),
        }
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "api-key": self.api_key,
        }
        try:
            response = requests.post(
                f"{BREVO_API_URL}/smtp/email",
                json=payload,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error("Email delivery to %s failed: %s", to, e)
            return False

        if not response.ok:
            logger.error("Brevo API error %s for %s: %s", response.status_code, to, response.text)
            return False

        logger.info("Email sent to %s: %s", to, subject)
        return True

    def send_otp_email(self, email: str, code: str, user_name: str) -> bool:
        html_content = OTP_EMAIL_HTML.format(
            app_name=escape(settings.app_name),
            user_name=escape(user_name),
            code=code,
            expiry_minutes=settings.otp_expiry_minutes,
        )
        return self.send_email(email, f"{settings.app_name} - Password Reset OTP", html_content)


def get_mailer() -> BrevoMailer:
    return BrevoMailer(
        api_key=settings.brevo_api_key,
        sender_email=settings.brevo_sender_email,
        sender_name=settings.brevo_sender_name,
    )
