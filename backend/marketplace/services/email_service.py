"""
Email Service
Transactional e-mail delivery through Resend
"""
import logging
from typing import Dict, Optional, Tuple

import resend

from marketplace.core.config import settings


logger = logging.getLogger(__name__)


def send_email_via_resend(payload: Dict[str, object], api_key: str) -> Tuple[bool, Optional[str]]:
    """
    Send one e-mail.

    Returns:
        (sent, error_details)
    """
    configured_api_key = (api_key or "").strip()
    if not configured_api_key:
        return False, "Resend API key is not configured."

    resend.api_key = configured_api_key
    try:
        response = resend.Emails.send(payload)
    except Exception as exc:
        return False, str(exc)

    if not isinstance(response, dict) or not response.get("id"):
        return False, str(response)

    return True, None


def build_reset_link(token: str) -> str:
    base_url = (settings.FRONTEND_URL or "http://localhost:3000").rstrip("/")
    return f"{base_url}/reset-password?token={token}"


def send_password_reset_email(recipient_email: str, token: str) -> Tuple[bool, Optional[str]]:
    reset_link = build_reset_link(token)
    minutes = settings.RESET_TOKEN_EXPIRE_MINUTES
    text_body = (
        f"Use this link to reset your Marketplace password within {minutes} minutes: "
        f"{reset_link}\n\nIf you did not ask for a reset, ignore this e-mail."
    )
    html_body = (
        f"<p>Use the link below to reset your Marketplace password within {minutes} minutes.</p>"
        f'<p><a href="{reset_link}">Reset password</a></p>'
        "<p>If you did not ask for a reset, ignore this e-mail.</p>"
    )
    payload: Dict[str, object] = {
        "from": f"Marketplace <{settings.PASSWORD_RESET_SENDER_EMAIL}>",
        "to": [recipient_email],
        "subject": settings.PASSWORD_RESET_SUBJECT,
        "html": html_body,
        "text": text_body,
    }
    return send_email_via_resend(payload, settings.RESEND_API_KEY)
