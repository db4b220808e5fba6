"""
Transactional email via the SendGrid v3 HTTP API.

Used by the contact form. `from` must be a verified SendGrid sender;
the visitor's address goes in reply_to so support can answer directly.
"""

import html
import json
import logging
import urllib.error
import urllib.request
from typing import Optional

from .config import settings

logger = logging.getLogger(__name__)

SENDGRID_API_URL = "https://api.sendgrid.com/v3/mail/send"


class EmailError(Exception):
    pass


class EmailNotConfigured(EmailError):
    pass


def send_email(to: str, subject: str, html_body: str, reply_to: Optional[str] = None) -> None:
    """Send one HTML email. Raises EmailNotConfigured / EmailError."""
    if not settings.SENDGRID_API_KEY:
        raise EmailNotConfigured("SENDGRID_API_KEY not configured")

    message = {
        "personalizations": [{"to": [{"email": to}]}],
        "from": {"email": settings.EMAIL_FROM},
        "subject": subject,
        "content": [{"type": "text/html", "value": html_body}],
    }
    if reply_to:
        message["reply_to"] = {"email": reply_to}

    req = urllib.request.Request(
        SENDGRID_API_URL,
        data=json.dumps(message).encode("utf-8"),
        headers={
            "Authorization": f"Bearer {settings.SENDGRID_API_KEY}",
            "Content-Type": "application/json",
        },
        method="POST",
    )

    try:
        with urllib.request.urlopen(req, timeout=20) as response:
            status = response.status
    except urllib.error.HTTPError as e:
        body = e.read().decode("utf-8", errors="replace")
        logger.warning("SendGrid rejected email: %s %s", e.code, body)
        raise EmailError(f"SendGrid API error: {e.code}") from e
    except urllib.error.URLError as e:
        logger.warning("SendGrid unreachable: %s", e.reason)
        raise EmailError(f"SendGrid unreachable: {e.reason}") from e

    if status >= 300:
        raise EmailError(f"SendGrid API error: {status}")
    logger.info("Email sent to %s: %s", to, subject)


def render_contact_email(name: str, email: str, message: str) -> str:
    """Contact-form body. User input is escaped."""
    return (
        "<h2>New contact form message</h2>"
        f"<p><strong>Name:</strong> {html.escape(name or '-')}</p>"
        f"<p><strong>Email:</strong> {html.escape(email)}</p>"
        f"<p>{html.escape(message).replace(chr(10), '<br>')}</p>"
    )
