"""
Contact form → support inbox via SendGrid.

400 missing fields, 500 email not configured, 502 upstream failure.
"""

import logging

from fastapi import APIRouter, HTTPException

from .. import schemas
from ..config import settings
from ..email_sender import EmailError, EmailNotConfigured, render_contact_email, send_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contact", tags=["contact"])


@router.post("")
def send_contact_message(message: schemas.ContactMessage):
    email = (message.email or "").strip()
    body = (message.message or "").strip()
    if not email or not body:
        raise HTTPException(status_code=400, detail="Email and message are required")

    subject = (message.subject or "").strip() or "Website contact"
    try:
        send_email(
            to=settings.CONTACT_EMAIL,
            subject=f"[{settings.APP_NAME}] {subject}",
            html_body=render_contact_email(message.name, email, body),
            reply_to=email,
        )
    except EmailNotConfigured:
        logger.error("Contact form used but SENDGRID_API_KEY is not set")
        raise HTTPException(status_code=500, detail="Email service is not configured")
    except EmailError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return {"ok": True}
