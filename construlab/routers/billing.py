"""
Billing — hosted Stripe checkout, its webhook, trial and demo payment.

POST /api/billing/checkout          → Stripe Checkout Session URL
POST /api/billing/webhook           → checkout.session.completed activates PRO
POST /api/billing/simulate-success  → demo: activates PRO without paying
POST /api/billing/trial             → one 7-day trial per account

Stripe is only called from here. Without STRIPE_SECRET_KEY checkout returns 503.
"""

import logging

import stripe
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from .. import models
from ..auth import get_current_user
from ..config import settings
from ..database import get_db
from ..subscriptions import SubscriptionError, activate_pro, start_trial
from .auth import _user_to_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/billing", tags=["billing"])


def _stripe_configured() -> bool:
    return bool(settings.STRIPE_SECRET_KEY and settings.STRIPE_PRICE_ID)


def _field(obj, key):
    """Read a key from a StripeObject (not a dict subclass in newer stripe) or a dict."""
    if obj is None or key not in obj:
        return None
    return obj[key]


@router.post("/checkout")
def create_checkout_session(current_user: models.User = Depends(get_current_user)):
    """Create a Stripe Checkout Session for one PRO period."""
    if not _stripe_configured():
        raise HTTPException(status_code=503, detail="Payments are not configured")

    stripe.api_key = settings.STRIPE_SECRET_KEY
    try:
        session = stripe.checkout.Session.create(
            mode="payment",
            success_url=settings.APP_URL + "/success?session_id={CHECKOUT_SESSION_ID}",
            cancel_url=settings.APP_URL + "/",
            customer_email=current_user.email,
            client_reference_id=str(current_user.id),
            line_items=[{"price": settings.STRIPE_PRICE_ID, "quantity": 1}],
            metadata={"user_id": str(current_user.id), "email": current_user.email},
        )
    except stripe.StripeError as e:
        logger.warning("Stripe checkout failed for user %s: %s", current_user.id, e)
        raise HTTPException(status_code=502, detail="Payment provider error")

    return {"session_id": session.id, "url": session.url}


@router.post("/webhook")
async def stripe_webhook(request: Request, db: Session = Depends(get_db)):
    """Stripe events. Signature is checked against the raw body."""
    if not settings.STRIPE_WEBHOOK_SECRET:
        raise HTTPException(status_code=503, detail="Webhook secret not configured")

    payload = await request.body()
    sig_header = request.headers.get("Stripe-Signature", "")

    try:
        event = stripe.Webhook.construct_event(
            payload=payload,
            sig_header=sig_header,
            secret=settings.STRIPE_WEBHOOK_SECRET,
        )
    except (ValueError, stripe.SignatureVerificationError) as e:
        logger.warning("Rejected Stripe webhook: %s", e)
        raise HTTPException(status_code=400, detail="Invalid webhook signature")

    if event["type"] != "checkout.session.completed":
        return {"received": True, "handled": False}

    session = event["data"]["object"]
    metadata = _field(session, "metadata") or {}
    user_id = _field(metadata, "user_id") or _field(session, "client_reference_id")

    user = None
    if user_id and str(user_id).isdigit():
        user = db.query(models.User).filter(models.User.id == int(user_id)).first()
    if user is None:
        logger.warning("Checkout completed for unknown user %r", user_id)
        return {"received": True, "handled": False}

    activate_pro(user)
    db.commit()
    return {"received": True, "handled": True}


@router.post("/simulate-success")
def simulate_payment_success(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Demo checkout: PRO for one period without a payment provider."""
    if not settings.PAYMENT_SIMULATION_ENABLED:
        raise HTTPException(status_code=403, detail="Payment simulation is disabled")

    activate_pro(current_user)
    db.commit()
    db.refresh(current_user)
    return _user_to_response(current_user)


@router.post("/trial")
def start_free_trial(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        start_trial(current_user)
    except SubscriptionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    db.commit()
    db.refresh(current_user)
    return _user_to_response(current_user)
