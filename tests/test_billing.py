"""
Billing — Stripe checkout (mocked), signed webhooks, demo payment, trial.
"""

import hashlib
import hmac
import json
import time
from datetime import datetime, timedelta
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from construlab import models
from construlab.config import settings

from conftest import register_user


def test_simulate_success_activates_pro(client, auth_headers):
    response = client.post("/api/billing/simulate-success", headers=auth_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["role"] == "pro"
    assert body["subscription_status"] == "active"
    assert body["has_pro_access"] is True
    expiry = datetime.fromisoformat(body["subscription_expiry"])
    assert timedelta(days=364) < expiry - datetime.utcnow() <= timedelta(days=365)


def test_simulate_success_disabled(client, auth_headers):
    with patch.object(settings, "PAYMENT_SIMULATION_ENABLED", False):
        response = client.post("/api/billing/simulate-success", headers=auth_headers)
    assert response.status_code == 403


def test_simulate_success_requires_login(client):
    assert client.post("/api/billing/simulate-success").status_code == 401


def test_trial_starts_once(client, auth_headers):
    response = client.post("/api/billing/trial", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["subscription_status"] == "trial"
    assert response.json()["has_pro_access"] is True

    assert client.post("/api/billing/trial", headers=auth_headers).status_code == 409


def test_trial_rejected_for_pro(client, pro_headers):
    assert client.post("/api/billing/trial", headers=pro_headers).status_code == 409


def test_checkout_unconfigured(client, auth_headers):
    with patch.object(settings, "STRIPE_SECRET_KEY", ""):
        response = client.post("/api/billing/checkout", headers=auth_headers)
    assert response.status_code == 503


def test_checkout_creates_stripe_session(client, auth_headers):
    fake_session = SimpleNamespace(id="cs_test_123", url="https://checkout.stripe.com/c/pay/cs_test_123")
    with patch.object(settings, "STRIPE_SECRET_KEY", "sk_test_x"), \
            patch.object(settings, "STRIPE_PRICE_ID", "price_123"), \
            patch("construlab.routers.billing.stripe.checkout.Session.create", return_value=fake_session) as create:
        response = client.post("/api/billing/checkout", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["url"] == fake_session.url
    kwargs = create.call_args.kwargs
    assert kwargs["customer_email"] == "free@builder.pt"
    assert kwargs["line_items"] == [{"price": "price_123", "quantity": 1}]


def _signed(payload: dict, secret: str = "whsec_test"):
    """Serialize an event and sign it the way Stripe does (t=<ts>,v1=<hmac>)."""
    body = json.dumps(payload)
    timestamp = int(time.time())
    digest = hmac.new(secret.encode(), f"{timestamp}.{body}".encode(), hashlib.sha256).hexdigest()
    return body.encode(), {"Stripe-Signature": f"t={timestamp},v1={digest}"}


def _stripe_event(user_id, metadata=True):
    session = {
        "id": "cs_test_123",
        "object": "checkout.session",
        "client_reference_id": str(user_id),
        "metadata": {"user_id": str(user_id)} if metadata else {},
    }
    return {
        "id": "evt_test_123",
        "object": "event",
        "type": "checkout.session.completed",
        "data": {"object": session},
    }


def test_webhook_activates_pro(client, db):
    data = register_user(client, "pagante@obra.pt")
    body, headers = _signed(_stripe_event(data["user_id"]))
    with patch.object(settings, "STRIPE_WEBHOOK_SECRET", "whsec_test"):
        response = client.post("/api/billing/webhook", content=body, headers=headers)

    assert response.status_code == 200
    assert response.json()["handled"] is True
    user = db.query(models.User).filter(models.User.id == data["user_id"]).first()
    assert user.role == "pro"
    assert user.subscription_status == "active"
    assert user.subscription_expiry is not None


def test_webhook_falls_back_to_client_reference_id(client, db):
    data = register_user(client, "pagante@obra.pt")
    body, headers = _signed(_stripe_event(data["user_id"], metadata=False))
    with patch.object(settings, "STRIPE_WEBHOOK_SECRET", "whsec_test"):
        response = client.post("/api/billing/webhook", content=body, headers=headers)

    assert response.status_code == 200
    assert response.json()["handled"] is True
    user = db.query(models.User).filter(models.User.id == data["user_id"]).first()
    assert user.role == "pro"


def test_webhook_rejects_wrong_secret(client):
    body, headers = _signed(_stripe_event(1), secret="whsec_other")
    with patch.object(settings, "STRIPE_WEBHOOK_SECRET", "whsec_test"):
        response = client.post("/api/billing/webhook", content=body, headers=headers)
    assert response.status_code == 400


def test_webhook_bad_signature(client):
    with patch.object(settings, "STRIPE_WEBHOOK_SECRET", "whsec_test"):
        response = client.post("/api/billing/webhook", content=b"{}", headers={"Stripe-Signature": "sig"})
    assert response.status_code == 400


@pytest.mark.parametrize("event_type", ["invoice.paid", "customer.created"])
def test_webhook_ignores_other_events(client, event_type):
    body, headers = _signed({
        "id": "evt_test_456", "object": "event", "type": event_type, "data": {"object": {"object": "invoice"}},
    })
    with patch.object(settings, "STRIPE_WEBHOOK_SECRET", "whsec_test"):
        response = client.post("/api/billing/webhook", content=body, headers=headers)
    assert response.status_code == 200
    assert response.json()["handled"] is False
