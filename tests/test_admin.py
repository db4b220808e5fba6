"""
Admin user management and subscription state transitions.
"""

from datetime import datetime, timedelta

import pytest

from construlab import models
from construlab.models import SubscriptionStatus, UserRole
from construlab.subscriptions import (
    SubscriptionError,
    activate_pro,
    apply_role,
    has_pro_access,
    start_trial,
)

from conftest import bearer, register_user


def _user(**kwargs):
    defaults = {"id": 1, "email": "x@y.pt", "password_hash": "-", "role": "free",
                "subscription_status": "inactive", "subscription_expiry": None}
    defaults.update(kwargs)
    return models.User(**defaults)


# --- Subscription rules ---

def test_pro_access_rules():
    now = datetime(2026, 1, 1)
    assert has_pro_access(None) is False
    assert has_pro_access(_user(role="admin")) is True
    assert has_pro_access(_user(role="free")) is False
    assert has_pro_access(_user(role="pro")) is True
    assert has_pro_access(_user(role="pro", subscription_expiry=now + timedelta(days=1)), now) is True
    assert has_pro_access(_user(role="pro", subscription_expiry=now - timedelta(days=1)), now) is False


@pytest.mark.parametrize("role,status", [
    (UserRole.FREE, SubscriptionStatus.INACTIVE),
    (UserRole.PRO, SubscriptionStatus.ACTIVE),
    (UserRole.ADMIN, SubscriptionStatus.ACTIVE),
    (UserRole.BANNED, SubscriptionStatus.BANNED),
])
def test_status_follows_role(role, status):
    user = apply_role(_user(), role)
    assert user.role == role.value
    assert user.subscription_status == status.value


def test_activate_pro_sets_one_year_expiry():
    now = datetime(2026, 3, 1)
    user = activate_pro(_user(), now=now)
    assert user.role == "pro"
    assert user.subscription_status == "active"
    assert user.subscription_expiry == now + timedelta(days=365)


def test_trial_only_once():
    now = datetime(2026, 3, 1)
    user = start_trial(_user(), now=now)
    assert user.subscription_status == "trial"
    assert user.subscription_expiry == now + timedelta(days=7)

    user.role = "free"  # trial lapsed and was downgraded
    with pytest.raises(SubscriptionError):
        start_trial(user, now=now + timedelta(days=30))


# --- Admin endpoints ---

def test_non_admin_forbidden(client, auth_headers, pro_headers):
    assert client.get("/api/admin/users", headers=auth_headers).status_code == 403
    assert client.get("/api/admin/users", headers=pro_headers).status_code == 403


def test_list_and_search_users(client, admin_headers):
    register_user(client, "ana@obra.pt", name="Ana Costa")
    register_user(client, "rui@obra.pt", name="Rui Lopes")

    all_users = client.get("/api/admin/users", headers=admin_headers).json()
    assert len(all_users) == 3

    found = client.get("/api/admin/users", params={"search": "costa"}, headers=admin_headers).json()
    assert [u["email"] for u in found] == ["ana@obra.pt"]


def test_change_role_updates_status(client, admin_headers):
    target = register_user(client, "ana@obra.pt")
    response = client.patch(
        f"/api/admin/users/{target['user_id']}/role",
        json={"role": "pro"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["role"] == "pro"
    assert response.json()["subscription_status"] == "active"

    response = client.patch(
        f"/api/admin/users/{target['user_id']}/role",
        json={"role": "banned"},
        headers=admin_headers,
    )
    assert response.json()["subscription_status"] == "banned"
    assert client.get("/api/auth/me", headers=bearer(target["access_token"])).status_code == 403


def test_invalid_role_rejected(client, admin_headers):
    target = register_user(client, "ana@obra.pt")
    response = client.patch(
        f"/api/admin/users/{target['user_id']}/role",
        json={"role": "superuser"},
        headers=admin_headers,
    )
    assert response.status_code == 422


def test_admin_cannot_modify_self(client, admin_headers):
    me = client.get("/api/auth/me", headers=admin_headers).json()
    response = client.patch(f"/api/admin/users/{me['id']}/role", json={"role": "free"}, headers=admin_headers)
    assert response.status_code == 400
    assert client.delete(f"/api/admin/users/{me['id']}", headers=admin_headers).status_code == 400


def test_delete_user_removes_projects(client, admin_headers, db):
    target = register_user(client, "ana@obra.pt")
    db.add(models.Project(user_id=target["user_id"], name="Casa", data={"points": []}))
    db.commit()

    response = client.delete(f"/api/admin/users/{target['user_id']}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["deleted_projects"] == 1

    db.expire_all()
    assert db.query(models.User).filter(models.User.id == target["user_id"]).first() is None
    assert db.query(models.Project).count() == 0


def test_delete_missing_user(client, admin_headers):
    assert client.delete("/api/admin/users/9999", headers=admin_headers).status_code == 404
