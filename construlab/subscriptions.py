"""
Role and subscription state.

Pro access = admin, or pro whose subscription hasn't expired.
Status follows role: free → inactive, pro/admin → active, banned → banned.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from .config import settings
from .models import SubscriptionStatus, User, UserRole

logger = logging.getLogger(__name__)

STATUS_FOR_ROLE = {
    UserRole.FREE: SubscriptionStatus.INACTIVE,
    UserRole.PRO: SubscriptionStatus.ACTIVE,
    UserRole.ADMIN: SubscriptionStatus.ACTIVE,
    UserRole.BANNED: SubscriptionStatus.BANNED,
}


class SubscriptionError(Exception):
    pass


def has_pro_access(user: Optional[User], now: datetime = None) -> bool:
    if user is None:
        return False
    if user.role == UserRole.ADMIN.value:
        return True
    if user.role != UserRole.PRO.value:
        return False
    if user.subscription_expiry is None:
        return True
    return user.subscription_expiry > (now or datetime.utcnow())


def apply_role(user: User, role: UserRole) -> User:
    """Set role and the matching subscription status. Caller commits."""
    role = UserRole(role)
    user.role = role.value
    user.subscription_status = STATUS_FOR_ROLE[role].value
    # Manual grant: clear a lapsed expiry
    if role == UserRole.PRO and user.subscription_expiry and user.subscription_expiry <= datetime.utcnow():
        user.subscription_expiry = None
    logger.info("User %s role → %s", user.id, role.value)
    return user


def activate_pro(user: User, days: int = None, now: datetime = None) -> User:
    """Payment confirmed: pro, active, expiry one period from now."""
    now = now or datetime.utcnow()
    user.role = UserRole.PRO.value
    user.subscription_status = SubscriptionStatus.ACTIVE.value
    user.subscription_expiry = now + timedelta(days=days or settings.PRO_PERIOD_DAYS)
    logger.info("User %s activated PRO until %s", user.id, user.subscription_expiry.isoformat())
    return user


def start_trial(user: User, now: datetime = None) -> User:
    """
    One trial per account. Rejected for accounts that already have (or had)
    a trial, are already pro/admin, or are banned.
    """
    if user.role in (UserRole.PRO.value, UserRole.ADMIN.value) and has_pro_access(user, now):
        raise SubscriptionError("Account already has PRO access")
    if user.role == UserRole.BANNED.value:
        raise SubscriptionError("Banned accounts cannot start a trial")
    if user.subscription_status == SubscriptionStatus.TRIAL.value or user.subscription_expiry is not None:
        raise SubscriptionError("Trial already used")

    now = now or datetime.utcnow()
    user.role = UserRole.PRO.value
    user.subscription_status = SubscriptionStatus.TRIAL.value
    user.subscription_expiry = now + timedelta(days=settings.TRIAL_DAYS)
    logger.info("User %s started %d-day trial", user.id, settings.TRIAL_DAYS)
    return user
