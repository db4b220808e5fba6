"""
Ad slot configuration for the web client.

PRO users see no ads. Outside production the slots are inert placeholders,
so development traffic never hits the ad network.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from .. import models
from ..auth import get_optional_user
from ..config import settings
from ..subscriptions import has_pro_access

router = APIRouter(prefix="/ads", tags=["ads"])

SLOT_NAMES = ("header", "inline", "sidebar")


def _slot_ids() -> dict:
    return {
        "header": settings.ADSENSE_SLOT_HEADER,
        "inline": settings.ADSENSE_SLOT_INLINE,
        "sidebar": settings.ADSENSE_SLOT_SIDEBAR,
    }


@router.get("/slots")
def ad_slots(user: Optional[models.User] = Depends(get_optional_user)):
    if has_pro_access(user):
        return {"enabled": False, "placeholder": False, "publisher_id": None, "slots": []}

    live = settings.ENVIRONMENT == "production"
    slot_ids = _slot_ids()
    return {
        "enabled": live,
        "placeholder": not live,
        "publisher_id": settings.ADSENSE_PUBLISHER_ID if live else None,
        "slots": [
            {"name": name, "slot_id": slot_ids[name] if live else None}
            for name in SLOT_NAMES
        ],
    }
