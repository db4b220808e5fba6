"""
Admin user management.

GET    /api/admin/users?search=   — all users, newest first
PATCH  /api/admin/users/{id}/role — change role (status follows role)
DELETE /api/admin/users/{id}      — delete user, their projects and tokens

Admins can't change or delete their own account.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import require_admin
from ..database import get_db
from ..subscriptions import apply_role
from .auth import _user_to_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_other_user(user_id: int, admin: models.User, db: Session) -> models.User:
    if user_id == admin.id:
        raise HTTPException(status_code=400, detail="You cannot modify your own account")
    user = db.query(models.User).filter(models.User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/users")
def list_users(
    search: Optional[str] = Query(None),
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    query = db.query(models.User)
    term = (search or "").strip()
    if term:
        like = f"%{term}%"
        query = query.filter(or_(models.User.email.ilike(like), models.User.name.ilike(like)))
    users = query.order_by(models.User.created_at.desc(), models.User.id.desc()).all()
    return [_user_to_response(u) for u in users]


@router.patch("/users/{user_id}/role")
def change_role(
    user_id: int,
    update: schemas.RoleUpdate,
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    user = _get_other_user(user_id, admin, db)
    apply_role(user, update.role)
    db.commit()
    db.refresh(user)
    logger.info("Admin %s set user %s role to %s", admin.id, user.id, user.role)
    return _user_to_response(user)


@router.delete("/users/{user_id}")
def delete_user(
    user_id: int,
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    user = _get_other_user(user_id, admin, db)
    project_count = len(user.projects)
    db.delete(user)
    db.commit()
    logger.info("Admin %s deleted user %s (%d projects)", admin.id, user_id, project_count)
    return {"ok": True, "deleted_projects": project_count}
