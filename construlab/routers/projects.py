"""
Cloud project storage — PRO only, scoped to the owner.

A saveable project needs a name and at least 3 points.
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import geometry, models, schemas
from ..auth import require_pro
from ..database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects", tags=["projects"])

MIN_POINTS = 3


def _validate(project: schemas.ProjectCreate) -> str:
    name = (project.name or "").strip()
    if not name:
        raise HTTPException(status_code=400, detail="Project name is required")
    if len(project.data.points) < MIN_POINTS:
        raise HTTPException(
            status_code=400,
            detail=f"A project needs at least {MIN_POINTS} points",
        )
    return name


def _project_to_response(project: models.Project) -> dict:
    data = project.data or {}
    points = [(p["x"], p["y"]) for p in data.get("points", [])]
    scale = data.get("scale") or geometry.DEFAULT_SCALE_PX_PER_M
    area = geometry.area_m2(points, scale) if data.get("is_closed") else 0.0
    return {
        "id": project.id,
        "user_id": project.user_id,
        "name": project.name,
        "data": data,
        "area_m2": round(area, 4),
        "created_at": project.created_at.isoformat() if project.created_at else None,
        "updated_at": project.updated_at.isoformat() if project.updated_at else None,
    }


def _get_owned(project_id: int, user: models.User, db: Session) -> models.Project:
    project = db.query(models.Project).filter(models.Project.id == project_id).first()
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    if project.user_id != user.id:
        raise HTTPException(status_code=403, detail="Not your project")
    return project


@router.get("/")
def list_projects(
    current_user: models.User = Depends(require_pro),
    db: Session = Depends(get_db),
):
    """The user's projects, most recently updated first."""
    projects = (
        db.query(models.Project)
        .filter(models.Project.user_id == current_user.id)
        .order_by(models.Project.updated_at.desc(), models.Project.id.desc())
        .all()
    )
    return [_project_to_response(p) for p in projects]


@router.post("/")
def create_project(
    project: schemas.ProjectCreate,
    current_user: models.User = Depends(require_pro),
    db: Session = Depends(get_db),
):
    name = _validate(project)
    db_project = models.Project(
        user_id=current_user.id,
        name=name,
        data=project.data.model_dump(mode="json"),
    )
    db.add(db_project)
    db.commit()
    db.refresh(db_project)
    logger.info("User %s saved project %s", current_user.id, db_project.id)
    return _project_to_response(db_project)


@router.get("/{project_id}")
def get_project(
    project_id: int,
    current_user: models.User = Depends(require_pro),
    db: Session = Depends(get_db),
):
    return _project_to_response(_get_owned(project_id, current_user, db))


@router.put("/{project_id}")
def update_project(
    project_id: int,
    project: schemas.ProjectCreate,
    current_user: models.User = Depends(require_pro),
    db: Session = Depends(get_db),
):
    db_project = _get_owned(project_id, current_user, db)
    db_project.name = _validate(project)
    db_project.data = project.data.model_dump(mode="json")
    db_project.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(db_project)
    return _project_to_response(db_project)


@router.delete("/{project_id}")
def delete_project(
    project_id: int,
    current_user: models.User = Depends(require_pro),
    db: Session = Depends(get_db),
):
    db_project = _get_owned(project_id, current_user, db)
    db.delete(db_project)
    db.commit()
    return {"ok": True}
