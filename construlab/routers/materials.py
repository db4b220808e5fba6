from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from .. import models, schemas
from ..auth import require_admin
from ..calculators.material_config import DEFAULT_MATERIALS, preset_to_config
from ..database import get_db

router = APIRouter(prefix="/materials", tags=["materials"])

# Default presets (ratios per m³ of concrete), editable via PATCH
DEFAULT_PRESETS = {
    "default": {**DEFAULT_MATERIALS, "notes": "C25/30 general purpose mix — volumetric averages"},
}


def seed_default_presets(db: Session) -> int:
    """Insert missing default presets. Returns how many were added."""
    added = 0
    for name, data in DEFAULT_PRESETS.items():
        existing = db.query(models.MaterialPreset).filter(models.MaterialPreset.name == name).first()
        if not existing:
            db.add(models.MaterialPreset(name=name, **data))
            added += 1
    db.commit()
    return added


def load_preset_config(db: Session, name: str) -> dict:
    """Config dict for a named preset. `default` falls back to built-in ratios if unseeded."""
    preset = db.query(models.MaterialPreset).filter(models.MaterialPreset.name == name).first()
    if preset:
        return preset_to_config(preset)
    if name == "default":
        return dict(DEFAULT_MATERIALS)
    raise HTTPException(status_code=404, detail=f"Material preset '{name}' not found")


@router.get("/seed")
def seed_presets(db: Session = Depends(get_db)):
    """Seed default material presets."""
    added = seed_default_presets(db)
    return {"ok": True, "seeded": len(DEFAULT_PRESETS), "added": added}


@router.get("/", response_model=List[schemas.MaterialPreset])
def list_presets(db: Session = Depends(get_db)):
    return db.query(models.MaterialPreset).order_by(models.MaterialPreset.name).all()


@router.get("/{name}", response_model=schemas.MaterialPreset)
def get_preset(name: str, db: Session = Depends(get_db)):
    preset = db.query(models.MaterialPreset).filter(models.MaterialPreset.name == name).first()
    if not preset:
        raise HTTPException(status_code=404, detail="Preset not found — run /materials/seed first")
    return preset


@router.patch("/{name}", response_model=schemas.MaterialPreset)
def update_preset(
    name: str,
    update: schemas.MaterialPresetUpdate,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
):
    preset = db.query(models.MaterialPreset).filter(models.MaterialPreset.name == name).first()
    if not preset:
        raise HTTPException(status_code=404, detail="Preset not found — run /materials/seed first")
    for field, value in update.model_dump(exclude_unset=True).items():
        if value is None and field != "notes":
            continue
        if field != "notes" and value < 0:
            raise HTTPException(status_code=400, detail=f"{field} cannot be negative")
        setattr(preset, field, value)
    if preset.steel_kg_per_m3_min > preset.steel_kg_per_m3_max:
        raise HTTPException(status_code=400, detail="steel_kg_per_m3_min cannot exceed steel_kg_per_m3_max")
    db.commit()
    db.refresh(preset)
    return preset
