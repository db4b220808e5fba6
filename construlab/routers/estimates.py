"""
Estimate endpoints.

POST /api/estimates/measure — geometry only (area, perimeter, edge lengths)
POST /api/estimates/        — full material estimate
POST /api/estimates/pdf     — same input, returns the PDF report

Anonymous use is allowed. The steel breakdown and white-label PDF branding
are PRO features; for everyone else they are stripped from the output.
"""

import logging
import re
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.orm import Session

from .. import geometry, models, schemas, units
from ..auth import get_optional_user
from ..calculators.material_config import resolve_config
from ..calculators.registry import get_calculator, list_calculators
from ..config import settings
from ..database import get_db
from ..i18n import SUPPORTED_LANGUAGES
from ..pdf_generator import generate_materials_pdf
from ..subscriptions import has_pro_access
from .materials import load_preset_config

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/estimates", tags=["estimates"])


def _points(data: schemas.ProjectData) -> list:
    return [(p.x, p.y) for p in data.points]


def _lang(requested: Optional[str]) -> str:
    if requested in SUPPORTED_LANGUAGES:
        return requested
    return settings.DEFAULT_LANGUAGE


def _unit_system(request: schemas.EstimateRequest) -> units.UnitSystem:
    if request.unit_system is not None:
        return request.unit_system
    if request.geometry is not None:
        return request.geometry.unit_system
    return units.UnitSystem.SI


def _request_fields(request: schemas.EstimateRequest) -> dict:
    """Flatten the request into the calculator's fields dict."""
    fields = {
        "unit_system": _unit_system(request),
        "area_m2": request.area_m2,
        "thickness": request.thickness,
        "length": request.length,
        "width": request.width,
        "height": request.height,
    }
    if request.geometry is not None:
        fields["points"] = _points(request.geometry)
        fields["scale"] = request.geometry.scale
        fields["is_closed"] = request.geometry.is_closed
    return fields


def build_estimate(
    request: schemas.EstimateRequest,
    db: Session,
    user: Optional[models.User],
) -> dict:
    """Run the calculator for a request. Raises HTTPException(400) on bad mode/geometry."""
    base = load_preset_config(db, request.preset)
    overrides = request.config.model_dump(exclude_none=True) if request.config else None
    config = resolve_config(base, overrides)
    lang = _lang(request.lang)

    try:
        calculator = get_calculator(request.mode)
        estimate = calculator.calculate(_request_fields(request), config=config, lang=lang)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not has_pro_access(user):
        estimate["steel_breakdown"] = None
    return estimate


@router.get("/modes")
def modes():
    """Structure modes the estimator supports."""
    return {"modes": list_calculators()}


@router.post("/measure")
def measure(data: schemas.MeasureRequest):
    """Area, perimeter and edge lengths of the drawn footprint in the chosen units."""
    points = _points(data)
    system = data.unit_system
    closed = data.is_closed and len(points) >= 3

    area = geometry.area_m2(points, data.scale) if closed else 0.0
    perimeter_m = geometry.perimeter_px(points, closed=closed) / data.scale
    segments = geometry.segment_lengths_m(points, data.scale, closed=closed)

    return {
        "points": len(points),
        "is_closed": closed,
        "scale": data.scale,
        "area_px": geometry.polygon_area_px(points) if closed else 0.0,
        "area_m2": area,
        "area": round(units.convert_value(area, "area", system), 2),
        "large_area": round(units.large_area(area, system), 4),
        "perimeter": round(units.convert_value(perimeter_m, "length", system), 2),
        "segments": [round(units.convert_value(s, "length", system), 2) for s in segments],
        "units": units.labels_for(system),
    }


@router.post("/")
def create_estimate(
    request: schemas.EstimateRequest,
    db: Session = Depends(get_db),
    user: Optional[models.User] = Depends(get_optional_user),
):
    """Material quantities for a slab or box."""
    return build_estimate(request, db, user)


@router.post("/pdf")
def estimate_pdf(
    request: schemas.EstimateRequest,
    db: Session = Depends(get_db),
    user: Optional[models.User] = Depends(get_optional_user),
):
    """
    Generate and download the materials report.

    Returns: application/pdf
    """
    estimate = build_estimate(request, db, user)

    branding = None
    if has_pro_access(user) and user.company_name:
        branding = {
            "company_name": user.company_name,
            "company_logo_url": user.company_logo_url,
        }

    pdf_bytes = generate_materials_pdf(
        estimate,
        branding=branding,
        lang=estimate["lang"],
        project_name=request.project_name,
    )

    slug = re.sub(r"[^A-Za-z0-9_-]+", "-", request.project_name or "").strip("-")
    filename = f"Construlab-{slug or estimate['mode']}.pdf"
    logger.info("PDF report generated (%s, %d bytes)", estimate["mode"], len(pdf_bytes))
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
        },
    )
