"""
Company logo upload (white-label).

POST /api/profile/logo — PRO only.
Stores to Cloudflare R2 if configured, otherwise local uploads/ directory.
"""

import logging
import uuid
from datetime import datetime
from io import BytesIO
from pathlib import Path

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.orm import Session

from .. import models
from ..auth import require_pro
from ..config import settings
from ..database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["profile"])

ALLOWED_EXTENSIONS = {"jpg", "jpeg", "png", "webp"}
MAX_FILE_SIZE = 2 * 1024 * 1024  # 2MB

CONTENT_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "webp": "image/webp",
}


def _get_extension(filename: str) -> str:
    """Extract and validate file extension."""
    if not filename or "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower()


def _r2_configured() -> bool:
    """Check if Cloudflare R2 credentials are set."""
    return bool(
        settings.CLOUDFLARE_R2_ACCOUNT_ID
        and settings.CLOUDFLARE_R2_ACCESS_KEY_ID
        and settings.CLOUDFLARE_R2_SECRET_ACCESS_KEY
    )


def _upload_to_r2(file_bytes: bytes, filename: str, content_type: str) -> str:
    """Upload file to Cloudflare R2 and return the public URL."""
    import boto3

    s3 = boto3.client(
        "s3",
        endpoint_url=f"https://{settings.CLOUDFLARE_R2_ACCOUNT_ID}.r2.cloudflarestorage.com",
        aws_access_key_id=settings.CLOUDFLARE_R2_ACCESS_KEY_ID,
        aws_secret_access_key=settings.CLOUDFLARE_R2_SECRET_ACCESS_KEY,
    )
    s3.upload_fileobj(
        BytesIO(file_bytes),
        settings.CLOUDFLARE_R2_BUCKET,
        filename,
        ExtraArgs={"ContentType": content_type},
    )
    return f"https://{settings.CLOUDFLARE_R2_BUCKET}.{settings.CLOUDFLARE_R2_ACCOUNT_ID}.r2.dev/{filename}"


def _save_locally(file_bytes: bytes, filename: str) -> str:
    """Save file to local uploads/logos and return the URL path."""
    upload_dir = Path("uploads") / "logos"
    upload_dir.mkdir(parents=True, exist_ok=True)
    with open(upload_dir / filename, "wb") as f:
        f.write(file_bytes)
    return f"/uploads/logos/{filename}"


@router.post("/logo")
async def upload_logo(
    file: UploadFile = File(...),
    current_user: models.User = Depends(require_pro),
    db: Session = Depends(get_db),
):
    """
    Upload the company logo shown on white-labeled PDF reports.

    - Validates file type (png, jpg, jpeg, webp)
    - Validates file size (max 2MB)
    - Saves the URL on the user's profile
    """
    ext = _get_extension(file.filename or "")
    if ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"File type '{ext}' not allowed. Allowed: {', '.join(sorted(ALLOWED_EXTENSIONS))}",
        )

    file_bytes = await file.read()

    if len(file_bytes) == 0:
        raise HTTPException(status_code=400, detail="Empty file.")

    if len(file_bytes) > MAX_FILE_SIZE:
        raise HTTPException(
            status_code=400,
            detail=f"File too large ({len(file_bytes) / 1024 / 1024:.1f}MB). Maximum is 2MB.",
        )

    unique_name = f"user{current_user.id}_{uuid.uuid4().hex[:12]}.{ext}"

    if _r2_configured():
        logo_url = _upload_to_r2(file_bytes, unique_name, CONTENT_TYPES[ext])
    else:
        logo_url = _save_locally(file_bytes, unique_name)

    current_user.company_logo_url = logo_url
    current_user.updated_at = datetime.utcnow()
    db.commit()
    logger.info("User %s uploaded logo %s", current_user.id, logo_url)

    return {"company_logo_url": logo_url, "filename": unique_name}
