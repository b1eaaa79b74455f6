"""
Photo upload endpoint.

POST /api/photos/upload — Upload a camera capture or image file.
Stores to S3/R2 if configured, otherwise local uploads/ directory.
"""

import uuid
from typing import Optional

from fastapi import APIRouter, HTTPException, UploadFile, File, Form

from .. import storage
from ..config import settings
from ..errors import StorageError
from ..image_utils import get_mime_type
from .errors import to_http_exception

router = APIRouter(prefix="/photos", tags=["photos"])

ALLOWED_EXTENSIONS = {"jpg", "jpeg", "png", "webp", "heic"}


def _get_extension(filename: str) -> str:
    """Extract and validate file extension."""
    if not filename or "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower()


@router.post("/upload")
async def upload_photo(
    file: UploadFile = File(...),
    prefix: Optional[str] = Form(None),
):
    """
    Upload a photo.

    - Validates file type (jpg, jpeg, png, webp, heic)
    - Validates file size (MAX_UPLOAD_BYTES, 10MB default)
    - Returns the photo URL/path, usable as the image of /api/analyze
    """
    ext = _get_extension(file.filename or "")
    if ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"File type '{ext}' not allowed. Allowed: {', '.join(sorted(ALLOWED_EXTENSIONS))}",
        )

    file_bytes = await file.read()

    if len(file_bytes) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=400,
            detail=f"File too large ({len(file_bytes) / 1024 / 1024:.1f}MB). "
                   f"Maximum is {settings.MAX_UPLOAD_BYTES // (1024 * 1024)}MB.",
        )

    if len(file_bytes) == 0:
        raise HTTPException(status_code=400, detail="Empty file.")

    unique_name = f"{prefix or 'unsorted'}_{uuid.uuid4().hex[:12]}.{ext}"

    try:
        photo_url = storage.upload_bytes(file_bytes, f"photos/{unique_name}", get_mime_type(unique_name))
    except StorageError as e:
        raise to_http_exception(e)

    return {
        "photo_url": photo_url,
        "filename": unique_name,
    }
