"""Photo upload API.

POST /api/upload accepts a single image in the multipart field ``photo``,
checks its type and pixel dimensions, and stores it under a fresh file id
that the generate endpoint later refers to.
"""

import logging
import os
from typing import Optional

from fastapi import APIRouter, File, UploadFile
from PIL import Image, UnidentifiedImageError

from app.config import settings
from app.errors import InternalError, ValidationError
from app.storage.uploads import upload_store

logger = logging.getLogger(__name__)

router = APIRouter()

# Replaceable in tests (same pattern as the job store wiring)
_upload_store = upload_store


def set_upload_store(store):
    global _upload_store
    _upload_store = store


_ALLOWED_TYPES = {"image/jpeg", "image/png", "image/webp"}

_CHUNK_BYTES = 1024 * 1024


@router.post("/upload")
async def upload_photo(photo: Optional[UploadFile] = File(None)):
    """Store an uploaded photo and return its file id.

    Returns:
        {success, message, fileId, fileName, fileSize, dimensions: {width, height}}
    """
    if photo is None or not photo.filename:
        raise ValidationError("No file uploaded")

    if photo.content_type not in _ALLOWED_TYPES:
        raise ValidationError("Invalid file type. Only JPEG, PNG, and WebP are allowed.")

    file_id = _upload_store.new_file_id()
    ext = os.path.splitext(photo.filename)[1].lower()
    path = _upload_store.get_path(file_id, ext)

    total = 0
    try:
        with open(path, "wb") as dst:
            while True:
                chunk = await photo.read(_CHUNK_BYTES)
                if not chunk:
                    break
                total += len(chunk)
                if total > settings.upload_max_size:
                    break
                dst.write(chunk)
    except OSError as exc:
        _upload_store.remove(path)
        raise InternalError(f"Failed to save upload: {exc}")

    if total > settings.upload_max_size:
        _upload_store.remove(path)
        max_mb = settings.upload_max_size // (1024 * 1024)
        raise ValidationError(f"File too large. Maximum size: {max_mb}MB")

    try:
        with Image.open(path) as img:
            width, height = img.size
    except (UnidentifiedImageError, OSError):
        _upload_store.remove(path)
        raise ValidationError("Invalid image file")

    min_dim = settings.min_image_dimension
    max_dim = settings.max_image_dimension
    if width < min_dim or height < min_dim:
        _upload_store.remove(path)
        raise ValidationError(f"Image too small. Minimum dimensions: {min_dim}x{min_dim}px")
    if width > max_dim or height > max_dim:
        _upload_store.remove(path)
        raise ValidationError(f"Image too large. Maximum dimensions: {max_dim}x{max_dim}px")

    logger.info("Stored upload %s (%s, %dx%d, %d bytes)", file_id, photo.filename, width, height, total)

    return {
        "success": True,
        "message": "File uploaded successfully",
        "fileId": file_id,
        "fileName": photo.filename,
        "fileSize": total,
        "dimensions": {"width": width, "height": height},
    }
