# backend/shop_admin/api/endpoints/upload.py
from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError as PydanticValidationError
from starlette.datastructures import UploadFile
from typing import Any
import json
import logging

from shop_admin import models, schemas
from shop_admin.api import deps
from shop_admin.core.config import settings
from shop_admin.core.exceptions import NotFoundError, ValidationError
from shop_admin.services.asset_store import AssetStore
from shop_admin.services.image_hash import decode_image_input
from shop_admin.services.image_upload import ImageUploadService

logger = logging.getLogger(__name__)

router = APIRouter()

def _check_size(size: int) -> None:
    if size > settings.MAX_UPLOAD_BYTES:
        limit_mb = settings.MAX_UPLOAD_BYTES // (1024 * 1024)
        raise ValidationError(f"Image exceeds the {limit_mb}MB upload limit", field="image")

async def _read_multipart(request: Request) -> bytes:
    form = await request.form()
    file_upload = form.get("image")
    if not isinstance(file_upload, UploadFile):
        raise ValidationError("No image file provided", field="image")
    try:
        if not (file_upload.content_type or "").startswith("image/"):
            raise ValidationError("Only image files are allowed", field="image")
        data = await file_upload.read()
    finally:
        await file_upload.close()
    if not data:
        raise ValidationError("Uploaded image is empty", field="image")
    _check_size(len(data))
    return data

async def _read_json(request: Request) -> str:
    try:
        body = await request.json()
        payload = schemas.Base64ImageUpload.model_validate(body)
    except json.JSONDecodeError:
        raise ValidationError("Request body must be multipart/form-data or JSON")
    except PydanticValidationError:
        raise ValidationError("No image data provided", field="imageData")
    # Size limit applies to the decoded bytes, not the base64 text
    _check_size(len(decode_image_input(payload.image_data)))
    return payload.image_data

@router.post("/image", response_model=schemas.UploadResult)
async def upload_image(
    request: Request,
    upload_service: ImageUploadService = Depends(deps.get_upload_service),
    current_admin: models.Admin = Depends(deps.get_current_admin),
) -> Any:
    """
    Upload one image, either as the multipart field ``image`` or as a JSON
    ``{"imageData": "data:image/...;base64,..."}`` body.
    Identical content is stored once; repeats come back with ``isDuplicate``.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("multipart/form-data"):
        image_data = await _read_multipart(request)
    else:
        image_data = await _read_json(request)
    result = await upload_service.upload(image_data)
    logger.info("Image upload by admin %s -> %s (duplicate=%s)", current_admin.id, result.storage_key, result.is_duplicate)
    return result

@router.delete("/image/{storage_key:path}", response_model=schemas.DestroyResult)
async def delete_image(
    storage_key: str,
    asset_store: AssetStore = Depends(deps.get_asset_store),
    current_admin: models.Admin = Depends(deps.get_current_admin),
) -> Any:
    if not storage_key.strip():
        raise ValidationError("Storage key is required", field="storageKey")
    outcome = await asset_store.destroy(storage_key)
    if not outcome.deleted:
        raise NotFoundError("Image not found or already deleted")
    return outcome
