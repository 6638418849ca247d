import logging
from typing import List

from fastapi import APIRouter, File, HTTPException, UploadFile

from stylesnap.core.config import get_settings
from stylesnap.schemas.tryon import (
    GenerateTryOnInput,
    GenerateTryOnOutput,
    ModelOption,
    UploadOut,
    ValidateImageIn,
    ValidationResult,
)
from stylesnap.services.dispatch import MODEL_OPTIONS, generate_try_on
from stylesnap.services.image_utils import normalize_photo
from stylesnap.services.uploader import UploadRejected, check_upload
from stylesnap.services.validation import validate_image

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/models", response_model=List[ModelOption])
async def list_models():
    return MODEL_OPTIONS


@router.post("/upload", response_model=UploadOut)
async def upload_photo(photo: UploadFile = File(...)):
    settings = get_settings()
    limit = int(settings.max_upload_mb * 1024 * 1024)
    try:
        if photo.size is not None:
            check_upload(photo.size, photo.content_type, settings.max_upload_mb)
        # one byte past the ceiling is enough to reject
        data = await photo.read(limit + 1)
        if not data:
            raise HTTPException(400, "photo is empty")
        check_upload(len(data), photo.content_type, settings.max_upload_mb)
    except UploadRejected as e:
        raise HTTPException(e.status_code, str(e))

    logger.info("Upload %s: %d bytes (%s)", photo.filename, len(data), photo.content_type)
    return UploadOut(dataUri=normalize_photo(data, settings.upload_max_side), fileName=photo.filename)


@router.post("/validate-image", response_model=ValidationResult)
async def validate_photo(req: ValidateImageIn):
    return await validate_image(req.photoDataUri)


@router.post("/try-on", response_model=GenerateTryOnOutput)
async def try_on(req: GenerateTryOnInput):
    return await generate_try_on(req)
