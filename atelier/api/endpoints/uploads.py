import logging

from fastapi import APIRouter, File, UploadFile

from atelier.api.errors import http_error
from atelier.core.config import settings
from atelier.schemas.generation import ImageUrlSchema
from atelier.services.uploads import validate_image_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix=settings.API_V1_STR, tags=["Uploads"])


@router.post(
    "/uploads/image",
    response_model=ImageUrlSchema,
    summary="Upload Image",
    description="Validate an image file and return it as a data URL",
)
async def upload_image(image_file: UploadFile = File(..., description="JPEG, PNG or WebP image")) -> ImageUrlSchema:
    try:
        logger.info(f"[upload_image] Received {image_file.filename} ({image_file.content_type})")
        file_bytes = await image_file.read()
        image_url = validate_image_upload(file_bytes, image_file.content_type, settings.MAX_UPLOAD_SIZE_BYTES)
        return ImageUrlSchema(image_url=image_url)
    except Exception as e:
        logger.error(f"[upload_image] Error: {e}")
        raise http_error(e)
