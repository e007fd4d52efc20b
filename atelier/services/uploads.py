"""
Image upload validation.
"""
from typing import Optional

from atelier.core.exceptions import ImageValidationError
from atelier.utils.image_workflow import to_data_url


def validate_image_upload(file_bytes: bytes, content_type: Optional[str], max_size: int) -> str:
    """
    Validate an uploaded image and return it as a data URL.

    Args:
        file_bytes: Raw bytes of the uploaded file
        content_type: MIME type declared by the client
        max_size: Largest accepted size in bytes (inclusive)

    Returns:
        ``data:<content_type>;base64,...`` URL of the upload

    Raises:
        ImageValidationError: If the file is not an image, is empty, or is too large
    """
    if not content_type or not content_type.startswith("image/"):
        raise ImageValidationError("Please select a valid image file")

    if not file_bytes:
        raise ImageValidationError("Image file is empty")

    if len(file_bytes) > max_size:
        raise ImageValidationError(
            f"Image too large: {len(file_bytes)} bytes. Maximum is {max_size // (1024 * 1024)}MB"
        )

    return to_data_url(file_bytes, content_type)
