import base64
import binascii
import io
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import aiohttp
import google.genai as genai
from google.genai import errors as genai_errors
from google.genai import types
from PIL import Image

from atelier.core.exceptions import (
    ConfigurationError,
    GenerationError,
    ImageValidationError,
    describe_upstream_error,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InlineImage:
    """Decoded image bytes ready to be sent to the provider."""
    data: bytes
    mime_type: str = "image/jpeg"

    def to_part(self) -> types.Part:
        return types.Part.from_bytes(data=self.data, mime_type=self.mime_type)


def ensure_provider_configured() -> None:
    """Fail fast when the credentials the provider needs are missing."""
    from atelier.core.config import settings

    if settings.GOOGLE_GENAI_USE_VERTEXAI:
        if not settings.GOOGLE_CLOUD_PROJECT_ID:
            raise ConfigurationError("GOOGLE_CLOUD_PROJECT_ID is not configured in settings")
    elif not settings.GOOGLE_API_KEY:
        raise ConfigurationError("GOOGLE_API_KEY is not configured in settings")


def _get_gemini_client() -> genai.Client:
    """Initialize and return Gemini API client."""
    from atelier.core.config import settings

    ensure_provider_configured()
    if settings.GOOGLE_GENAI_USE_VERTEXAI:
        return genai.Client(
            vertexai=True,
            project=settings.GOOGLE_CLOUD_PROJECT_ID,
            location=settings.GOOGLE_CLOUD_LOCATION,
        )
    return genai.Client(api_key=settings.GOOGLE_API_KEY)


def to_data_url(image_bytes: bytes, mime_type: str = "image/jpeg") -> str:
    return f"data:{mime_type};base64,{base64.b64encode(image_bytes).decode('ascii')}"


def _sniff_mime_type(data: bytes) -> str:
    """Best-effort MIME detection for raw base64 input."""
    try:
        img = Image.open(io.BytesIO(data))
        return Image.MIME.get(img.format or "", "image/jpeg")
    except Exception:
        return "image/jpeg"


def _decode_base64(payload: str) -> bytes:
    try:
        return base64.b64decode(payload.strip(), validate=False)
    except (binascii.Error, ValueError) as e:
        raise ImageValidationError(f"Invalid base64 image data: {e}")


def _validate_and_convert_image(file_content: bytes, mime_type: str) -> tuple[bytes, str]:
    """
    Convert image to JPEG for maximum compatibility with Gemini API.

    Args:
        file_content: Raw image bytes
        mime_type: MIME type the bytes arrived with

    Returns:
        Tuple of (converted_image_bytes, mime_type). The original bytes are
        returned untouched when Pillow cannot decode them.
    """
    try:
        img = Image.open(io.BytesIO(file_content))
        logger.debug(f"[_validate_and_convert_image] format={img.format} mode={img.mode} size={img.size}")

        if img.size[0] < 100 or img.size[1] < 100:
            logger.warning(f"[_validate_and_convert_image] Small image detected {img.size}, may not work well")

        # Convert RGBA to RGB
        if img.mode == "RGBA":
            rgb_img = Image.new("RGB", img.size, (255, 255, 255))
            rgb_img.paste(img, mask=img.split()[3])
            img = rgb_img
        elif img.mode not in ("RGB", "L"):
            img = img.convert("RGB")

        output = io.BytesIO()
        img.save(output, format="JPEG", quality=95)
        return output.getvalue(), "image/jpeg"

    except Exception as e:
        logger.warning(f"[_validate_and_convert_image] Could not re-encode image, sending as-is: {e}")
        return file_content, mime_type


async def _download_image(url: str, timeout: int) -> tuple[bytes, str]:
    async with aiohttp.ClientSession() as session:
        async with session.get(url, timeout=aiohttp.ClientTimeout(total=timeout)) as resp:
            if resp.status != 200:
                raise ImageValidationError(f"Download failed: {url} - HTTP {resp.status}")
            img_bytes = await resp.read()
            mime_type = resp.content_type if resp.content_type.startswith("image/") else "image/jpeg"
            logger.info(f"[_download_image] Downloaded: {len(img_bytes)} bytes")
            return img_bytes, mime_type


async def load_image_input(value: str) -> InlineImage:
    """
    Normalize an image reference into inline bytes.

    Accepts an ``http(s)`` URL (downloaded), a ``data:image/...`` URL (prefix
    stripped) or a bare base64 payload.
    """
    from atelier.core.config import settings

    if not value or not value.strip():
        raise ImageValidationError("Image input is empty")

    if value.startswith("http"):
        data, mime_type = await _download_image(value, settings.IMAGE_FETCH_TIMEOUT)
    elif value.startswith("data:image"):
        header, _, payload = value.partition(",")
        mime_type = header[len("data:"):].split(";")[0] or "image/jpeg"
        data = _decode_base64(payload)
    else:
        data = _decode_base64(value)
        mime_type = _sniff_mime_type(data)

    if not data:
        raise ImageValidationError("Image input is empty")

    converted, converted_mime = _validate_and_convert_image(data, mime_type)
    return InlineImage(data=converted, mime_type=converted_mime)


def _upstream_error(e: genai_errors.APIError) -> GenerationError:
    text = e.message or str(e)
    logger.error(f"[gemini] Upstream error {e.code}: {text}")
    return GenerationError(describe_upstream_error(e.code, text), status_code=e.code)


def generate_image_bytes(
    prompt: str,
    images: Sequence[InlineImage] = (),
    aspect_ratio: Optional[str] = None,
) -> bytes:
    """
    Run one image generation call and return the produced image bytes.

    Args:
        prompt: Instruction text
        images: Reference images sent after the prompt
        aspect_ratio: Optional output aspect ratio, e.g. "3:4"

    Raises:
        ConfigurationError: Provider credentials are missing
        GenerationError: Provider failed or returned no image
    """
    from atelier.core.config import settings

    client = _get_gemini_client()

    contents = [types.Part.from_text(text=prompt)]
    contents.extend(image.to_part() for image in images)

    generate_content_config = types.GenerateContentConfig(
        response_modalities=["IMAGE"],
        image_config=types.ImageConfig(aspect_ratio=aspect_ratio) if aspect_ratio else None,
    )

    image_bytes = b""
    try:
        for chunk in client.models.generate_content_stream(
            model=settings.IMAGE_MODEL,
            contents=contents,
            config=generate_content_config,
        ):
            if not chunk.candidates or not chunk.candidates[0].content or not chunk.candidates[0].content.parts:
                continue
            for part in chunk.candidates[0].content.parts:
                if part.inline_data and part.inline_data.data:
                    image_bytes = part.inline_data.data
    except genai_errors.APIError as e:
        raise _upstream_error(e)

    if not image_bytes:
        raise GenerationError("No image generated")

    logger.info(f"[generate_image_bytes] Received image: {len(image_bytes)} bytes")
    return image_bytes


def generate_text(prompt: str) -> str:
    """Run one text generation call and return the model's text."""
    from atelier.core.config import settings

    client = _get_gemini_client()
    try:
        response = client.models.generate_content(
            model=settings.TEXT_MODEL,
            contents=prompt,
            config=types.GenerateContentConfig(
                temperature=1.0,
                top_k=40,
                top_p=0.95,
                max_output_tokens=8192,
            ),
        )
    except genai_errors.APIError as e:
        raise _upstream_error(e)

    if not response.text:
        raise GenerationError("No content generated")
    return response.text
