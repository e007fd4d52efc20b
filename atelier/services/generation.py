"""
Generation service layer: prompt construction and provider calls behind each
gateway handler.

Each function builds one prompt, normalizes any input image and returns the
generated asset. Failures propagate as ConfigurationError / GenerationError /
ImageValidationError; nothing is retried here.
"""
import json
import logging
import re
from typing import Optional, Sequence

from fastapi.concurrency import run_in_threadpool

from atelier.core.config import settings
from atelier.models.studio import ClothingItem, Creation
from atelier.schemas.generation import (
    MarketplaceContentSchema,
    ModelCharacteristicsSchema,
    SceneSettingsSchema,
)
from atelier.services.variations import (
    VariantResult,
    color_specs,
    generate_variants,
    pose_specs,
)
from atelier.utils import image_workflow
from atelier.utils.image_workflow import to_data_url
from atelier.utils.image_workflow.prompt import (
    EXTRACT_CLOTHING_PROMPT,
    build_clothing_prompt,
    build_marketplace_prompt,
    build_merge_prompt,
    build_model_prompt,
)

logger = logging.getLogger(__name__)

JSON_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")

# Product fields used when a creation carries no clothing metadata
DEFAULT_CLOTHING_NAME = "Clothing item"
DEFAULT_CLOTHING_TYPE = "custom piece"
DEFAULT_CLOTHING_COLOR = "as shown in the image"


async def generate_model_image(characteristics: ModelCharacteristicsSchema) -> str:
    image_workflow.ensure_provider_configured()
    logger.info(f"[generate_model_image] Characteristics: {characteristics.model_dump()}")

    prompt = build_model_prompt(
        gender=characteristics.gender,
        ethnicity=characteristics.ethnicity,
        age_range=characteristics.age_range,
        body_type=characteristics.body_type,
        hair_color=characteristics.hair_color,
        hair_style=characteristics.hair_style,
        skin_tone=characteristics.skin_tone,
    )
    image_bytes = await run_in_threadpool(image_workflow.generate_image_bytes, prompt, [], "3:4")
    return to_data_url(image_bytes)


async def generate_clothing_image(description: str) -> str:
    image_workflow.ensure_provider_configured()
    if not description or not description.strip():
        raise ValueError("Please describe the clothing item")

    prompt = build_clothing_prompt(description.strip())
    image_bytes = await run_in_threadpool(image_workflow.generate_image_bytes, prompt, [], "1:1")
    return to_data_url(image_bytes)


async def extract_clothing_image(image_url: str) -> str:
    image_workflow.ensure_provider_configured()
    source = await image_workflow.load_image_input(image_url)

    image_bytes = await run_in_threadpool(
        image_workflow.generate_image_bytes, EXTRACT_CLOTHING_PROMPT, [source], "1:1"
    )
    return to_data_url(image_bytes)


async def merge_images(
    model_image: Optional[str],
    clothing_image: Optional[str],
    scene: Optional[SceneSettingsSchema] = None,
    instructions: Optional[str] = None,
) -> str:
    """
    Dress the model in the clothing item under the given scene settings.

    The model photo is the edited base image; the clothing photo is sent as a
    second reference.
    """
    if not model_image or not clothing_image:
        raise ValueError("Both model and product images are required")
    image_workflow.ensure_provider_configured()

    scene = scene or SceneSettingsSchema()
    prompt = build_merge_prompt(
        pose=scene.pose,
        scenario=scene.scenario,
        lighting=scene.lighting,
        style=scene.style,
        instructions=instructions,
    )
    logger.info(f"[merge_images] Generated prompt: {prompt}")

    model_part = await image_workflow.load_image_input(model_image)
    clothing_part = await image_workflow.load_image_input(clothing_image)

    image_bytes = await run_in_threadpool(
        image_workflow.generate_image_bytes, prompt, [model_part, clothing_part], "3:4"
    )
    logger.info("[merge_images] Image merge completed successfully")
    return to_data_url(image_bytes)


async def generate_color_variations(creation_image: str, colors: Sequence[str]) -> list[VariantResult]:
    image_workflow.ensure_provider_configured()
    if not colors:
        raise ValueError("No colors selected")

    source = await image_workflow.load_image_input(creation_image)
    return await generate_variants(source, color_specs(colors))


async def generate_pose_pack(creation_image: str) -> list[VariantResult]:
    image_workflow.ensure_provider_configured()

    source = await image_workflow.load_image_input(creation_image)
    return await generate_variants(source, pose_specs())


def parse_marketplace_content(text: str) -> MarketplaceContentSchema:
    """
    Pull the JSON object out of the model's reply.

    Anything that does not parse into an object yields empty fields.
    """
    match = JSON_OBJECT_PATTERN.search(text or "")
    if not match:
        return MarketplaceContentSchema()
    try:
        payload = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        logger.warning(f"[parse_marketplace_content] Unparsable model output: {e}")
        return MarketplaceContentSchema()
    if not isinstance(payload, dict):
        return MarketplaceContentSchema()

    tags = payload.get("tags") or []
    return MarketplaceContentSchema(
        title=str(payload.get("title") or ""),
        description=str(payload.get("description") or ""),
        tags=[str(tag) for tag in tags] if isinstance(tags, list) else [],
    )


async def generate_marketplace_content(
    clothing_name: Optional[str],
    clothing_type: Optional[str],
    clothing_style: Optional[str],
    clothing_color: Optional[str],
) -> MarketplaceContentSchema:
    image_workflow.ensure_provider_configured()

    prompt = build_marketplace_prompt(
        name=clothing_name or DEFAULT_CLOTHING_NAME,
        clothing_type=clothing_type or DEFAULT_CLOTHING_TYPE,
        style=clothing_style or "",
        color=clothing_color or DEFAULT_CLOTHING_COLOR,
        language=settings.MARKETPLACE_LANGUAGE,
    )
    text = await run_in_threadpool(image_workflow.generate_text, prompt)
    return parse_marketplace_content(text)


def marketplace_fields_for_creation(
    creation: Creation,
    clothing: Optional[ClothingItem],
) -> dict[str, Optional[str]]:
    """Product fields for a stored creation, preferring its clothing item's metadata."""
    if clothing is not None:
        return {
            "clothing_name": clothing.name,
            "clothing_type": clothing.type,
            "clothing_style": creation.style or clothing.style,
            "clothing_color": clothing.color,
        }
    return {
        "clothing_name": creation.title or DEFAULT_CLOTHING_NAME,
        "clothing_type": DEFAULT_CLOTHING_TYPE,
        "clothing_style": creation.style,
        "clothing_color": DEFAULT_CLOTHING_COLOR,
    }
