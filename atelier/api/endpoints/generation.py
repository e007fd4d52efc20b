"""
AI gateway handlers: one provider round-trip (or one sequential batch) per request.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from atelier.api.deps import get_creation_repository, get_optional_user_id
from atelier.api.errors import http_error
from atelier.core.config import settings
from atelier.core.database import get_db
from atelier.schemas.generation import (
    ColorVariationSchema,
    ColorVariationsRequestSchema,
    ColorVariationsResponseSchema,
    GenerateClothingRequestSchema,
    GenerateModelResponseSchema,
    ImageUrlSchema,
    MarketplaceContentRequestSchema,
    MarketplaceContentSchema,
    MergeImagesRequestSchema,
    MergeImagesResponseSchema,
    ModelCharacteristicsSchema,
    PoseImageSchema,
    PosePackRequestSchema,
    PosePackResponseSchema,
)
from atelier.services import generation
from atelier.services.repositories import ClothingItemRepository, CreationRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix=settings.API_V1_STR, tags=["Generation"])


@router.post(
    "/generate-model",
    response_model=GenerateModelResponseSchema,
    summary="Generate Model Photo",
    description="Generate a full-body model photo from physical characteristics",
)
async def generate_model(characteristics: ModelCharacteristicsSchema) -> GenerateModelResponseSchema:
    try:
        model_image = await generation.generate_model_image(characteristics)
        logger.info("[generate_model] Model image generated")
        return GenerateModelResponseSchema(model_image=model_image)
    except Exception as e:
        logger.error(f"[generate_model] Error: {e}")
        raise http_error(e)


@router.post(
    "/generate-clothing",
    response_model=ImageUrlSchema,
    summary="Generate Clothing Image",
    description="Generate a product photo of a garment from a free-text description",
)
async def generate_clothing(body: GenerateClothingRequestSchema) -> ImageUrlSchema:
    try:
        image_url = await generation.generate_clothing_image(body.characteristics.description)
        return ImageUrlSchema(image_url=image_url)
    except Exception as e:
        logger.error(f"[generate_clothing] Error: {e}")
        raise http_error(e)


@router.post(
    "/extract-clothing",
    response_model=ImageUrlSchema,
    summary="Extract Clothing",
    description="Isolate the garment worn in a photo onto a plain background",
)
async def extract_clothing(body: ImageUrlSchema) -> ImageUrlSchema:
    try:
        image_url = await generation.extract_clothing_image(body.image_url)
        return ImageUrlSchema(image_url=image_url)
    except Exception as e:
        logger.error(f"[extract_clothing] Error: {e}")
        raise http_error(e)


@router.post(
    "/merge-images",
    response_model=MergeImagesResponseSchema,
    summary="Merge Model and Clothing",
    description="Dress the model in the clothing item under the given scene settings",
)
async def merge_images(body: MergeImagesRequestSchema) -> MergeImagesResponseSchema:
    try:
        merged_image = await generation.merge_images(
            body.model_image,
            body.product_image,
            body.scene_settings,
            body.prompt,
        )
        return MergeImagesResponseSchema(merged_image=merged_image)
    except Exception as e:
        logger.error(f"[merge_images] Error: {e}")
        raise http_error(e)


@router.post(
    "/generate-color-variations",
    response_model=ColorVariationsResponseSchema,
    summary="Generate Color Variations",
    description="Recolor the garment of a creation once per selected color",
)
async def generate_color_variations(
    body: ColorVariationsRequestSchema,
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_optional_user_id),
) -> ColorVariationsResponseSchema:
    try:
        parent = None
        if body.creation_id and user_id:
            parent = CreationRepository(db, user_id).get(body.creation_id)

        results = await generation.generate_color_variations(body.creation_image, body.selected_colors)

        creation_ids = [None] * len(results)
        if parent is not None and results:
            rows = CreationRepository(db, user_id).insert_variations(
                parent, [(result.image_url, None) for result in results]
            )
            creation_ids = [row.id for row in rows]

        return ColorVariationsResponseSchema(
            variations=[result.image_url for result in results],
            results=[
                ColorVariationSchema(color=result.key, image_url=result.image_url, creation_id=creation_id)
                for result, creation_id in zip(results, creation_ids)
            ],
        )
    except Exception as e:
        logger.error(f"[generate_color_variations] Error: {e}")
        raise http_error(e)


@router.post(
    "/generate-pose-pack",
    response_model=PosePackResponseSchema,
    summary="Generate Pose Pack",
    description="Render a stored creation from five fixed angles and store each shot as a variation",
)
async def generate_pose_pack(
    body: PosePackRequestSchema,
    creations: CreationRepository = Depends(get_creation_repository),
) -> PosePackResponseSchema:
    try:
        parent = creations.get(body.creation_id)
        results = await generation.generate_pose_pack(parent.image_url)
        rows = creations.insert_variations(parent, [(result.image_url, result.key) for result in results])

        return PosePackResponseSchema(
            poses=[result.image_url for result in results],
            results=[
                PoseImageSchema(
                    pose=result.key,
                    label=result.label or result.key,
                    image_url=result.image_url,
                    creation_id=row.id,
                )
                for result, row in zip(results, rows)
            ],
        )
    except Exception as e:
        logger.error(f"[generate_pose_pack] Error: {e}")
        raise http_error(e)


@router.post(
    "/generate-marketplace-content",
    response_model=MarketplaceContentSchema,
    summary="Generate Marketplace Content",
    description="Write a listing title, description and tags for a garment or a stored creation",
)
async def generate_marketplace_content(
    body: MarketplaceContentRequestSchema,
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_optional_user_id),
) -> MarketplaceContentSchema:
    try:
        fields = {
            "clothing_name": body.clothing_name,
            "clothing_type": body.clothing_type,
            "clothing_style": body.clothing_style,
            "clothing_color": body.clothing_color,
        }
        if body.creation_id:
            if user_id is None:
                raise HTTPException(status_code=401, detail={"error": "Missing X-User-Id header"})
            creation = CreationRepository(db, user_id).get(body.creation_id)
            clothing = None
            if creation.clothing_id:
                try:
                    clothing = ClothingItemRepository(db, user_id).get(creation.clothing_id)
                except LookupError:
                    logger.warning(
                        f"[generate_marketplace_content] Clothing {creation.clothing_id} of creation "
                        f"{creation.id} is gone, using defaults"
                    )
            fields = generation.marketplace_fields_for_creation(creation, clothing)

        return await generation.generate_marketplace_content(**fields)
    except Exception as e:
        logger.error(f"[generate_marketplace_content] Error: {e}")
        raise http_error(e)
