"""
In-process gateway the creation workflow uses to reach the generation handlers.
"""
from typing import Optional, Sequence

from atelier.schemas.generation import MarketplaceContentSchema, SceneSettingsSchema
from atelier.services import generation
from atelier.services.variations import VariantResult


class StudioGateway:
    """Thin async facade over the generation service; swapped for a fake in tests."""

    async def merge_images(
        self,
        model_image: str,
        clothing_image: str,
        scene: SceneSettingsSchema,
    ) -> str:
        return await generation.merge_images(model_image, clothing_image, scene)

    async def generate_marketplace_content(
        self,
        clothing_name: Optional[str],
        clothing_type: Optional[str],
        clothing_style: Optional[str],
        clothing_color: Optional[str],
    ) -> MarketplaceContentSchema:
        return await generation.generate_marketplace_content(
            clothing_name, clothing_type, clothing_style, clothing_color
        )

    async def generate_color_variations(self, image: str, colors: Sequence[str]) -> list[VariantResult]:
        return await generation.generate_color_variations(image, colors)

    async def generate_pose_pack(self, image: str) -> list[VariantResult]:
        return await generation.generate_pose_pack(image)
