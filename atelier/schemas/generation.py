"""
Request/response schemas for the generation handlers.
"""
from typing import Optional

from pydantic import AliasChoices, Field

from atelier.schemas.base import CamelModel


class ModelCharacteristicsSchema(CamelModel):
    """Characteristics a model photo is generated from."""
    gender: str = Field(..., description="female or male")
    ethnicity: str = Field(..., description="e.g. caucasian, african, asian, latino, middle-eastern")
    age_range: str = Field(..., description="e.g. 18-25, 25-35, 35-45, 45-60")
    body_type: str = Field(..., description="e.g. slim, athletic, curvy, plus-size")
    hair_color: str
    hair_style: str
    skin_tone: str


class GenerateModelResponseSchema(CamelModel):
    model_image: str = Field(..., description="Generated model photo as a data URL")


class ClothingCharacteristicsSchema(CamelModel):
    description: str = Field("", description="Free-text description of the garment")


class GenerateClothingRequestSchema(CamelModel):
    characteristics: ClothingCharacteristicsSchema


class ImageUrlSchema(CamelModel):
    """Single image reference: http(s) URL, data URL or bare base64."""
    image_url: str


class SceneSettingsSchema(CamelModel):
    pose: Optional[str] = None
    scenario: Optional[str] = None
    lighting: Optional[str] = None
    style: Optional[str] = None


class MergeImagesRequestSchema(CamelModel):
    model_image: Optional[str] = None
    product_image: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("productImage", "clothingImage", "product_image"),
    )
    scene_settings: Optional[SceneSettingsSchema] = None
    prompt: Optional[str] = Field(None, description="Overrides the default merge instructions")


class MergeImagesResponseSchema(CamelModel):
    merged_image: str


class ColorVariationsRequestSchema(CamelModel):
    creation_image: str
    selected_colors: list[str] = Field(default_factory=list)
    creation_id: Optional[str] = Field(
        None, description="When set, each variation is stored as a child of this creation"
    )


class ColorVariationSchema(CamelModel):
    color: str
    image_url: str
    creation_id: Optional[str] = None


class ColorVariationsResponseSchema(CamelModel):
    variations: list[str]
    results: list[ColorVariationSchema]


class PosePackRequestSchema(CamelModel):
    creation_id: str


class PoseImageSchema(CamelModel):
    pose: str
    label: str
    image_url: str
    creation_id: Optional[str] = None


class PosePackResponseSchema(CamelModel):
    poses: list[str]
    results: list[PoseImageSchema]


class MarketplaceContentRequestSchema(CamelModel):
    clothing_name: Optional[str] = None
    clothing_type: Optional[str] = None
    clothing_style: Optional[str] = None
    clothing_color: Optional[str] = None
    creation_id: Optional[str] = Field(
        None, description="Derive the product fields from a stored creation"
    )


class MarketplaceContentSchema(CamelModel):
    title: str = ""
    description: str = ""
    tags: list[str] = Field(default_factory=list)
