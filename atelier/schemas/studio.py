"""
Schemas for saved models, clothing items and creations.
"""
from datetime import datetime
from typing import Optional

from pydantic import Field

from atelier.schemas.base import CamelModel

# Attributes stored for garments saved from a free-text description
CLOTHING_PLACEHOLDERS = {
    "type": "general",
    "color": "assorted",
    "style": "custom",
    "pattern": "as described",
    "fabric": "as described",
}


class FashionModelCreateSchema(CamelModel):
    name: str
    image_url: str
    gender: str
    ethnicity: str
    age_range: str
    body_type: str
    hair_color: str
    hair_style: str
    skin_tone: str


class FashionModelSchema(FashionModelCreateSchema):
    id: str
    user_id: str
    created_at: datetime


class ClothingItemCreateSchema(CamelModel):
    name: str
    image_url: str
    type: str = CLOTHING_PLACEHOLDERS["type"]
    color: Optional[str] = CLOTHING_PLACEHOLDERS["color"]
    style: Optional[str] = CLOTHING_PLACEHOLDERS["style"]
    pattern: Optional[str] = CLOTHING_PLACEHOLDERS["pattern"]
    fabric: Optional[str] = CLOTHING_PLACEHOLDERS["fabric"]


class ClothingItemSchema(ClothingItemCreateSchema):
    id: str
    user_id: str
    created_at: datetime


class CreationSchema(CamelModel):
    id: str
    user_id: str
    image_url: str
    model_id: Optional[str] = None
    clothing_id: Optional[str] = None
    parent_creation_id: Optional[str] = None
    pose: Optional[str] = None
    scenario: Optional[str] = None
    lighting: Optional[str] = None
    style: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    is_variation: bool = False
    created_at: datetime


class CreationUpdateSchema(CamelModel):
    title: Optional[str] = Field(None, description="Marketplace title")
    description: Optional[str] = Field(None, description="Marketplace description")


class SaveAsSchema(CamelModel):
    name: str = Field(..., description="Display name for the saved row")
