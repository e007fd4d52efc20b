"""
Studio data models for database persistence.
"""
import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


class TimestampMixin:
    created_at = Column(DateTime, default=datetime.utcnow, index=True, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class FashionModel(TimestampMixin, Base):
    """
    A saved reference human figure.

    Attributes:
        id: Unique identifier
        user_id: Owner of the model
        name: Display name chosen when saving
        image_url: Data URL (or remote URL) of the model photo
        gender, ethnicity, age_range, body_type, hair_color, hair_style, skin_tone:
            Characteristics the model was generated from
    """
    __tablename__ = "models"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(64), index=True, nullable=False)
    name = Column(String(200), nullable=False)
    image_url = Column(Text, nullable=False)
    gender = Column(String(50), nullable=False)
    ethnicity = Column(String(50), nullable=False)
    age_range = Column(String(50), nullable=False)
    body_type = Column(String(50), nullable=False)
    hair_color = Column(String(50), nullable=False)
    hair_style = Column(String(50), nullable=False)
    skin_tone = Column(String(50), nullable=False)

    def __repr__(self) -> str:
        return f"<FashionModel(id={self.id}, name={self.name})>"


class ClothingItem(TimestampMixin, Base):
    """A saved reference garment image with descriptive metadata."""
    __tablename__ = "clothing_items"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(64), index=True, nullable=False)
    name = Column(String(200), nullable=False)
    image_url = Column(Text, nullable=False)
    type = Column(String(100), nullable=False)
    color = Column(String(100), nullable=True)
    style = Column(String(100), nullable=True)
    pattern = Column(String(100), nullable=True)
    fabric = Column(String(100), nullable=True)

    def __repr__(self) -> str:
        return f"<ClothingItem(id={self.id}, name={self.name})>"


class Creation(TimestampMixin, Base):
    """
    A generated composite of a model wearing a clothing item.

    Variations (color swaps, pose pack shots) point back at the creation they
    were derived from through ``parent_creation_id``.
    """
    __tablename__ = "creations"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(64), index=True, nullable=False)
    image_url = Column(Text, nullable=False)
    model_id = Column(String(36), ForeignKey("models.id", ondelete="SET NULL"), nullable=True)
    clothing_id = Column(String(36), ForeignKey("clothing_items.id", ondelete="SET NULL"), nullable=True)
    parent_creation_id = Column(
        String(36), ForeignKey("creations.id", ondelete="SET NULL"), nullable=True, index=True
    )
    pose = Column(String(50), nullable=True)
    scenario = Column(String(50), nullable=True)
    lighting = Column(String(50), nullable=True)
    style = Column(String(50), nullable=True)
    title = Column(String(300), nullable=True)
    description = Column(Text, nullable=True)
    is_variation = Column(Boolean, default=False, nullable=False)

    def __repr__(self) -> str:
        return f"<Creation(id={self.id}, is_variation={self.is_variation})>"
