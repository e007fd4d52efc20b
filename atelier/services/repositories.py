"""
Per-entity persistence for models, clothing items and creations.

Every repository is bound to one user at construction time; reads never
return rows owned by anyone else, and a row owned by another user is reported
as missing.
"""
import logging
from typing import Any, Generic, Iterable, Optional, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session

from atelier.core.exceptions import NotFoundError
from atelier.models.studio import ClothingItem, Creation, FashionModel

logger = logging.getLogger(__name__)

RowT = TypeVar("RowT", FashionModel, ClothingItem, Creation)


class Repository(Generic[RowT]):
    row_type: type
    label: str = "Row"

    def __init__(self, db: Session, user_id: str):
        self.db = db
        self.user_id = user_id

    def list(self) -> list[RowT]:
        stmt = (
            select(self.row_type)
            .where(self.row_type.user_id == self.user_id)
            .order_by(self.row_type.created_at.desc())
        )
        return list(self.db.scalars(stmt))

    def get(self, row_id: str) -> RowT:
        row = self.db.get(self.row_type, row_id)
        if row is None or row.user_id != self.user_id:
            raise NotFoundError(f"{self.label} not found: {row_id}")
        return row

    def insert(self, **values: Any) -> RowT:
        row = self.row_type(user_id=self.user_id, **values)
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        logger.info(f"[{self.__class__.__name__}.insert] Created {self.label.lower()} {row.id}")
        return row

    def update(self, row_id: str, **values: Any) -> RowT:
        row = self.get(row_id)
        for key, value in values.items():
            setattr(row, key, value)
        self.db.commit()
        self.db.refresh(row)
        return row

    def delete(self, row_id: str) -> None:
        row = self.get(row_id)
        self.db.delete(row)
        self.db.commit()
        logger.info(f"[{self.__class__.__name__}.delete] Deleted {self.label.lower()} {row_id}")


class ModelRepository(Repository[FashionModel]):
    row_type = FashionModel
    label = "Model"


class ClothingItemRepository(Repository[ClothingItem]):
    row_type = ClothingItem
    label = "Clothing item"


class CreationRepository(Repository[Creation]):
    row_type = Creation
    label = "Creation"

    def list_variations(self, parent_id: str) -> list[Creation]:
        self.get(parent_id)
        stmt = (
            select(Creation)
            .where(Creation.user_id == self.user_id, Creation.parent_creation_id == parent_id)
            .order_by(Creation.created_at.desc())
        )
        return list(self.db.scalars(stmt))

    def insert_variations(
        self,
        parent: Creation,
        images: Iterable[tuple[str, Optional[str]]],
    ) -> list[Creation]:
        """
        Store derived images as children of ``parent``.

        Args:
            parent: The creation the images were derived from
            images: ``(image_url, pose)`` pairs; ``pose`` overrides the
                parent's pose when set (pose pack shots)

        Returns:
            The inserted rows, in input order
        """
        rows = []
        for image_url, pose in images:
            row = Creation(
                user_id=self.user_id,
                image_url=image_url,
                model_id=parent.model_id,
                clothing_id=parent.clothing_id,
                parent_creation_id=parent.id,
                pose=pose or parent.pose,
                scenario=parent.scenario,
                lighting=parent.lighting,
                style=parent.style,
                is_variation=True,
            )
            self.db.add(row)
            rows.append(row)
        self.db.commit()
        for row in rows:
            self.db.refresh(row)
        logger.info(f"[CreationRepository.insert_variations] Stored {len(rows)} variations of {parent.id}")
        return rows
