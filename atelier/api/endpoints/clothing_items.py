"""
Saved clothing items of the calling user.
"""
import logging

from fastapi import APIRouter, Depends

from atelier.api.deps import get_clothing_repository
from atelier.api.errors import http_error
from atelier.core.config import settings
from atelier.schemas.studio import ClothingItemCreateSchema, ClothingItemSchema
from atelier.services.repositories import ClothingItemRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{settings.API_V1_STR}/clothing-items", tags=["Clothing Items"])


@router.get("", response_model=list[ClothingItemSchema], summary="List Clothing Items")
def list_clothing_items(
    items: ClothingItemRepository = Depends(get_clothing_repository),
) -> list[ClothingItemSchema]:
    return [ClothingItemSchema.model_validate(row) for row in items.list()]


@router.post("", response_model=ClothingItemSchema, status_code=201, summary="Save Clothing Item")
def create_clothing_item(
    body: ClothingItemCreateSchema,
    items: ClothingItemRepository = Depends(get_clothing_repository),
) -> ClothingItemSchema:
    try:
        if not body.name.strip():
            raise ValueError("Please give the clothing item a name")
        row = items.insert(**body.model_dump())
        return ClothingItemSchema.model_validate(row)
    except Exception as e:
        logger.error(f"[create_clothing_item] Error: {e}")
        raise http_error(e)


@router.get("/{clothing_id}", response_model=ClothingItemSchema, summary="Get Clothing Item")
def get_clothing_item(
    clothing_id: str,
    items: ClothingItemRepository = Depends(get_clothing_repository),
) -> ClothingItemSchema:
    try:
        return ClothingItemSchema.model_validate(items.get(clothing_id))
    except Exception as e:
        raise http_error(e)


@router.delete("/{clothing_id}", status_code=204, summary="Delete Clothing Item")
def delete_clothing_item(
    clothing_id: str,
    items: ClothingItemRepository = Depends(get_clothing_repository),
) -> None:
    try:
        items.delete(clothing_id)
    except Exception as e:
        logger.error(f"[delete_clothing_item] Error: {e}")
        raise http_error(e)
