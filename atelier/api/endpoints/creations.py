"""
Gallery of the calling user's creations and their variations.
"""
import logging

from fastapi import APIRouter, Depends

from atelier.api.deps import get_creation_repository
from atelier.api.errors import http_error
from atelier.core.config import settings
from atelier.schemas.studio import CreationSchema, CreationUpdateSchema
from atelier.services.repositories import CreationRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{settings.API_V1_STR}/creations", tags=["Creations"])


@router.get("", response_model=list[CreationSchema], summary="List Creations")
def list_creations(creations: CreationRepository = Depends(get_creation_repository)) -> list[CreationSchema]:
    return [CreationSchema.model_validate(row) for row in creations.list()]


@router.get("/{creation_id}", response_model=CreationSchema, summary="Get Creation")
def get_creation(
    creation_id: str,
    creations: CreationRepository = Depends(get_creation_repository),
) -> CreationSchema:
    try:
        return CreationSchema.model_validate(creations.get(creation_id))
    except Exception as e:
        raise http_error(e)


@router.get("/{creation_id}/variations", response_model=list[CreationSchema], summary="List Variations")
def list_variations(
    creation_id: str,
    creations: CreationRepository = Depends(get_creation_repository),
) -> list[CreationSchema]:
    try:
        return [CreationSchema.model_validate(row) for row in creations.list_variations(creation_id)]
    except Exception as e:
        raise http_error(e)


@router.patch("/{creation_id}", response_model=CreationSchema, summary="Update Creation")
def update_creation(
    creation_id: str,
    body: CreationUpdateSchema,
    creations: CreationRepository = Depends(get_creation_repository),
) -> CreationSchema:
    """Patch the marketplace title and/or description; omitted fields are left alone."""
    try:
        row = creations.update(creation_id, **body.model_dump(exclude_unset=True))
        return CreationSchema.model_validate(row)
    except Exception as e:
        logger.error(f"[update_creation] Error: {e}")
        raise http_error(e)


@router.delete("/{creation_id}", status_code=204, summary="Delete Creation")
def delete_creation(
    creation_id: str,
    creations: CreationRepository = Depends(get_creation_repository),
) -> None:
    try:
        creations.delete(creation_id)
    except Exception as e:
        logger.error(f"[delete_creation] Error: {e}")
        raise http_error(e)
