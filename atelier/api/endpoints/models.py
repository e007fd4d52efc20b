"""
Saved fashion models of the calling user.
"""
import logging

from fastapi import APIRouter, Depends

from atelier.api.deps import get_model_repository
from atelier.api.errors import http_error
from atelier.core.config import settings
from atelier.schemas.studio import FashionModelCreateSchema, FashionModelSchema
from atelier.services.repositories import ModelRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{settings.API_V1_STR}/models", tags=["Models"])


@router.get("", response_model=list[FashionModelSchema], summary="List Models")
def list_models(models: ModelRepository = Depends(get_model_repository)) -> list[FashionModelSchema]:
    return [FashionModelSchema.model_validate(row) for row in models.list()]


@router.post("", response_model=FashionModelSchema, status_code=201, summary="Save Model")
def create_model(
    body: FashionModelCreateSchema,
    models: ModelRepository = Depends(get_model_repository),
) -> FashionModelSchema:
    try:
        if not body.name.strip():
            raise ValueError("Please give the model a name")
        row = models.insert(**body.model_dump())
        return FashionModelSchema.model_validate(row)
    except Exception as e:
        logger.error(f"[create_model] Error: {e}")
        raise http_error(e)


@router.get("/{model_id}", response_model=FashionModelSchema, summary="Get Model")
def get_model(model_id: str, models: ModelRepository = Depends(get_model_repository)) -> FashionModelSchema:
    try:
        return FashionModelSchema.model_validate(models.get(model_id))
    except Exception as e:
        raise http_error(e)


@router.delete("/{model_id}", status_code=204, summary="Delete Model")
def delete_model(model_id: str, models: ModelRepository = Depends(get_model_repository)) -> None:
    try:
        models.delete(model_id)
    except Exception as e:
        logger.error(f"[delete_model] Error: {e}")
        raise http_error(e)
