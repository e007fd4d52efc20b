"""
Shared FastAPI dependencies.
"""
from typing import Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from atelier.core.database import get_db
from atelier.services.gateway import StudioGateway
from atelier.services.repositories import ClothingItemRepository, CreationRepository, ModelRepository
from atelier.workflow.store import WorkflowStore, workflow_store


def get_optional_user_id(x_user_id: Optional[str] = Header(None)) -> Optional[str]:
    if x_user_id is None or not x_user_id.strip():
        return None
    return x_user_id.strip()


def get_current_user_id(user_id: Optional[str] = Depends(get_optional_user_id)) -> str:
    """Caller identity from the ``X-User-Id`` header; required for persisted rows."""
    if user_id is None:
        raise HTTPException(status_code=401, detail={"error": "Missing X-User-Id header"})
    return user_id


def get_gateway() -> StudioGateway:
    return StudioGateway()


def get_workflow_store() -> WorkflowStore:
    return workflow_store


def get_model_repository(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> ModelRepository:
    return ModelRepository(db, user_id)


def get_clothing_repository(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> ClothingItemRepository:
    return ClothingItemRepository(db, user_id)


def get_creation_repository(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> CreationRepository:
    return CreationRepository(db, user_id)
