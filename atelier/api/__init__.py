from fastapi import APIRouter

from atelier.api.endpoints.clothing_items import router as clothing_items
from atelier.api.endpoints.creations import router as creations
from atelier.api.endpoints.generation import router as generation
from atelier.api.endpoints.models import router as models
from atelier.api.endpoints.uploads import router as uploads
from atelier.api.endpoints.workflows import router as workflows

api_router = APIRouter()

api_router.include_router(generation)
api_router.include_router(uploads)
api_router.include_router(models)
api_router.include_router(clothing_items)
api_router.include_router(creations)
api_router.include_router(workflows)
