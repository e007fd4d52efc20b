"""
Creation workflow sessions.

Each request loads the caller's workflow state, applies one event (or runs one
controller action) and stores the resulting state. Rejected events answer 409
and leave the stored state untouched.
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from atelier.api.deps import get_current_user_id, get_gateway, get_workflow_store
from atelier.api.errors import http_error
from atelier.core.config import settings
from atelier.core.database import get_db
from atelier.core.exceptions import InvalidTransition
from atelier.schemas.generation import (
    ColorVariationSchema,
    ColorVariationsResponseSchema,
    MarketplaceContentSchema,
    ModelCharacteristicsSchema,
    PoseImageSchema,
    PosePackResponseSchema,
    SceneSettingsSchema,
)
from atelier.schemas.studio import (
    CLOTHING_PLACEHOLDERS,
    ClothingItemSchema,
    FashionModelSchema,
    SaveAsSchema,
)
from atelier.schemas.workflow import (
    ChooseClothingSchema,
    ChooseModelSchema,
    ColorSelectionSchema,
    ContentSchema,
    TogglesSchema,
    WorkflowViewSchema,
)
from atelier.services.gateway import StudioGateway
from atelier.services.repositories import ClothingItemRepository, CreationRepository, ModelRepository
from atelier.workflow.controller import WorkflowController
from atelier.workflow.state import (
    Advance,
    Back,
    ClothingChosen,
    ClothingSaved,
    ModelChosen,
    ModelSaved,
    Reset,
    SceneChanged,
    UseExistingClothing,
    UseExistingModel,
    WorkflowState,
    transition,
)
from atelier.workflow.store import WorkflowStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{settings.API_V1_STR}/workflows", tags=["Workflows"])

MODEL_FIELDS = ("gender", "ethnicity", "age_range", "body_type", "hair_color", "hair_style", "skin_tone")


def _apply(
    store: WorkflowStore,
    workflow_id: str,
    user_id: str,
    *events: object,
) -> WorkflowViewSchema:
    state = store.get(workflow_id, user_id)
    for event in events:
        state = transition(state, event)
    store.update(workflow_id, user_id, state)
    return WorkflowViewSchema.from_state(workflow_id, state)


def _controller(
    state: WorkflowState,
    gateway: StudioGateway,
    db: Session,
    user_id: str,
) -> WorkflowController:
    return WorkflowController(state, gateway, CreationRepository(db, user_id))


@router.post("", response_model=WorkflowViewSchema, status_code=201, summary="Start Workflow")
def create_workflow(
    user_id: str = Depends(get_current_user_id),
    store: WorkflowStore = Depends(get_workflow_store),
) -> WorkflowViewSchema:
    workflow_id, state = store.create(user_id)
    logger.info(f"[create_workflow] Workflow {workflow_id} started for {user_id}")
    return WorkflowViewSchema.from_state(workflow_id, state)


@router.get("/{workflow_id}", response_model=WorkflowViewSchema, summary="Get Workflow")
def get_workflow(
    workflow_id: str,
    user_id: str = Depends(get_current_user_id),
    store: WorkflowStore = Depends(get_workflow_store),
) -> WorkflowViewSchema:
    try:
        return WorkflowViewSchema.from_state(workflow_id, store.get(workflow_id, user_id))
    except Exception as e:
        raise http_error(e)


@router.delete("/{workflow_id}", status_code=204, summary="Discard Workflow")
def discard_workflow(
    workflow_id: str,
    user_id: str = Depends(get_current_user_id),
    store: WorkflowStore = Depends(get_workflow_store),
) -> None:
    """Drop the session; rows it already stored are kept."""
    try:
        store.discard(workflow_id, user_id)
        logger.info(f"[discard_workflow] Workflow {workflow_id} discarded")
    except Exception as e:
        raise http_error(e)


@router.post("/{workflow_id}/model", response_model=WorkflowViewSchema, summary="Choose Model")
def choose_model(
    workflow_id: str,
    body: ChooseModelSchema,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    store: WorkflowStore = Depends(get_workflow_store),
) -> WorkflowViewSchema:
    """Select a saved model by id, or take a freshly generated or uploaded image."""
    try:
        if body.model_id:
            row = ModelRepository(db, user_id).get(body.model_id)
            event = ModelChosen(
                image=row.image_url,
                characteristics={field: getattr(row, field) for field in MODEL_FIELDS},
                model_id=row.id,
            )
        else:
            event = ModelChosen(
                image=body.image_url or "",
                characteristics=body.characteristics.model_dump() if body.characteristics else None,
            )
        return _apply(store, workflow_id, user_id, event)
    except Exception as e:
        logger.error(f"[choose_model] Error: {e}")
        raise http_error(e)


@router.post("/{workflow_id}/clothing", response_model=WorkflowViewSchema, summary="Choose Clothing")
def choose_clothing(
    workflow_id: str,
    body: ChooseClothingSchema,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    store: WorkflowStore = Depends(get_workflow_store),
) -> WorkflowViewSchema:
    try:
        if body.clothing_id:
            row = ClothingItemRepository(db, user_id).get(body.clothing_id)
            event = ClothingChosen(image=row.image_url, description=row.name, clothing_id=row.id)
        else:
            event = ClothingChosen(image=body.image_url or "", description=body.description)
        return _apply(store, workflow_id, user_id, event)
    except Exception as e:
        logger.error(f"[choose_clothing] Error: {e}")
        raise http_error(e)


@router.post("/{workflow_id}/scene", response_model=WorkflowViewSchema, summary="Change Scene")
def change_scene(
    workflow_id: str,
    body: SceneSettingsSchema,
    user_id: str = Depends(get_current_user_id),
    store: WorkflowStore = Depends(get_workflow_store),
) -> WorkflowViewSchema:
    try:
        return _apply(store, workflow_id, user_id, SceneChanged(**body.model_dump()))
    except Exception as e:
        raise http_error(e)


@router.post("/{workflow_id}/toggles", response_model=WorkflowViewSchema, summary="Switch Sources")
def set_toggles(
    workflow_id: str,
    body: TogglesSchema,
    user_id: str = Depends(get_current_user_id),
    store: WorkflowStore = Depends(get_workflow_store),
) -> WorkflowViewSchema:
    try:
        events = []
        if body.use_existing_model is not None:
            events.append(UseExistingModel(body.use_existing_model))
        if body.use_existing_clothing is not None:
            events.append(UseExistingClothing(body.use_existing_clothing))
        return _apply(store, workflow_id, user_id, *events)
    except Exception as e:
        raise http_error(e)


@router.post("/{workflow_id}/advance", response_model=WorkflowViewSchema, summary="Next Step")
def advance(
    workflow_id: str,
    user_id: str = Depends(get_current_user_id),
    store: WorkflowStore = Depends(get_workflow_store),
) -> WorkflowViewSchema:
    try:
        return _apply(store, workflow_id, user_id, Advance())
    except Exception as e:
        raise http_error(e)


@router.post("/{workflow_id}/back", response_model=WorkflowViewSchema, summary="Previous Step")
def back(
    workflow_id: str,
    user_id: str = Depends(get_current_user_id),
    store: WorkflowStore = Depends(get_workflow_store),
) -> WorkflowViewSchema:
    try:
        return _apply(store, workflow_id, user_id, Back())
    except Exception as e:
        raise http_error(e)


@router.post("/{workflow_id}/reset", response_model=WorkflowViewSchema, summary="Start Over")
def reset(
    workflow_id: str,
    user_id: str = Depends(get_current_user_id),
    store: WorkflowStore = Depends(get_workflow_store),
) -> WorkflowViewSchema:
    try:
        return _apply(store, workflow_id, user_id, Reset())
    except Exception as e:
        raise http_error(e)


@router.post("/{workflow_id}/save-model", response_model=FashionModelSchema, status_code=201, summary="Save Model")
def save_model(
    workflow_id: str,
    body: SaveAsSchema,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    store: WorkflowStore = Depends(get_workflow_store),
) -> FashionModelSchema:
    """Persist the workflow's generated model under ``name`` and select it."""
    try:
        state = store.get(workflow_id, user_id, for_update=True)
        if not body.name.strip():
            raise ValueError("Please give the model a name")
        if not state.model_image or not state.model_characteristics:
            raise InvalidTransition("Generate a model before saving it")

        characteristics = ModelCharacteristicsSchema(**state.model_characteristics)
        row = ModelRepository(db, user_id).insert(
            name=body.name.strip(),
            image_url=state.model_image,
            **characteristics.model_dump(),
        )
        store.update(workflow_id, user_id, transition(state, ModelSaved(model_id=row.id)))
        return FashionModelSchema.model_validate(row)
    except Exception as e:
        logger.error(f"[save_model] Error: {e}")
        raise http_error(e)


@router.post(
    "/{workflow_id}/save-clothing",
    response_model=ClothingItemSchema,
    status_code=201,
    summary="Save Clothing Item",
)
def save_clothing(
    workflow_id: str,
    body: SaveAsSchema,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    store: WorkflowStore = Depends(get_workflow_store),
) -> ClothingItemSchema:
    """Persist the workflow's clothing image under ``name`` with placeholder attributes."""
    try:
        state = store.get(workflow_id, user_id, for_update=True)
        if not body.name.strip():
            raise ValueError("Please give the clothing item a name")
        if not state.clothing_image:
            raise InvalidTransition("Add a clothing image before saving it")

        row = ClothingItemRepository(db, user_id).insert(
            name=body.name.strip(),
            image_url=state.clothing_image,
            **CLOTHING_PLACEHOLDERS,
        )
        store.update(workflow_id, user_id, transition(state, ClothingSaved(clothing_id=row.id)))
        return ClothingItemSchema.model_validate(row)
    except Exception as e:
        logger.error(f"[save_clothing] Error: {e}")
        raise http_error(e)


@router.post("/{workflow_id}/generate", response_model=WorkflowViewSchema, summary="Generate Creation")
async def generate_creation(
    workflow_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    store: WorkflowStore = Depends(get_workflow_store),
    gateway: StudioGateway = Depends(get_gateway),
) -> WorkflowViewSchema:
    """
    Merge the chosen model and clothing under the current scene settings.

    A failed merge is not an HTTP error: the view stays on the scene step and
    carries the notice in ``error``. A second generate for the same workflow
    is refused with 409 while the first is still running.
    """
    try:
        with store.generating(workflow_id, user_id) as current:
            state = await _controller(current, gateway, db, user_id).generate_creation()
            store.save(workflow_id, user_id, state)
        logger.info(
            f"[generate_creation] Workflow {workflow_id} on step {state.step.value}, "
            f"enrichment {state.enrichment.value}"
        )
        return WorkflowViewSchema.from_state(workflow_id, state)
    except Exception as e:
        logger.error(f"[generate_creation] Error: {e}")
        raise http_error(e)


@router.post(
    "/{workflow_id}/color-variations",
    response_model=ColorVariationsResponseSchema,
    summary="Generate Color Variations",
)
async def workflow_color_variations(
    workflow_id: str,
    body: ColorSelectionSchema,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    store: WorkflowStore = Depends(get_workflow_store),
    gateway: StudioGateway = Depends(get_gateway),
) -> ColorVariationsResponseSchema:
    try:
        controller = _controller(store.get(workflow_id, user_id), gateway, db, user_id)
        results = await controller.generate_color_variations(body.selected_colors)
        return ColorVariationsResponseSchema(
            variations=[result.image_url for result in results],
            results=[
                ColorVariationSchema(color=result.key, image_url=result.image_url, creation_id=result.creation_id)
                for result in results
            ],
        )
    except Exception as e:
        logger.error(f"[workflow_color_variations] Error: {e}")
        raise http_error(e)


@router.post("/{workflow_id}/pose-pack", response_model=PosePackResponseSchema, summary="Generate Pose Pack")
async def workflow_pose_pack(
    workflow_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    store: WorkflowStore = Depends(get_workflow_store),
    gateway: StudioGateway = Depends(get_gateway),
) -> PosePackResponseSchema:
    try:
        controller = _controller(store.get(workflow_id, user_id), gateway, db, user_id)
        results = await controller.generate_pose_pack()
        return PosePackResponseSchema(
            poses=[result.image_url for result in results],
            results=[
                PoseImageSchema(
                    pose=result.key,
                    label=result.label or result.key,
                    image_url=result.image_url,
                    creation_id=result.creation_id,
                )
                for result in results
            ],
        )
    except Exception as e:
        logger.error(f"[workflow_pose_pack] Error: {e}")
        raise http_error(e)


@router.post(
    "/{workflow_id}/marketplace-content",
    response_model=MarketplaceContentSchema,
    summary="Draft Marketplace Content",
)
async def workflow_marketplace_content(
    workflow_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    store: WorkflowStore = Depends(get_workflow_store),
    gateway: StudioGateway = Depends(get_gateway),
) -> MarketplaceContentSchema:
    try:
        controller = _controller(store.get(workflow_id, user_id), gateway, db, user_id)
        return await controller.generate_marketplace_content()
    except Exception as e:
        logger.error(f"[workflow_marketplace_content] Error: {e}")
        raise http_error(e)


@router.post("/{workflow_id}/content", response_model=WorkflowViewSchema, summary="Apply Marketplace Content")
def apply_content(
    workflow_id: str,
    body: ContentSchema,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    store: WorkflowStore = Depends(get_workflow_store),
    gateway: StudioGateway = Depends(get_gateway),
) -> WorkflowViewSchema:
    try:
        controller = _controller(store.get(workflow_id, user_id, for_update=True), gateway, db, user_id)
        state = controller.apply_content(body.title, body.description)
        store.update(workflow_id, user_id, state)
        return WorkflowViewSchema.from_state(workflow_id, state)
    except Exception as e:
        logger.error(f"[apply_content] Error: {e}")
        raise http_error(e)
