"""
Creation workflow state machine.

The state is an immutable value; ``transition`` maps ``(state, event)`` to the
next state without touching the network or the database. Rejected events raise
InvalidTransition and leave the caller's state as it was.
"""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Optional

from atelier.core.exceptions import InvalidTransition


class Step(str, Enum):
    MODEL = "model"
    CLOTHING = "clothing"
    SCENE = "scene"
    RESULT = "result"


class EnrichmentStatus(str, Enum):
    """Outcome of the automatic title/description generation after a merge."""
    NOT_ATTEMPTED = "not_attempted"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class SceneSettings:
    pose: str = "frontal"
    scenario: str = "studio"
    lighting: str = "studio"
    style: str = "editorial"


@dataclass(frozen=True)
class WorkflowState:
    step: Step = Step.MODEL
    use_existing_model: bool = False
    use_existing_clothing: bool = False
    model_image: str = ""
    model_characteristics: Optional[dict] = None
    selected_model_id: Optional[str] = None
    clothing_image: str = ""
    clothing_description: Optional[str] = None
    selected_clothing_id: Optional[str] = None
    scene: SceneSettings = field(default_factory=SceneSettings)
    generated_image: str = ""
    creation_id: Optional[str] = None
    title: str = ""
    description: str = ""
    enrichment: EnrichmentStatus = EnrichmentStatus.NOT_ATTEMPTED
    error: Optional[str] = None


# Events


@dataclass(frozen=True)
class ModelChosen:
    image: str
    characteristics: Optional[dict] = None
    model_id: Optional[str] = None


@dataclass(frozen=True)
class ModelSaved:
    model_id: str


@dataclass(frozen=True)
class ClothingChosen:
    image: str
    description: Optional[str] = None
    clothing_id: Optional[str] = None


@dataclass(frozen=True)
class ClothingSaved:
    clothing_id: str


@dataclass(frozen=True)
class UseExistingModel:
    enabled: bool


@dataclass(frozen=True)
class UseExistingClothing:
    enabled: bool


@dataclass(frozen=True)
class SceneChanged:
    pose: Optional[str] = None
    scenario: Optional[str] = None
    lighting: Optional[str] = None
    style: Optional[str] = None


@dataclass(frozen=True)
class Advance:
    pass


@dataclass(frozen=True)
class Back:
    pass


@dataclass(frozen=True)
class GenerationSucceeded:
    image: str
    creation_id: Optional[str] = None


@dataclass(frozen=True)
class GenerationFailed:
    message: str


@dataclass(frozen=True)
class EnrichmentFinished:
    status: EnrichmentStatus
    title: str = ""
    description: str = ""


@dataclass(frozen=True)
class ContentApplied:
    title: str
    description: str


@dataclass(frozen=True)
class Reset:
    pass


def can_advance(state: WorkflowState) -> bool:
    """Whether the forward control is enabled on the current step."""
    if state.step is Step.MODEL:
        return state.model_image != ""
    if state.step is Step.CLOTHING:
        return state.clothing_image != ""
    return False


def _require_step(state: WorkflowState, step: Step, action: str) -> None:
    if state.step is not step:
        raise InvalidTransition(f"Cannot {action} on step '{state.step.value}'")


def _on_model_chosen(state: WorkflowState, event: ModelChosen) -> WorkflowState:
    _require_step(state, Step.MODEL, "choose a model")
    if not event.image:
        raise InvalidTransition("A model image is required")
    return replace(
        state,
        model_image=event.image,
        model_characteristics=dict(event.characteristics) if event.characteristics else None,
        selected_model_id=event.model_id,
        error=None,
    )


def _on_model_saved(state: WorkflowState, event: ModelSaved) -> WorkflowState:
    return replace(state, selected_model_id=event.model_id)


def _on_clothing_chosen(state: WorkflowState, event: ClothingChosen) -> WorkflowState:
    _require_step(state, Step.CLOTHING, "choose clothing")
    if not event.image:
        raise InvalidTransition("A clothing image is required")
    return replace(
        state,
        clothing_image=event.image,
        clothing_description=event.description,
        selected_clothing_id=event.clothing_id,
        error=None,
    )


def _on_clothing_saved(state: WorkflowState, event: ClothingSaved) -> WorkflowState:
    return replace(state, selected_clothing_id=event.clothing_id)


def _on_use_existing_model(state: WorkflowState, event: UseExistingModel) -> WorkflowState:
    _require_step(state, Step.MODEL, "switch model source")
    return replace(state, use_existing_model=event.enabled)


def _on_use_existing_clothing(state: WorkflowState, event: UseExistingClothing) -> WorkflowState:
    _require_step(state, Step.CLOTHING, "switch clothing source")
    return replace(state, use_existing_clothing=event.enabled)


def _on_scene_changed(state: WorkflowState, event: SceneChanged) -> WorkflowState:
    _require_step(state, Step.SCENE, "change scene settings")
    changes = {key: value for key, value in vars(event).items() if value}
    return replace(state, scene=replace(state.scene, **changes))


def _on_advance(state: WorkflowState, event: Advance) -> WorkflowState:
    if state.step is Step.MODEL:
        if not can_advance(state):
            raise InvalidTransition("A model image is required before choosing clothing")
        return replace(state, step=Step.CLOTHING, error=None)
    if state.step is Step.CLOTHING:
        if not can_advance(state):
            raise InvalidTransition("A clothing image is required before configuring the scene")
        return replace(state, step=Step.SCENE, error=None)
    if state.step is Step.SCENE:
        raise InvalidTransition("Use generate to produce the creation")
    raise InvalidTransition("The workflow is already on its last step")


def _on_back(state: WorkflowState, event: Back) -> WorkflowState:
    if state.step is Step.CLOTHING:
        return replace(state, step=Step.MODEL, error=None)
    if state.step is Step.SCENE:
        return replace(state, step=Step.CLOTHING, error=None)
    raise InvalidTransition(f"Cannot go back from step '{state.step.value}'")


def _on_generation_succeeded(state: WorkflowState, event: GenerationSucceeded) -> WorkflowState:
    _require_step(state, Step.SCENE, "finish generation")
    return replace(
        state,
        step=Step.RESULT,
        generated_image=event.image,
        creation_id=event.creation_id,
        enrichment=EnrichmentStatus.NOT_ATTEMPTED,
        error=None,
    )


def _on_generation_failed(state: WorkflowState, event: GenerationFailed) -> WorkflowState:
    _require_step(state, Step.SCENE, "fail generation")
    return replace(state, error=event.message)


def _on_enrichment_finished(state: WorkflowState, event: EnrichmentFinished) -> WorkflowState:
    _require_step(state, Step.RESULT, "record enrichment")
    if event.status is EnrichmentStatus.SUCCEEDED:
        return replace(state, enrichment=event.status, title=event.title, description=event.description)
    return replace(state, enrichment=event.status)


def _on_content_applied(state: WorkflowState, event: ContentApplied) -> WorkflowState:
    _require_step(state, Step.RESULT, "apply marketplace content")
    return replace(state, title=event.title, description=event.description)


def _on_reset(state: WorkflowState, event: Reset) -> WorkflowState:
    # Scene settings survive a restart
    return WorkflowState(scene=state.scene)


_HANDLERS: dict[type, Callable] = {
    ModelChosen: _on_model_chosen,
    ModelSaved: _on_model_saved,
    ClothingChosen: _on_clothing_chosen,
    ClothingSaved: _on_clothing_saved,
    UseExistingModel: _on_use_existing_model,
    UseExistingClothing: _on_use_existing_clothing,
    SceneChanged: _on_scene_changed,
    Advance: _on_advance,
    Back: _on_back,
    GenerationSucceeded: _on_generation_succeeded,
    GenerationFailed: _on_generation_failed,
    EnrichmentFinished: _on_enrichment_finished,
    ContentApplied: _on_content_applied,
    Reset: _on_reset,
}


def transition(state: WorkflowState, event: object) -> WorkflowState:
    """Apply ``event`` to ``state`` and return the next state."""
    handler = _HANDLERS.get(type(event))
    if handler is None:
        raise InvalidTransition(f"Unknown workflow event: {type(event).__name__}")
    return handler(state, event)
