import pytest

from atelier.core.exceptions import InvalidTransition
from atelier.workflow.state import (
    Advance,
    Back,
    ClothingChosen,
    ContentApplied,
    EnrichmentFinished,
    EnrichmentStatus,
    GenerationFailed,
    GenerationSucceeded,
    ModelChosen,
    Reset,
    SceneChanged,
    SceneSettings,
    Step,
    UseExistingModel,
    WorkflowState,
    can_advance,
    transition,
)

MODEL_IMAGE = "data:image/jpeg;base64,bW9kZWw="
CLOTHING_IMAGE = "data:image/jpeg;base64,c2hpcnQ="


def _at_scene() -> WorkflowState:
    state = transition(WorkflowState(), ModelChosen(image=MODEL_IMAGE))
    state = transition(state, Advance())
    state = transition(state, ClothingChosen(image=CLOTHING_IMAGE, description="Linen shirt"))
    return transition(state, Advance())


def test_initial_state() -> None:
    state = WorkflowState()

    assert state.step is Step.MODEL
    assert state.scene == SceneSettings("frontal", "studio", "studio", "editorial")
    assert not can_advance(state)


def test_advance_without_model_is_rejected() -> None:
    state = WorkflowState()

    with pytest.raises(InvalidTransition):
        transition(state, Advance())
    assert state.step is Step.MODEL


def test_advance_without_clothing_is_rejected() -> None:
    state = transition(transition(WorkflowState(), ModelChosen(image=MODEL_IMAGE)), Advance())

    assert state.step is Step.CLOTHING
    assert not can_advance(state)
    with pytest.raises(InvalidTransition):
        transition(state, Advance())


def test_empty_model_image_is_rejected() -> None:
    with pytest.raises(InvalidTransition):
        transition(WorkflowState(), ModelChosen(image=""))


def test_forward_and_back_navigation() -> None:
    state = _at_scene()
    assert state.step is Step.SCENE

    state = transition(state, Back())
    assert state.step is Step.CLOTHING
    state = transition(state, Back())
    assert state.step is Step.MODEL
    assert state.model_image == MODEL_IMAGE

    with pytest.raises(InvalidTransition):
        transition(state, Back())


def test_scene_only_leaves_through_generation() -> None:
    state = _at_scene()

    with pytest.raises(InvalidTransition):
        transition(state, Advance())

    state = transition(state, GenerationSucceeded(image="data:image/jpeg;base64,b3V0", creation_id="c-1"))
    assert state.step is Step.RESULT
    assert state.creation_id == "c-1"

    with pytest.raises(InvalidTransition):
        transition(state, Back())
    with pytest.raises(InvalidTransition):
        transition(state, Advance())


def test_events_are_bound_to_their_step() -> None:
    with pytest.raises(InvalidTransition):
        transition(WorkflowState(), ClothingChosen(image=CLOTHING_IMAGE))
    with pytest.raises(InvalidTransition):
        transition(WorkflowState(), SceneChanged(pose="costas"))
    with pytest.raises(InvalidTransition):
        transition(_at_scene(), UseExistingModel(True))
    with pytest.raises(InvalidTransition):
        transition(_at_scene(), ContentApplied(title="t", description="d"))


def test_scene_change_only_touches_given_fields() -> None:
    state = transition(_at_scene(), SceneChanged(pose="costas", lighting="soft"))

    assert state.scene == SceneSettings(pose="costas", scenario="studio", lighting="soft", style="editorial")


def test_generation_failure_stays_on_scene() -> None:
    state = transition(_at_scene(), GenerationFailed("Failed to generate creation"))

    assert state.step is Step.SCENE
    assert state.error == "Failed to generate creation"
    assert state.generated_image == ""


def test_failed_enrichment_keeps_content_empty() -> None:
    state = transition(_at_scene(), GenerationSucceeded(image="data:image/jpeg;base64,b3V0", creation_id="c-1"))
    state = transition(state, EnrichmentFinished(EnrichmentStatus.FAILED, title="ignored"))

    assert state.enrichment is EnrichmentStatus.FAILED
    assert state.title == ""


def test_reset_clears_everything_but_scene() -> None:
    state = transition(_at_scene(), SceneChanged(style="casual"))
    state = transition(state, GenerationSucceeded(image="data:image/jpeg;base64,b3V0", creation_id="c-1"))
    state = transition(state, EnrichmentFinished(EnrichmentStatus.SUCCEEDED, "Title", "Description"))

    state = transition(state, Reset())

    assert state == WorkflowState(scene=SceneSettings(style="casual"))
