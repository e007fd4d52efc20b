"""
Schemas for the creation workflow endpoints.
"""
from dataclasses import asdict
from typing import Optional

from pydantic import Field

from atelier.schemas.base import CamelModel
from atelier.schemas.generation import (
    ModelCharacteristicsSchema,
    SceneSettingsSchema,
)
from atelier.workflow.state import WorkflowState, can_advance


class ChooseModelSchema(CamelModel):
    """Either a saved model id or a generated/uploaded image."""
    model_id: Optional[str] = None
    image_url: Optional[str] = None
    characteristics: Optional[ModelCharacteristicsSchema] = None


class ChooseClothingSchema(CamelModel):
    clothing_id: Optional[str] = None
    image_url: Optional[str] = None
    description: Optional[str] = None


class TogglesSchema(CamelModel):
    use_existing_model: Optional[bool] = None
    use_existing_clothing: Optional[bool] = None


class ColorSelectionSchema(CamelModel):
    selected_colors: list[str] = Field(default_factory=list)


class ContentSchema(CamelModel):
    title: str = ""
    description: str = ""


class WorkflowViewSchema(CamelModel):
    id: str
    step: str
    can_advance: bool
    use_existing_model: bool
    use_existing_clothing: bool
    model_image: str
    model_characteristics: Optional[dict[str, str]] = None
    selected_model_id: Optional[str] = None
    clothing_image: str
    clothing_description: Optional[str] = None
    selected_clothing_id: Optional[str] = None
    scene: SceneSettingsSchema
    generated_image: str
    creation_id: Optional[str] = None
    title: str
    description: str
    enrichment: str
    error: Optional[str] = None

    @classmethod
    def from_state(cls, workflow_id: str, state: WorkflowState) -> "WorkflowViewSchema":
        return cls(
            id=workflow_id,
            step=state.step.value,
            can_advance=can_advance(state),
            use_existing_model=state.use_existing_model,
            use_existing_clothing=state.use_existing_clothing,
            model_image=state.model_image,
            model_characteristics=state.model_characteristics,
            selected_model_id=state.selected_model_id,
            clothing_image=state.clothing_image,
            clothing_description=state.clothing_description,
            selected_clothing_id=state.selected_clothing_id,
            scene=SceneSettingsSchema(**asdict(state.scene)),
            generated_image=state.generated_image,
            creation_id=state.creation_id,
            title=state.title,
            description=state.description,
            enrichment=state.enrichment.value,
            error=state.error,
        )
