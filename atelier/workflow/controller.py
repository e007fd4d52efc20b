"""
Effect layer of the creation workflow.

The controller owns one workflow state for the duration of a request and runs
the network and database side effects around the pure transitions in
``atelier.workflow.state``.
"""
import logging
from dataclasses import asdict, replace
from typing import Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError

from atelier.core.exceptions import InvalidTransition
from atelier.schemas.generation import MarketplaceContentSchema, SceneSettingsSchema
from atelier.services.gateway import StudioGateway
from atelier.services.generation import DEFAULT_CLOTHING_COLOR, DEFAULT_CLOTHING_NAME, DEFAULT_CLOTHING_TYPE
from atelier.services.repositories import CreationRepository
from atelier.services.variations import VariantResult
from atelier.workflow.notices import friendly_error
from atelier.workflow.state import (
    ContentApplied,
    EnrichmentFinished,
    EnrichmentStatus,
    GenerationFailed,
    GenerationSucceeded,
    Step,
    WorkflowState,
    transition,
)

logger = logging.getLogger(__name__)

MERGE_FAILED_NOTICE = "Failed to generate creation"


class WorkflowController:
    def __init__(
        self,
        state: WorkflowState,
        gateway: StudioGateway,
        creations: CreationRepository,
    ):
        self.state = state
        self.gateway = gateway
        self.creations = creations

    def dispatch(self, event: object) -> WorkflowState:
        self.state = transition(self.state, event)
        return self.state

    async def generate_creation(self) -> WorkflowState:
        """
        Merge the chosen model and clothing into a creation.

        The merge is mandatory: if it fails the workflow stays on the scene
        step with an error notice. Persisting the row and generating the
        marketplace copy are best effort and never hold back the move to the
        result step.
        """
        if self.state.step is not Step.SCENE:
            raise InvalidTransition(f"Cannot generate on step '{self.state.step.value}'")
        if not self.state.model_image or not self.state.clothing_image:
            raise InvalidTransition("Model and clothing images are required")

        scene = self.state.scene
        try:
            merged_image = await self.gateway.merge_images(
                self.state.model_image,
                self.state.clothing_image,
                SceneSettingsSchema(**asdict(scene)),
            )
        except Exception as e:
            logger.exception(f"[generate_creation] Merge failed: {e}")
            return self.dispatch(GenerationFailed(friendly_error(str(e), MERGE_FAILED_NOTICE)))

        if not merged_image:
            logger.error("[generate_creation] Merge returned no image")
            return self.dispatch(GenerationFailed(MERGE_FAILED_NOTICE))

        creation_id = self._persist_creation(merged_image)
        self.dispatch(GenerationSucceeded(image=merged_image, creation_id=creation_id))

        if creation_id is None:
            return self.dispatch(EnrichmentFinished(EnrichmentStatus.SKIPPED))
        return self.dispatch(await self._enrich(creation_id))

    def _persist_creation(self, image_url: str) -> Optional[str]:
        scene = self.state.scene
        try:
            row = self.creations.insert(
                image_url=image_url,
                model_id=self.state.selected_model_id,
                clothing_id=self.state.selected_clothing_id,
                pose=scene.pose,
                scenario=scene.scenario,
                lighting=scene.lighting,
                style=scene.style,
            )
        except SQLAlchemyError as e:
            self.creations.db.rollback()
            logger.error(f"[generate_creation] Could not store creation: {e}")
            return None
        return row.id

    async def _enrich(self, creation_id: str) -> EnrichmentFinished:
        """Generate listing copy for a fresh creation; failures are reported, not raised."""
        try:
            content = await self._draft_content()
        except Exception as e:
            logger.warning(f"[generate_creation] Marketplace content for {creation_id} failed: {e}")
            return EnrichmentFinished(EnrichmentStatus.FAILED)

        try:
            self.creations.update(creation_id, title=content.title, description=content.description)
        except SQLAlchemyError as e:
            self.creations.db.rollback()
            logger.warning(f"[generate_creation] Could not store marketplace content for {creation_id}: {e}")
            return EnrichmentFinished(EnrichmentStatus.FAILED)

        logger.info(f"[generate_creation] Marketplace content stored for {creation_id}")
        return EnrichmentFinished(EnrichmentStatus.SUCCEEDED, content.title, content.description)

    def _require_result(self, action: str) -> None:
        if self.state.step is not Step.RESULT:
            raise InvalidTransition(f"Cannot {action} on step '{self.state.step.value}'")

    async def generate_color_variations(self, colors: Sequence[str]) -> list[VariantResult]:
        self._require_result("generate color variations")
        results = await self.gateway.generate_color_variations(self.state.generated_image, colors)
        return self._store_variations(results, vary_pose=False)

    async def generate_pose_pack(self) -> list[VariantResult]:
        self._require_result("generate a pose pack")
        results = await self.gateway.generate_pose_pack(self.state.generated_image)
        return self._store_variations(results, vary_pose=True)

    def _store_variations(self, results: list[VariantResult], vary_pose: bool) -> list[VariantResult]:
        if not results or not self.state.creation_id:
            return results
        parent = self.creations.get(self.state.creation_id)
        rows = self.creations.insert_variations(
            parent, [(result.image_url, result.key if vary_pose else None) for result in results]
        )
        return [replace(result, creation_id=row.id) for result, row in zip(results, rows)]

    async def generate_marketplace_content(self) -> MarketplaceContentSchema:
        """Draft listing copy for the current creation without applying it."""
        self._require_result("generate marketplace content")
        return await self._draft_content()

    async def _draft_content(self) -> MarketplaceContentSchema:
        return await self.gateway.generate_marketplace_content(
            self.state.clothing_description or DEFAULT_CLOTHING_NAME,
            DEFAULT_CLOTHING_TYPE,
            self.state.scene.style,
            DEFAULT_CLOTHING_COLOR,
        )

    def apply_content(self, title: str, description: str) -> WorkflowState:
        self.dispatch(ContentApplied(title=title, description=description))
        if self.state.creation_id:
            self.creations.update(self.state.creation_id, title=title, description=description)
        return self.state
