"""
Sequential multi-call orchestration for color variations and pose packs.

One source image is normalized once and reused for every call. Calls run one
at a time in the order the specs were given; a failing variant is logged and
left out of the result, it never aborts the remaining ones.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from fastapi.concurrency import run_in_threadpool

from atelier.utils import image_workflow
from atelier.utils.image_workflow import InlineImage, to_data_url
from atelier.utils.image_workflow.prompt import (
    POSE_PACK,
    build_color_variation_prompt,
    build_pose_prompt,
)

logger = logging.getLogger(__name__)

VARIATION_ASPECT_RATIO = "3:4"


@dataclass(frozen=True)
class VariantSpec:
    key: str
    prompt: str
    label: Optional[str] = None


@dataclass(frozen=True)
class VariantResult:
    """A generated image tagged with the variant it came from."""
    key: str
    image_url: str
    label: Optional[str] = None
    creation_id: Optional[str] = None


def color_specs(colors: Sequence[str]) -> list[VariantSpec]:
    return [VariantSpec(key=color, prompt=build_color_variation_prompt(color)) for color in colors]


def pose_specs() -> list[VariantSpec]:
    return [VariantSpec(key=pose.name, prompt=build_pose_prompt(pose), label=pose.label) for pose in POSE_PACK]


async def generate_variants(
    source: InlineImage,
    specs: Sequence[VariantSpec],
    aspect_ratio: str = VARIATION_ASPECT_RATIO,
) -> list[VariantResult]:
    """
    Issue one edit call per variant against the same source image.

    Args:
        source: Normalized source image
        specs: Variants to produce, in the order they should be attempted

    Returns:
        Results for the variants that succeeded, in input order
    """
    logger.info(f"[generate_variants] Generating {len(specs)} variants")
    results: list[VariantResult] = []

    for spec in specs:
        try:
            image_bytes = await run_in_threadpool(
                image_workflow.generate_image_bytes, spec.prompt, [source], aspect_ratio
            )
        except Exception as e:
            logger.error(f"[generate_variants] Variant {spec.key} failed, skipping: {e}")
            continue

        results.append(VariantResult(key=spec.key, image_url=to_data_url(image_bytes), label=spec.label))
        logger.info(f"[generate_variants] Variant {spec.key} generated")

    logger.info(f"[generate_variants] {len(results)}/{len(specs)} variants generated")
    return results
