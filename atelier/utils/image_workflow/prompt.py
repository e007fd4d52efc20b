from dataclasses import dataclass
from typing import Optional

POSE_DESCRIPTIONS = {
    "frontal": "full frontal view",
    "lateral": "side profile view",
    "3-4": "3/4 angle view",
    "costas": "back view",
    "sentado": "seated pose",
    "caminhando": "walking pose",
}

SCENARIO_DESCRIPTIONS = {
    "studio": "professional studio setting",
    "rua": "urban street environment",
    "praia": "beach setting with sand",
    "parque": "outdoor park environment",
    "indoor": "indoor home setting",
    "white-background": "clean white background",
}

LIGHTING_DESCRIPTIONS = {
    "studio": "professional studio lighting",
    "natural": "natural daylight",
    "dramatica": "dramatic high-contrast lighting",
    "golden-hour": "warm golden hour lighting",
    "soft": "soft diffused lighting",
}

STYLE_DESCRIPTIONS = {
    "editorial": "editorial magazine style",
    "comercial": "commercial catalog style",
    "casual": "casual lifestyle style",
    "lifestyle": "natural lifestyle photography",
    "high-fashion": "high fashion runway style",
}

MERGE_PROMPT_PREFIX = "Professional fashion photography showing a model wearing the clothing item. "

DEFAULT_MERGE_INSTRUCTIONS = (
    "The model should be wearing the clothing item naturally. "
    "Ensure realistic fit, proper lighting, shadows, and perspective. "
    "The result should look natural and professional. High quality, detailed, realistic."
)

EXTRACT_CLOTHING_PROMPT = """Extract and isolate the clothing item from this image.
Remove the model, mannequin, or any person wearing it.
Display the clothing item on a hanger against a pure white background.
The clothing should be centered, well-lit with professional studio lighting.
Maintain all details, textures, colors, and characteristics of the original clothing.
The result should look like a professional product photography for e-commerce.
Ultra high resolution, clean, professional."""


@dataclass(frozen=True)
class PosePreset:
    name: str
    label: str
    prompt: str


POSE_PACK = (
    PosePreset(
        "frontal",
        "Front view",
        "Full frontal view, model facing camera directly, standing straight, full body visible",
    ),
    PosePreset(
        "back",
        "Back view",
        "Full back view, model with back to camera, showing rear of clothing, full body visible",
    ),
    PosePreset(
        "profile",
        "Side profile",
        "Side profile view, model turned 90 degrees showing side of clothing, full body visible",
    ),
    PosePreset(
        "macro_detail",
        "Macro detail",
        "Extreme close-up macro shot showing fabric texture and clothing details, "
        "focus on material quality and craftsmanship",
    ),
    PosePreset(
        "three_quarter",
        "3/4 angle",
        "3/4 angle view, model positioned at 45 degrees, showing both front and side, full body visible",
    ),
)


def describe(table: dict[str, str], key: str) -> str:
    """Look ``key`` up in ``table``; unknown keys are used verbatim."""
    return table.get(key, key)


def build_merge_prompt(
    pose: Optional[str] = None,
    scenario: Optional[str] = None,
    lighting: Optional[str] = None,
    style: Optional[str] = None,
    instructions: Optional[str] = None,
) -> str:
    """
    Render scene settings into the instruction sent with the merge call.

    Every field that is set contributes exactly one sentence; unset fields are
    left out entirely.
    """
    prompt = MERGE_PROMPT_PREFIX
    if pose:
        prompt += f"Model in {describe(POSE_DESCRIPTIONS, pose)} pose. "
    if scenario:
        prompt += f"Shot in {describe(SCENARIO_DESCRIPTIONS, scenario)}. "
    if lighting:
        prompt += f"With {describe(LIGHTING_DESCRIPTIONS, lighting)}. "
    if style:
        prompt += f"{describe(STYLE_DESCRIPTIONS, style)} photography. "
    return prompt + (instructions or DEFAULT_MERGE_INSTRUCTIONS)


def build_model_prompt(
    gender: str,
    ethnicity: str,
    age_range: str,
    body_type: str,
    hair_color: str,
    hair_style: str,
    skin_tone: str,
) -> str:
    return f"""Ultra high resolution professional fashion model photo.
{"Female" if gender == "female" else "Male"} model, {ethnicity} ethnicity, {age_range} years old, {body_type} body type.
Hair: {hair_color} {hair_style}.
Skin tone: {skin_tone}.
Full body shot, standing pose, neutral background, studio lighting, professional photography.
The model should be wearing simple neutral clothing to showcase the body and features clearly.
High quality, detailed, realistic, professional fashion photography."""


def build_clothing_prompt(description: str) -> str:
    return f"""Ultra high resolution professional fashion product photography.
Create a clothing item based on this description: {description}
The clothing should be displayed on a hanger or mannequin against a pure white background.
Professional studio lighting, centered composition.
High quality, detailed, realistic product photography suitable for e-commerce.
Make sure all details from the description are visible and well-represented."""


def build_color_variation_prompt(color: str) -> str:
    return f"""You must maintain the EXACT same image composition and model pose.
ONLY change the color of the clothing item to {color}.
Keep everything else identical:
- Same model
- Same pose and position
- Same background
- Same lighting
- Same image composition
ONLY the clothing color should change to {color}.
The result must look like the exact same photo, just with the clothing in {color} color."""


def build_pose_prompt(pose: PosePreset) -> str:
    return f"""Generate a new photo with this exact framing: {pose.prompt}.
Use the same model and same clothing as shown in the reference image.
Maintain the same clothing design, color, and style.
Maintain the same model appearance.
Professional fashion photography, studio lighting, neutral background.
High quality, detailed, realistic, professional."""


def build_marketplace_prompt(
    name: str,
    clothing_type: str,
    style: str,
    color: str,
    language: str,
) -> str:
    return f"""You are an expert e-commerce fashion copywriter.
Write a marketplace-optimized title and description in {language} for the following product:

Name: {name}
Type: {clothing_type}
Style: {style}
Color: {color}

INSTRUCTIONS:
1. Title: 50-80 characters, attractive, with relevant keywords
2. Description: 200-500 words, persuasive, covering benefits and features
3. Include 5-8 relevant SEO tags/keywords

Return JSON in this format:
{{
  "title": "title here",
  "description": "full description here",
  "tags": ["tag1", "tag2", ...]
}}"""
