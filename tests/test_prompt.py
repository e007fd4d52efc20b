from atelier.utils.image_workflow.prompt import (
    DEFAULT_MERGE_INSTRUCTIONS,
    MERGE_PROMPT_PREFIX,
    POSE_PACK,
    build_color_variation_prompt,
    build_marketplace_prompt,
    build_merge_prompt,
    build_model_prompt,
)


def test_merge_prompt_uses_lookup_tables() -> None:
    prompt = build_merge_prompt(pose="costas", scenario="praia", lighting="golden-hour", style="comercial")

    assert prompt.startswith(MERGE_PROMPT_PREFIX)
    assert "Model in back view pose. " in prompt
    assert "Shot in beach setting with sand. " in prompt
    assert "With warm golden hour lighting. " in prompt
    assert "commercial catalog style photography. " in prompt
    assert prompt.endswith(DEFAULT_MERGE_INSTRUCTIONS)


def test_merge_prompt_falls_back_to_raw_value() -> None:
    prompt = build_merge_prompt(pose="jumping", scenario="rooftop bar")

    assert "Model in jumping pose. " in prompt
    assert "Shot in rooftop bar. " in prompt


def test_merge_prompt_one_sentence_per_set_field() -> None:
    prompt = build_merge_prompt(pose="frontal")

    assert prompt.count("Model in ") == 1
    assert "Shot in" not in prompt
    assert "With " not in prompt
    assert "photography. " not in prompt.replace(MERGE_PROMPT_PREFIX, "")


def test_merge_prompt_custom_instructions_replace_default() -> None:
    prompt = build_merge_prompt(style="editorial", instructions="Tuck the shirt in.")

    assert prompt.endswith("Tuck the shirt in.")
    assert DEFAULT_MERGE_INSTRUCTIONS not in prompt


def test_model_prompt_gender_wording() -> None:
    values = dict(
        ethnicity="asian",
        age_range="25-35",
        body_type="athletic",
        hair_color="black",
        hair_style="short",
        skin_tone="medium",
    )

    assert "Female model, asian ethnicity, 25-35 years old" in build_model_prompt(gender="female", **values)
    assert "Male model" in build_model_prompt(gender="male", **values)
    assert "Male model" in build_model_prompt(gender="unspecified", **values)


def test_color_prompt_names_only_the_color() -> None:
    prompt = build_color_variation_prompt("navy blue")

    assert "ONLY change the color of the clothing item to navy blue." in prompt
    assert "Same pose and position" in prompt


def test_pose_pack_is_fixed() -> None:
    assert [pose.name for pose in POSE_PACK] == ["frontal", "back", "profile", "macro_detail", "three_quarter"]
    assert [pose.label for pose in POSE_PACK] == [
        "Front view",
        "Back view",
        "Side profile",
        "Macro detail",
        "3/4 angle",
    ]


def test_marketplace_prompt_carries_product_fields() -> None:
    prompt = build_marketplace_prompt(
        name="Linen shirt",
        clothing_type="custom piece",
        style="editorial",
        color="white",
        language="Brazilian Portuguese",
    )

    assert "in Brazilian Portuguese" in prompt
    assert "Name: Linen shirt" in prompt
    assert "Color: white" in prompt
    assert '"tags"' in prompt
