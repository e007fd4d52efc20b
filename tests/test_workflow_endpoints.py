import pytest

from atelier.api.deps import get_workflow_store
from atelier.main import app
from atelier.workflow.notices import PAYMENT_REQUIRED_NOTICE

from conftest import OTHER_USER_ID, SAMPLE_IMAGE, USER_ID

CHARACTERISTICS = {
    "gender": "female",
    "ethnicity": "asian",
    "ageRange": "18-25",
    "bodyType": "athletic",
    "hairColor": "black",
    "hairStyle": "short",
    "skinTone": "light",
}


@pytest.fixture()
def workflow_id(client) -> str:
    response = client.post("/api/v1/workflows")
    assert response.status_code == 201
    return response.json()["id"]


def _post(client, workflow_id: str, action: str, json=None):
    return client.post(f"/api/v1/workflows/{workflow_id}/{action}", json=json)


def _to_scene(client, workflow_id: str) -> None:
    assert _post(client, workflow_id, "model", {"imageUrl": SAMPLE_IMAGE}).status_code == 200
    assert _post(client, workflow_id, "advance").status_code == 200
    clothing = {"imageUrl": SAMPLE_IMAGE, "description": "Linen shirt"}
    assert _post(client, workflow_id, "clothing", clothing).status_code == 200
    assert _post(client, workflow_id, "advance").json()["step"] == "scene"


def test_new_workflow_view(client, workflow_id) -> None:
    view = client.get(f"/api/v1/workflows/{workflow_id}").json()

    assert view["step"] == "model"
    assert view["canAdvance"] is False
    assert view["scene"] == {"pose": "frontal", "scenario": "studio", "lighting": "studio", "style": "editorial"}
    assert view["enrichment"] == "not_attempted"


def test_workflow_is_private(client, workflow_id) -> None:
    response = client.get(f"/api/v1/workflows/{workflow_id}", headers={"X-User-Id": OTHER_USER_ID})

    assert response.status_code == 404


def test_advance_without_model_is_conflict(client, workflow_id) -> None:
    response = _post(client, workflow_id, "advance")

    assert response.status_code == 409
    assert client.get(f"/api/v1/workflows/{workflow_id}").json()["step"] == "model"


def test_generate_and_save_model(client, provider, workflow_id) -> None:
    model_image = client.post("/api/v1/generate-model", json=CHARACTERISTICS).json()["modelImage"]
    view = _post(client, workflow_id, "model", {"imageUrl": model_image, "characteristics": CHARACTERISTICS}).json()
    assert view["canAdvance"] is True

    response = _post(client, workflow_id, "save-model", {"name": "Test Model"})

    assert response.status_code == 201
    saved = response.json()
    assert saved["name"] == "Test Model"
    assert saved["imageUrl"] == model_image
    assert (saved["gender"], saved["ethnicity"], saved["ageRange"]) == ("female", "asian", "18-25")
    assert saved["bodyType"] == "athletic"
    assert [row["name"] for row in client.get("/api/v1/models").json()] == ["Test Model"]
    assert client.get(f"/api/v1/workflows/{workflow_id}").json()["selectedModelId"] == saved["id"]


def test_save_model_rejections(client, workflow_id) -> None:
    assert _post(client, workflow_id, "save-model", {"name": "Nobody"}).status_code == 409

    _post(client, workflow_id, "model", {"imageUrl": SAMPLE_IMAGE, "characteristics": CHARACTERISTICS})
    response = _post(client, workflow_id, "save-model", {"name": "   "})
    assert response.status_code == 400


def test_uploaded_model_without_characteristics_cannot_be_saved(client, workflow_id) -> None:
    _post(client, workflow_id, "model", {"imageUrl": SAMPLE_IMAGE})

    assert _post(client, workflow_id, "save-model", {"name": "Upload"}).status_code == 409


def test_save_clothing(client, workflow_id) -> None:
    _post(client, workflow_id, "model", {"imageUrl": SAMPLE_IMAGE})
    _post(client, workflow_id, "advance")
    _post(client, workflow_id, "clothing", {"imageUrl": SAMPLE_IMAGE, "description": "Red dress"})

    response = _post(client, workflow_id, "save-clothing", {"name": "Red dress"})

    assert response.status_code == 201
    assert response.json()["type"] == "general"
    assert client.get(f"/api/v1/workflows/{workflow_id}").json()["selectedClothingId"] == response.json()["id"]


def test_choose_saved_model_by_id(client, workflow_id) -> None:
    body = {"name": "Ana", "imageUrl": SAMPLE_IMAGE, **CHARACTERISTICS}
    model = client.post("/api/v1/models", json=body).json()

    _post(client, workflow_id, "toggles", {"useExistingModel": True})
    view = _post(client, workflow_id, "model", {"modelId": model["id"]}).json()

    assert view["useExistingModel"] is True
    assert view["selectedModelId"] == model["id"]
    assert view["modelImage"] == SAMPLE_IMAGE
    assert _post(client, workflow_id, "model", {"modelId": "missing"}).status_code == 404


def test_full_creation_flow(client, provider, workflow_id) -> None:
    _to_scene(client, workflow_id)
    assert _post(client, workflow_id, "scene", {"pose": "costas", "style": "casual"}).json()["scene"]["pose"] == "costas"

    view = _post(client, workflow_id, "generate").json()

    assert view["step"] == "result"
    assert view["generatedImage"].startswith("data:image/jpeg;base64,")
    assert view["enrichment"] == "succeeded"
    assert view["title"] == "Linen Shirt"
    assert "Model in back view pose." in provider.image_calls[0][0]
    assert "Name: Linen shirt" in provider.text_calls[0]

    creation = client.get(f"/api/v1/creations/{view['creationId']}").json()
    assert creation["title"] == "Linen Shirt"
    assert creation["style"] == "casual"

    poses = _post(client, workflow_id, "pose-pack").json()
    assert len(poses["results"]) == 5
    assert all(result["creationId"] for result in poses["results"])

    colors = _post(client, workflow_id, "color-variations", {"selectedColors": ["red", "black"]}).json()
    assert [result["color"] for result in colors["results"]] == ["red", "black"]
    assert len(client.get(f"/api/v1/creations/{view['creationId']}/variations").json()) == 7

    draft = _post(client, workflow_id, "marketplace-content").json()
    assert draft["tags"] == ["linen", "summer"]

    applied = _post(client, workflow_id, "content", {"title": "Edited", "description": "Mine."}).json()
    assert applied["title"] == "Edited"
    assert client.get(f"/api/v1/creations/{view['creationId']}").json()["description"] == "Mine."

    reset = _post(client, workflow_id, "reset").json()
    assert reset["step"] == "model"
    assert reset["modelImage"] == ""
    assert reset["scene"]["style"] == "casual"


def test_merge_failure_stays_on_scene(client, provider, workflow_id) -> None:
    _to_scene(client, workflow_id)
    provider.fail_when("Professional fashion photography showing a model", "Payment required: no credits")

    response = _post(client, workflow_id, "generate")

    assert response.status_code == 200
    assert response.json()["step"] == "scene"
    assert response.json()["error"] == PAYMENT_REQUIRED_NOTICE
    assert client.get("/api/v1/creations").json() == []


def test_enrichment_failure_still_reaches_result(client, provider, workflow_id) -> None:
    _to_scene(client, workflow_id)
    provider.text_error = RuntimeError("text model unavailable")

    view = _post(client, workflow_id, "generate").json()

    assert view["step"] == "result"
    assert view["enrichment"] == "failed"
    assert view["title"] == ""


def test_actions_outside_their_step_conflict(client, workflow_id) -> None:
    assert _post(client, workflow_id, "generate").status_code == 409
    assert _post(client, workflow_id, "pose-pack").status_code == 409
    assert _post(client, workflow_id, "color-variations", {"selectedColors": ["red"]}).status_code == 409
    assert _post(client, workflow_id, "content", {"title": "t"}).status_code == 409
    assert _post(client, workflow_id, "back").status_code == 409
    assert _post(client, workflow_id, "scene", {"pose": "lateral"}).status_code == 409


def test_default_scene_creation_row(client, provider, workflow_id) -> None:
    _to_scene(client, workflow_id)

    view = _post(client, workflow_id, "generate").json()

    creation = client.get(f"/api/v1/creations/{view['creationId']}").json()
    assert (creation["pose"], creation["scenario"], creation["lighting"], creation["style"]) == (
        "frontal",
        "studio",
        "studio",
        "editorial",
    )
    assert creation["imageUrl"] == view["generatedImage"]
    assert creation["isVariation"] is False


def test_discard_workflow(client, workflow_id) -> None:
    other = {"X-User-Id": OTHER_USER_ID}
    assert client.delete(f"/api/v1/workflows/{workflow_id}", headers=other).status_code == 404

    assert client.delete(f"/api/v1/workflows/{workflow_id}").status_code == 204
    assert client.get(f"/api/v1/workflows/{workflow_id}").status_code == 404
    assert client.delete(f"/api/v1/workflows/{workflow_id}").status_code == 404


def test_workflow_busy_generating_refuses_changes(client, provider, workflow_id) -> None:
    _to_scene(client, workflow_id)
    store = app.dependency_overrides[get_workflow_store]()

    with store.generating(workflow_id, USER_ID):
        assert _post(client, workflow_id, "generate").status_code == 409
        assert _post(client, workflow_id, "reset").status_code == 409
        assert _post(client, workflow_id, "save-clothing", {"name": "Shirt"}).status_code == 409
        assert client.delete(f"/api/v1/workflows/{workflow_id}").status_code == 409
        assert client.get(f"/api/v1/workflows/{workflow_id}").json()["step"] == "scene"

    assert provider.image_calls == []
    assert client.get("/api/v1/clothing-items").json() == []
    assert _post(client, workflow_id, "generate").json()["step"] == "result"
