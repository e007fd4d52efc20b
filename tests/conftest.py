"""Shared fixtures: in-memory database, fake provider and an API client."""

import json
from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from atelier.api.deps import get_workflow_store
from atelier.core.config import settings
from atelier.core.database import enable_sqlite_foreign_keys, get_db
from atelier.core.exceptions import GenerationError
from atelier.main import app
from atelier.models.studio import Base
from atelier.utils import image_workflow
from atelier.workflow.store import WorkflowStore

USER_ID = "user-1"
OTHER_USER_ID = "user-2"

# "hello" as a data URL; Pillow cannot decode it so it is forwarded untouched
SAMPLE_IMAGE = "data:image/png;base64,aGVsbG8="


class FakeProvider:
    """Stands in for the provider calls; records every prompt it receives."""

    def __init__(self) -> None:
        self.image_calls: list[tuple[str, list, str | None]] = []
        self.text_calls: list[str] = []
        self.fail_markers: dict[str, str] = {}
        self.text_reply = json.dumps(
            {"title": "Linen Shirt", "description": "Fresh and light.", "tags": ["linen", "summer"]}
        )
        self.text_error: Exception | None = None

    def fail_when(self, marker: str, message: str = "Generation failed (500): boom") -> None:
        self.fail_markers[marker] = message

    def generate_image_bytes(self, prompt: str, images=(), aspect_ratio=None) -> bytes:
        self.image_calls.append((prompt, list(images), aspect_ratio))
        for marker, message in self.fail_markers.items():
            if marker in prompt:
                raise GenerationError(message)
        return f"image-{len(self.image_calls)}".encode()

    def generate_text(self, prompt: str) -> str:
        self.text_calls.append(prompt)
        if self.text_error is not None:
            raise self.text_error
        return self.text_reply


@pytest.fixture(autouse=True)
def provider_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "GOOGLE_API_KEY", "test-key")
    monkeypatch.setattr(settings, "GOOGLE_GENAI_USE_VERTEXAI", False)


@pytest.fixture()
def provider(monkeypatch: pytest.MonkeyPatch) -> FakeProvider:
    fake = FakeProvider()
    monkeypatch.setattr(image_workflow, "generate_image_bytes", fake.generate_image_bytes)
    monkeypatch.setattr(image_workflow, "generate_text", fake.generate_text)
    return fake


@pytest.fixture()
def engine() -> Iterator[Engine]:
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    yield session
    session.close()


@pytest.fixture()
def client(db_session: Session, provider: FakeProvider) -> Iterator[TestClient]:
    store = WorkflowStore()

    def _get_db() -> Iterator[Session]:
        yield db_session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_workflow_store] = lambda: store
    test_client = TestClient(app, headers={"X-User-Id": USER_ID})
    yield test_client
    app.dependency_overrides.clear()
