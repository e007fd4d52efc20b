from typing import Annotated

from pydantic import (
    AnyUrl,
    BeforeValidator,
    computed_field,
)
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # API Configuration
    API_V1_STR: str = "/api/v1"

    # Server Configuration
    SERVER_NAME: str = "Atelier"
    SERVER_HOST: str = "http://localhost"
    SERVER_PORT: int = 8081

    # CORS Configuration
    BACKEND_CORS_ORIGINS: Annotated[
        list[AnyUrl] | str,
        BeforeValidator(lambda x: x.split(",") if isinstance(x, str) else x),
    ] = []

    # Project Configuration
    PROJECT_NAME: str = "Atelier"
    LOG_LEVEL: str = "INFO"

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./atelier.db"

    # Upload Configuration
    MAX_UPLOAD_SIZE_MB: int = 10
    IMAGE_FETCH_TIMEOUT: int = 30

    # Google AI Configuration
    GOOGLE_API_KEY: str = ""
    GOOGLE_CLOUD_PROJECT_ID: str = ""
    GOOGLE_CLOUD_LOCATION: str = "us-central1"
    GOOGLE_GENAI_USE_VERTEXAI: bool = False
    IMAGE_MODEL: str = "gemini-2.5-flash-image"
    TEXT_MODEL: str = "gemini-2.5-flash"

    # Marketplace copy is written in this language
    MARKETPLACE_LANGUAGE: str = "Brazilian Portuguese"

    # Live workflow sessions kept in memory
    WORKFLOW_MAX_SESSIONS: int = 500
    WORKFLOW_TTL_SECONDS: int = 3600

    @computed_field  # type: ignore[prop-decorator]
    @property
    def MAX_UPLOAD_SIZE_BYTES(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @computed_field  # type: ignore[prop-decorator]
    @property
    def all_cors_origins(self) -> list[str]:
        origins = [str(origin).rstrip("/") for origin in self.BACKEND_CORS_ORIGINS]
        return origins or ["*"]


settings = Settings()
