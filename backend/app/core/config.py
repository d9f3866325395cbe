import json
from typing import Annotated, Any, Literal

from pydantic import BeforeValidator, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_cors(value: Any) -> list[str] | str:
    if isinstance(value, str) and not value.startswith("["):
        return [item.strip() for item in value.split(",") if item.strip()]
    if isinstance(value, str):
        return json.loads(value)
    if isinstance(value, list):
        return value
    raise ValueError(value)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Use top level .env file (one level above ./backend/)
        env_file="../.env",
        env_ignore_empty=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "Character Pack Generator"
    API_PREFIX: str = "/api"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"

    BACKEND_CORS_ORIGINS: Annotated[list[str] | str, BeforeValidator(parse_cors)] = []

    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DB: str = "character_packs"
    # Full SQLAlchemy URL; takes precedence over the POSTGRES_* parts when set.
    DATABASE_URL: str | None = None

    # Identity used when a request carries no X-User-Id header. Unset it to
    # require an explicit caller identity on every request.
    DEMO_USER_ID: str | None = "demo-user"
    DEMO_USER_EMAIL: str | None = None

    # Text generation (prompt enhancement + metadata), OpenAI-compatible API.
    LLM_API_KEY: str | None = None
    GEMINI_API_KEY: str | None = None
    LLM_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    MODEL_DEFAULT: str = "gemini-2.0-flash"
    MODEL_ENHANCER: str | None = None
    MODEL_METADATA: str | None = None

    # Image generation provider (Runware REST task API).
    IMAGE_API_URL: str = "https://api.runware.ai/v1"
    IMAGE_API_KEY: str | None = None
    IMAGE_MODEL: str = "runware:101@1"
    IMAGE_API_TIMEOUT_SECONDS: float = 120.0

    PACK_EVENTS_POLL_SECONDS: float = 2.0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def all_cors_origins(self) -> list[str]:
        return [str(origin).rstrip("/") for origin in self.BACKEND_CORS_ORIGINS]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+psycopg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )


settings = Settings()  # type: ignore
