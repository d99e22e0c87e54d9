from enum import Enum

from pydantic_settings import BaseSettings, SettingsConfigDict


class ModeEnum(str, Enum):
    development = "development"
    production = "production"
    testing = "testing"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file="../.env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── App ───────────────────────────────────────────────────
    MODE: ModeEnum = ModeEnum.production
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "STARTUP DIRECTOR"
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000",
    ]

    # ── OpenAI ────────────────────────────────────────────────
    OPENAI_API_KEY: str = ""
    TEXT_MODEL: str = "gpt-4o-mini"
    # Used for turns that carry attachments and for deck content
    REASONING_MODEL: str = "gpt-4o"
    IMAGE_MODEL: str = "gpt-image-1"
    # Closest landscape size the image endpoint offers to 16:9
    IMAGE_SIZE: str = "1536x1024"

    # ── Gateway behaviour ─────────────────────────────────────
    GATEWAY_TIMEOUT_SECONDS: float = 90.0
    IMAGE_TIMEOUT_SECONDS: float = 120.0
    STRUCTURED_RETRIES: int = 3

    # ── Turn pacing ───────────────────────────────────────────
    ACTIVATION_DWELL_SECONDS: float = 1.2


settings = Settings()
