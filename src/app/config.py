from __future__ import annotations

from pydantic import AnyUrl, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8-sig",
        case_sensitive=False,
        extra="ignore",
    )

    SUPABASE_URL: AnyUrl
    SUPABASE_SERVICE_ROLE_KEY: str
    APP_ENV: str = "local"
    LOG_LEVEL: str = "INFO"
    FRONTEND_CORS_ORIGINS: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:4321"],
    )

    GEMINI_API_KEY: SecretStr = SecretStr("")
    GEMINI_MODEL: str = "gemini-2.5-flash"
    AI_TEMPERATURE: float = Field(default=0.7, ge=0.0, le=2.0)
    AI_MAX_OUTPUT_TOKENS: int = Field(default=2000, ge=1, le=8192)
    AI_TOP_P: float = Field(default=0.9, ge=0.0, le=1.0)


settings = Settings()
