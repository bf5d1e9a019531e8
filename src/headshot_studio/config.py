"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    supabase_bucket: str = "headshots"
    supabase_generations_table: str = "headshot_generations"
    openai_api_key: str
    openai_image_model: str = "gpt-image-1"
    openai_image_quality: str = "high"
    generation_count: int = 4
    upload_timeout_seconds: float | None = 30
    generation_timeout_seconds: float | None = 300
    persist_timeout_seconds: float | None = 15
    download_timeout_seconds: float = 20
    max_reference_image_bytes: int = 10 * 1024 * 1024
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
