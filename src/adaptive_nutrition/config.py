"""Application configuration."""

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    vision_provider: str = "huggingface"
    hf_api_key: str | None = None
    hf_base_url: str = "https://api-inference.huggingface.co/models"
    hf_caption_model: str = "Salesforce/blip-image-captioning-large"
    openai_api_key: str | None = None
    openai_model: str = "gpt-5.2"
    openai_reasoning_effort: str | None = "low"
    learned_confidence_threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    learned_snapshot_limit: int = Field(default=500, ge=1)
    learned_snapshot_ttl_seconds: int = Field(default=30, ge=0)
    confidence_pivot: float = Field(default=4.0, gt=0.0)
    correction_max_attempts: int = Field(default=5, ge=1)
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    def vision_api_key(self) -> str | None:
        """Return the API key for the configured vision provider."""
        if self.vision_provider == "openai":
            return self.openai_api_key
        return self.hf_api_key
