"""Application configuration for the token server."""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    app_env: str = Field(default="development")
    cors_allow_origins: list[str] = Field(default_factory=lambda: ["*"])

    agora_app_id: str = Field(default="")
    agora_app_certificate: str = Field(default="", repr=False)
    token_ttl_seconds: int = Field(default=3600, ge=1)

    supabase_url: str = Field(default="")
    supabase_anon_key: str = Field(default="", repr=False)

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: object) -> object:
        """Allow comma-separated env values for CORS origins."""

        if isinstance(value, str):
            parts = [item.strip() for item in value.split(",") if item.strip()]
            return parts
        return value

    @field_validator("agora_app_id", "agora_app_certificate", "supabase_url", "supabase_anon_key", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    @property
    def has_agora_credentials(self) -> bool:
        return bool(self.agora_app_id and self.agora_app_certificate)

    @property
    def has_identity_provider(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()


settings = get_settings()
