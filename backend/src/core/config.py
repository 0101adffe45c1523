"""Application configuration using pydantic-settings."""
from functools import lru_cache
from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    database_url: str

    # Development mode - bypasses token verification for local development
    dev_mode: bool = False
    dev_user_subject: str = "dev-user"
    dev_user_name: str = "Dev User"
    dev_user_email: str = "dev@localhost"

    # Identity provider (issuer of the bearer tokens sent by the frontend)
    auth_issuer: str = ""
    auth_audience: str = ""

    # CORS - NoDecode keeps pydantic-settings from JSON-parsing the raw env value
    cors_origins: Annotated[list[str], NoDecode] = ["http://localhost:3000"]

    # Redis (rate limiting)
    redis_url: str = "redis://localhost:6379"
    redis_enabled: bool = True
    rate_limit_enabled: bool = True

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Accept a comma-separated string or a list of origins."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @property
    def auth_jwks_url(self) -> str:
        """JWKS endpoint published by the identity provider."""
        return f"{self.auth_issuer.rstrip('/')}/.well-known/jwks.json"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
