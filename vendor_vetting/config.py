"""Application configuration via environment variables."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Central configuration for Vendor Vetting."""

    # Application
    app_name: str = "Vendor Vetting"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = Field(default="development", pattern=r"^(development|staging|production)$")
    log_level: str = "INFO"
    log_format: str = Field(default="json", pattern=r"^(json|console)$")

    # API
    api_prefix: str = "/api"
    allowed_origins: str = "http://localhost:3000"
    rate_limit_default: str = "100/minute"

    # Storage
    storage_backend: str = Field(default="memory", pattern=r"^(memory|database)$")
    database_url: str = "sqlite:///./vendor_vetting.db"

    # Workflow policy
    vendor_token_validity_days: int = Field(default=7, ge=1)
    approval_validity_months: int = Field(default=12, ge=1)
    min_justification_length: int = Field(default=20, ge=0)
    expiring_soon_days: int = Field(default=30, ge=0)
    public_base_url: str = "http://localhost:3000"

    @property
    def allowed_origins_list(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",")]

    model_config = {"env_prefix": "VETTING_", "env_file": ".env", "extra": "ignore"}


def get_settings() -> Settings:
    """Return settings loaded from the environment."""
    return Settings()
