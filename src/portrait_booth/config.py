"""Application configuration."""

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from portrait_booth.domain.placement import PlacementPolicy

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded once from environment variables."""

    supabase_url: str
    supabase_service_key: str
    storage_bucket: str = "photobooth"
    storage_folder: str = "final-images"
    admin_token: str
    removebg_api_key: str
    removebg_url: str = "https://api.remove.bg/v1.0/removebg"
    removebg_size: str = "auto"
    removal_timeout_seconds: float = Field(default=30.0, gt=0.0)
    upload_timeout_seconds: float = Field(default=15.0, gt=0.0)
    assets_dir: Path = Path("assets")
    output_dir: Path = Path("final-images")
    placement: PlacementPolicy = PlacementPolicy()
    flatten_color: str = "#ffffff"
    layout_cache_ttl_seconds: int = Field(default=300, ge=0)
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        env_nested_delimiter="__",
        extra="ignore",
    )
