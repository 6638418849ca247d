from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(RuntimeError):
    """Raised when a validation/generation call cannot run because of missing configuration."""


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    project_name: str = Field(default="StyleSnap Try-On API", alias="PROJECT_NAME")
    version: str = Field(default="0.1.0", alias="VERSION")
    environment: str = Field(default="development", alias="ENVIRONMENT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000, alias="PORT")
    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://127.0.0.1:3000"], alias="CORS_ORIGINS"
    )

    # optional KEY=VALUE file with secrets, loaded into the environment
    api_txt_path: str = Field(default="", alias="API_TXT_PATH")

    gemini_api_key: str = Field(default="", alias="GEMINI_API_KEY")
    gemini_api_base: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta", alias="GEMINI_API_BASE"
    )
    validation_model: str = Field(default="gemini-2.0-flash", alias="VALIDATION_MODEL")
    flash_image_model: str = Field(
        default="gemini-2.0-flash-preview-image-generation", alias="FLASH_IMAGE_MODEL"
    )
    imagen3_model: str = Field(default="imagen-3.0-generate-002", alias="IMAGEN3_MODEL")
    imagen4_model: str = Field(default="imagen-4.0-generate-preview-06-06", alias="IMAGEN4_MODEL")
    generation_temperature: float = Field(default=0.2, alias="GENERATION_TEMPERATURE")

    max_upload_mb: float = Field(default=5.0, alias="MAX_UPLOAD_MB")
    upload_max_side: int = Field(default=1536, alias="UPLOAD_MAX_SIDE")

    # remote item images are only fetched from these hosts
    item_image_hosts: List[str] = Field(default=["placehold.co"], alias="ITEM_IMAGE_HOSTS")
    max_item_image_mb: float = Field(default=5.0, alias="MAX_ITEM_IMAGE_MB")

    proxy_url: str = Field(default="", alias="PROXY_URL")


def load_keys_from_txt(path: str) -> None:
    p = Path(path)
    if not p.exists():
        raise ConfigurationError(f"api.txt not found at: {path}")

    for raw in p.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key and value:
            os.environ[key] = value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    settings = Settings()
    if settings.api_txt_path:
        load_keys_from_txt(settings.api_txt_path)
        settings = Settings()
    return settings


def require_api_key(settings: Settings) -> str:
    key = settings.gemini_api_key.strip()
    if not key:
        raise ConfigurationError("GEMINI_API_KEY is not configured")
    return key
