"""Backend configuration loaded from environment variables."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings for payments, license signing and KV storage."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "staging", "production"] = Field(
        default="development", validation_alias="ENVIRONMENT"
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    stripe_secret_key: str = Field(default="", validation_alias="STRIPE_SECRET_KEY")
    stripe_webhook_secret: str = Field(default="", validation_alias="STRIPE_WEBHOOK_SECRET")
    license_signing_key: str = Field(default="", validation_alias="LICENSE_SIGNING_KEY")

    kv_backend: Literal["memory", "cloudflare"] = Field(default="memory", validation_alias="KV_BACKEND")
    cloudflare_account_id: str = Field(default="", validation_alias="CLOUDFLARE_ACCOUNT_ID")
    cloudflare_namespace_id: str = Field(default="", validation_alias="CLOUDFLARE_KV_NAMESPACE_ID")
    cloudflare_api_token: str = Field(default="", validation_alias="CLOUDFLARE_API_TOKEN")

    site_url: str = Field(default="https://ggdotdev.com", validation_alias="SITE_URL")

    @field_validator(
        "stripe_secret_key",
        "stripe_webhook_secret",
        "license_signing_key",
        "cloudflare_account_id",
        "cloudflare_namespace_id",
        "cloudflare_api_token",
        mode="before",
    )
    @classmethod
    def _strip_strings(cls, value: str | None) -> str:
        if value is None:
            return ""
        return value.strip()

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value}")
        return level

    @field_validator("site_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @model_validator(mode="after")
    def _validate_required_config(self) -> "Settings":
        if self.environment == "production":
            missing = [
                key
                for key, value in {
                    "STRIPE_SECRET_KEY": self.stripe_secret_key,
                    "STRIPE_WEBHOOK_SECRET": self.stripe_webhook_secret,
                    "LICENSE_SIGNING_KEY": self.license_signing_key,
                }.items()
                if not value
            ]
            if missing:
                raise ValueError(f"Missing required settings: {', '.join(missing)}")

        if self.kv_backend == "cloudflare":
            missing = [
                key
                for key, value in {
                    "CLOUDFLARE_ACCOUNT_ID": self.cloudflare_account_id,
                    "CLOUDFLARE_KV_NAMESPACE_ID": self.cloudflare_namespace_id,
                    "CLOUDFLARE_API_TOKEN": self.cloudflare_api_token,
                }.items()
                if not value
            ]
            if missing:
                raise ValueError(f"KV_BACKEND=cloudflare requires: {', '.join(missing)}")

        return self

    @property
    def allowed_origin(self) -> str:
        """The only origin allowed by CORS."""
        return self.site_url


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load and cache validated settings."""
    return Settings()
