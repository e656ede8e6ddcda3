"""Application configuration using Pydantic settings."""

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, RedisDsn, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Built once at process start and handed to each component; instances are
    frozen so no stage can change configuration mid-flight.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False

    # API
    api_v1_prefix: str = "/api/v1"
    project_name: str = "Order Lookup API"
    version: str = "0.1.0"

    # Trust
    trust_mode: Literal["cors", "signed_proxy"] = "cors"
    allowed_origins: Annotated[list[str], NoDecode] = []
    proxy_signing_secret: str = ""

    # Shopify
    shopify_shop: str = ""
    shopify_admin_api_access_token: str = ""
    shopify_api_version: str = "2025-07"

    # reCAPTCHA
    recaptcha_secret: str = ""
    recaptcha_min_score: float = Field(default=0.5, ge=0.0, le=1.0)
    recaptcha_verify_url: str = "https://www.google.com/recaptcha/api/siteverify"

    # Rate limiting (disabled unless a Redis URL is set)
    rate_limit_redis_url: RedisDsn | None = None
    rate_limit_requests: int = Field(default=10, gt=0)
    rate_limit_window_seconds: int = Field(default=60, gt=0)

    # Outbound HTTP
    http_timeout_seconds: float = Field(default=10.0, gt=0)

    # Error reporting
    sentry_dsn: str = ""

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: object) -> object:
        """Accept ALLOWED_ORIGINS as a comma-separated string."""
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("rate_limit_redis_url", mode="before")
    @classmethod
    def _blank_url_disables(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def captcha_enabled(self) -> bool:
        return bool(self.recaptcha_secret)

    @property
    def rate_limit_enabled(self) -> bool:
        return self.rate_limit_redis_url is not None

    @property
    def backend_configured(self) -> bool:
        return bool(self.shopify_shop and self.shopify_admin_api_access_token)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
