"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Text generation providers
    openai_api_key: SecretStr | None = None
    openai_model: str = "gpt-4o-mini"
    anthropic_api_key: SecretStr | None = None
    anthropic_model: str = "claude-3-5-sonnet-20241022"
    anthropic_base_url: str = "https://api.anthropic.com/v1"
    generation_max_tokens: int = 1500
    generation_temperature: float = 0.7
    provider_timeout_seconds: float = 60.0
    use_stub_generator: bool = False

    # Document store
    document_ttl_seconds: int = 24 * 3600
    document_sweep_interval_seconds: int = 300
    redis_url: str | None = None

    # Payments
    stripe_secret_key: SecretStr | None = None
    stripe_webhook_secret: SecretStr | None = None
    stripe_price_id: str = ""
    app_url: str = ""

    # Email
    resend_api_key: SecretStr | None = None
    resend_base_url: str = "https://api.resend.com"
    email_from: str = "Immigration Letter <noreply@immigrationexplanationletter.com>"

    # Export
    pdf_filename_prefix: str = "immigration_letter"

    # HTTP
    cors_origins: list[str] = ["http://localhost:3000"]

    # Logging
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
