"""
Configuration settings for the Scryfall NLP API
Loads environment variables and provides application settings
"""

from typing import List, Optional
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # API Configuration
    environment: str = "production"
    port: int = 3001

    # Logging
    log_level: str = "INFO"

    # Rate limiting (per license key)
    rate_max_requests: int = 60
    rate_window_seconds: int = 3600  # 1 hour
    rate_sweep_interval_seconds: int = 1800  # 30 minutes

    # Set catalog
    scryfall_sets_url: str = "https://api.scryfall.com/sets"
    sets_cache_ttl: int = 24 * 3600
    candidate_limit: int = 6

    # Completion service
    instruction_version: str = "2"
    default_provider: str = "openai"
    openai_api_key: Optional[str] = None
    openai_url: str = "https://api.openai.com/v1/chat/completions"
    openai_model: str = "gpt-4o-mini"
    anthropic_api_key: Optional[str] = None
    anthropic_url: str = "https://api.anthropic.com/v1/messages"
    anthropic_model: str = "claude-3-5-haiku-20241022"
    anthropic_version: str = "2023-06-01"
    completion_temperature: float = 0.1
    completion_max_tokens: int = 200

    # Payments / licenses
    stripe_secret_key: Optional[str] = None
    stripe_webhook_secret: Optional[str] = None
    # Only honoured outside production; lets test environments replay unsigned events
    allow_unverified_webhooks: bool = False
    license_store_file: Optional[str] = None
    seed_licenses: List[str] = ["TEST-1234-5678-ABCD", "TEST-9999-8888-XXXX"]

    # Email delivery (optional)
    resend_api_key: Optional[str] = None
    resend_url: str = "https://api.resend.com/emails"
    email_from: str = "onboarding@resend.dev"

    # Timeout Configuration
    external_api_timeout: int = 25
    external_api_connect_timeout: int = 8
    external_api_write_timeout: int = 8

    # CORS Configuration
    allowed_origins: List[str] = ["*"]

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings"""
    return Settings()


# Global settings instance
settings = get_settings()
