"""Configuration settings for the bot runtime."""

from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = ConfigDict(
        env_prefix="BOTMACHINE_",
        env_file=".env",
        extra="ignore",
    )

    environment: str = "development"

    # Telegram Bot API
    bot_token: str = ""
    api_base_url: str = "https://api.telegram.org"
    request_timeout_seconds: float = 60.0

    # Long polling
    poll_timeout_seconds: int = 30
    retry_delay_seconds: float = 5.0

    # Session storage
    session_store: str = "memory"  # memory | redis
    redis_url: str = "redis://localhost:6379"
    session_prefix: str = "botmachine:session:"
    session_ttl_seconds: int | None = None

    # Webhook delivery
    webhook_secret: str = ""
    webhook_host: str = "0.0.0.0"
    webhook_port: int = 8000

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


def get_settings() -> Settings:
    """Get a settings instance built from the current environment."""
    return Settings()
