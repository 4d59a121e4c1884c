from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Vendor credentials (empty = provider not configured)
    OPENAI_API_KEY: str = ""
    ANTHROPIC_API_KEY: str = ""
    GOOGLE_API_KEY: str = ""

    DEFAULT_MODEL: str = "gpt-4o"

    # Backend collaborators
    AML_CORE_URL: str = "http://localhost:8787"
    AUTH_SERVICE_URL: str = "http://localhost:8788"
    HTTP_TIMEOUT_S: float = 30.0

    # Model requests allowed per chat turn (tool calls included)
    CHAT_MAX_STEPS: int = 5

    CORS_ALLOWED_ORIGINS: str = ""
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""


@lru_cache
def get_settings() -> Settings:
    """Return cached settings loaded from environment/.env.

    Use refresh_settings() to clear the cache if the environment changes at runtime.
    """
    return Settings()


def refresh_settings() -> None:
    """Clear cached settings so the next get_settings() reloads from env/.env."""
    get_settings.cache_clear()
