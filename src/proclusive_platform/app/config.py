"""Application configuration via Pydantic Settings."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

# Resolve .env from the project root regardless of CWD
_ENV_FILE = Path(__file__).resolve().parents[3] / ".env"


class Settings(BaseSettings):
    """Central configuration loaded from environment variables / .env file."""

    # Database
    database_url: str = "sqlite+aiosqlite:///./proclusive.db"

    # Session tokens issued by the identity provider
    jwt_secret_key: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_audience: str = "authenticated"
    jwt_expiration_minutes: int = 1440
    profile_lookup_timeout_seconds: float = 10.0

    # SendGrid
    sendgrid_api_key: str = ""
    sendgrid_from_email: str = "noreply@proclusive.com"
    sendgrid_admin_email: str = "admin@proclusive.com"

    # Links rendered into emails
    app_url: str = "http://localhost:3000"

    # Scheduler
    cron_secret: str = ""
    reminder_loop_enabled: bool = False
    reminder_loop_interval_minutes: int = 60

    # CORS
    cors_origins: str = "http://localhost:3000"

    # General
    debug: bool = True

    model_config = {"env_file": str(_ENV_FILE), "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list.

        In debug mode, returns ["*"] to allow any origin.
        """
        if self.debug:
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return cached Settings instance."""
    return Settings()
