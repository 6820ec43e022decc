"""
Configuration management for the Agro Koi store backend.

Loads settings from the environment (and .env) via pydantic-settings.
The Settings instance is handed to create_app() and reaches handlers through
the get_settings dependency; nothing below main.py reads os.environ.
"""
import logging
from functools import lru_cache
from typing import List

from fastapi import Request
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── Database ────────────────────────────────────────────────────
    database_url: str = "sqlite:///./data/agrokoi.db"

    # ── Application ─────────────────────────────────────────────────
    environment: str = "development"

    # ── Auth (JWT) ──────────────────────────────────────────────────
    jwt_secret: str = ""
    jwt_issuer: str = "agrokoi-api"
    jwt_access_ttl_minutes: int = 60 * 24

    # Registrations whose e-mail ends with this suffix get the ADMIN role.
    # Empty means nobody is promoted.
    admin_email: str = ""

    # ── Account tokens ──────────────────────────────────────────────
    password_reset_ttl_minutes: int = 10
    delete_token_ttl_minutes: int = 10

    # ── Xendit ──────────────────────────────────────────────────────
    xendit_webhook_token: str = ""

    # ── CORS ────────────────────────────────────────────────────────
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def async_database_url(self) -> str:
        """Convert sqlite:///... to sqlite+aiosqlite:///... for the async driver."""
        if self.database_url.startswith("sqlite:///"):
            return self.database_url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
        return self.database_url

    def validate_production_settings(self):
        """
        Fail fast on unsafe production settings, warn about them elsewhere.

        Called once from the app lifespan.
        """
        problems = []
        if "*" in self.cors_origins:
            problems.append("CORS_ORIGINS contains '*' (open access)")
        if not self.jwt_secret:
            problems.append("JWT_SECRET is not set (tokens cannot be issued)")
        if not self.xendit_webhook_token:
            problems.append("XENDIT_WEBHOOK_TOKEN is not set (payment webhooks will be rejected)")

        if self.environment == "production":
            if problems:
                raise ValueError("Unsafe production settings: " + "; ".join(problems))
            logger.info("✅ Production settings validated")
        else:
            for p in problems:
                logger.warning(f"⚠️  {p}")


@lru_cache
def load_settings() -> Settings:
    """Settings from the process environment, built once."""
    return Settings()


def get_settings(request: Request) -> Settings:
    """FastAPI dependency — the Settings the app was constructed with."""
    return request.app.state.settings
