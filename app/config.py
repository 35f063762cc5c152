"""Configuration settings for Finance Vision."""

import os
import secrets
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


def _get_bool_env(name: str, default: bool = False) -> bool:
    """Read a boolean env var ("1", "true", "yes", "y" are truthy)."""
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y"}


class Settings:
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./finance_vision.db")

    # Session tokens
    ACCESS_TOKEN_SECRET: str = os.getenv("ACCESS_TOKEN_SECRET", "")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "15"))
    REFRESH_TOKEN_SECRET: str = os.getenv("REFRESH_TOKEN_SECRET", "")
    REFRESH_TOKEN_EXPIRE_DAYS: int = int(os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", "10"))
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")

    # One-time tokens (email verification, password reset)
    TEMPORARY_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("TEMPORARY_TOKEN_EXPIRE_MINUTES", "20"))

    # Client
    CLIENT_URL: str = os.getenv("CLIENT_URL", "http://localhost:5173")
    CORS_ORIGINS: list[str] = [
        o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",") if o.strip()
    ]

    # Cookies
    COOKIE_DOMAIN: str | None = os.getenv("COOKIE_DOMAIN") or None
    COOKIE_SECURE: bool = _get_bool_env("COOKIE_SECURE", default=True)
    COOKIE_SAMESITE: str = os.getenv("COOKIE_SAMESITE", "lax")

    # Mail
    MAIL_BACKEND: str = os.getenv("MAIL_BACKEND", "console")  # console, smtp
    SMTP_HOST: str | None = os.getenv("SMTP_HOST")
    SMTP_PORT: int = int(os.getenv("SMTP_PORT", "587"))
    SMTP_USERNAME: str | None = os.getenv("SMTP_USERNAME")
    SMTP_PASSWORD: str | None = os.getenv("SMTP_PASSWORD")
    SMTP_FROM_EMAIL: str = os.getenv("SMTP_FROM_EMAIL", os.getenv("SMTP_USERNAME", ""))
    SMTP_FROM_NAME: str = os.getenv("SMTP_FROM_NAME", "Finance Vision")
    SMTP_USE_TLS: bool = _get_bool_env("SMTP_USE_TLS", default=True)
    SMTP_USE_SSL: bool = _get_bool_env("SMTP_USE_SSL", default=False)

    # Application
    APP_ENV: str = os.getenv("APP_ENV", "development")  # development, production
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    def __init__(self) -> None:
        # Unset secrets fall back to per-process random keys
        if not self.ACCESS_TOKEN_SECRET:
            self.ACCESS_TOKEN_SECRET = secrets.token_urlsafe(32)
            self._generated_access_secret = True
        if not self.REFRESH_TOKEN_SECRET:
            self.REFRESH_TOKEN_SECRET = secrets.token_urlsafe(32)
            self._generated_refresh_secret = True

    def validate(self) -> list[str]:
        """Validate settings and return list of warnings."""
        errors = []
        if getattr(self, "_generated_access_secret", False):
            errors.append("ACCESS_TOKEN_SECRET is not set - using auto-generated key (not persistent across restarts)")
        if getattr(self, "_generated_refresh_secret", False):
            errors.append("REFRESH_TOKEN_SECRET is not set - using auto-generated key (not persistent across restarts)")
        if self.MAIL_BACKEND == "smtp" and not self.SMTP_HOST:
            errors.append("MAIL_BACKEND is 'smtp' but SMTP_HOST is not set")
        if self.MAIL_BACKEND == "console" and self.APP_ENV == "production":
            errors.append("MAIL_BACKEND is 'console' in production - outgoing mail will be refused")
        if self.COOKIE_SAMESITE.lower() == "none" and not self.COOKIE_SECURE:
            errors.append("COOKIE_SAMESITE=none requires COOKIE_SECURE=true; browsers will drop the cookies")
        return errors


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
