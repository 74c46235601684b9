"""Centralized configuration loaded from environment variables."""

from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application-wide settings sourced from .env / environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── General ──────────────────────────────────────────────────────
    acadcal_env: str = "development"
    acadcal_log_level: str = "INFO"

    # ── API Server ───────────────────────────────────────────────────
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: str = "*"

    # ── Academic Portal ──────────────────────────────────────────────
    portal_base_url: str = "https://academia.srmist.edu.in"
    portal_calendar_path: str = (
        "/srm_university/academia-academic-services/page/Academic_Planner_2025_26_ODD"
    )
    portal_timeout_seconds: float = Field(default=30.0, gt=0)
    portal_max_attempts: int = Field(default=3, ge=1)
    portal_retry_backoff_seconds: float = Field(default=1.0, ge=0)

    # ── Locale ───────────────────────────────────────────────────────
    institution_timezone: str = "Asia/Kolkata"

    @field_validator("portal_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    # ── Derived ──────────────────────────────────────────────────────
    @property
    def calendar_url(self) -> str:
        """Full URL of the academic planner page."""
        path = self.portal_calendar_path
        if not path.startswith("/"):
            path = "/" + path
        return f"{self.portal_base_url}{path}"

    @property
    def allowed_origins(self) -> list[str]:
        """Parse comma-separated CORS origins."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the singleton Settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
