"""Runtime configuration for the help-desk backend.

Values are read from the environment (a local `.env` file is loaded first
when present) into a `Settings` object. Modules import the shared `settings`
instance instead of calling `os.getenv` themselves.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Project root (two levels up from this file)
PROJECT_ROOT = Path(__file__).resolve().parents[1]


def _default_sqlite_url() -> str:
    db_path = PROJECT_ROOT / "helpdesk.db"
    return f"sqlite:///{db_path.as_posix()}"


class Settings(BaseSettings):
    database_url: str = _default_sqlite_url()

    # Auth
    jwt_secret: str = "change-this-secret-in-production"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    # HTTP
    public_base_url: str = "http://localhost:3333"
    # CORS_ORIGINS=http://localhost:5173,http://127.0.0.1:5173 or "*"
    cors_origins: Union[str, List[str]] = ["*"]
    rate_limit: str = "100/minute"

    log_level: str = "INFO"
    allow_seed: bool = False
    max_picture_bytes: int = 5 * 1024 * 1024

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _parse_cors_origins(cls, v):
        if isinstance(v, str):
            if v.strip() == "*":
                return ["*"]
            return [o.strip() for o in v.split(",") if o.strip()]
        return v

    @field_validator("public_base_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


settings = Settings()


def get_settings() -> Settings:
    """FastAPI dependency returning the process-wide settings."""
    return settings


__all__ = ["Settings", "settings", "get_settings", "PROJECT_ROOT"]
