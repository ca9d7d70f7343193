"""Application settings powered by ``pydantic-settings``."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, Literal, Sequence

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .. import __version__ as package_version

PROJECT_DIR = Path(__file__).resolve().parents[3]

PLACEHOLDER_JWT_SECRET = "change-me"

EnvironmentName = Literal["development", "test", "ci", "production"]

_ENVIRONMENT_ALIASES: dict[str, EnvironmentName] = {
    "development": "development",
    "dev": "development",
    "test": "test",
    "testing": "test",
    "ci": "ci",
    "production": "production",
    "prod": "production",
}

_ENVIRONMENT_PROFILES: dict[EnvironmentName, dict[str, Any]] = {
    "development": {
        "log_level": "DEBUG",
        "reload": True,
        "cookie_secure": False,
    },
    "test": {
        "log_level": "WARNING",
        "reload": False,
        "cookie_secure": False,
    },
    "ci": {
        "log_level": "INFO",
        "reload": False,
        "cookie_secure": False,
    },
    "production": {
        "log_level": "INFO",
        "reload": False,
        "cookie_secure": True,
    },
}


class Settings(BaseSettings):
    """Runtime configuration for the task board service."""

    model_config = SettingsConfigDict(
        env_prefix="TASKBOARD_",
        env_file=PROJECT_DIR / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    project_name: str = "Taskboard"
    environment: EnvironmentName = "development"
    api_prefix: str = ""
    version: str = package_version

    mongo_url: str = "mongodb://localhost:27017"
    mongo_database: str = "taskboard"

    cors_allow_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["http://localhost:5173"],
    )
    cors_allow_credentials: bool = True
    cors_allow_methods: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["*"])
    cors_allow_headers: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["*"])

    app_host: str = "0.0.0.0"
    app_port: int = 5000
    log_level: str = "INFO"
    reload: bool = True

    jwt_secret_key: str = PLACEHOLDER_JWT_SECRET
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = Field(default=60, ge=1)
    auth_cookie_name: str = "token"
    cookie_secure: bool = False
    password_hash_rounds: int = Field(default=10, ge=4, le=31)
    public_task_feed: bool = True

    @field_validator("environment", mode="before")
    @classmethod
    def _normalise_environment(cls, value: object) -> EnvironmentName:
        if isinstance(value, str):
            normalized = value.strip().lower()
        else:
            normalized = ""
        return _ENVIRONMENT_ALIASES.get(normalized, "development")

    @field_validator(
        "cors_allow_origins",
        "cors_allow_methods",
        "cors_allow_headers",
        mode="before",
    )
    @classmethod
    def _coerce_comma_separated(cls, value: object) -> list[str]:
        """Allow comma separated strings for CORS configuration."""

        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(value, Sequence):
            return [str(item) for item in value if str(item).strip()]
        return []

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_log_level(cls, value: object) -> str:
        if not isinstance(value, str):
            return "INFO"
        return value.upper()

    @model_validator(mode="after")
    def _apply_environment_profile(self) -> "Settings":
        profile = _ENVIRONMENT_PROFILES[self.environment]
        fields_set = set(self.model_fields_set)
        for field_name, value in profile.items():
            if field_name not in fields_set:
                setattr(self, field_name, value)
        if self.environment == "production" and self.jwt_secret_key == PLACEHOLDER_JWT_SECRET:
            raise ValueError("TASKBOARD_JWT_SECRET_KEY must be set in production.")
        return self

    @property
    def access_token_lifetime_seconds(self) -> int:
        return self.access_token_expire_minutes * 60


@lru_cache()
def get_settings() -> Settings:
    """Return a cached ``Settings`` instance."""

    return Settings()


__all__ = ["EnvironmentName", "PLACEHOLDER_JWT_SECRET", "Settings", "get_settings"]
