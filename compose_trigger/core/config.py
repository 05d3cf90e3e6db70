"""Application settings loaded from environment with validation."""

import shlex
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Webhook settings from environment (immutable once built)."""

    model_config = SettingsConfigDict(
        env_prefix="COMPOSE_TRIGGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
    )

    # Projects
    project_base_dir: Path = Field(
        default=Path("/root/"),
        description="Directory where all projects are located",
    )
    compose_file_name: str = Field(
        default="docker-compose.yml",
        min_length=1,
        description="Compose definition file name inside each project directory",
    )
    compose_command: str = Field(
        default="docker-compose",
        min_length=1,
        description="Compose executable, e.g. 'docker-compose' or 'docker compose'",
    )

    # HTTP
    host: str = Field(default="0.0.0.0", min_length=1)
    port: int = Field(default=8080, ge=1, le=65535, description="Listening port")

    # Auth
    auth_enabled: bool = Field(
        default=True,
        description="Require 'Authorization: Bearer <token>' on update requests",
    )
    auth_token_file: Path = Field(
        default=Path("/root/.compose-trigger.token"),
        description="File where the auth token is read from or stored",
    )

    # Behaviour
    fail_on_command_error: bool = Field(
        default=False,
        description=(
            "Answer 500 when pull or up exits non-zero or cannot be spawned. "
            "Off by default: both commands run and the request answers 200."
        ),
    )

    # Logging
    log_level: LogLevel = Field(default="INFO")

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        u = (v or "INFO").upper()
        if u not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return u

    @field_validator("compose_command")
    @classmethod
    def validate_compose_command(cls, v: str) -> str:
        if not shlex.split(v):
            raise ValueError("compose_command must name an executable")
        return v

    @property
    def compose_argv(self) -> list[str]:
        """Compose command split into argv (supports the 'docker compose' plugin form)."""
        return shlex.split(self.compose_command)


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
