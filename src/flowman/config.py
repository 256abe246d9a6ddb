"""
flowman configuration.

Settings come from environment variables (optionally loaded from a .env file
by the CLI). Nothing here is persisted: credentials live in the shell config
file, see flowman.shell.config_file.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any, ClassVar, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator


class FlowmanConfig(BaseModel):
    """flowman runtime configuration."""

    DEFAULT_API_URL: ClassVar[str] = "https://api.getpostman.com"
    DEFAULT_TIMEOUT: ClassVar[float] = 10.0

    # Maps field name -> environment variable(s), first match wins
    ENV_VARS: ClassVar[dict[str, tuple[str, ...]]] = {
        "API_URL": ("FLOWMAN_API_URL",),
        "TIMEOUT": ("FLOWMAN_TIMEOUT",),
        "SHELL": ("FLOWMAN_SHELL",),
        "DEBUG": ("FLOWMAN_DEBUG", "DEBUG"),
    }

    API_URL: str = Field(
        default=DEFAULT_API_URL,
        description="Base URL of the Postman API",
    )
    TIMEOUT: float = Field(
        default=DEFAULT_TIMEOUT,
        description="HTTP timeout in seconds for Postman API requests",
        gt=0,
        le=120,
    )
    SHELL: Optional[str] = Field(
        default=None,
        description="Force a shell (bash, zsh, fish, powershell) instead of detecting it",
    )
    DEBUG: bool = Field(
        default=False,
        description="Enable debug logging",
    )

    @field_validator("API_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("SHELL", mode="before")
    @classmethod
    def empty_shell_is_unset(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @field_validator("DEBUG", mode="before")
    @classmethod
    def validate_debug(cls, v: Any) -> bool:
        """
        Convert various string representations to boolean.

        Truthy values: "true", "1", "yes", "on" (case-insensitive)
        Falsy values: "false", "0", "no", "off", or any other string
        """
        if isinstance(v, bool):
            return v
        if v is None:
            return False
        return str(v).strip().lower() in ("true", "1", "yes", "on")


def load_config(environ: Mapping[str, str] | None = None) -> FlowmanConfig:
    """Build configuration from environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        FlowmanConfig with defaults for unset variables
    """
    env = os.environ if environ is None else environ
    values: dict[str, Any] = {}
    for field, names in FlowmanConfig.ENV_VARS.items():
        for name in names:
            if env.get(name):
                values[field] = env[name]
                break
    return FlowmanConfig(**values)


def shell_override(environ: Mapping[str, str] | None = None) -> Optional[str]:
    """FLOWMAN_SHELL on its own, without validating the other settings."""
    env = os.environ if environ is None else environ
    for name in FlowmanConfig.ENV_VARS["SHELL"]:
        value = (env.get(name) or "").strip()
        if value:
            return value
    return None


def describe_config_error(error: ValidationError) -> str:
    """One-line summary of a config validation error, naming the environment variables."""
    parts = []
    for err in error.errors():
        field = str(err["loc"][0]) if err.get("loc") else ""
        env_name = FlowmanConfig.ENV_VARS.get(field, (field,))[0]
        parts.append(f"{env_name}={err.get('input')!r}: {err['msg']}")
    return "; ".join(parts)
