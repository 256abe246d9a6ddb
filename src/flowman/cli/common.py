"""Helpers shared by CLI commands."""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from typing import Any, Optional

import click
import pydantic
from rich.console import Console
from rich.panel import Panel

from flowman.auth.api import PostmanClient
from flowman.auth.credentials import CredentialStore
from flowman.auth.manager import AuthManager
from flowman.auth.validators import ensure_api_key, ensure_workspace_id
from flowman.config import FlowmanConfig, describe_config_error, load_config
from flowman.errors import AuthenticationRequiredError, ValidationError

console = Console()


def load_settings() -> FlowmanConfig:
    """Configuration from the environment, or a ClickException naming the bad variable."""
    try:
        return load_config()
    except pydantic.ValidationError as e:
        raise click.ClickException(f"Invalid configuration: {describe_config_error(e)}")


def get_auth_manager() -> AuthManager:
    """AuthManager for the current user's shell config and the Postman API."""
    load_settings()
    return AuthManager(credentials=CredentialStore(), client_factory=get_client)


def get_client(api_key: str) -> PostmanClient:
    load_settings()
    return PostmanClient(api_key)


def require_api_key(manager: AuthManager) -> str:
    """Stored API key, or a ClickException telling the user to log in."""
    try:
        return manager.require_authentication()
    except AuthenticationRequiredError as e:
        raise click.ClickException(str(e))


def note(body: str, title: str, style: str = "blue") -> None:
    """Print a titled panel."""
    console.print(Panel(body, title=title, title_align="left", border_style=style, expand=False))


def print_json(data: Any) -> None:
    """Print JSON output for scripts and agents."""
    if is_dataclass(data):
        data = asdict(data)
    click.echo(json.dumps(data, indent=2, default=str))


# =============================================================================
# Option callbacks
# =============================================================================


def api_key_value(value: str) -> str:
    """value_proc for click.prompt: re-prompts on malformed keys."""
    try:
        return ensure_api_key(value.strip())
    except ValidationError as e:
        raise click.BadParameter(str(e))


def validate_api_key_option(ctx: click.Context, param: click.Parameter, value: Optional[str]):
    if value is None:
        return None
    try:
        return ensure_api_key(value.strip())
    except ValidationError as e:
        raise click.BadParameter(str(e))


def validate_workspace_option(ctx: click.Context, param: click.Parameter, value: Optional[str]):
    if value is None:
        return None
    try:
        return ensure_workspace_id(value.strip())
    except ValidationError as e:
        raise click.BadParameter(str(e))
