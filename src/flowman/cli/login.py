"""Login command: store and verify a Postman API key."""

from __future__ import annotations

from typing import Optional

import click

from flowman.cli.common import (
    api_key_value,
    console,
    get_auth_manager,
    note,
    validate_api_key_option,
    validate_workspace_option,
)

API_KEYS_URL = "https://go.postman.co/settings/me/api-keys"


@click.command()
@click.option(
    "--api-key",
    "-k",
    callback=validate_api_key_option,
    help="Postman API key (prompted for if omitted)",
)
@click.option(
    "--workspace",
    "-w",
    "workspace_id",
    callback=validate_workspace_option,
    help="Workspace ID to select after login",
)
@click.option("--force", "-f", is_flag=True, help="Re-authenticate without asking")
def login(api_key: Optional[str], workspace_id: Optional[str], force: bool):
    """Login to Postman with an API key.

    The key is checked against the Postman API and saved to your shell
    config file as POSTMAN_API_KEY. A rejected key is not kept.

    \b
    Examples:
        flowman login
        flowman login --api-key PMAK-... --workspace <workspace-id>
    """
    manager = get_auth_manager()

    console.print()
    console.print("[bold blue]Postman Authentication[/bold blue]")
    console.print()

    if manager.is_authenticated() and not force:
        console.print(f"[yellow]Already logged in[/yellow] (API key {manager.get_masked_api_key()})")
        if not click.confirm("Do you want to re-authenticate?", default=False):
            console.print("[dim]Login cancelled.[/dim]")
            return

    if api_key is None:
        console.print(f"[dim]Create an API key at {API_KEYS_URL}[/dim]")
        api_key = click.prompt("Postman API key", hide_input=True, value_proc=api_key_value)

    with console.status("[bold blue]Validating API key...[/bold blue]"):
        authenticated = manager.authenticate_with_api_key(api_key, workspace_id)

    if not authenticated:
        raise click.ClickException(
            "Authentication failed. The API key was rejected or could not be saved."
        )

    with console.status("[dim]Fetching account...[/dim]"):
        user = manager.get_user_info()

    lines = []
    if user is not None:
        lines.append(f"Name: {user.full_name or user.username or 'N/A'}")
        lines.append(f"Email: {user.email or 'N/A'}")
    lines.append(f"API key: {manager.get_masked_api_key()}")
    lines.append(f"Workspace: {manager.get_workspace_id() or 'not set'}")
    note("\n".join(lines), "Postman Account", style="green")

    console.print("[green]✓ Logged in to Postman[/green]")
    if not manager.get_workspace_id():
        console.print("[dim]Run 'flowman workspace switch' to choose a workspace[/dim]")
    console.print("[dim]Restart your shell or source its config file to export the variables[/dim]")
