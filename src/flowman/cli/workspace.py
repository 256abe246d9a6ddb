"""Workspace commands: list and switch Postman workspaces."""

from __future__ import annotations

from typing import Optional

import click
from rich.table import Table

from flowman.cli.common import (
    console,
    get_auth_manager,
    get_client,
    require_api_key,
    validate_workspace_option,
)


@click.group(name="workspace")
def workspace_group():
    """Postman workspaces.

    \b
    Examples:
        flowman workspace ls
        flowman workspace switch
        flowman workspace switch 1f0df51a-8658-4ee8-a2a1-d2567dfa09a9
    """
    pass


@workspace_group.command(name="ls")
def list_cmd():
    """List the workspaces your API key can see."""
    manager = get_auth_manager()
    api_key = require_api_key(manager)
    current = manager.get_workspace_id()

    with console.status("[bold blue]Fetching workspaces...[/bold blue]"):
        with get_client(api_key) as client:
            workspaces = client.list_workspaces()

    if not workspaces:
        console.print("[yellow]No workspaces found.[/yellow]")
        return

    table = Table(title="Workspaces")
    table.add_column("", width=1)
    table.add_column("Name", style="cyan")
    table.add_column("ID", style="dim")
    table.add_column("Type")
    for ws in workspaces:
        table.add_row("*" if ws.id == current else "", ws.name, ws.id, ws.type or "")
    console.print(table)


@workspace_group.command(name="switch")
@click.argument("workspace_id", required=False, callback=validate_workspace_option)
def switch_cmd(workspace_id: Optional[str]):
    """Set the current workspace.

    Without WORKSPACE_ID, pick one from a numbered list.
    """
    manager = get_auth_manager()
    api_key = require_api_key(manager)

    with console.status("[bold blue]Fetching workspaces...[/bold blue]"):
        with get_client(api_key) as client:
            workspaces = client.list_workspaces()

    if workspace_id is None:
        if not workspaces:
            raise click.ClickException("No workspaces found for this API key.")
        for index, ws in enumerate(workspaces, start=1):
            console.print(f"  {index}. {ws.name} [dim]({ws.id})[/dim]")
        choice = click.prompt(
            "Select a workspace", type=click.IntRange(1, len(workspaces))
        )
        selected = workspaces[choice - 1]
    else:
        selected = next((ws for ws in workspaces if ws.id == workspace_id), None)
        if selected is None:
            raise click.ClickException(f"Workspace {workspace_id} not found.")

    if not manager.set_current_workspace(selected.id):
        raise click.ClickException("Failed to save the workspace to your shell config file.")

    console.print(f"[green]✓ Switched to workspace {selected.name}[/green]")
