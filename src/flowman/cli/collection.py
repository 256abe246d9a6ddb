"""Collection commands."""

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


@click.group(name="collection")
def collection_group():
    """Postman collections."""
    pass


@collection_group.command(name="ls")
@click.option(
    "--workspace",
    "-w",
    "workspace_id",
    callback=validate_workspace_option,
    help="Workspace ID (defaults to the current workspace)",
)
def list_cmd(workspace_id: Optional[str]):
    """List collections in a workspace.

    \b
    Examples:
        flowman collection ls
        flowman col ls --workspace <workspace-id>
    """
    manager = get_auth_manager()
    api_key = require_api_key(manager)
    workspace_id = workspace_id or manager.get_workspace_id()

    with console.status("[bold blue]Fetching collections...[/bold blue]"):
        with get_client(api_key) as client:
            collections = client.list_collections(workspace_id)

    if not collections:
        console.print("[yellow]No collections found.[/yellow]")
        return

    table = Table(title="Collections")
    table.add_column("Name", style="cyan")
    table.add_column("ID", style="dim")
    for col in collections:
        table.add_row(col.name, col.id)
    console.print(table)
