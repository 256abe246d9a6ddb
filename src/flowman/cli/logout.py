"""Logout command: remove stored credentials."""

import click

from flowman.cli.common import console, get_auth_manager, note


@click.command()
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
def logout(yes: bool):
    """Logout from Postman.

    Removes POSTMAN_API_KEY and POSTMAN_WORKSPACE_ID from your shell
    config file. The git repository setting is kept.

    Example:
        flowman logout
    """
    manager = get_auth_manager()

    if not manager.is_authenticated():
        console.print("[yellow]Not logged in.[/yellow]")
        return

    status = manager.get_auth_status()
    note(
        f"API key: {status.api_key}\nWorkspace: {status.workspace_id or 'not set'}",
        "Current Session",
    )

    if not yes and not click.confirm("Are you sure you want to logout?", default=False):
        console.print("[dim]Logout cancelled.[/dim]")
        return

    manager.logout()
    if manager.is_authenticated():
        raise click.ClickException(
            "Credentials are still set. They may be exported by another file or your current shell."
        )

    console.print("[green]✓ Logged out successfully.[/green]")
