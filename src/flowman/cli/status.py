"""Status command: what is stored and whether Postman accepts it."""

from dataclasses import asdict

import click

from flowman.cli.common import console, get_auth_manager, print_json


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def status(as_json: bool):
    """Show authentication status.

    \b
    Displays:
    - Login status and the masked API key
    - Current workspace ID
    - Git repository used for sync
    - Postman account, when the API is reachable

    Example:
        flowman status
    """
    manager = get_auth_manager()
    auth = manager.get_auth_status()

    user = None
    if auth.authenticated:
        with console.status("[dim]Contacting Postman...[/dim]"):
            user = manager.get_user_info()

    if as_json:
        data = asdict(auth)
        data["user"] = asdict(user) if user is not None else None
        print_json(data)
        return

    console.print()
    console.print("[bold]flowman Status[/bold]")
    console.print()

    if not auth.authenticated:
        console.print("[yellow]Not logged in[/yellow]")
        console.print("[dim]Run 'flowman login' to authenticate[/dim]")
    else:
        console.print("[green]✓ Authenticated[/green]")
        console.print(f"  API key: {auth.api_key}")
        if user is not None:
            console.print(f"  User: {user.full_name or user.username or 'N/A'}")
            console.print(f"  Email: {user.email or 'N/A'}")
        else:
            console.print("  [yellow]Could not reach Postman to verify the key[/yellow]")

    console.print()
    if auth.workspace_id:
        console.print(f"Workspace ID: {auth.workspace_id}")
    else:
        console.print("Workspace ID: [yellow]not set[/yellow]")

    if auth.git_repo_path:
        console.print(f"Git repository: {auth.git_repo_path}")
    else:
        console.print("Git repository: [yellow]not set[/yellow]")
        console.print("[dim]Run 'flowman git add' to register one[/dim]")
    console.print()
