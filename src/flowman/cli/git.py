"""Git commands: register the repository collections are synced into."""

from __future__ import annotations

from typing import Optional

import click

from flowman.auth.validators import check_repo_path
from flowman.cli.common import console, get_auth_manager


@click.group(name="git")
def git_group():
    """Git repository settings."""
    pass


@git_group.command(name="add")
@click.argument("path", required=False, type=click.Path(file_okay=False))
def add_cmd(path: Optional[str]):
    """Register the git repository used for sync.

    Stores the absolute path as FLOWMAN_GIT_REPO_PATH in your shell
    config file.

    \b
    Examples:
        flowman git add .
        flowman git add ~/code/api-collections
    """
    if path is None:
        path = click.prompt("Path to your git repository", default=".")

    ok, message = check_repo_path(path)
    if not ok:
        raise click.ClickException(message)

    credentials = get_auth_manager().credentials
    if not credentials.store_git_repo_path(path):
        raise click.ClickException("Failed to save the repository path to your shell config file.")

    console.print(f"[green]✓ Git repository set to {credentials.get_git_repo_path()}[/green]")
