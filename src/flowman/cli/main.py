"""flowman CLI - Main command-line interface.

Commands:
- login, logout, status: Postman authentication
- workspace: List and switch Postman workspaces
- collection: List collections in a workspace
- git: Register the git repository collections are synced into

Command aliases (typo tolerance):
- st -> status, ws -> workspace, col -> collection
"""

import click
from dotenv import load_dotenv

load_dotenv()

from flowman.cli.common import load_settings  # noqa: E402
from flowman.utils.logging import configure_logging  # noqa: E402


class AliasedLazyGroup(click.Group):
    """A Click group with lazy loading and command aliases."""

    # Maps alias -> canonical command name
    ALIASES: dict[str, str] = {
        "st": "status",
        "stat": "status",
        "ws": "workspace",
        "workspaces": "workspace",
        "col": "collection",
        "collections": "collection",
        "signin": "login",
        "signout": "logout",
    }

    def __init__(self, *args, lazy_subcommands=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.lazy_subcommands = lazy_subcommands or {}
        self._loaded_commands = {}

    def list_commands(self, ctx):
        lazy = list(self.lazy_subcommands.keys())
        regular = list(self.commands.keys())
        return sorted(set(lazy + regular))

    def get_command(self, ctx, name):
        name = self.ALIASES.get(name, name)

        if name in self.commands:
            return self.commands[name]

        if name in self.lazy_subcommands:
            if name not in self._loaded_commands:
                module_path, cmd_name = self.lazy_subcommands[name]
                module = __import__(module_path, fromlist=[cmd_name])
                self._loaded_commands[name] = getattr(module, cmd_name)
            return self._loaded_commands[name]
        return None


@click.group(
    cls=AliasedLazyGroup,
    lazy_subcommands={
        "login": ("flowman.cli.login", "login"),
        "logout": ("flowman.cli.logout", "logout"),
        "status": ("flowman.cli.status", "status"),
        "workspace": ("flowman.cli.workspace", "workspace_group"),
        "collection": ("flowman.cli.collection", "collection_group"),
        "git": ("flowman.cli.git", "git_group"),
    },
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.version_option(package_name="flowman-cli", prog_name="flowman")
@click.pass_context
def main(ctx, verbose: bool):
    """
    flowman - Postman collections from the command line.

    Credentials are kept as environment variables in your shell config
    file (~/.bashrc, ~/.zshrc, fish config or PowerShell profile).

    \b
    Getting started:
      flowman login
      flowman workspace switch
      flowman status
    """
    ctx.ensure_object(dict)
    configure_logging(verbose=verbose or load_settings().DEBUG)


if __name__ == "__main__":
    main()
