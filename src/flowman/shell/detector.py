"""Detect the user's interactive shell and where its config file lives."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from enum import Enum
from pathlib import Path, PureWindowsPath
from typing import Optional

logger = logging.getLogger(__name__)


class ShellKind(str, Enum):
    """Shells flowman knows how to persist variables for."""

    BASH = "bash"
    ZSH = "zsh"
    FISH = "fish"
    POWERSHELL = "powershell"
    CMD = "cmd"
    UNKNOWN = "unknown"


# Executable name -> shell. Anything missing falls back to UNKNOWN (~/.profile).
SHELL_ALIASES: dict[str, ShellKind] = {
    "bash": ShellKind.BASH,
    "zsh": ShellKind.ZSH,
    "fish": ShellKind.FISH,
    "pwsh": ShellKind.POWERSHELL,
    "powershell": ShellKind.POWERSHELL,
    "cmd": ShellKind.CMD,
}

PLATFORM_DEFAULTS: dict[str, ShellKind] = {
    "win32": ShellKind.CMD,
    "darwin": ShellKind.ZSH,  # macOS default since Catalina
}

# Candidate config files relative to the home directory, preferred first
CONFIG_FILES: dict[ShellKind, tuple[str, ...]] = {
    ShellKind.BASH: (".bashrc", ".bash_profile", ".profile"),
    ShellKind.ZSH: (".zshrc", ".zprofile", ".profile"),
    ShellKind.FISH: (".config/fish/config.fish",),
    ShellKind.POWERSHELL: ("Documents/PowerShell/profile.ps1",),
    ShellKind.CMD: (),
    ShellKind.UNKNOWN: (".profile",),
}

UNSUPPORTED_SHELLS = frozenset({ShellKind.CMD})


def shell_from_name(name: str) -> ShellKind:
    """Map a shell executable name or path to a ShellKind.

    Accepts "/bin/zsh", "C:\\Program Files\\PowerShell\\7\\pwsh.exe", "fish", ...
    """
    base = PureWindowsPath(name.strip()).name if "\\" in name else Path(name.strip()).name
    base = base.lower()
    if base.endswith(".exe"):
        base = base[: -len(".exe")]
    try:
        return ShellKind(base)
    except ValueError:
        return SHELL_ALIASES.get(base, ShellKind.UNKNOWN)


def detect_shell(
    environ: Optional[Mapping[str, str]] = None,
    platform: Optional[str] = None,
    override: Optional[str] = None,
) -> ShellKind:
    """Detect the current shell. Never raises.

    Order: explicit override (FLOWMAN_SHELL), then $SHELL, then a per-platform default.
    """
    env = os.environ if environ is None else environ

    if override:
        return shell_from_name(override)

    shell_path = env.get("SHELL")
    if shell_path:
        return shell_from_name(shell_path)

    platform = platform or sys.platform
    shell = PLATFORM_DEFAULTS.get(platform, ShellKind.BASH)
    logger.debug(f"SHELL not set, using {shell.value} default for {platform}")
    return shell


def config_paths(shell: ShellKind, home: Optional[Path] = None) -> list[Path]:
    """All candidate config files for a shell, preferred first."""
    home = Path(home) if home is not None else Path.home()
    return [home / rel for rel in CONFIG_FILES.get(shell, CONFIG_FILES[ShellKind.UNKNOWN])]


def resolve_config_path(shell: ShellKind, home: Optional[Path] = None) -> Optional[Path]:
    """Config file to write to: first existing candidate, else the primary one.

    Returns None for shells without a config file convention.
    """
    candidates = config_paths(shell, home)
    for path in candidates:
        if path.exists():
            return path
    return candidates[0] if candidates else None


def supports_persistence(shell: ShellKind) -> bool:
    return shell not in UNSUPPORTED_SHELLS


def export_syntax(shell: ShellKind) -> str:
    """Keyword the shell uses to set a variable, e.g. "export" or "set -gx"."""
    if shell == ShellKind.CMD:
        return "set"
    from flowman.shell.formats import format_for

    return format_for(shell).syntax
