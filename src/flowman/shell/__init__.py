"""Shell detection and persistent environment variables.

Public API:
- ShellKind, detect_shell, config_paths, resolve_config_path: locate the shell config file
- supports_persistence, export_syntax: per-shell capabilities
- ShellFormat, format_for: per-shell line syntax table
- ConfigFileStore: read/write/remove variables inside the shell config file
"""

from flowman.shell.config_file import ConfigFileStore
from flowman.shell.detector import (
    ShellKind,
    config_paths,
    detect_shell,
    export_syntax,
    resolve_config_path,
    supports_persistence,
)
from flowman.shell.formats import ShellFormat, format_for

__all__ = [
    "ShellKind",
    "detect_shell",
    "config_paths",
    "resolve_config_path",
    "supports_persistence",
    "export_syntax",
    "ShellFormat",
    "format_for",
    "ConfigFileStore",
]
