"""Per-shell line syntax for persisted environment variables.

Each shell is one ShellFormat row: a regex prefix that anchors the keyword and
the variable name, and a template that serializes the assignment. Locating,
extracting and removing lines are driven entirely by this table.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from flowman.errors import ValidationError
from flowman.shell.detector import ShellKind

VARIABLE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Double-quoted, single-quoted or bare value, then optional trailing comment
_VALUE = r"""(?:"(?P<dq>[^"\n]*)"|'(?P<sq>[^'\n]*)'|(?P<bare>[^\s"'#]+))[ \t]*(?:#[^\r\n]*)?\r?$"""


def check_variable_name(name: str) -> str:
    """Return name unchanged, or raise ValidationError if it is not a shell identifier."""
    if not isinstance(name, str) or not VARIABLE_NAME.match(name):
        raise ValidationError(f"Invalid environment variable name: {name!r}")
    return name


@dataclass(frozen=True)
class ShellFormat:
    """Line syntax for one family of shells."""

    syntax: str
    prefix: str  # regex, {name} is replaced by the escaped variable name
    line: str  # str.format template with {name} and {value}

    def _prefix(self, name: str) -> str:
        return r"^[ \t]*" + self.prefix.replace("{name}", re.escape(check_variable_name(name)))

    def serialize(self, name: str, value: str) -> str:
        check_variable_name(name)
        return self.line.format(name=name, value=value)

    def locate_pattern(self, name: str) -> re.Pattern[str]:
        """Pattern matching the variable's line and capturing its value."""
        return re.compile(self._prefix(name) + _VALUE, re.MULTILINE)

    def line_pattern(self, name: str) -> re.Pattern[str]:
        """Pattern matching the variable's whole line, whatever the value looks like."""
        return re.compile(self._prefix(name) + r".*$", re.MULTILINE)

    def extract(self, text: str, name: str) -> Optional[str]:
        """Value of the first assignment to name in text, or None."""
        match = self.locate_pattern(name).search(text)
        if match is None:
            return None
        for group in ("dq", "sq", "bare"):
            if match.group(group) is not None:
                return match.group(group)
        return None

    def matches_line(self, line: str, name: str) -> bool:
        return self.line_pattern(name).match(line.rstrip("\r\n")) is not None


POSIX = ShellFormat(
    syntax="export",
    prefix=r"export[ \t]+{name}=",
    line='export {name}="{value}"',
)
FISH = ShellFormat(
    syntax="set -gx",
    prefix=r"set[ \t]+-gx[ \t]+{name}[ \t]+",
    line='set -gx {name} "{value}"',
)
POWERSHELL = ShellFormat(
    syntax="$env:",
    prefix=r"\$env:{name}[ \t]*=[ \t]*",
    line='$env:{name} = "{value}"',
)

SHELL_FORMATS: dict[ShellKind, ShellFormat] = {
    ShellKind.BASH: POSIX,
    ShellKind.ZSH: POSIX,
    ShellKind.FISH: FISH,
    ShellKind.POWERSHELL: POWERSHELL,
    ShellKind.UNKNOWN: POSIX,
}


def format_for(shell: ShellKind) -> ShellFormat:
    """Line format for a shell; shells without one use POSIX export syntax."""
    return SHELL_FORMATS.get(shell, POSIX)
