"""Persistent environment variables stored in the user's shell config file.

Variables are written as a two-line block appended to the file:

    # Postman API Key for flowman
    export POSTMAN_API_KEY="PMAK-..."

Everything else in the file is left byte-for-byte intact. Every change is a
whole-file read-modify-write with no locking; concurrent edits of the same
file race with last-write-wins.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Optional

from flowman.config import shell_override
from flowman.errors import StorageError
from flowman.shell.detector import (
    ShellKind,
    config_paths,
    detect_shell,
    resolve_config_path,
    supports_persistence,
)
from flowman.shell.formats import check_variable_name, format_for

logger = logging.getLogger(__name__)


class ConfigFileStore:
    """
    Read, write and remove named variables in a shell config file.

    Lookups go through an in-memory cache first (values written or removed by
    this instance), then the process environment, then the candidate config
    files in preference order. The process environment is never modified.

    Usage:
        store = ConfigFileStore()
        store.write("POSTMAN_API_KEY", "PMAK-...", comment="Postman API Key for flowman")
        store.read("POSTMAN_API_KEY")
    """

    DEFAULT_COMMENT = "Added by flowman"

    def __init__(
        self,
        shell: Optional[ShellKind] = None,
        home: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
        marker: str = "flowman",
    ):
        """
        Args:
            shell: Shell to target. Detected from the environment if omitted.
            home: Home directory holding the config files (defaults to ~).
            environ: Environment consulted on reads (defaults to os.environ).
            marker: Word identifying comment lines written by this tool.
        """
        self.environ = os.environ if environ is None else environ
        if shell is None:
            shell = detect_shell(self.environ, override=shell_override(self.environ))
        self.shell = shell
        self.home = Path(home) if home is not None else Path.home()
        self.marker = marker
        # "# ... for flowman", "# ... by flowman" or "# ... (flowman)"
        word = re.escape(marker)
        self._marker_comment = re.compile(
            rf"^[ \t]*#.*(?:\b(?:for|by)[ \t]+{word}\b|\({word}\)[ \t]*$)",
            re.IGNORECASE,
        )
        self.format = format_for(shell)
        self._cache: dict[str, Optional[str]] = {}

    @property
    def paths(self) -> list[Path]:
        """Candidate config files, preferred first."""
        return config_paths(self.shell, self.home)

    @property
    def target_path(self) -> Optional[Path]:
        """Config file writes go to."""
        return resolve_config_path(self.shell, self.home)

    # =========================================================================
    # Public API
    # =========================================================================

    def read(self, name: str) -> Optional[str]:
        """Current value of a variable, or None if it is not set anywhere."""
        check_variable_name(name)

        if name in self._cache:
            return self._cache[name]

        value = self.environ.get(name)
        if value:
            return value

        for path in self.paths:
            if not path.is_file():
                continue
            try:
                text = self._read_text(path)
            except StorageError as e:
                logger.debug(f"Skipping unreadable config file: {e}")
                continue
            value = self.format.extract(text, name)
            if value:
                return value

        return None

    def exists(self, name: str) -> bool:
        return self.read(name) is not None

    def write(
        self,
        name: str,
        value: str,
        comment: Optional[str] = None,
        overwrite: bool = True,
    ) -> bool:
        """
        Persist a variable in the shell config file.

        An existing assignment is removed and the new block is appended at the
        end of the file. With overwrite=False an existing assignment is kept
        and the call still succeeds.

        Returns:
            True if the variable is stored, False on any failure (logged)
        """
        check_variable_name(name)

        if not supports_persistence(self.shell):
            logger.warning(
                f"Shell {self.shell.value} doesn't support persistent environment variables"
            )
            return False

        if any(ch in value for ch in ('"', "\n", "\r")):
            logger.error(f"Refusing to store {name}: value contains a quote or line break")
            return False

        path = self.target_path
        try:
            text = self._read_text(path) if path.exists() else ""
            stripped, removed = self._strip(text, name)

            if removed and not overwrite:
                logger.info(f"Environment variable {name} already exists in {path}")
                return True

            new_text = self._append(stripped, name, value, comment or self.DEFAULT_COMMENT)
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StorageError(f"Cannot create {path.parent}: {e}") from e
            self._write_text(path, new_text)
        except StorageError as e:
            logger.error(f"Error writing {name} to config file: {e}")
            return False

        self._cache[name] = value
        logger.info(f"Environment variable {name} written to {path}")
        return True

    def remove(self, name: str) -> bool:
        """
        Remove a variable from every candidate config file.

        Assignments are removed from each candidate read() consults, not only
        from target_path, including exports the user wrote by hand (e.g. in
        ~/.profile). Removals outside target_path are logged per file.
        Missing files and missing variables are not errors.

        Returns:
            True if at least one line was removed, False otherwise
        """
        check_variable_name(name)

        removed = 0
        failed = False
        target = self.target_path
        for path in self.paths:
            if not path.is_file():
                continue
            try:
                text = self._read_text(path)
                new_text, count = self._strip(text, name)
                if count:
                    self._write_text(path, new_text)
                    removed += count
                    if path == target:
                        logger.info(f"Environment variable {name} removed from {path}")
                    else:
                        logger.info(
                            f"Environment variable {name} also removed from {path} "
                            f"(flowman writes to {target})"
                        )
            except StorageError as e:
                failed = True
                logger.error(f"Error removing {name} from config file: {e}")

        if not failed:
            self._cache[name] = None
        if not removed:
            logger.info(f"Environment variable {name} not found in config files")
        return removed > 0

    # =========================================================================
    # Text manipulation
    # =========================================================================

    def _is_marker_comment(self, line: str) -> bool:
        """True for comment lines in one of the shapes _append writes."""
        return self._marker_comment.match(line.rstrip("\r\n")) is not None

    def _strip(self, text: str, name: str) -> tuple[str, int]:
        """Remove every assignment to name (and the marker comment above it).

        Blank-line runs left behind at a removal point are collapsed to a
        single blank line; the rest of the text is untouched.
        """
        kept: list[str] = []
        seams: list[int] = []
        for line in text.splitlines(keepends=True):
            if self.format.matches_line(line, name):
                if kept and self._is_marker_comment(kept[-1]):
                    kept.pop()
                seams.append(len(kept))
                continue
            kept.append(line)

        if not seams:
            return text, 0

        for seam in reversed(seams):
            if seam >= len(kept):
                # Block was at the end of the file: drop its separator line(s)
                while kept and not kept[-1].strip():
                    kept.pop()
                continue
            if seam == 0:
                while kept and not kept[0].strip():
                    del kept[0]
                continue
            while 0 < seam < len(kept) and not kept[seam - 1].strip() and not kept[seam].strip():
                del kept[seam]

        return "".join(kept), len(seams)

    def _append(self, text: str, name: str, value: str, comment: str) -> str:
        comment = " ".join(comment.split())
        if not self._is_marker_comment(f"# {comment}"):
            comment = f"{comment} ({self.marker})"

        if text and not text.endswith("\n"):
            text += "\n"
        if text and not text.endswith("\n\n"):
            text += "\n"
        return text + f"# {comment}\n{self.format.serialize(name, value)}\n"

    # =========================================================================
    # File I/O
    # =========================================================================

    @staticmethod
    def _read_text(path: Path) -> str:
        try:
            with open(path, encoding="utf-8", newline="") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Cannot read {path}: {e}") from e

    @staticmethod
    def _write_text(path: Path, text: str) -> None:
        try:
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(text)
        except OSError as e:
            raise StorageError(f"Cannot write {path}: {e}") from e
