"""Format validation for Postman credentials.

The check_* functions return (is_valid, message) so callers can surface the
reason; the is_valid_* wrappers are for boolean gates.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from flowman.errors import ValidationError

API_KEY_PREFIX = "PMAK-"
API_KEY_MIN_LENGTH = 20

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def check_api_key(value: Any) -> tuple[bool, str]:
    """Validate Postman API key format."""
    if not value or not isinstance(value, str):
        return False, "API key must be a non-empty string"
    if not value.startswith(API_KEY_PREFIX):
        return False, f'Invalid API key format. Postman API keys should start with "{API_KEY_PREFIX}"'
    if len(value) < API_KEY_MIN_LENGTH:
        return False, "API key appears to be too short"
    return True, ""


def check_workspace_id(value: Any) -> tuple[bool, str]:
    """Validate Postman workspace ID format (a UUID)."""
    if not value or not isinstance(value, str):
        return False, "Workspace ID must be a non-empty string"
    if not UUID_PATTERN.match(value):
        return False, "Invalid workspace ID format. Should be a valid UUID"
    return True, ""


def check_repo_path(value: Any) -> tuple[bool, str]:
    """Validate that a git repository path points at an existing directory."""
    if not value or not isinstance(value, (str, Path)) or not str(value).strip():
        return False, "Repository path is required"
    path = Path(value).expanduser()
    if not path.is_dir():
        return False, f"Directory not found: {path}"
    return True, ""


def is_valid_api_key(value: Any) -> bool:
    return check_api_key(value)[0]


def is_valid_workspace_id(value: Any) -> bool:
    return check_workspace_id(value)[0]


def ensure_api_key(value: Any) -> str:
    """Return the key, or raise ValidationError explaining what is wrong."""
    ok, message = check_api_key(value)
    if not ok:
        raise ValidationError(message)
    return value


def ensure_workspace_id(value: Any) -> str:
    """Return the workspace ID, or raise ValidationError explaining what is wrong."""
    ok, message = check_workspace_id(value)
    if not ok:
        raise ValidationError(message)
    return value
