"""
Test fixtures for the CLI.

Commands run against a temporary home directory (see fake_home) with the
Postman API replaced by a MagicMock.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from flowman.auth.api import Collection, UserInfo, Workspace
from flowman.conftest import OTHER_WORKSPACE_ID, VALID_API_KEY, VALID_WORKSPACE_ID


@pytest.fixture
def postman(fake_home: Path, monkeypatch) -> MagicMock:
    """Patch the Postman client used by CLI commands.

    Returns the factory; the client handed out by `with factory(key)` is
    available as `.client`.
    """
    client = MagicMock()
    client.validate_api_key.return_value = True
    client.get_user_info.return_value = UserInfo(
        id="12345", username="jdoe", full_name="Jane Doe", email="jane@example.com"
    )
    client.list_workspaces.return_value = [
        Workspace(id=VALID_WORKSPACE_ID, name="Team APIs", type="team"),
        Workspace(id=OTHER_WORKSPACE_ID, name="Personal", type="personal"),
    ]
    client.list_collections.return_value = [
        Collection(id="c-1", name="Payments API", uid="12345-c-1"),
        Collection(id="c-2", name="Users API", uid="12345-c-2"),
    ]

    factory = MagicMock()
    factory.return_value.__enter__.return_value = client
    factory.client = client
    monkeypatch.setattr("flowman.cli.common.PostmanClient", factory)
    return factory


@pytest.fixture
def bashrc(fake_home: Path) -> Path:
    return fake_home / ".bashrc"


@pytest.fixture
def logged_in(bashrc: Path) -> Path:
    """A .bashrc that already holds credentials written by flowman."""
    bashrc.write_text(
        "# Postman API Key for flowman\n"
        f'export POSTMAN_API_KEY="{VALID_API_KEY}"\n'
        "\n"
        "# Postman Workspace ID for flowman\n"
        f'export POSTMAN_WORKSPACE_ID="{VALID_WORKSPACE_ID}"\n'
    )
    return bashrc
