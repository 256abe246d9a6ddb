"""
Root pytest configuration for flowman.

Provides fixtures for CLI testing and an isolated home directory so tests
never touch the real shell config files.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from flowman.auth.credentials import CredentialStore
from flowman.shell import ConfigFileStore, ShellKind

VALID_API_KEY = "PMAK-0123456789abcdef0123456789"
VALID_WORKSPACE_ID = "1f0df51a-8658-4ee8-a2a1-d2567dfa09a9"
OTHER_WORKSPACE_ID = "6b1e3c52-0d4f-4a7e-9c2b-8e5f7a9d1c30"


# ============================================================================
# Shell Config Fixtures
# ============================================================================


@pytest.fixture
def fake_home(tmp_path: Path, monkeypatch) -> Path:
    """Temporary home directory with flowman-related env vars cleared."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.setenv("SHELL", "/bin/bash")
    for var in (
        "POSTMAN_API_KEY",
        "POSTMAN_WORKSPACE_ID",
        "FLOWMAN_GIT_REPO_PATH",
        "FLOWMAN_SHELL",
        "FLOWMAN_API_URL",
        "FLOWMAN_DEBUG",
    ):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def bash_store(fake_home: Path) -> ConfigFileStore:
    """ConfigFileStore targeting bash in the fake home, with an empty environment."""
    return ConfigFileStore(shell=ShellKind.BASH, home=fake_home, environ={})


@pytest.fixture
def credential_store(bash_store: ConfigFileStore) -> CredentialStore:
    return CredentialStore(store=bash_store)


# ============================================================================
# CLI Testing Fixtures
# ============================================================================


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click CLI runner for testing."""
    return CliRunner()


def invoke_cli(runner: CliRunner, cmd, args: list[str], **kwargs):
    """Run a flowman command. Unexpected exceptions propagate instead of
    being folded into the result; ClickException still exits normally."""
    return runner.invoke(cmd, args, catch_exceptions=False, **kwargs)


def _describe(result) -> str:
    return f"exit code {result.exit_code}\nOutput:\n{result.output}"


def assert_cli_success(result):
    if result.exit_code != 0:
        raise AssertionError(f"flowman command failed, {_describe(result)}")


def assert_cli_failure(result, expected_code: int | None = None):
    """Non-zero exit, optionally a specific one (1 for ClickException, 2 for usage errors)."""
    if result.exit_code == 0:
        raise AssertionError(f"flowman command succeeded, expected failure\nOutput:\n{result.output}")
    if expected_code is not None and result.exit_code != expected_code:
        raise AssertionError(f"expected exit code {expected_code}, got {_describe(result)}")


def assert_output_contains(result, text: str):
    if text not in result.output:
        raise AssertionError(f"{text!r} not in output:\n{result.output}")
