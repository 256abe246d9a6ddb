"""Tests for ConfigFileStore using real files in a temporary home."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from flowman.shell.config_file import ConfigFileStore
from flowman.shell.detector import ShellKind

PERSISTENT_SHELLS = [ShellKind.BASH, ShellKind.ZSH, ShellKind.FISH, ShellKind.POWERSHELL, ShellKind.UNKNOWN]


def make_store(home: Path, shell: ShellKind, environ: dict | None = None) -> ConfigFileStore:
    return ConfigFileStore(shell=shell, home=home, environ=environ if environ is not None else {})


class TestWriteAndRead:
    """Test write followed by read across shells."""

    @pytest.mark.parametrize("shell", PERSISTENT_SHELLS)
    def test_value_with_spaces_survives_fresh_store(self, fake_home: Path, shell: ShellKind):
        store = make_store(fake_home, shell)
        assert store.write("API_KEY", "value with spaces") is True

        # A new instance has an empty cache and must read from the file
        assert make_store(fake_home, shell).read("API_KEY") == "value with spaces"

    def test_creates_file_and_parent_dirs(self, fake_home: Path):
        store = make_store(fake_home, ShellKind.FISH)
        assert store.write("API_KEY", "abc") is True

        config = fake_home / ".config" / "fish" / "config.fish"
        assert config.read_text() == '# Added by flowman\nset -gx API_KEY "abc"\n'

    def test_appends_block_after_existing_content(self, fake_home: Path):
        bashrc = fake_home / ".bashrc"
        bashrc.write_text("alias ll='ls -l'")

        make_store(fake_home, ShellKind.BASH).write("API_KEY", "abc", comment="Postman API Key for flowman")

        assert bashrc.read_text() == (
            "alias ll='ls -l'\n"
            "\n"
            "# Postman API Key for flowman\n"
            'export API_KEY="abc"\n'
        )

    def test_comment_without_marker_gets_marker(self, fake_home: Path):
        make_store(fake_home, ShellKind.BASH).write("API_KEY", "abc", comment="My key")
        assert "# My key (flowman)\n" in (fake_home / ".bashrc").read_text()

    def test_writes_to_first_existing_candidate(self, fake_home: Path):
        profile = fake_home / ".bash_profile"
        profile.write_text("# existing\n")

        make_store(fake_home, ShellKind.BASH).write("API_KEY", "abc")

        assert not (fake_home / ".bashrc").exists()
        assert 'export API_KEY="abc"' in profile.read_text()

    def test_write_updates_cache(self, fake_home: Path):
        store = make_store(fake_home, ShellKind.BASH, environ={"API_KEY": "from-env"})
        store.write("API_KEY", "new")
        assert store.read("API_KEY") == "new"

    @pytest.mark.parametrize("value", ['has "quote"', "two\nlines"])
    def test_rejects_unsafe_values(self, fake_home: Path, value: str):
        store = make_store(fake_home, ShellKind.BASH)
        assert store.write("API_KEY", value) is False
        assert not (fake_home / ".bashrc").exists()

    def test_cmd_cannot_persist(self, fake_home: Path):
        store = make_store(fake_home, ShellKind.CMD)
        assert store.write("API_KEY", "abc") is False
        assert store.read("API_KEY") is None


class TestOverwrite:
    """Test updating existing assignments."""

    def test_same_value_twice_leaves_one_line(self, fake_home: Path):
        store = make_store(fake_home, ShellKind.BASH)
        store.write("API_KEY", "abc")
        store.write("API_KEY", "abc")

        text = (fake_home / ".bashrc").read_text()
        assert text.count("export API_KEY=") == 1
        assert text.count("# Added by flowman") == 1
        assert make_store(fake_home, ShellKind.BASH).read("API_KEY") == "abc"

    def test_update_replaces_value(self, fake_home: Path):
        store = make_store(fake_home, ShellKind.ZSH)
        store.write("API_KEY", "a")
        store.write("API_KEY", "b")

        text = (fake_home / ".zshrc").read_text()
        assert text.count("export API_KEY=") == 1
        assert 'export API_KEY="b"' in text
        assert make_store(fake_home, ShellKind.ZSH).read("API_KEY") == "b"

    def test_overwrite_false_keeps_existing(self, fake_home: Path):
        store = make_store(fake_home, ShellKind.BASH)
        store.write("API_KEY", "a")
        before = (fake_home / ".bashrc").read_text()

        assert store.write("API_KEY", "b", overwrite=False) is True
        assert (fake_home / ".bashrc").read_text() == before

    def test_prefix_names_are_isolated(self, fake_home: Path):
        bashrc = fake_home / ".bashrc"
        bashrc.write_text('export API_KEY_SECONDARY="second"\n')

        store = make_store(fake_home, ShellKind.BASH)
        store.write("API_KEY", "one")
        store.write("API_KEY", "two")

        fresh = make_store(fake_home, ShellKind.BASH)
        assert fresh.read("API_KEY") == "two"
        assert fresh.read("API_KEY_SECONDARY") == "second"
        assert bashrc.read_text().startswith('export API_KEY_SECONDARY="second"\n')

    def test_user_content_around_block_is_preserved(self, fake_home: Path):
        bashrc = fake_home / ".bashrc"
        user_content = "# top\n\n\n\nexport PATH=\"$HOME/bin:$PATH\"\n"
        bashrc.write_text(user_content)

        store = make_store(fake_home, ShellKind.BASH)
        store.write("API_KEY", "a")
        store.write("API_KEY", "b")
        store.remove("API_KEY")

        # The user's own triple blank line stays as written
        assert bashrc.read_text() == user_content


class TestRemove:
    """Test removing assignments."""

    def test_remove_after_write(self, fake_home: Path):
        bashrc = fake_home / ".bashrc"
        bashrc.write_text("alias ll='ls -l'\n")
        store = make_store(fake_home, ShellKind.BASH)
        store.write("API_KEY", "abc")

        assert store.remove("API_KEY") is True
        assert store.read("API_KEY") is None
        assert make_store(fake_home, ShellKind.BASH).read("API_KEY") is None
        assert bashrc.read_text() == "alias ll='ls -l'\n"

    def test_remove_never_written(self, fake_home: Path):
        (fake_home / ".bashrc").write_text("alias ll='ls -l'\n")
        store = make_store(fake_home, ShellKind.BASH)
        assert store.remove("API_KEY") is False
        assert (fake_home / ".bashrc").read_text() == "alias ll='ls -l'\n"

    def test_remove_without_any_file(self, fake_home: Path):
        assert make_store(fake_home, ShellKind.BASH).remove("API_KEY") is False
        assert not (fake_home / ".bashrc").exists()

    def test_remove_collapses_blank_lines_in_middle(self, fake_home: Path):
        bashrc = fake_home / ".bashrc"
        bashrc.write_text('a\n\n# Added by flowman\nexport API_KEY="x"\n\nb\n')

        make_store(fake_home, ShellKind.BASH).remove("API_KEY")

        assert bashrc.read_text() == "a\n\nb\n"

    def test_remove_keeps_other_variables(self, fake_home: Path):
        bashrc = fake_home / ".bashrc"
        bashrc.write_text('export API_KEY="x"\nexport API_KEY_SECONDARY="y"\n')

        make_store(fake_home, ShellKind.BASH).remove("API_KEY")

        assert bashrc.read_text() == 'export API_KEY_SECONDARY="y"\n'

    def test_remove_from_every_candidate(self, fake_home: Path):
        (fake_home / ".bashrc").write_text('export API_KEY="x"\n')
        (fake_home / ".profile").write_text('export API_KEY="y"\n')

        store = make_store(fake_home, ShellKind.BASH)
        assert store.remove("API_KEY") is True

        assert make_store(fake_home, ShellKind.BASH).read("API_KEY") is None

    def test_remove_hides_inherited_environment_value(self, fake_home: Path):
        store = make_store(fake_home, ShellKind.BASH, environ={"API_KEY": "exported"})
        assert store.read("API_KEY") == "exported"

        store.remove("API_KEY")

        assert store.read("API_KEY") is None

    @pytest.mark.parametrize("shell", [ShellKind.FISH, ShellKind.POWERSHELL])
    def test_remove_non_posix(self, fake_home: Path, shell: ShellKind):
        store = make_store(fake_home, shell)
        store.write("API_KEY", "abc")
        assert store.remove("API_KEY") is True
        assert store.target_path.read_text() == ""


class TestRead:
    """Test lookup order."""

    def test_environment_before_files(self, fake_home: Path):
        (fake_home / ".bashrc").write_text('export API_KEY="file"\n')
        store = make_store(fake_home, ShellKind.BASH, environ={"API_KEY": "env"})
        assert store.read("API_KEY") == "env"

    def test_falls_through_candidates(self, fake_home: Path):
        (fake_home / ".bashrc").write_text("# nothing here\n")
        (fake_home / ".profile").write_text('export API_KEY="from-profile"\n')
        assert make_store(fake_home, ShellKind.BASH).read("API_KEY") == "from-profile"

    def test_missing_is_none(self, fake_home: Path):
        store = make_store(fake_home, ShellKind.BASH)
        assert store.read("API_KEY") is None
        assert store.exists("API_KEY") is False

    def test_empty_assignment_is_unset(self, fake_home: Path):
        (fake_home / ".bashrc").write_text('export API_KEY=""\n')
        assert make_store(fake_home, ShellKind.BASH).read("API_KEY") is None


class TestStorageErrors:
    """Test filesystem failures are reported, not raised."""

    def test_unwritable_target_reports_failure(self, fake_home: Path):
        # A directory where the config file should be cannot be opened for writing
        (fake_home / ".bashrc").mkdir()
        store = make_store(fake_home, ShellKind.BASH)

        assert store.write("API_KEY", "abc") is False
        assert store.read("API_KEY") is None

    def test_shell_detected_from_environment(self, fake_home: Path):
        store = ConfigFileStore(home=fake_home, environ={"SHELL": "/usr/bin/fish"})
        assert store.shell == ShellKind.FISH

    def test_flowman_shell_override(self, fake_home: Path):
        store = ConfigFileStore(
            home=fake_home, environ={"SHELL": "/usr/bin/fish", "FLOWMAN_SHELL": "zsh"}
        )
        assert store.shell == ShellKind.ZSH

    def test_bad_http_setting_does_not_block_detection(self, fake_home: Path):
        store = ConfigFileStore(
            home=fake_home,
            environ={"SHELL": "/bin/bash", "FLOWMAN_SHELL": "fish", "FLOWMAN_TIMEOUT": "abc"},
        )
        assert store.shell == ShellKind.FISH
        assert store.write("API_KEY", "abc") is True


class TestMarkerComments:
    """Test which comment lines are removed together with an assignment."""

    def test_user_comment_mentioning_marker_is_kept(self, fake_home: Path):
        bashrc = fake_home / ".bashrc"
        bashrc.write_text('# flowman docs: see the README\nexport API_KEY="x"\n')

        make_store(fake_home, ShellKind.BASH).remove("API_KEY")

        assert bashrc.read_text() == "# flowman docs: see the README\n"

    @pytest.mark.parametrize(
        "comment",
        ["# Added by flowman", "# Postman API Key for flowman", "# My key (flowman)", "# added BY Flowman"],
    )
    def test_written_shapes_are_removed(self, fake_home: Path, comment: str):
        bashrc = fake_home / ".bashrc"
        bashrc.write_text(f'alias ll=\'ls -l\'\n\n{comment}\nexport API_KEY="x"\n')

        make_store(fake_home, ShellKind.BASH).remove("API_KEY")

        assert bashrc.read_text() == "alias ll='ls -l'\n"

    def test_comment_mentioning_marker_elsewhere_gets_suffix(self, fake_home: Path):
        store = make_store(fake_home, ShellKind.BASH)
        store.write("API_KEY", "abc", comment="flowman settings")

        assert "# flowman settings (flowman)\n" in (fake_home / ".bashrc").read_text()
        assert store.remove("API_KEY") is True
        assert (fake_home / ".bashrc").read_text() == ""


class TestRemoveLogging:
    def test_logs_removal_outside_target(self, fake_home: Path, caplog):
        (fake_home / ".bashrc").write_text('export API_KEY="x"\n')
        (fake_home / ".profile").write_text('export API_KEY="y"\n')

        with caplog.at_level(logging.INFO, logger="flowman.shell.config_file"):
            make_store(fake_home, ShellKind.BASH).remove("API_KEY")

        assert "also removed from" in caplog.text
        assert ".profile" in caplog.text
        assert (fake_home / ".profile").read_text() == ""
