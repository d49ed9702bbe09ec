"""Unit tests for XDG path management."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from airlinkctl.core.paths import (
    APP_NAME,
    ensure_config_dir,
    ensure_state_dir,
    get_config_dir,
    get_default_log_path,
    get_settings_path,
    get_state_dir,
    get_user_addons_path,
)


class TestXdgDirs:
    """Tests for the config and state directories."""

    def test_default_config_dir(self) -> None:
        """get_config_dir falls back to ~/.config."""
        with patch.dict(os.environ, {}, clear=True):
            result = get_config_dir()
            expected = Path.home() / ".config" / APP_NAME
        assert result == expected

    def test_respects_xdg_config_home(self, tmp_path: Path) -> None:
        """get_config_dir respects XDG_CONFIG_HOME."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            assert get_config_dir() == tmp_path / APP_NAME

    def test_default_state_dir(self) -> None:
        """get_state_dir falls back to ~/.local/state."""
        with patch.dict(os.environ, {}, clear=True):
            result = get_state_dir()
            expected = Path.home() / ".local" / "state" / APP_NAME
        assert result == expected

    def test_empty_variable_ignored(self) -> None:
        """An empty XDG variable is treated as unset."""
        with patch.dict(os.environ, {"XDG_STATE_HOME": ""}):
            assert get_state_dir() == Path.home() / ".local" / "state" / APP_NAME


class TestFilePaths:
    """Tests for the file locations."""

    def test_files(self, tmp_path: Path) -> None:
        """Settings and addons live in the config dir, the log in the state dir."""
        env = {"XDG_CONFIG_HOME": str(tmp_path / "c"), "XDG_STATE_HOME": str(tmp_path / "s")}
        with patch.dict(os.environ, env):
            assert get_settings_path() == tmp_path / "c" / APP_NAME / "settings.toml"
            assert get_user_addons_path() == tmp_path / "c" / APP_NAME / "addons.toml"
            assert get_default_log_path() == tmp_path / "s" / APP_NAME / "installer.log"


class TestEnsureDirs:
    """Tests for directory creation."""

    def test_creates_dirs(self, tmp_path: Path) -> None:
        """ensure_* create missing directories."""
        env = {"XDG_CONFIG_HOME": str(tmp_path / "c"), "XDG_STATE_HOME": str(tmp_path / "s")}
        with patch.dict(os.environ, env):
            assert ensure_config_dir().is_dir()
            assert ensure_state_dir().is_dir()

    def test_permission_denied(self, tmp_path: Path) -> None:
        """A directory that cannot be created raises RuntimeError."""
        with (
            patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}),
            patch.object(Path, "mkdir", side_effect=PermissionError("denied")),
            pytest.raises(RuntimeError, match="Permission denied"),
        ):
            ensure_config_dir()
