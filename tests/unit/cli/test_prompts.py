"""Unit tests for the interactive configuration prompts."""

from unittest.mock import patch

import pytest

from airlinkctl.cli.prompts import (
    ConfigurationError,
    ask_addons,
    ask_password,
    ask_username,
    collect_install_config,
)
from airlinkctl.models.component import AddonEntry
from airlinkctl.models.config import InstallConfig


class TestAskUsername:
    """Tests for ask_username."""

    def test_valid(self) -> None:
        """A valid answer is kept."""
        with patch("airlinkctl.cli.prompts.Prompt.ask", return_value="operator1"):
            assert ask_username("admin") == "operator1"

    def test_invalid_falls_back(self) -> None:
        """An invalid answer is replaced by the default."""
        with patch("airlinkctl.cli.prompts.Prompt.ask", return_value="no spaces!"):
            assert ask_username("admin") == "admin"

    def test_surrounding_whitespace_stripped(self) -> None:
        """Whitespace around the answer is ignored."""
        with patch("airlinkctl.cli.prompts.Prompt.ask", return_value=" operator1\n"):
            assert ask_username("admin") == "operator1"


class TestAskPassword:
    """Tests for ask_password."""

    def test_reprompts_until_valid(self) -> None:
        """Weak and mismatched passwords are asked again."""
        answers = ["short", "s3cretpass1", "different1", "s3cretpass1", "s3cretpass1"]
        with patch("airlinkctl.cli.prompts.Prompt.ask", side_effect=answers) as mock_ask:
            assert ask_password() == "s3cretpass1"
        assert mock_ask.call_count == 5


class TestAskAddons:
    """Tests for ask_addons."""

    def test_selects_confirmed(self) -> None:
        """Only confirmed addons are returned, in catalog order."""
        catalog = {
            "modrinth": AddonEntry(
                display_name="Modrinth", repo_url="https://example.com/a.git", directory="m"
            ),
            "parachute": AddonEntry(
                display_name="Parachute", repo_url="https://example.com/a.git", directory="p"
            ),
        }
        with patch("airlinkctl.cli.prompts.Confirm.ask", side_effect=[False, True]):
            assert ask_addons(catalog) == ("parachute",)


class TestCollectInstallConfig:
    """Tests for collect_install_config."""

    def test_panel_with_admin(self) -> None:
        """Panel questions fill the panel and admin fields."""
        with (
            patch(
                "airlinkctl.cli.prompts.Prompt.ask",
                side_effect=["My Panel", "operator1", "ops@example.com", "s3cretpass1",
                             "s3cretpass1"],
            ),
            patch("airlinkctl.cli.prompts.IntPrompt.ask", return_value=8080),
            patch("airlinkctl.cli.prompts.Confirm.ask", return_value=True),
        ):
            config = collect_install_config(InstallConfig(), daemon=False)

        assert config.panel_name == "My Panel"
        assert config.panel_port == 8080
        assert config.admin_username == "operator1"
        assert config.wants_admin is True
        assert config.daemon_port == 3002

    def test_daemon_only(self) -> None:
        """An empty daemon key means one is generated later."""
        with (
            patch("airlinkctl.cli.prompts.Prompt.ask", return_value=""),
            patch("airlinkctl.cli.prompts.IntPrompt.ask", side_effect=[0, 4000]),
        ):
            config = collect_install_config(InstallConfig(), panel=False)

        assert config.daemon_port == 4000
        assert config.daemon_key is None
        assert config.create_admin is False

    def test_rejected_answers(self) -> None:
        """An invalid email is reported as a configuration error."""
        with (
            patch(
                "airlinkctl.cli.prompts.Prompt.ask",
                side_effect=["Airlink", "operator1", "not-an-email", "s3cretpass1",
                             "s3cretpass1"],
            ),
            patch("airlinkctl.cli.prompts.IntPrompt.ask", return_value=3000),
            patch("airlinkctl.cli.prompts.Confirm.ask", return_value=True),
            pytest.raises(ConfigurationError, match="Invalid configuration"),
        ):
            collect_install_config(InstallConfig(), daemon=False)
