"""Unit tests for the install command."""

from unittest.mock import MagicMock, patch

from typer.testing import CliRunner

from airlinkctl.cli.main import app
from airlinkctl.components.base import ComponentInstallError
from airlinkctl.core.workflow import InstallSummary
from airlinkctl.models.config import InstallConfig

runner = CliRunner()


def _workflow() -> MagicMock:
    workflow = MagicMock()
    workflow.install_everything.return_value = InstallSummary(
        panel_url="http://10.0.0.5:3000", daemon_key="abc123"
    )
    workflow.panel_url.return_value = "http://10.0.0.5:3000"
    return workflow


class TestInstallCommand:
    """Tests for airlinkctl install."""

    def test_unattended_everything(self) -> None:
        """--yes installs everything with the given options."""
        workflow = _workflow()
        with patch("airlinkctl.cli.commands.install.open_workflow", return_value=workflow):
            result = runner.invoke(app, ["install", "--yes", "--panel-port", "8080"])

        assert result.exit_code == 0, result.output
        config = workflow.install_everything.call_args[0][0]
        assert isinstance(config, InstallConfig)
        assert config.panel_port == 8080
        assert "abc123" in result.output
        assert "http://10.0.0.5:3000" in result.output

    def test_unattended_daemon(self) -> None:
        """-c daemon installs only the daemon."""
        workflow = _workflow()
        workflow.install_daemon.return_value = MagicMock(env={"AUTH_KEY": "k"})
        with patch("airlinkctl.cli.commands.install.open_workflow", return_value=workflow):
            result = runner.invoke(app, ["install", "-c", "daemon", "-y"])

        assert result.exit_code == 0, result.output
        workflow.install_daemon.assert_called_once()
        workflow.install_panel.assert_not_called()
        workflow.install_everything.assert_not_called()

    def test_admin_password_from_environment(self) -> None:
        """The admin password can come from AIRLINK_ADMIN_PASSWORD."""
        workflow = _workflow()
        with patch("airlinkctl.cli.commands.install.open_workflow", return_value=workflow):
            result = runner.invoke(
                app,
                ["install", "-c", "panel", "-y", "--admin"],
                env={"AIRLINK_ADMIN_PASSWORD": "s3cretpass1"},
            )

        assert result.exit_code == 0, result.output
        config = workflow.bootstrap_admin.call_args[0][0]
        assert config.wants_admin is True

    def test_weak_password_rejected(self) -> None:
        """An invalid password fails before anything runs."""
        with patch("airlinkctl.cli.commands.install.open_workflow") as mock_open:
            result = runner.invoke(app, ["install", "-y", "--admin-password", "short"])
        assert result.exit_code == 1
        mock_open.assert_not_called()

    def test_fatal_error_exits_1(self) -> None:
        """An install error is reported and exits with status 1."""
        workflow = _workflow()
        workflow.install_panel.side_effect = ComponentInstallError("panel: Building panel failed")
        with patch("airlinkctl.cli.commands.install.open_workflow", return_value=workflow):
            result = runner.invoke(app, ["install", "-c", "panel", "-y"])
        assert result.exit_code == 1

    def test_interactive_collects_once(self) -> None:
        """Interactive installs ask all questions before running."""
        workflow = _workflow()
        answers = InstallConfig(panel_name="Answered")
        with (
            patch("airlinkctl.cli.commands.install.open_workflow", return_value=workflow),
            patch(
                "airlinkctl.cli.commands.install.collect_install_config", return_value=answers
            ) as mock_collect,
            patch("airlinkctl.cli.commands.install.Confirm.ask", return_value=True),
        ):
            result = runner.invoke(app, ["install"])

        assert result.exit_code == 0, result.output
        mock_collect.assert_called_once()
        assert workflow.install_everything.call_args[0][0] is answers

    def test_interactive_declined(self) -> None:
        """Declining the confirmation changes nothing."""
        workflow = _workflow()
        with (
            patch("airlinkctl.cli.commands.install.open_workflow", return_value=workflow),
            patch(
                "airlinkctl.cli.commands.install.collect_install_config",
                return_value=InstallConfig(),
            ),
            patch("airlinkctl.cli.commands.install.Confirm.ask", return_value=False),
        ):
            result = runner.invoke(app, ["install", "-c", "panel"])

        assert result.exit_code == 0
        workflow.install_panel.assert_not_called()

    def test_unknown_addon_rejected_up_front(self) -> None:
        """An addon key missing from the catalog fails before installing anything."""
        workflow = _workflow()
        workflow.catalog = {}
        with patch("airlinkctl.cli.commands.install.open_workflow", return_value=workflow):
            result = runner.invoke(app, ["install", "-y", "-a", "typo"])

        assert result.exit_code == 1
        workflow.install_everything.assert_not_called()
