"""Unit tests for the logs command."""

from unittest.mock import patch

from typer.testing import CliRunner

from airlinkctl.cli.commands.logs import journal_command
from airlinkctl.cli.main import app

runner = CliRunner()


class TestJournalCommand:
    """Tests for journal_command."""

    def test_without_follow(self) -> None:
        """The journal is printed without a pager."""
        assert journal_command("airlink-panel", 20, False) == [
            "journalctl", "-u", "airlink-panel", "-n", "20", "--no-pager",
        ]

    def test_with_follow(self) -> None:
        """--follow appends -f."""
        assert journal_command("airlink-daemon", 50, True)[-1] == "-f"


class TestLogsCommand:
    """Tests for airlinkctl logs."""

    def test_installer_log_tail(self, settings) -> None:
        """Only the last N lines of the installer log are shown."""
        settings.effective_log_path.write_text(
            "".join(f"line {i}\n" for i in range(10)), encoding="utf-8"
        )
        with patch("airlinkctl.cli.commands.logs.get_settings", return_value=settings):
            result = runner.invoke(app, ["logs", "-n", "3"])

        assert result.exit_code == 0, result.output
        assert "line 9" in result.output
        assert "line 7" in result.output
        assert "line 6" not in result.output

    def test_missing_installer_log(self, settings) -> None:
        """A missing log is reported, not an error."""
        with patch("airlinkctl.cli.commands.logs.get_settings", return_value=settings):
            result = runner.invoke(app, ["logs"])
        assert result.exit_code == 0
        assert "No installer log yet" in result.output

    def test_service_journal(self, settings) -> None:
        """-s daemon runs journalctl for the daemon unit."""
        with (
            patch("airlinkctl.cli.commands.logs.get_settings", return_value=settings),
            patch("airlinkctl.cli.commands.logs.run_interactive", return_value=0) as mock_run,
        ):
            result = runner.invoke(app, ["logs", "-s", "daemon", "-f"])

        assert result.exit_code == 0
        args = mock_run.call_args[0][0]
        assert args[:3] == ["journalctl", "-u", settings.daemon_service]
        assert "-f" in args

    def test_journal_failure_propagates(self, settings) -> None:
        """A failing journalctl exit code is passed through."""
        with (
            patch("airlinkctl.cli.commands.logs.get_settings", return_value=settings),
            patch("airlinkctl.cli.commands.logs.run_interactive", return_value=4),
        ):
            result = runner.invoke(app, ["logs", "-s", "panel"])
        assert result.exit_code == 4
