"""Unit tests for the package provisioner."""

from unittest.mock import MagicMock, patch

import pytest

from airlinkctl.core.provisioner import PackageProvisioner, ProvisionError, parse_node_major
from airlinkctl.core.settings import InstallerSettings
from airlinkctl.utils.shell import CommandResult


def _node_version(version: str) -> CommandResult:
    return CommandResult(stdout=f"{version}\n", stderr="", returncode=0)


@pytest.fixture
def operator() -> MagicMock:
    """Operator mock with Debian dependency packages."""
    op = MagicMock()
    op.dependency_packages = ("nodejs", "npm", "docker.io")
    return op


@pytest.fixture
def provisioner(operator: MagicMock, settings: InstallerSettings) -> PackageProvisioner:
    """Provisioner with mocked operator and systemd."""
    return PackageProvisioner(operator, settings, systemd=MagicMock())


class TestParseNodeMajor:
    """Tests for parse_node_major."""

    @pytest.mark.parametrize(
        ("output", "major"),
        [("v20.11.1", "20"), ("v18.19.0\n", "18"), ("22.1.0", "22"), ("garbage", None)],
    )
    def test_parse(self, output: str, major: str | None) -> None:
        """The major version is extracted from node -v output."""
        assert parse_node_major(output) == major


class TestEnsurePackages:
    """Tests for ensure_packages."""

    def test_installs_only_missing(
        self, provisioner: PackageProvisioner, operator: MagicMock
    ) -> None:
        """Only packages without executable are installed."""
        with patch(
            "airlinkctl.core.provisioner.command_exists",
            side_effect=lambda name: name in ("curl", "git"),
        ):
            installed = provisioner.ensure_packages(["curl", "wget", "git", "jq"])
        assert installed == ["wget", "jq"]
        operator.install.assert_called_once_with(["wget", "jq"])

    def test_satisfied_set_is_noop(
        self, provisioner: PackageProvisioner, operator: MagicMock
    ) -> None:
        """A second run with everything present issues no install."""
        with patch("airlinkctl.core.provisioner.command_exists", return_value=True):
            assert provisioner.ensure_packages(["curl", "wget", "git", "jq"]) == []
            assert provisioner.ensure_packages(["curl", "wget", "git", "jq"]) == []
        operator.install.assert_not_called()

    def test_nodejs_probes_node_binary(
        self, provisioner: PackageProvisioner, operator: MagicMock
    ) -> None:
        """The nodejs package is detected through the node executable."""
        with patch(
            "airlinkctl.core.provisioner.command_exists", side_effect=lambda n: n == "node"
        ):
            assert provisioner.missing_packages(["nodejs"]) == []


class TestEnsureNode:
    """Tests for ensure_node."""

    def test_matching_major_is_noop(
        self, provisioner: PackageProvisioner, operator: MagicMock
    ) -> None:
        """Node 20 installed and pinned 20: nothing is installed."""
        with (
            patch("airlinkctl.core.provisioner.command_exists", return_value=True),
            patch(
                "airlinkctl.core.provisioner.run_command",
                return_value=_node_version("v20.11.1"),
            ),
        ):
            assert provisioner.ensure_node() is False
        operator.setup_node.assert_not_called()
        operator.install.assert_not_called()

    def test_mismatch_reinstalls(
        self, provisioner: PackageProvisioner, operator: MagicMock
    ) -> None:
        """Node 18 installed with pin 20 triggers the upstream setup."""
        versions = [_node_version("v18.19.0"), _node_version("v20.11.1")]
        with (
            patch("airlinkctl.core.provisioner.command_exists", return_value=True),
            patch("airlinkctl.core.provisioner.run_command", side_effect=versions),
        ):
            assert provisioner.ensure_node() is True
        operator.setup_node.assert_called_once_with("20")

    def test_absent_installs(self, provisioner: PackageProvisioner, operator: MagicMock) -> None:
        """Missing node is installed."""
        present = iter([False, True, True])
        with (
            patch(
                "airlinkctl.core.provisioner.command_exists",
                side_effect=lambda _name: next(present),
            ),
            patch("airlinkctl.core.provisioner.run_command", return_value=_node_version("v20.1.0")),
        ):
            assert provisioner.ensure_node() is True
        operator.setup_node.assert_called_once_with("20")

    def test_still_missing_is_fatal(
        self, provisioner: PackageProvisioner, operator: MagicMock
    ) -> None:
        """node absent after the install attempt raises ProvisionError."""
        with patch("airlinkctl.core.provisioner.command_exists", return_value=False):
            with pytest.raises(ProvisionError, match="'node' not found"):
                provisioner.ensure_node()


class TestEnsureDocker:
    """Tests for ensure_docker."""

    def test_present_is_noop(self, provisioner: PackageProvisioner, operator: MagicMock) -> None:
        """An existing Docker is left alone."""
        with patch("airlinkctl.core.provisioner.command_exists", return_value=True):
            assert provisioner.ensure_docker() is False
        operator.setup_docker.assert_not_called()

    def test_installs_and_enables(
        self, provisioner: PackageProvisioner, operator: MagicMock
    ) -> None:
        """Docker is installed then enabled at boot."""
        present = {"docker": iter([False, True]), "systemctl": iter([True])}
        with patch(
            "airlinkctl.core.provisioner.command_exists",
            side_effect=lambda name: next(present[name]),
        ):
            assert provisioner.ensure_docker() is True
        operator.setup_docker.assert_called_once()
        systemd = provisioner.systemd
        systemd.enable_now.assert_called_once_with("docker")  # type: ignore[attr-defined]

    def test_still_missing_is_fatal(self, provisioner: PackageProvisioner) -> None:
        """docker absent after the install attempt raises ProvisionError."""
        with patch("airlinkctl.core.provisioner.command_exists", return_value=False):
            with pytest.raises(ProvisionError, match="Docker install failed"):
                provisioner.ensure_docker()


class TestEnsureTypescript:
    """Tests for ensure_typescript."""

    def test_present_is_noop(self, provisioner: PackageProvisioner, ok: CommandResult) -> None:
        """npm lists typescript: nothing is installed."""
        with (
            patch("airlinkctl.core.provisioner.run_command", return_value=ok),
            patch("airlinkctl.core.provisioner.run_step") as mock_step,
        ):
            assert provisioner.ensure_typescript() is False
        mock_step.assert_not_called()

    def test_installs_globally(self, provisioner: PackageProvisioner, ok: CommandResult) -> None:
        """Missing typescript is installed with npm -g."""
        missing = CommandResult(stdout="", stderr="", returncode=1)
        with (
            patch("airlinkctl.core.provisioner.run_command", return_value=missing),
            patch("airlinkctl.core.provisioner.run_step", return_value=ok) as mock_step,
        ):
            assert provisioner.ensure_typescript() is True
        assert mock_step.call_args[0][0] == ["npm", "install", "-g", "typescript"]


class TestRemoveDependencies:
    """Tests for remove_dependencies."""

    def test_failure_is_not_fatal(
        self, provisioner: PackageProvisioner, operator: MagicMock
    ) -> None:
        """A failing package manager only yields False."""
        operator.remove.return_value = CommandResult(stdout="", stderr="E: locked", returncode=100)
        assert provisioner.remove_dependencies() is False
        operator.remove.assert_called_once_with(["nodejs", "npm", "docker.io"])

    def test_success(self, provisioner: PackageProvisioner, operator: MagicMock) -> None:
        """Successful removal returns True."""
        operator.remove.return_value = CommandResult(stdout="", stderr="", returncode=0)
        assert provisioner.remove_dependencies() is True
