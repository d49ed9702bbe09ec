"""Unit tests for the OS family operators.

Tests for the operator registry and the commands each family issues.
"""

from unittest.mock import patch

import pytest

from airlinkctl.models.host import HostProfile, OsFamily
from airlinkctl.operators import (
    FAMILY_OPERATORS,
    AlpineOperator,
    ArchOperator,
    DebianOperator,
    RedHatOperator,
    get_operator,
)
from airlinkctl.utils.shell import CommandResult

OK = CommandResult(stdout="", stderr="", returncode=0)


def _profile(family: OsFamily, manager: str) -> HostProfile:
    return HostProfile(
        distribution_id=family.value, version_id="", family=family, package_manager=manager
    )


def _commands(mock_step: object) -> list[list[str]]:
    return [c[0][0] for c in mock_step.call_args_list]  # type: ignore[attr-defined]


class TestRegistry:
    """Tests for the family operator registry."""

    def test_covers_every_family(self) -> None:
        """Each OsFamily has exactly one operator."""
        assert set(FAMILY_OPERATORS) == set(OsFamily)

    @pytest.mark.parametrize(
        ("family", "manager", "cls"),
        [
            (OsFamily.DEBIAN, "apt", DebianOperator),
            (OsFamily.REDHAT, "dnf", RedHatOperator),
            (OsFamily.ARCH, "pacman", ArchOperator),
            (OsFamily.ALPINE, "apk", AlpineOperator),
        ],
    )
    def test_get_operator(self, family: OsFamily, manager: str, cls: type) -> None:
        """The registry returns the matching operator."""
        operator = get_operator(_profile(family, manager))
        assert isinstance(operator, cls)
        assert operator.family is family


class TestDebianOperator:
    """Tests for DebianOperator."""

    def test_install_updates_index_first(self) -> None:
        """apt-get update runs before a non-interactive install."""
        operator = DebianOperator(_profile(OsFamily.DEBIAN, "apt"))
        with patch("airlinkctl.operators.debian.run_step", return_value=OK) as mock_step:
            operator.install(["git", "jq"])
        assert _commands(mock_step) == [
            ["apt-get", "update", "-qq"],
            ["apt-get", "install", "-y", "-qq", "git", "jq"],
        ]
        assert mock_step.call_args.kwargs["env"] == {"DEBIAN_FRONTEND": "noninteractive"}

    def test_install_nothing(self) -> None:
        """An empty list issues no command."""
        operator = DebianOperator(_profile(OsFamily.DEBIAN, "apt"))
        with patch("airlinkctl.operators.debian.run_step") as mock_step:
            operator.install([])
        mock_step.assert_not_called()

    def test_setup_node_uses_nodesource(self) -> None:
        """Node.js comes from the NodeSource setup script."""
        operator = DebianOperator(_profile(OsFamily.DEBIAN, "apt"))
        with (
            patch("airlinkctl.operators.base.run_step", return_value=OK) as mock_script,
            patch("airlinkctl.operators.debian.run_step", return_value=OK) as mock_step,
        ):
            operator.setup_node("20")
        script = mock_script.call_args[0][0]
        assert script[:2] == ["bash", "-c"]
        assert "https://deb.nodesource.com/setup_20.x" in script[2]
        assert "pipefail" in script[2]
        assert _commands(mock_step)[-1] == ["apt-get", "install", "-y", "-qq", "nodejs"]

    def test_setup_docker_uses_bootstrap_script(self) -> None:
        """Docker comes from get.docker.com."""
        operator = DebianOperator(_profile(OsFamily.DEBIAN, "apt"))
        with patch("airlinkctl.operators.base.run_step", return_value=OK) as mock_script:
            operator.setup_docker()
        assert "curl -fsSL https://get.docker.com | sh -" in mock_script.call_args[0][0][2]

    def test_remove_packages(self) -> None:
        """Dependencies are docker.io, nodejs and npm."""
        operator = DebianOperator(_profile(OsFamily.DEBIAN, "apt"))
        assert operator.remove_command(list(operator.dependency_packages)) == [
            "apt-get",
            "remove",
            "-y",
            "nodejs",
            "npm",
            "docker.io",
        ]

    def test_remove_tolerates_failure(self) -> None:
        """remove() returns the failed result instead of raising."""
        operator = DebianOperator(_profile(OsFamily.DEBIAN, "apt"))
        failed = CommandResult(stdout="", stderr="E: not installed", returncode=100)
        with patch("airlinkctl.operators.base.run_command", return_value=failed):
            assert operator.remove(["nodejs"]).success is False


class TestRedHatOperator:
    """Tests for RedHatOperator."""

    @pytest.mark.parametrize("manager", ["dnf", "yum"])
    def test_install_uses_profile_manager(self, manager: str) -> None:
        """The detected manager is used."""
        operator = RedHatOperator(_profile(OsFamily.REDHAT, manager))
        with patch("airlinkctl.operators.redhat.run_step", return_value=OK) as mock_step:
            operator.install(["git"])
        assert _commands(mock_step) == [[manager, "install", "-y", "-q", "git"]]

    def test_setup_node_uses_rpm_nodesource(self) -> None:
        """Node.js comes from the NodeSource rpm script."""
        operator = RedHatOperator(_profile(OsFamily.REDHAT, "dnf"))
        with (
            patch("airlinkctl.operators.base.run_step", return_value=OK) as mock_script,
            patch("airlinkctl.operators.redhat.run_step", return_value=OK),
        ):
            operator.setup_node("20")
        assert "https://rpm.nodesource.com/setup_20.x" in mock_script.call_args[0][0][2]


class TestArchOperator:
    """Tests for ArchOperator."""

    def test_install(self) -> None:
        """pacman upgrades and installs without confirmation."""
        operator = ArchOperator(_profile(OsFamily.ARCH, "pacman"))
        with patch("airlinkctl.operators.arch.run_step", return_value=OK) as mock_step:
            operator.install(["docker"])
        assert _commands(mock_step) == [
            ["pacman", "-Syu", "--needed", "--noconfirm", "--quiet", "docker"]
        ]

    def test_setup_node_uses_native_packages(self) -> None:
        """Arch installs nodejs and npm from its own repositories."""
        operator = ArchOperator(_profile(OsFamily.ARCH, "pacman"))
        with patch("airlinkctl.operators.arch.run_step", return_value=OK) as mock_step:
            operator.setup_node("20")
        assert _commands(mock_step) == [
            ["pacman", "-Syu", "--needed", "--noconfirm", "--quiet", "nodejs", "npm"]
        ]


class TestAlpineOperator:
    """Tests for AlpineOperator."""

    def test_setup_docker_adds_boot_service(self) -> None:
        """Docker is installed and added to the OpenRC boot runlevel."""
        operator = AlpineOperator(_profile(OsFamily.ALPINE, "apk"))
        with patch("airlinkctl.operators.alpine.run_step", return_value=OK) as mock_step:
            operator.setup_docker()
        assert _commands(mock_step) == [
            ["apk", "add", "--no-cache", "-q", "docker"],
            ["rc-update", "add", "docker", "boot"],
        ]

    def test_add_system_user(self) -> None:
        """busybox adduser creates the account."""
        operator = AlpineOperator(_profile(OsFamily.ALPINE, "apk"))
        with patch("airlinkctl.operators.alpine.run_step", return_value=OK) as mock_step:
            operator.add_system_user("www-data")
        assert _commands(mock_step) == [["adduser", "-S", "-D", "-H", "www-data"]]
