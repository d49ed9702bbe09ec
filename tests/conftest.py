"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from pathlib import Path

import pytest

from airlinkctl.core.settings import InstallerSettings
from airlinkctl.models.config import InstallConfig
from airlinkctl.models.host import HostProfile, OsFamily
from airlinkctl.utils.shell import CommandResult


@pytest.fixture
def settings(tmp_path: Path) -> InstallerSettings:
    """Settings pointing every path into a temporary directory."""
    return InstallerSettings(
        install_root=tmp_path / "www",
        unit_dir=tmp_path / "systemd",
        countdown_seconds=0,
        bootstrap_delay=0,
        log_path=tmp_path / "installer.log",
    )


@pytest.fixture
def ubuntu_profile() -> HostProfile:
    """Host profile of an Ubuntu machine."""
    return HostProfile(
        distribution_id="ubuntu",
        version_id="24.04",
        family=OsFamily.DEBIAN,
        package_manager="apt",
    )


@pytest.fixture
def install_config() -> InstallConfig:
    """Configuration with an admin account and default ports."""
    return InstallConfig(
        panel_name="Airlink",
        admin_username="operator1",
        admin_email="ops@example.com",
        admin_password="s3cretpass1",
        create_admin=True,
    )


@pytest.fixture
def ok() -> CommandResult:
    """Successful command result with no output."""
    return CommandResult(stdout="", stderr="", returncode=0)


@pytest.fixture
def mock_os_release() -> str:
    """Sample /etc/os-release of Ubuntu 24.04."""
    return """PRETTY_NAME="Ubuntu 24.04.1 LTS"
NAME="Ubuntu"
VERSION_ID="24.04"
VERSION="24.04.1 LTS (Noble Numbat)"
ID=ubuntu
ID_LIKE=debian
# comment line
HOME_URL="https://www.ubuntu.com/"
"""
