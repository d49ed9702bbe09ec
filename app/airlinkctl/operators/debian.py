"""Debian family operator implementation.

Covers Debian, Ubuntu, Linux Mint and Pop!_OS using apt-get.
"""

import logging

from airlinkctl.models.host import OsFamily
from airlinkctl.operators.base import DOCKER_BOOTSTRAP_URL, FamilyOperator
from airlinkctl.utils.shell import run_step

logger = logging.getLogger(__name__)

NODESOURCE_DEB_URL = "https://deb.nodesource.com/setup_{major}.x"

# Keeps apt from prompting for configuration
_APT_ENV = {"DEBIAN_FRONTEND": "noninteractive"}


class DebianOperator(FamilyOperator):
    """Operator for apt-based distributions."""

    dependency_packages = ("nodejs", "npm", "docker.io")

    @property
    def family(self) -> OsFamily:
        """Return DEBIAN as the family."""
        return OsFamily.DEBIAN

    def install(self, packages: list[str]) -> None:
        """Refresh the package index and install packages with apt-get."""
        if not packages:
            return
        run_step(
            ["apt-get", "update", "-qq"],
            description="Updating package index",
            timeout=self._timeout,
            env=_APT_ENV,
        )
        run_step(
            ["apt-get", "install", "-y", "-qq", *packages],
            description=f"Installing {', '.join(packages)}",
            timeout=self._timeout,
            env=_APT_ENV,
        )

    def remove_command(self, packages: list[str]) -> list[str]:
        """Build an apt-get remove command."""
        return ["apt-get", "remove", "-y", *packages]

    def setup_node(self, major: str) -> None:
        """Install Node.js from the NodeSource apt repository."""
        self._run_remote_script(
            NODESOURCE_DEB_URL.format(major=major),
            description=f"Adding NodeSource repository for Node.js {major}",
        )
        self.install(["nodejs"])

    def setup_docker(self) -> None:
        """Install Docker with the vendor bootstrap script."""
        self._run_remote_script(DOCKER_BOOTSTRAP_URL, description="Installing Docker", shell="sh")
