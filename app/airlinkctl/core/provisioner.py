"""Package provisioning.

Ensures base packages, Node.js (pinned major version), TypeScript and
Docker are present. Presence is checked by probing for executables on
PATH, not by querying the package database, so every ensure step is a
no-op when its tools are already installed.
"""

import logging
import re

from airlinkctl.core.errors import InstallerError
from airlinkctl.core.settings import InstallerSettings
from airlinkctl.core.systemd import Systemd
from airlinkctl.operators.base import FamilyOperator
from airlinkctl.utils.formatting import print_info, print_success, print_warning
from airlinkctl.utils.shell import CommandError, command_exists, run_command, run_step

logger = logging.getLogger(__name__)

# Executables whose package name differs from the binary name
PACKAGE_EXECUTABLES: dict[str, str] = {
    "nodejs": "node",
}

_NODE_VERSION_RE = re.compile(r"^v?(\d+)\.")


class ProvisionError(InstallerError):
    """Raised when a tool is still missing after an install attempt."""


def parse_node_major(version_output: str) -> str | None:
    """Extract the major version from ``node -v`` output (e.g. 'v20.11.1')."""
    match = _NODE_VERSION_RE.match(version_output.strip())
    return match.group(1) if match else None


class PackageProvisioner:
    """Installs the system dependencies of the panel and daemon.

    Attributes:
        operator: Family operator used for package installs.
        settings: Installer settings (pinned versions, base packages).
    """

    def __init__(
        self,
        operator: FamilyOperator,
        settings: InstallerSettings,
        systemd: Systemd | None = None,
    ) -> None:
        self.operator = operator
        self.settings = settings
        self.systemd = systemd or Systemd(settings.unit_dir)

    def missing_packages(self, packages: list[str]) -> list[str]:
        """Return the packages whose executable is not on PATH."""
        return [p for p in packages if not command_exists(PACKAGE_EXECUTABLES.get(p, p))]

    def ensure_packages(self, packages: list[str]) -> list[str]:
        """Install the packages that are not yet present.

        Returns:
            The packages that were installed (empty when nothing was missing).

        Raises:
            CommandError: If the package manager fails.
        """
        missing = self.missing_packages(packages)
        if not missing:
            logger.info("All base packages present: %s", ", ".join(packages))
            return []
        print_info(f"Installing: {' '.join(missing)}")
        self.operator.install(missing)
        return missing

    def installed_node_major(self) -> str | None:
        """Return the installed Node.js major version, or None if absent."""
        if not command_exists("node"):
            return None
        try:
            result = run_command(["node", "-v"], timeout=30.0)
        except OSError:
            return None
        return parse_node_major(result.stdout) if result.success else None

    def ensure_node(self) -> bool:
        """Make sure the pinned Node.js major version is installed.

        Returns:
            True if Node.js was (re)installed, False if it was already current.

        Raises:
            ProvisionError: If node is missing after the install attempt.
        """
        target = self.settings.node_major
        installed = self.installed_node_major()
        if installed == target:
            print_success(f"Node.js {target} already installed, skipping")
            return False
        if installed is None:
            print_info(f"Node.js not found, installing {target}")
        else:
            print_info(f"Node.js version mismatch (found {installed}), reinstalling {target}")

        self.operator.setup_node(target)

        if not command_exists("node"):
            raise ProvisionError("Node.js install failed: 'node' not found on PATH")
        now = self.installed_node_major()
        if now != target:
            print_warning(f"Node.js {now} installed, expected {target}")
        else:
            print_success(f"Node.js {target} installed")
        return True

    def ensure_typescript(self) -> bool:
        """Install TypeScript globally when npm does not list it.

        Returns:
            True if TypeScript was installed.
        """
        try:
            check = run_command(["npm", "list", "-g", "typescript"], timeout=60.0)
        except OSError as e:
            raise ProvisionError(f"npm is not usable: {e}") from e
        if check.success:
            return False
        run_step(
            ["npm", "install", "-g", "typescript"],
            description="Installing TypeScript",
            timeout=self.settings.command_timeout,
        )
        print_success("TypeScript installed")
        return True

    def ensure_docker(self) -> bool:
        """Install and enable Docker if it is missing.

        Returns:
            True if Docker was installed.

        Raises:
            ProvisionError: If docker is missing after the install attempt.
        """
        if command_exists("docker"):
            print_info("Docker already installed")
            return False

        self.operator.setup_docker()
        if command_exists("systemctl"):
            self.systemd.enable_now("docker")
        else:
            logger.info("systemctl not available, leaving Docker boot setup to the init system")

        if not command_exists("docker"):
            raise ProvisionError("Docker install failed: 'docker' not found on PATH")
        print_success("Docker installed")
        return True

    def provision(self) -> None:
        """Ensure base packages, Node.js, TypeScript and Docker, in that order."""
        self.ensure_packages(list(self.settings.base_packages))
        self.ensure_node()
        self.ensure_typescript()
        self.ensure_docker()

    def remove_dependencies(self) -> bool:
        """Remove Node.js, npm and Docker. Failure is reported, not raised.

        Returns:
            True if the package manager succeeded.
        """
        packages = list(self.operator.dependency_packages)
        print_info(f"Removing dependencies: {' '.join(packages)}")
        try:
            result = self.operator.remove(packages)
        except (OSError, CommandError) as e:
            print_warning(f"Could not remove dependencies: {e}")
            return False
        if not result.success:
            print_warning(f"Dependency removal reported an error: {result.stderr.strip()}")
            return False
        print_success("Dependencies removed")
        return True
