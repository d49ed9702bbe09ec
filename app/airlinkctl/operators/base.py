"""Abstract base class for OS family operators.

This module defines the FamilyOperator interface. There is exactly one
implementation per :class:`~airlinkctl.models.host.OsFamily`; each one
knows how its family installs packages, Node.js and Docker.
"""

import logging
import shlex
from abc import ABC, abstractmethod

from airlinkctl.models.host import HostProfile, OsFamily
from airlinkctl.utils.shell import CommandResult, format_command, run_command, run_step

logger = logging.getLogger(__name__)

DOCKER_BOOTSTRAP_URL = "https://get.docker.com"


class FamilyOperator(ABC):
    """Abstract base class for all OS family operators.

    Install methods are fatal: they raise
    :class:`~airlinkctl.utils.shell.CommandError` when the package manager
    fails. ``remove`` is best-effort and reports failure through its result.

    Attributes:
        profile: Host the operator acts on.
        timeout: Upper bound in seconds for each package manager call.

    Example:
        >>> operator = get_operator(detect_host())
        >>> operator.install(["git", "jq"])
    """

    #: Packages removed by ``remove dependencies``
    dependency_packages: tuple[str, ...] = ("nodejs", "npm", "docker")

    def __init__(self, profile: HostProfile, timeout: float | None = None) -> None:
        """Initialize the operator.

        Args:
            profile: Host the operator acts on.
            timeout: Upper bound in seconds for each package manager call.
        """
        self._profile = profile
        self._timeout = timeout

    @property
    def profile(self) -> HostProfile:
        """Return the host profile."""
        return self._profile

    @property
    @abstractmethod
    def family(self) -> OsFamily:
        """Return the OS family this operator handles."""

    @abstractmethod
    def install(self, packages: list[str]) -> None:
        """Install packages with the native package manager.

        Raises:
            CommandError: If the package manager fails.
        """

    @abstractmethod
    def remove_command(self, packages: list[str]) -> list[str]:
        """Build the command that removes packages."""

    def remove(self, packages: list[str]) -> CommandResult:
        """Remove packages, tolerating failure.

        Returns:
            CommandResult of the package manager call.
        """
        args = self.remove_command(packages)
        logger.info("CMD %s", format_command(args))
        return run_command(args, timeout=self._timeout)

    def setup_node(self, major: str) -> None:
        """Install Node.js and npm.

        The default uses the distribution packages; families whose
        repositories lag behind override this with the NodeSource channel.
        """
        self.install(["nodejs", "npm"])

    def setup_docker(self) -> None:
        """Install the Docker engine."""
        self.install(["docker"])

    def add_system_user(self, name: str) -> None:
        """Create a system account without home directory or login shell."""
        run_step(
            ["useradd", "--system", "--no-create-home", "--shell", "/usr/sbin/nologin", name],
            description=f"Creating system user {name}",
            timeout=self._timeout,
        )

    def _run_remote_script(self, url: str, description: str, shell: str = "bash") -> None:
        """Download a vendor setup script and pipe it into a shell."""
        script = f"set -o pipefail; curl -fsSL {shlex.quote(url)} | {shell} -"
        run_step(["bash", "-c", script], description=description, timeout=self._timeout)
