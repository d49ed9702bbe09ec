"""Red Hat family operator implementation.

Covers Fedora, CentOS, RHEL, Rocky Linux and AlmaLinux using dnf or yum.
"""

from airlinkctl.models.host import OsFamily
from airlinkctl.operators.base import DOCKER_BOOTSTRAP_URL, FamilyOperator
from airlinkctl.utils.shell import run_step

NODESOURCE_RPM_URL = "https://rpm.nodesource.com/setup_{major}.x"


class RedHatOperator(FamilyOperator):
    """Operator for dnf/yum-based distributions.

    The concrete command (dnf or yum) comes from the host profile.
    """

    @property
    def family(self) -> OsFamily:
        """Return REDHAT as the family."""
        return OsFamily.REDHAT

    def install(self, packages: list[str]) -> None:
        """Install packages with dnf or yum."""
        if not packages:
            return
        run_step(
            [self.profile.package_manager, "install", "-y", "-q", *packages],
            description=f"Installing {', '.join(packages)}",
            timeout=self._timeout,
        )

    def remove_command(self, packages: list[str]) -> list[str]:
        """Build a dnf/yum remove command."""
        return [self.profile.package_manager, "remove", "-y", *packages]

    def setup_node(self, major: str) -> None:
        """Install Node.js from the NodeSource rpm repository."""
        self._run_remote_script(
            NODESOURCE_RPM_URL.format(major=major),
            description=f"Adding NodeSource repository for Node.js {major}",
        )
        self.install(["nodejs"])

    def setup_docker(self) -> None:
        """Install Docker with the vendor bootstrap script."""
        self._run_remote_script(DOCKER_BOOTSTRAP_URL, description="Installing Docker", shell="sh")
