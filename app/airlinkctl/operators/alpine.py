"""Alpine operator implementation using apk.

Alpine boots with OpenRC, so Docker is also added to the OpenRC boot
runlevel, and system users are created with busybox adduser.
"""

from airlinkctl.models.host import OsFamily
from airlinkctl.operators.base import FamilyOperator
from airlinkctl.utils.shell import run_step


class AlpineOperator(FamilyOperator):
    """Operator for apk-based distributions."""

    @property
    def family(self) -> OsFamily:
        """Return ALPINE as the family."""
        return OsFamily.ALPINE

    def install(self, packages: list[str]) -> None:
        """Install packages with apk."""
        if not packages:
            return
        run_step(
            ["apk", "add", "--no-cache", "-q", *packages],
            description=f"Installing {', '.join(packages)}",
            timeout=self._timeout,
        )

    def remove_command(self, packages: list[str]) -> list[str]:
        """Build an apk del command."""
        return ["apk", "del", *packages]

    def setup_docker(self) -> None:
        """Install Docker and register it in the OpenRC boot runlevel."""
        self.install(["docker"])
        run_step(
            ["rc-update", "add", "docker", "boot"],
            description="Enabling Docker at boot",
            timeout=self._timeout,
        )

    def add_system_user(self, name: str) -> None:
        """Create a system account with busybox adduser."""
        run_step(
            ["adduser", "-S", "-D", "-H", name],
            description=f"Creating system user {name}",
            timeout=self._timeout,
        )
