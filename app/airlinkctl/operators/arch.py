"""Arch family operator implementation.

Covers Arch Linux and Manjaro using pacman. Node.js and Docker come from
the distribution repositories, which track upstream closely.
"""

from airlinkctl.models.host import OsFamily
from airlinkctl.operators.base import FamilyOperator
from airlinkctl.utils.shell import run_step


class ArchOperator(FamilyOperator):
    """Operator for pacman-based distributions."""

    @property
    def family(self) -> OsFamily:
        """Return ARCH as the family."""
        return OsFamily.ARCH

    def install(self, packages: list[str]) -> None:
        """Upgrade the system and install packages with pacman.

        Packages that are already current are skipped (``--needed``).
        """
        if not packages:
            return
        run_step(
            ["pacman", "-Syu", "--needed", "--noconfirm", "--quiet", *packages],
            description=f"Installing {', '.join(packages)}",
            timeout=self._timeout,
        )

    def remove_command(self, packages: list[str]) -> list[str]:
        """Build a pacman remove command."""
        return ["pacman", "-R", "--noconfirm", *packages]
