"""Host models for OS classification.

This module defines the closed set of supported OS families and the
immutable profile the host probe derives once at startup.
"""

from dataclasses import dataclass
from enum import Enum


class OsFamily(Enum):
    """Supported OS families.

    Each family selects one package manager front-end and one set of
    provisioning command templates.
    """

    DEBIAN = "debian"
    REDHAT = "redhat"
    ARCH = "arch"
    ALPINE = "alpine"


@dataclass(frozen=True, slots=True)
class HostProfile:
    """Identification of the host the installer runs on.

    Attributes:
        distribution_id: ``ID`` from os-release (e.g. 'ubuntu').
        version_id: ``VERSION_ID`` from os-release, empty when absent.
        family: OS family the distribution belongs to.
        package_manager: Package manager command (apt, dnf, yum, pacman, apk).
    """

    distribution_id: str
    version_id: str
    family: OsFamily
    package_manager: str

    @property
    def display_name(self) -> str:
        """Return a short human-readable description of the host."""
        version = f" {self.version_id}" if self.version_id else ""
        return f"{self.distribution_id}{version} ({self.family.value})"
