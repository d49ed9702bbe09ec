"""Host environment probe.

Reads the platform identification file once and classifies the
distribution into one of the supported OS families. There is no retry and
no fallback: an unknown or unreadable host is a fatal error.
"""

import logging
import shlex
import subprocess
from pathlib import Path

from airlinkctl.core.errors import InstallerError
from airlinkctl.core.paths import OS_RELEASE_PATH
from airlinkctl.models.host import HostProfile, OsFamily
from airlinkctl.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)

# Distribution ID -> family
DISTRO_FAMILIES: dict[str, OsFamily] = {
    "ubuntu": OsFamily.DEBIAN,
    "debian": OsFamily.DEBIAN,
    "linuxmint": OsFamily.DEBIAN,
    "pop": OsFamily.DEBIAN,
    "fedora": OsFamily.REDHAT,
    "centos": OsFamily.REDHAT,
    "rhel": OsFamily.REDHAT,
    "rocky": OsFamily.REDHAT,
    "almalinux": OsFamily.REDHAT,
    "arch": OsFamily.ARCH,
    "manjaro": OsFamily.ARCH,
    "alpine": OsFamily.ALPINE,
}


class HostDetectionError(InstallerError):
    """Raised when the host OS cannot be identified or is unsupported."""


def parse_os_release(text: str) -> dict[str, str]:
    """Parse os-release ``KEY=value`` lines.

    Values may be quoted; comments and blank lines are ignored.

    Args:
        text: Content of an os-release file.

    Returns:
        Mapping of keys to unquoted values.
    """
    fields: dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, raw_value = line.partition("=")
        try:
            parts = shlex.split(raw_value)
        except ValueError:
            logger.debug("Skipping malformed os-release line: %s", line)
            continue
        fields[key.strip()] = parts[0] if parts else ""
    return fields


def package_manager_for(family: OsFamily) -> str:
    """Select the package manager command for a family.

    Red Hat hosts use ``dnf`` when it is installed and ``yum`` otherwise.
    """
    if family is OsFamily.DEBIAN:
        return "apt"
    if family is OsFamily.REDHAT:
        return "dnf" if command_exists("dnf") else "yum"
    if family is OsFamily.ARCH:
        return "pacman"
    return "apk"


def classify_host(distribution_id: str, version_id: str = "") -> HostProfile:
    """Map a distribution ID to a host profile.

    Raises:
        HostDetectionError: If the distribution is not supported.
    """
    family = DISTRO_FAMILIES.get(distribution_id.lower())
    if family is None:
        raise HostDetectionError(f"Unsupported OS: {distribution_id or '<empty>'}")
    return HostProfile(
        distribution_id=distribution_id.lower(),
        version_id=version_id,
        family=family,
        package_manager=package_manager_for(family),
    )


def detect_host(os_release: Path = OS_RELEASE_PATH) -> HostProfile:
    """Identify the current host.

    Args:
        os_release: Path of the os-release file.

    Returns:
        HostProfile for the running system.

    Raises:
        HostDetectionError: If the file is missing or the OS is unsupported.
    """
    try:
        text = os_release.read_text(encoding="utf-8")
    except OSError as e:
        raise HostDetectionError(f"Cannot detect OS: {os_release} is not readable") from e

    fields = parse_os_release(text)
    profile = classify_host(fields.get("ID", ""), fields.get("VERSION_ID", ""))
    logger.info("Detected host %s using %s", profile.display_name, profile.package_manager)
    return profile


def primary_address() -> str:
    """Return the host's first IP address, or 'localhost' if unknown.

    Used to build the panel URL shown to the operator and written to the
    panel configuration.
    """
    try:
        result = run_command(["hostname", "-I"], timeout=10.0)
    except (OSError, subprocess.TimeoutExpired):
        return "localhost"
    addresses = result.stdout.split() if result.success else []
    return addresses[0] if addresses else "localhost"
