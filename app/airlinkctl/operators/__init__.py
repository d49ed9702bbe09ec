"""OS family operators for package, Node.js and Docker installation.

Exactly one operator class exists per OS family. :func:`get_operator` is
the single dispatch point; :data:`FAMILY_OPERATORS` must cover every
:class:`~airlinkctl.models.host.OsFamily` member.
"""

from airlinkctl.models.host import HostProfile, OsFamily
from airlinkctl.operators.alpine import AlpineOperator
from airlinkctl.operators.arch import ArchOperator
from airlinkctl.operators.base import FamilyOperator
from airlinkctl.operators.debian import DebianOperator
from airlinkctl.operators.redhat import RedHatOperator

FAMILY_OPERATORS: dict[OsFamily, type[FamilyOperator]] = {
    OsFamily.DEBIAN: DebianOperator,
    OsFamily.REDHAT: RedHatOperator,
    OsFamily.ARCH: ArchOperator,
    OsFamily.ALPINE: AlpineOperator,
}

_missing = set(OsFamily) - set(FAMILY_OPERATORS)
if _missing:
    raise ImportError(f"No operator for OS families: {sorted(f.value for f in _missing)}")


def get_operator(profile: HostProfile, timeout: float | None = None) -> FamilyOperator:
    """Create the operator matching the host's OS family.

    Args:
        profile: Detected host profile.
        timeout: Upper bound in seconds for each package manager call.

    Returns:
        FamilyOperator for the host's family.
    """
    return FAMILY_OPERATORS[profile.family](profile, timeout=timeout)


__all__ = [
    "FAMILY_OPERATORS",
    "AlpineOperator",
    "ArchOperator",
    "DebianOperator",
    "FamilyOperator",
    "RedHatOperator",
    "get_operator",
]
