"""Base exception for the installer.

Every fatal condition derives from :class:`InstallerError`. The CLI layer
catches it, logs it and exits with status 1. Each module defines its own
subclasses next to the code that raises them.
"""


class InstallerError(Exception):
    """Base exception for fatal installer errors."""
