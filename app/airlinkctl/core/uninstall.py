"""Component removal.

Removal reverses the install in a fixed order: stop, disable, delete the
unit file, delete the directory, reload systemd. Every step tolerates an
already-absent component, so removing twice is not an error.
"""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from airlinkctl.core.errors import InstallerError
from airlinkctl.core.settings import InstallerSettings
from airlinkctl.core.systemd import Systemd
from airlinkctl.models.component import AddonEntry, ComponentSpec
from airlinkctl.utils.formatting import print_info, print_success, print_warning
from airlinkctl.utils.shell import CommandError

logger = logging.getLogger(__name__)


class UninstallError(InstallerError):
    """Raised when a component directory cannot be deleted."""


@dataclass(frozen=True, slots=True)
class RemovalReport:
    """What a removal actually deleted.

    Attributes:
        name: Component name.
        unit_removed: Whether a unit file was deleted.
        directory_removed: Whether the component directory was deleted.
    """

    name: str
    unit_removed: bool = False
    directory_removed: bool = False

    @property
    def anything_removed(self) -> bool:
        """Check if the component was present at all."""
        return self.unit_removed or self.directory_removed


def _remove_tree(path: Path) -> bool:
    if not path.exists() and not path.is_symlink():
        return False
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
    except OSError as e:
        raise UninstallError(f"Cannot delete {path}: {e}") from e
    logger.info("Deleted %s", path)
    return True


class Uninstaller:
    """Removes installed components.

    Attributes:
        settings: Installer settings.
        systemd: Unit file and service controller.
    """

    def __init__(self, settings: InstallerSettings, systemd: Systemd | None = None) -> None:
        self.settings = settings
        self.systemd = systemd or Systemd(settings.unit_dir)

    def remove(self, spec: ComponentSpec) -> RemovalReport:
        """Remove a component and its service unit.

        Raises:
            UninstallError: If the directory cannot be deleted.
        """
        print_info(f"Removing {spec.name}...")
        unit_removed = False
        if spec.service_name is not None:
            self.systemd.stop(spec.service_name)
            self.systemd.disable(spec.service_name)
            unit_removed = self.systemd.remove_unit(spec.service_name)

        directory_removed = _remove_tree(spec.target_dir)

        if spec.service_name is not None:
            self._daemon_reload()

        report = RemovalReport(spec.name, unit_removed, directory_removed)
        if report.anything_removed:
            print_success(f"{spec.name.capitalize()} removed")
        else:
            print_info(f"{spec.name.capitalize()} was not installed")
        return report

    def remove_addon(self, entry: AddonEntry) -> RemovalReport:
        """Delete an addon directory and restart the panel if anything changed."""
        target = self.settings.addons_dir / entry.directory
        removed = _remove_tree(target)
        report = RemovalReport(entry.display_name, directory_removed=removed)
        if not removed:
            print_info(f"{entry.display_name} was not installed")
            return report

        service = self.settings.panel_service
        if self.systemd.unit_path(service).exists():
            try:
                self.systemd.restart(service)
            except CommandError as e:
                print_warning(f"Could not restart {service}: {e}")
        print_success(f"{entry.display_name} removed")
        return report

    def _daemon_reload(self) -> None:
        # The unit file is already gone; a failed reload only delays cleanup
        try:
            self.systemd.daemon_reload()
        except CommandError as e:
            print_warning(f"systemctl daemon-reload failed: {e}")
