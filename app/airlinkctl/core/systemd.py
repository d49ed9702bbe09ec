"""systemd unit files and service control.

:class:`ServiceUnit` is the persisted supervision descriptor of a
component; :class:`Systemd` writes and removes unit files and drives
``systemctl``. Stop and disable tolerate units that are already stopped,
disabled or absent so that uninstalling twice is not an error.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from airlinkctl.utils.shell import CommandResult, format_command, run_command, run_step

if TYPE_CHECKING:
    from airlinkctl.models.component import ComponentSpec

logger = logging.getLogger(__name__)

SYSTEMCTL_TIMEOUT = 120.0


@dataclass(frozen=True, slots=True)
class ServiceUnit:
    """Supervision descriptor for one component.

    Attributes:
        name: Unit name without the ``.service`` suffix.
        description: Human-readable description.
        user: Account the service runs as.
        working_directory: Directory the service starts in.
        exec_start: Absolute command line of the service.
        after: Units this service is ordered after.
        environment: Environment variables set for the service.
    """

    name: str
    description: str
    user: str
    working_directory: Path
    exec_start: str
    after: tuple[str, ...] = ("network.target",)
    environment: Mapping[str, str] = field(default_factory=lambda: {"NODE_ENV": "production"})

    @property
    def filename(self) -> str:
        """Return the unit file name."""
        return f"{self.name}.service"

    @classmethod
    def for_component(cls, spec: ComponentSpec) -> ServiceUnit:
        """Build the unit of a component that declares a service.

        The executable of the start command is resolved to an absolute path,
        since systemd does not search PATH for ExecStart.

        Raises:
            ValueError: If the component has no service.
        """
        if spec.service_name is None:
            msg = f"Component '{spec.name}' has no service unit"
            raise ValueError(msg)
        executable, *arguments = spec.start_command
        resolved = shutil.which(executable) or f"/usr/bin/{executable}"
        return cls(
            name=spec.service_name,
            description=f"Airlink {spec.name.capitalize()}",
            user=spec.service_user,
            working_directory=spec.target_dir,
            exec_start=" ".join([resolved, *arguments]),
            after=spec.after_units,
        )

    def render(self) -> str:
        """Render the unit file content."""
        lines = [
            "[Unit]",
            f"Description={self.description}",
            f"After={' '.join(self.after)}",
            "",
            "[Service]",
            "Type=simple",
            f"User={self.user}",
            f"WorkingDirectory={self.working_directory}",
            f"ExecStart={self.exec_start}",
            "Restart=always",
        ]
        lines.extend(f"Environment={key}={value}" for key, value in self.environment.items())
        lines.extend(["", "[Install]", "WantedBy=multi-user.target", ""])
        return "\n".join(lines)


class Systemd:
    """Writes unit files and controls services through systemctl.

    Attributes:
        unit_dir: Directory unit files are written to.
    """

    def __init__(self, unit_dir: Path = Path("/etc/systemd/system")) -> None:
        self.unit_dir = unit_dir

    def unit_path(self, name: str) -> Path:
        """Return the unit file path of a service."""
        return self.unit_dir / f"{name}.service"

    def write_unit(self, unit: ServiceUnit) -> Path:
        """Write a unit file, replacing any previous version."""
        path = self.unit_dir / unit.filename
        self.unit_dir.mkdir(parents=True, exist_ok=True)
        path.write_text(unit.render(), encoding="utf-8")
        logger.info("Wrote unit file %s", path)
        return path

    def remove_unit(self, name: str) -> bool:
        """Delete a unit file.

        Returns:
            True if a file was deleted, False if it did not exist.
        """
        path = self.unit_path(name)
        if not path.exists():
            return False
        path.unlink()
        logger.info("Removed unit file %s", path)
        return True

    def daemon_reload(self) -> None:
        """Reload the systemd manager configuration."""
        run_step(
            ["systemctl", "daemon-reload"],
            description="Reloading systemd",
            timeout=SYSTEMCTL_TIMEOUT,
        )

    def enable_now(self, name: str) -> None:
        """Enable a service at boot and start it immediately."""
        run_step(
            ["systemctl", "enable", "--now", name],
            description=f"Enabling and starting {name}",
            timeout=SYSTEMCTL_TIMEOUT,
        )

    def start(self, name: str) -> None:
        """Start a service."""
        run_step(
            ["systemctl", "start", name],
            description=f"Starting {name}",
            timeout=SYSTEMCTL_TIMEOUT,
        )

    def restart(self, name: str) -> None:
        """Restart a service."""
        run_step(
            ["systemctl", "restart", name],
            description=f"Restarting {name}",
            timeout=SYSTEMCTL_TIMEOUT,
        )

    def stop(self, name: str) -> CommandResult:
        """Stop a service; a unit that is not running is not an error."""
        return self._tolerant(["systemctl", "stop", name])

    def disable(self, name: str) -> CommandResult:
        """Disable a service; a unit that is not enabled is not an error."""
        return self._tolerant(["systemctl", "disable", name])

    def is_active(self, name: str) -> str:
        """Return the ``is-active`` state of a service.

        Returns:
            State string such as "active" or "inactive", or "not installed"
            when systemctl reports nothing.
        """
        try:
            result = run_command(["systemctl", "is-active", name], timeout=SYSTEMCTL_TIMEOUT)
        except (OSError, subprocess.TimeoutExpired):
            return "unknown"
        state = result.stdout.strip()
        if not state or (state == "inactive" and not self.unit_path(name).exists()):
            return "not installed"
        return state

    def _tolerant(self, args: list[str]) -> CommandResult:
        logger.info("CMD %s", format_command(args))
        try:
            result = run_command(args, timeout=SYSTEMCTL_TIMEOUT)
        except OSError as e:
            logger.warning("Could not run %s: %s", format_command(args), e)
            return CommandResult(stdout="", stderr=str(e), returncode=127)
        except subprocess.TimeoutExpired:
            logger.warning("%s timed out, continuing", format_command(args))
            return CommandResult(stdout="", stderr="timed out", returncode=124)
        if not result.success:
            logger.debug("Ignoring exit %d of %s", result.returncode, format_command(args))
        return result
