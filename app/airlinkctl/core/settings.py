"""Installer settings.

This module provides the settings model and I/O functions for airlinkctl.
Settings describe *where* and *how* components are installed (paths,
repositories, pinned versions, timeouts); per-run answers such as ports and
the admin account live in :class:`airlinkctl.models.config.InstallConfig`.

Settings are stored in ~/.config/airlinkctl/settings.toml. A missing file
means "use the defaults".
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from airlinkctl.core.errors import InstallerError
from airlinkctl.core.paths import get_default_log_path, get_settings_path

logger = logging.getLogger(__name__)


class InstallerSettings(BaseModel):
    """Configuration for the installer.

    Attributes:
        install_root: Parent directory of the panel and daemon checkouts.
        panel_repo: Git URL of the panel.
        panel_branch: Panel branch, None for the default branch.
        daemon_repo: Git URL of the daemon.
        daemon_branch: Daemon branch, None for the default branch.
        panel_service: systemd unit name of the panel.
        daemon_service: systemd unit name of the daemon.
        panel_user: User the panel runs as.
        daemon_user: User the daemon runs as.
        unit_dir: Directory systemd unit files are written to.
        node_major: Pinned Node.js major version.
        prisma_version: Pinned Prisma version used by the panel.
        base_packages: Executables that must be present before installing.
        seed_database: Run the panel's seed script after migrating.
        countdown_seconds: Length of the warning before a checkout is deleted.
        command_timeout: Upper bound in seconds for a single install step.
        http_timeout: Timeout in seconds for panel HTTP calls.
        bootstrap_delay: Seconds to wait for the panel before the admin bootstrap.
        log_path: Installer log file; None uses the state directory.
    """

    model_config = ConfigDict(extra="forbid")

    install_root: Annotated[Path, Field(description="Parent directory of checkouts")] = Path(
        "/var/www"
    )
    panel_repo: str = "https://github.com/thavanish/panel.git"
    panel_branch: str | None = None
    daemon_repo: str = "https://github.com/airlinklabs/daemon.git"
    daemon_branch: str | None = None
    panel_service: str = "airlink-panel"
    daemon_service: str = "airlink-daemon"
    panel_user: str = "www-data"
    daemon_user: str = "root"
    unit_dir: Path = Path("/etc/systemd/system")
    node_major: Annotated[str, Field(pattern=r"^\d+$")] = "20"
    prisma_version: str = "6.19.1"
    base_packages: list[str] = Field(default_factory=lambda: ["curl", "wget", "git", "jq"])
    seed_database: bool = False
    countdown_seconds: Annotated[int, Field(ge=0, le=60)] = 5
    command_timeout: Annotated[int, Field(ge=30, le=7200)] = 1800
    http_timeout: Annotated[float, Field(gt=0, le=120)] = 10.0
    bootstrap_delay: Annotated[float, Field(ge=0, le=120)] = 5.0
    log_path: Path | None = None

    @property
    def panel_dir(self) -> Path:
        """Directory of the panel checkout."""
        return self.install_root / "panel"

    @property
    def daemon_dir(self) -> Path:
        """Directory of the daemon checkout."""
        return self.install_root / "daemon"

    @property
    def addons_dir(self) -> Path:
        """Directory addons are installed into."""
        return self.panel_dir / "storage" / "addons"

    @property
    def effective_log_path(self) -> Path:
        """Configured log path or the default one in the state directory."""
        return self.log_path or get_default_log_path()


class SettingsError(InstallerError):
    """Raised when the settings file cannot be read, parsed or written."""


def load_settings(path: Path | None = None) -> InstallerSettings:
    """Load installer settings from a TOML file.

    Args:
        path: Path to the settings file. If None, uses the default path.

    Returns:
        Validated InstallerSettings; defaults if the file does not exist.

    Raises:
        SettingsError: If the file cannot be read or its content is invalid.
    """
    settings_path = path or get_settings_path()

    if not settings_path.exists():
        logger.debug("No settings file at %s, using defaults", settings_path)
        return InstallerSettings()

    try:
        with open(settings_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise SettingsError(f"Invalid TOML syntax in {settings_path}: {e}") from e
    except OSError as e:
        raise SettingsError(f"Failed to read settings: {e}") from e

    try:
        return InstallerSettings.model_validate(data)
    except ValidationError as e:
        raise SettingsError(f"Invalid settings in {settings_path}: {e}") from e


def save_settings(settings: InstallerSettings, path: Path | None = None) -> Path:
    """Save installer settings to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        settings: The settings to save.
        path: Destination path. If None, uses the default path.

    Returns:
        Path where the settings were saved.

    Raises:
        SettingsError: If the file cannot be written.
    """
    settings_path = path or get_settings_path()
    settings_path.parent.mkdir(parents=True, exist_ok=True)

    # TOML has no null, so unset optional values are left out
    data = settings.model_dump(mode="json", exclude_none=True)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=settings_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(settings_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise SettingsError(f"Failed to write settings: {e}") from e

    return settings_path
