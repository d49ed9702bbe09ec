"""Addon installer.

Addons are cloned into the panel's addon folder and built in place. They
have no service of their own; the panel is restarted to load them.
"""

import json
import logging

from airlinkctl.components.base import ComponentInstaller, ComponentInstallError
from airlinkctl.models.component import BuildStep
from airlinkctl.models.config import InstallConfig
from airlinkctl.utils.formatting import print_info, print_warning
from airlinkctl.utils.shell import CommandError

logger = logging.getLogger(__name__)


class AddonInstaller(ComponentInstaller):
    """Installs one panel addon."""

    def env_options(self, config: InstallConfig) -> dict[str, str]:
        """Addons are configured through the panel, not an env file."""
        return {}

    def _package_scripts(self) -> dict[str, object] | None:
        """Return the ``scripts`` table of package.json, None without package.json."""
        manifest = self.spec.target_dir / "package.json"
        if not manifest.exists():
            return None
        try:
            data = json.loads(manifest.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ComponentInstallError(f"{self.spec.name}: unreadable package.json: {e}") from e
        scripts = data.get("scripts", {}) if isinstance(data, dict) else {}
        return scripts if isinstance(scripts, dict) else {}

    def install_dependencies(self) -> None:
        """Install dependencies only for addons that ship a package.json."""
        if self._package_scripts() is None:
            logger.info("%s has no package.json, skipping npm install", self.spec.name)
            return
        super().install_dependencies()

    def build_steps(self) -> tuple[BuildStep, ...]:
        """Build the addon when its package.json declares a build script."""
        scripts = self._package_scripts()
        if scripts and "build" in scripts:
            return (BuildStep(f"Building {self.spec.name}", ("npm", "run", "build")),)
        return ()

    def after_install(self) -> None:
        """Restart the panel so it loads the addon."""
        service = self.settings.panel_service
        if not self.systemd.unit_path(service).exists():
            print_warning(f"Panel service {service} not installed; addon loads on next panel start")
            return
        print_info("Restarting panel to load the addon")
        try:
            self.systemd.restart(service)
        except CommandError as e:
            raise ComponentInstallError(f"{self.spec.name}: panel restart failed: {e}") from e
