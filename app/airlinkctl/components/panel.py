"""Panel installer.

The panel is a Node.js web application backed by a Prisma-managed SQLite
database. Besides the common pipeline it pins the Prisma CLI version and
drops the example configuration shipped in the repository.
"""

import logging
import re

from airlinkctl.components.base import ComponentInstaller, ComponentInstallError
from airlinkctl.core.envfile import generate_secret
from airlinkctl.core.host import primary_address
from airlinkctl.models.config import InstallConfig
from airlinkctl.utils.formatting import print_info, print_success
from airlinkctl.utils.shell import CommandError, command_exists, run_command, run_step

logger = logging.getLogger(__name__)

_PRISMA_VERSION_RE = re.compile(r"^prisma\s*:\s*(\S+)", re.MULTILINE)


def parse_prisma_version(output: str) -> str | None:
    """Extract the CLI version from ``prisma -v`` output."""
    match = _PRISMA_VERSION_RE.search(output)
    return match.group(1) if match else None


class PanelInstaller(ComponentInstaller):
    """Installs the Airlink panel."""

    def panel_url(self, config: InstallConfig) -> str:
        """Return the URL the panel is reachable at."""
        return f"http://{primary_address()}:{config.panel_port}"

    def env_options(self, config: InstallConfig) -> dict[str, str]:
        """Return panel options with freshly generated JWT and session secrets."""
        return {
            "NAME": config.panel_name,
            "NODE_ENV": "production",
            "URL": self.panel_url(config),
            "PORT": str(config.panel_port),
            "DATABASE_URL": "file:./dev.db",
            "JWT_SECRET": generate_secret(),
            "SESSION_SECRET": generate_secret(),
        }

    def prepare_checkout(self) -> None:
        """Remove the example env file so it cannot shadow the rendered one."""
        example = self.spec.target_dir / "example.env"
        if example.exists():
            example.unlink()

    def before_build(self) -> None:
        """Pin the Prisma CLI before migrations run."""
        self.ensure_prisma()

    def installed_prisma_version(self) -> str | None:
        """Return the version of the prisma CLI on PATH, or None."""
        if not command_exists("prisma"):
            return None
        try:
            result = run_command(["prisma", "-v"], timeout=60.0, cwd=str(self.spec.target_dir))
        except OSError:
            return None
        return parse_prisma_version(result.stdout) if result.success else None

    def ensure_prisma(self) -> bool:
        """Install the pinned Prisma version into the panel if needed.

        Returns:
            True if Prisma was (re)installed.

        Raises:
            ComponentInstallError: If the pinned version cannot be installed.
        """
        target = self.settings.prisma_version
        installed = self.installed_prisma_version()
        if installed == target:
            print_success(f"Prisma {target} already installed, skipping")
            return False

        cwd = str(self.spec.target_dir)
        if installed is None:
            print_info(f"Prisma not found, installing {target}")
        else:
            print_info(f"Prisma version mismatch (found {installed}), reinstalling {target}")
            # Cleanup of the old version is best-effort
            for args in (
                ["npm", "uninstall", "-g", "prisma"],
                ["npm", "uninstall", "prisma", "@prisma/client"],
                ["npm", "cache", "clean", "--force"],
            ):
                result = run_command(args, timeout=self.settings.command_timeout, cwd=cwd)
                if not result.success:
                    logger.debug("Ignoring failure of %s", " ".join(args))

        try:
            run_step(
                ["npm", "install", f"prisma@{target}", f"@prisma/client@{target}"],
                description=f"Installing Prisma {target}",
                timeout=self.settings.command_timeout,
                cwd=cwd,
            )
        except CommandError as e:
            raise ComponentInstallError(f"panel: Prisma install failed: {e}") from e
        return True
