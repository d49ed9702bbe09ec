"""Daemon installer.

The daemon authenticates to the panel with a shared key. When the operator
did not provide one, a fresh key is generated and must be entered in the
panel's node settings.
"""

from airlinkctl.components.base import ComponentInstaller
from airlinkctl.core.envfile import generate_secret
from airlinkctl.models.config import InstallConfig

DOCKER_SOCKET = "/var/run/docker.sock"


class DaemonInstaller(ComponentInstaller):
    """Installs the Airlink daemon."""

    def env_options(self, config: InstallConfig) -> dict[str, str]:
        """Return daemon options; the auth key is generated when not given."""
        return {
            "NODE_ENV": "production",
            "PORT": str(config.daemon_port),
            "AUTH_KEY": config.daemon_key or generate_secret(),
            "DOCKER_SOCKET": DOCKER_SOCKET,
        }
