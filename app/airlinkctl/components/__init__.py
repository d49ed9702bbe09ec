"""Component installers for the panel, the daemon and addons."""

from airlinkctl.components.addon import AddonInstaller
from airlinkctl.components.base import ComponentInstaller, ComponentInstallError, InstallReport
from airlinkctl.components.catalog import addon_spec, daemon_spec, panel_spec
from airlinkctl.components.daemon import DaemonInstaller
from airlinkctl.components.panel import PanelInstaller

__all__ = [
    "AddonInstaller",
    "ComponentInstallError",
    "ComponentInstaller",
    "DaemonInstaller",
    "InstallReport",
    "PanelInstaller",
    "addon_spec",
    "daemon_spec",
    "panel_spec",
]
