"""Install and removal workflows.

Composes the provisioner, component installers, admin bootstrap and
uninstaller into the operations offered by the CLI. "Install everything"
runs provisioning, panel, daemon, admin bootstrap and addons in that fixed
order with one :class:`InstallConfig` collected up front.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from airlinkctl.components import (
    AddonInstaller,
    ComponentInstaller,
    DaemonInstaller,
    InstallReport,
    PanelInstaller,
    addon_spec,
    daemon_spec,
    panel_spec,
)
from airlinkctl.core.addons import load_addon_catalog, resolve_addons
from airlinkctl.core.bootstrap import AdminBootstrap, RegistrationResult
from airlinkctl.core.fetcher import RepositoryFetcher
from airlinkctl.core.host import primary_address
from airlinkctl.core.provisioner import PackageProvisioner
from airlinkctl.core.settings import InstallerSettings
from airlinkctl.core.systemd import Systemd
from airlinkctl.core.uninstall import RemovalReport, Uninstaller
from airlinkctl.models.component import AddonEntry, ComponentSpec
from airlinkctl.models.config import InstallConfig
from airlinkctl.models.host import HostProfile
from airlinkctl.operators import get_operator
from airlinkctl.operators.base import FamilyOperator
from airlinkctl.utils.shell import run_command

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class InstallSummary:
    """Result of "install everything".

    Attributes:
        panel_url: URL the panel is reachable at.
        daemon_key: Auth key written to the daemon configuration.
        reports: Per-component install reports in install order.
        admin: Result of the admin bootstrap, None when skipped.
    """

    panel_url: str
    daemon_key: str | None
    reports: tuple[InstallReport, ...] = ()
    admin: RegistrationResult | None = None


@dataclass(frozen=True, slots=True)
class StatusReport:
    """Snapshot of the installation state.

    Attributes:
        host: Detected host profile.
        services: Service name -> ``systemctl is-active`` state.
        node_version: Output of ``node -v`` or "not installed".
        docker_version: Output of ``docker --version`` or "not installed".
        addons: Installed addon display names.
    """

    host: HostProfile
    services: dict[str, str] = field(default_factory=dict)
    node_version: str = "not installed"
    docker_version: str = "not installed"
    addons: tuple[str, ...] = ()


def _tool_version(args: list[str]) -> str:
    try:
        result = run_command(args, timeout=30.0)
    except OSError:
        return "not installed"
    if not result.success:
        return "not installed"
    return result.stdout.strip() or "unknown"


class InstallWorkflow:
    """Entry point for all install, removal and status operations.

    Attributes:
        settings: Installer settings.
        profile: Detected host profile.
    """

    def __init__(
        self,
        settings: InstallerSettings,
        profile: HostProfile,
        *,
        operator: FamilyOperator | None = None,
        systemd: Systemd | None = None,
        fetcher: RepositoryFetcher | None = None,
        catalog: dict[str, AddonEntry] | None = None,
        bootstrap: AdminBootstrap | None = None,
    ) -> None:
        self.settings = settings
        self.profile = profile
        self.operator = operator or get_operator(profile, timeout=settings.command_timeout)
        self.systemd = systemd or Systemd(settings.unit_dir)
        self.fetcher = fetcher or RepositoryFetcher(
            countdown_seconds=settings.countdown_seconds,
            timeout=settings.command_timeout,
        )
        self._catalog = catalog
        self._bootstrap = bootstrap

    @property
    def catalog(self) -> dict[str, AddonEntry]:
        """Addon catalog, loaded on first use."""
        if self._catalog is None:
            self._catalog = load_addon_catalog()
        return self._catalog

    @property
    def provisioner(self) -> PackageProvisioner:
        """Provisioner bound to this host's operator."""
        return PackageProvisioner(self.operator, self.settings, self.systemd)

    @property
    def uninstaller(self) -> Uninstaller:
        """Uninstaller sharing this workflow's systemd controller."""
        return Uninstaller(self.settings, self.systemd)

    def _installer(self, cls: type[ComponentInstaller], spec: ComponentSpec) -> ComponentInstaller:
        return cls(
            spec, self.settings, operator=self.operator, fetcher=self.fetcher, systemd=self.systemd
        )

    def install_dependencies(self) -> None:
        """Provision base packages, Node.js, TypeScript and Docker."""
        self.provisioner.provision()

    def install_panel(self, config: InstallConfig) -> InstallReport:
        """Install the panel."""
        return self._installer(PanelInstaller, panel_spec(self.settings)).install(config)

    def install_daemon(self, config: InstallConfig) -> InstallReport:
        """Install the daemon."""
        return self._installer(DaemonInstaller, daemon_spec(self.settings)).install(config)

    def install_addons(self, config: InstallConfig) -> list[InstallReport]:
        """Install the addons selected in ``config``.

        Raises:
            UnknownAddonError: If a selected key is not in the catalog.
        """
        return self._install_entries(resolve_addons(config.addons, self.catalog), config)

    def _install_entries(
        self, entries: list[AddonEntry], config: InstallConfig
    ) -> list[InstallReport]:
        reports = []
        for entry in entries:
            installer = self._installer(AddonInstaller, addon_spec(entry, self.settings))
            reports.append(installer.install(config))
        return reports

    def bootstrap_admin(self, config: InstallConfig) -> RegistrationResult | None:
        """Create the admin account when requested.

        Raises:
            AdminBootstrapError: If the panel rejects the username or password.
        """
        if not config.wants_admin:
            logger.info("Admin bootstrap not requested")
            return None
        bootstrap = self._bootstrap or AdminBootstrap(self.settings, systemd=self.systemd)
        return bootstrap.run(config)

    def panel_url(self, config: InstallConfig) -> str:
        """Return the URL the panel is reachable at."""
        return f"http://{primary_address()}:{config.panel_port}"

    def install_everything(self, config: InstallConfig) -> InstallSummary:
        """Provision, install panel and daemon, bootstrap the admin, install addons.

        Addon keys are resolved before the first step runs.

        Raises:
            UnknownAddonError: If a selected addon is not in the catalog.
        """
        addons = resolve_addons(config.addons, self.catalog)
        self.install_dependencies()
        reports = [self.install_panel(config)]
        daemon = self.install_daemon(config)
        reports.append(daemon)
        admin = self.bootstrap_admin(config)
        reports.extend(self._install_entries(addons, config))
        return InstallSummary(
            panel_url=self.panel_url(config),
            daemon_key=daemon.env.get("AUTH_KEY"),
            reports=tuple(reports),
            admin=admin,
        )

    def remove_panel(self) -> RemovalReport:
        """Remove the panel, addons included."""
        return self.uninstaller.remove(panel_spec(self.settings))

    def remove_daemon(self) -> RemovalReport:
        """Remove the daemon."""
        return self.uninstaller.remove(daemon_spec(self.settings))

    def remove_addon(self, key: str) -> RemovalReport:
        """Remove one addon by catalog key."""
        (entry,) = resolve_addons([key], self.catalog)
        return self.uninstaller.remove_addon(entry)

    def remove_dependencies(self) -> bool:
        """Remove Node.js, npm and Docker; failure is only reported."""
        return self.provisioner.remove_dependencies()

    def remove_everything(self) -> list[RemovalReport]:
        """Remove panel, daemon and dependencies."""
        reports = [self.remove_panel(), self.remove_daemon()]
        self.remove_dependencies()
        return reports

    def installed_addons(self) -> tuple[str, ...]:
        """Return the display names of addons present on disk."""
        return tuple(
            entry.display_name
            for entry in self.catalog.values()
            if (self.settings.addons_dir / entry.directory).is_dir()
        )

    def status(self) -> StatusReport:
        """Collect service states and tool versions."""
        services = {
            name: self.systemd.is_active(name)
            for name in (self.settings.panel_service, self.settings.daemon_service)
        }
        return StatusReport(
            host=self.profile,
            services=services,
            node_version=_tool_version(["node", "-v"]),
            docker_version=_tool_version(["docker", "--version"]),
            addons=self.installed_addons(),
        )
