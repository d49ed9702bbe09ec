"""Abstract base class for component installers.

A component install is a fixed pipeline:

1. fetch the repository (destructive replace)
2. component-specific checkout preparation
3. render the environment file
4. install production dependencies
5. component-specific pre-build hook
6. declared build steps (migrations, build, seed)
7. ownership and permissions for the service user
8. write the service unit and enable it

Every failing command is fatal and stops the pipeline; nothing is rolled
back, so the checkout stays on disk for inspection. The installer never
checks whether a component is already installed: re-running always
re-provisions from scratch.
"""

from __future__ import annotations

import logging
import pwd
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from airlinkctl.core.errors import InstallerError
from airlinkctl.core.envfile import write_env_file
from airlinkctl.core.fetcher import RepositoryFetcher
from airlinkctl.core.settings import InstallerSettings
from airlinkctl.core.systemd import ServiceUnit, Systemd
from airlinkctl.models.component import BuildStep, ComponentSpec
from airlinkctl.models.config import InstallConfig
from airlinkctl.operators.base import FamilyOperator
from airlinkctl.utils.formatting import print_info, print_success
from airlinkctl.utils.shell import CommandError, run_step

logger = logging.getLogger(__name__)


class ComponentInstallError(InstallerError):
    """Raised when a step of a component install fails."""


@dataclass(frozen=True, slots=True)
class InstallReport:
    """Outcome of a successful component install.

    Attributes:
        spec: The installed component.
        env: Options written to the environment file.
        unit_path: Path of the written unit file, None for addons.
    """

    spec: ComponentSpec
    env: dict[str, str] = field(default_factory=dict)
    unit_path: Path | None = None


class ComponentInstaller(ABC):
    """Runs the install pipeline for one component.

    Subclasses provide the environment options and may override the
    checkout, dependency, pre-build and post-install hooks.

    Attributes:
        spec: Component being installed.
        settings: Installer settings.
    """

    def __init__(
        self,
        spec: ComponentSpec,
        settings: InstallerSettings,
        *,
        operator: FamilyOperator,
        fetcher: RepositoryFetcher | None = None,
        systemd: Systemd | None = None,
    ) -> None:
        self.spec = spec
        self.settings = settings
        self.operator = operator
        self.fetcher = fetcher or RepositoryFetcher(
            countdown_seconds=settings.countdown_seconds,
            timeout=settings.command_timeout,
        )
        self.systemd = systemd or Systemd(settings.unit_dir)

    @abstractmethod
    def env_options(self, config: InstallConfig) -> dict[str, str]:
        """Return the environment options for this install.

        Secrets must be generated fresh on every call.
        """

    def prepare_checkout(self) -> None:
        """Adjust the fresh checkout before configuration (no-op by default)."""

    def install_dependencies(self) -> None:
        """Install production npm dependencies."""
        self._run(
            BuildStep(
                description="Installing dependencies",
                command=("npm", "install", "--omit=dev"),
            )
        )

    def before_build(self) -> None:
        """Run component-specific work before the build steps (no-op by default)."""

    def build_steps(self) -> tuple[BuildStep, ...]:
        """Return the build steps to run, by default the declared ones."""
        return self.spec.build_steps

    def after_install(self) -> None:
        """Run component-specific work after the install (no-op by default)."""

    def install(self, config: InstallConfig) -> InstallReport:
        """Run the full install pipeline.

        Raises:
            FetchError: If the clone fails or is aborted.
            ComponentInstallError: If any command of the pipeline fails.
        """
        spec = self.spec
        print_info(f"Installing {spec.name}...")
        self.fetcher.fetch(spec.source_url, spec.target_dir, spec.branch)
        self.prepare_checkout()

        env = self.env_options(config)
        if env:
            write_env_file(spec.env_path, env)

        self.install_dependencies()
        self.before_build()
        for step in self.build_steps():
            self._run(step)

        self.apply_permissions()

        unit_path: Path | None = None
        if spec.has_service:
            unit_path = self.register_service()

        self.after_install()
        print_success(f"{spec.name.capitalize()} installed in {spec.target_dir}")
        return InstallReport(spec=spec, env=env, unit_path=unit_path)

    def apply_permissions(self) -> None:
        """Hand the checkout to the service user.

        The environment file keeps mode 0600 since it holds secrets.
        """
        user = self.spec.service_user
        target = str(self.spec.target_dir)
        self.ensure_user(user)
        self._run(BuildStep("Setting ownership", ("chown", "-R", f"{user}:{user}", target)))
        self._run(BuildStep("Setting permissions", ("chmod", "-R", "755", target)))
        if self.spec.env_path.exists():
            self.spec.env_path.chmod(0o600)

    def ensure_user(self, name: str) -> None:
        """Create the service user as a system account if it does not exist."""
        try:
            pwd.getpwnam(name)
        except KeyError:
            print_info(f"Creating system user {name}")
            try:
                self.operator.add_system_user(name)
            except CommandError as e:
                msg = f"{self.spec.name}: cannot create user {name}: {e}"
                raise ComponentInstallError(msg) from e

    def register_service(self) -> Path:
        """Write the unit file, reload systemd and start the service."""
        unit = ServiceUnit.for_component(self.spec)
        path = self.systemd.write_unit(unit)
        try:
            self.systemd.daemon_reload()
            self.systemd.enable_now(unit.name)
        except CommandError as e:
            raise ComponentInstallError(f"{self.spec.name}: service setup failed: {e}") from e
        return path

    def _run(self, step: BuildStep) -> None:
        try:
            run_step(
                list(step.command),
                description=step.description,
                timeout=self.settings.command_timeout,
                cwd=str(self.spec.target_dir),
                env=step.env or None,
            )
        except CommandError as e:
            raise ComponentInstallError(f"{self.spec.name}: {step.description} failed: {e}") from e
