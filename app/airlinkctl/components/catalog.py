"""Component specifications derived from the installer settings."""

from airlinkctl.core.settings import InstallerSettings
from airlinkctl.models.component import AddonEntry, BuildStep, ComponentKind, ComponentSpec


def panel_spec(settings: InstallerSettings) -> ComponentSpec:
    """Build the panel component specification."""
    steps = [
        BuildStep("Running migrations", ("npm", "run", "migrate:dev"), env={"CI": "true"}),
        BuildStep("Building panel", ("npm", "run", "build")),
    ]
    if settings.seed_database:
        steps.append(BuildStep("Seeding database", ("npm", "run", "seed")))
    return ComponentSpec(
        name="panel",
        kind=ComponentKind.PANEL,
        source_url=settings.panel_repo,
        branch=settings.panel_branch,
        target_dir=settings.panel_dir,
        service_name=settings.panel_service,
        service_user=settings.panel_user,
        start_command=("node", "dist/app.js"),
        after_units=("network.target",),
        build_steps=tuple(steps),
    )


def daemon_spec(settings: InstallerSettings) -> ComponentSpec:
    """Build the daemon component specification.

    The daemon drives containers, so its unit is ordered after Docker.
    """
    return ComponentSpec(
        name="daemon",
        kind=ComponentKind.DAEMON,
        source_url=settings.daemon_repo,
        branch=settings.daemon_branch,
        target_dir=settings.daemon_dir,
        service_name=settings.daemon_service,
        service_user=settings.daemon_user,
        start_command=("node", "dist/index.js"),
        after_units=("network.target", "docker.service"),
        build_steps=(BuildStep("Building daemon", ("npm", "run", "build")),),
    )


def addon_spec(entry: AddonEntry, settings: InstallerSettings) -> ComponentSpec:
    """Build the specification of a panel addon.

    Addons run inside the panel: they have no unit of their own and are
    owned by the panel user.
    """
    return ComponentSpec(
        name=entry.display_name,
        kind=ComponentKind.ADDON,
        source_url=entry.repo_url,
        branch=entry.branch,
        target_dir=settings.addons_dir / entry.directory,
        service_user=settings.panel_user,
    )
