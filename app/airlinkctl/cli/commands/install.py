"""Install command implementation.

Installs the panel, the daemon, the system dependencies or everything.
All questions are asked before the first step runs.
"""

from typing import Annotated

import typer
from pydantic import ValidationError
from rich.prompt import Confirm

from airlinkctl.cli.display import print_install_summary
from airlinkctl.cli.prompts import collect_install_config
from airlinkctl.cli.types import ComponentChoice, fail, open_workflow
from airlinkctl.core.addons import resolve_addons
from airlinkctl.core.errors import InstallerError
from airlinkctl.core.workflow import InstallWorkflow
from airlinkctl.models.config import DEFAULT_EMAIL, DEFAULT_USERNAME, InstallConfig
from airlinkctl.utils.formatting import console, print_info, print_success, print_warning

app = typer.Typer(
    help="Install the panel, the daemon and their dependencies.",
    invoke_without_command=True,
)


def run_install(
    workflow: InstallWorkflow,
    component: ComponentChoice,
    config: InstallConfig,
) -> None:
    """Run the install for the chosen component.

    Raises:
        InstallerError: If any step fails.
    """
    if component == ComponentChoice.ALL:
        summary = workflow.install_everything(config)
        print_install_summary(summary)
    elif component == ComponentChoice.PANEL:
        workflow.install_panel(config)
        workflow.bootstrap_admin(config)
        print_success(f"Panel available at {workflow.panel_url(config)}")
    elif component == ComponentChoice.DAEMON:
        report = workflow.install_daemon(config)
        key = report.env.get("AUTH_KEY")
        if key:
            console.print(f"  Daemon key: [warning]{key}[/]")
    else:
        workflow.install_dependencies()
        print_success("Dependencies installed")


@app.callback(invoke_without_command=True)
def install(
    ctx: typer.Context,
    component: Annotated[
        ComponentChoice,
        typer.Option(
            "--component",
            "-c",
            help="What to install: all, panel, daemon or dependencies.",
            case_sensitive=False,
        ),
    ] = ComponentChoice.ALL,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Do not ask questions; use the options given.",
        ),
    ] = False,
    panel_name: Annotated[
        str, typer.Option("--panel-name", help="Panel display name.")
    ] = "Airlink",
    panel_port: Annotated[int, typer.Option("--panel-port", help="Panel port.")] = 3000,
    daemon_port: Annotated[int, typer.Option("--daemon-port", help="Daemon port.")] = 3002,
    daemon_key: Annotated[
        str | None,
        typer.Option("--daemon-key", help="Daemon auth key (generated if omitted)."),
    ] = None,
    admin: Annotated[
        bool,
        typer.Option("--admin/--no-admin", help="Create the first admin account."),
    ] = False,
    admin_username: Annotated[
        str, typer.Option("--admin-username", help="Admin username.")
    ] = DEFAULT_USERNAME,
    admin_email: Annotated[str, typer.Option("--admin-email", help="Admin email.")] = DEFAULT_EMAIL,
    admin_password: Annotated[
        str | None,
        typer.Option(
            "--admin-password",
            envvar="AIRLINK_ADMIN_PASSWORD",
            help="Admin password (or set AIRLINK_ADMIN_PASSWORD).",
        ),
    ] = None,
    addons: Annotated[
        list[str] | None,
        typer.Option("--addon", "-a", help="Addon to install (repeatable)."),
    ] = None,
) -> None:
    """Install Airlink components.

    Examples:
        airlinkctl install                      # Interactive, everything
        airlinkctl install -c daemon            # Only the daemon
        airlinkctl install -y --admin \\
            --admin-password s3cretpass         # Unattended
    """
    if ctx.invoked_subcommand is not None:
        return

    try:
        defaults = InstallConfig(
            panel_name=panel_name,
            panel_port=panel_port,
            daemon_port=daemon_port,
            daemon_key=daemon_key,
            admin_email=admin_email,
            admin_username=admin_username,
            admin_password=admin_password,
            create_admin=admin,
            addons=tuple(addons or ()),
        )
    except ValidationError as e:
        fail(e)

    workflow = open_workflow(ctx)
    wants_panel = component in (ComponentChoice.ALL, ComponentChoice.PANEL)
    wants_daemon = component in (ComponentChoice.ALL, ComponentChoice.DAEMON)

    try:
        if defaults.addons:
            resolve_addons(defaults.addons, workflow.catalog)
        if yes:
            config = defaults
            if config.create_admin and not config.wants_admin:
                print_warning("--admin given without a password; skipping the admin account")
        elif component == ComponentChoice.DEPENDENCIES:
            config = defaults
        else:
            catalog = workflow.catalog if component == ComponentChoice.ALL else None
            config = collect_install_config(
                defaults, panel=wants_panel, daemon=wants_daemon, catalog=catalog
            )

        if not yes and not Confirm.ask(
            f"Install {component.value} now?", default=True, console=console
        ):
            print_info("Aborted. Nothing was changed.")
            raise typer.Exit(code=0)

        run_install(workflow, component, config)
    except InstallerError as e:
        fail(e)
