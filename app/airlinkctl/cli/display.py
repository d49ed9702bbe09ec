"""Shared Rich display functions for status and install results."""

from rich.table import Table

from airlinkctl.core.workflow import InstallSummary, StatusReport
from airlinkctl.models.component import AddonEntry
from airlinkctl.utils.formatting import (
    console,
    create_status_table,
    format_service_state,
    print_success,
)


def create_status_report_table(report: StatusReport) -> Table:
    """Create a table with service states, tool versions and the host.

    Args:
        report: Status snapshot to display.

    Returns:
        Rich Table ready for printing.
    """
    table = create_status_table()
    for name, state in report.services.items():
        table.add_row(name, format_service_state(state))
    table.add_row("Node.js", report.node_version)
    table.add_row("Docker", report.docker_version)
    table.add_row("OS", report.host.display_name)
    table.add_row("Package manager", report.host.package_manager)
    table.add_row("Addons", ", ".join(report.addons) or "[muted]none[/]")
    return table


def create_addons_table(catalog: dict[str, AddonEntry], installed: tuple[str, ...]) -> Table:
    """Create a table listing the addon catalog."""
    table = Table(
        title="Addons",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Key", style="text", no_wrap=True)
    table.add_column("Name")
    table.add_column("Repository", style="muted")
    table.add_column("Installed", justify="center")

    for key, entry in catalog.items():
        mark = "[success]yes[/]" if entry.display_name in installed else "[muted]no[/]"
        table.add_row(key, entry.display_name, f"{entry.repo_url} ({entry.branch})", mark)
    return table


def print_install_summary(summary: InstallSummary) -> None:
    """Print the completion summary of an install run."""
    console.print()
    print_success("Installation complete")
    console.print(f"  Panel URL:  [info]{summary.panel_url}[/]")
    if summary.daemon_key:
        console.print(f"  Daemon key: [warning]{summary.daemon_key}[/]")
        console.print("  [muted]Enter this key when adding the node in the panel.[/]")
    for report in summary.reports:
        console.print(f"  [muted]{report.spec.name}: {report.spec.target_dir}[/]")
