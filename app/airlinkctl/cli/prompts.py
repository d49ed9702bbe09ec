"""Interactive collection of the install configuration.

All questions are asked once, before any install step runs. The answers
are validated into an immutable :class:`InstallConfig`.
"""

from pydantic import ValidationError
from rich.prompt import Confirm, IntPrompt, Prompt

from airlinkctl.core.errors import InstallerError
from airlinkctl.models.component import AddonEntry
from airlinkctl.models.config import (
    InstallConfig,
    is_valid_username,
    password_problem,
)
from airlinkctl.utils.formatting import console, print_warning


class ConfigurationError(InstallerError):
    """Raised when the collected answers do not form a valid configuration."""


def _ask_port(label: str, default: int) -> int:
    while True:
        port = IntPrompt.ask(label, default=default, console=console)
        if 1 <= port <= 65535:
            return port
        print_warning("Port must be between 1 and 65535")


def ask_username(default: str) -> str:
    """Ask for the admin username, falling back to ``default`` when invalid."""
    value = Prompt.ask(
        "Admin username (3-20 letters or digits)", default=default, console=console
    ).strip()
    if not is_valid_username(value):
        print_warning(f"Invalid username '{value}', using '{default}'")
        return default
    return value


def ask_password() -> str:
    """Ask for the admin password until it satisfies the password rule."""
    while True:
        value = Prompt.ask("Admin password", password=True, console=console)
        problem = password_problem(value)
        if problem is None:
            confirm = Prompt.ask("Repeat password", password=True, console=console)
            if confirm == value:
                return value
            print_warning("Passwords do not match")
            continue
        print_warning(f"Password {problem}")


def ask_addons(
    catalog: dict[str, AddonEntry], preselected: tuple[str, ...] = ()
) -> tuple[str, ...]:
    """Ask which catalog addons to install."""
    selected = []
    for key, entry in catalog.items():
        if Confirm.ask(
            f"Install addon [info]{entry.display_name}[/]?",
            default=key in preselected,
            console=console,
        ):
            selected.append(key)
    return tuple(selected)


def collect_install_config(
    defaults: InstallConfig,
    *,
    panel: bool = True,
    daemon: bool = True,
    catalog: dict[str, AddonEntry] | None = None,
) -> InstallConfig:
    """Ask the operator for every setting the selected components need.

    Args:
        defaults: Configuration providing the default answers.
        panel: Ask the panel and admin account questions.
        daemon: Ask the daemon questions.
        catalog: Addon catalog to choose from; None skips the addon question.

    Returns:
        The validated configuration.

    Raises:
        ConfigurationError: If the answers are rejected by validation.
    """
    answers = defaults.model_dump()

    if panel:
        answers["panel_name"] = Prompt.ask(
            "Panel name", default=defaults.panel_name, console=console
        )
        answers["panel_port"] = _ask_port("Panel port", defaults.panel_port)
        answers["create_admin"] = Confirm.ask(
            "Create an admin account?", default=True, console=console
        )
        if answers["create_admin"]:
            answers["admin_username"] = ask_username(defaults.admin_username)
            answers["admin_email"] = Prompt.ask(
                "Admin email", default=defaults.admin_email, console=console
            )
            answers["admin_password"] = ask_password()

    if daemon:
        answers["daemon_port"] = _ask_port("Daemon port", defaults.daemon_port)
        key = Prompt.ask(
            "Daemon auth key (leave empty to generate one)", default="", console=console
        )
        answers["daemon_key"] = key or None

    if catalog:
        answers["addons"] = ask_addons(catalog, defaults.addons)

    try:
        return InstallConfig.model_validate(answers)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
