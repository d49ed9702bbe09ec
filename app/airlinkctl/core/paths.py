"""XDG-compliant path management for airlinkctl.

This module provides standardized paths following the XDG Base Directory
Specification for the installer's own configuration and state.

XDG defaults:
- Config: ~/.config/airlinkctl/
- State: ~/.local/state/airlinkctl/

Paths of the installed components (install root, unit directory) are
configurable and live in :mod:`airlinkctl.core.settings`.
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "airlinkctl"

# Location of the OS identification file read by the host probe
OS_RELEASE_PATH = Path("/etc/os-release")


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/airlinkctl/ (or XDG_CONFIG_HOME/airlinkctl/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_state_dir() -> Path:
    """Get the state directory path.

    State data includes the installer log, which should persist between
    runs but is not configuration.

    Returns:
        Path to ~/.local/state/airlinkctl/ (or XDG_STATE_HOME/airlinkctl/).
    """
    return _get_xdg_dir("XDG_STATE_HOME", ".local/state")


def get_settings_path() -> Path:
    """Get the installer settings file path.

    Returns:
        Path to ~/.config/airlinkctl/settings.toml.
    """
    return get_config_dir() / "settings.toml"


def get_user_addons_path() -> Path:
    """Get the user addon catalog path.

    Returns:
        Path to ~/.config/airlinkctl/addons.toml.
    """
    return get_config_dir() / "addons.toml"


def get_default_log_path() -> Path:
    """Get the default installer log path.

    Returns:
        Path to ~/.local/state/airlinkctl/installer.log.
    """
    return get_state_dir() / "installer.log"


def _ensure_dir(path: Path, name: str) -> Path:
    """Create directory if it doesn't exist.

    Args:
        path: Directory path to create.
        name: Human-readable name for error messages.

    Returns:
        The created/existing directory path.

    Raises:
        RuntimeError: If directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create {name} directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create {name} directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path


def ensure_config_dir() -> Path:
    """Create the configuration directory if it doesn't exist.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    return _ensure_dir(get_config_dir(), "config")


def ensure_state_dir() -> Path:
    """Create the state directory if it doesn't exist.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    return _ensure_dir(get_state_dir(), "state")
