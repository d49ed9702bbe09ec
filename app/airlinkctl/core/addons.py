"""Addon catalog loading.

The catalog is pure data: a bundled ``addons.toml`` plus an optional user
file with the same layout. User entries are merged over the bundled ones,
so new addons are added by appending a table, without code changes::

    [addons.mykey]
    display_name = "My Addon"
    repo_url = "https://github.com/me/my-addon.git"
    branch = "main"
    directory = "my-addon"
"""

import logging
import tomllib
from importlib import resources
from pathlib import Path
from typing import cast

from pydantic import ValidationError

from airlinkctl.core.errors import InstallerError
from airlinkctl.core.paths import get_user_addons_path
from airlinkctl.models.component import AddonEntry

logger = logging.getLogger(__name__)


class AddonCatalogError(InstallerError):
    """Raised when an addon catalog file is malformed."""


class UnknownAddonError(InstallerError):
    """Raised when a requested addon key is not in the catalog."""


def get_bundled_addons_path() -> Path:
    """Get the bundled addon catalog path."""
    return resources.files("airlinkctl.data").joinpath("addons.toml")  # type: ignore[return-value]


def _load_catalog_file(path: Path) -> dict[str, AddonEntry]:
    """Load the ``[addons.*]`` tables of one catalog file.

    A missing file is an empty catalog.

    Raises:
        AddonCatalogError: If the file cannot be parsed or an entry is invalid.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return {}
    except tomllib.TOMLDecodeError as e:
        raise AddonCatalogError(f"Invalid TOML syntax in {path}: {e}") from e
    except OSError as e:
        raise AddonCatalogError(f"Failed to read addon catalog {path}: {e}") from e

    raw: object = data.get("addons", {})
    if not isinstance(raw, dict):
        raise AddonCatalogError(f"'addons' in {path} must be a table")

    entries: dict[str, AddonEntry] = {}
    for key, value in cast(dict[str, object], raw).items():
        try:
            entries[key] = AddonEntry.model_validate(value)
        except ValidationError as e:
            raise AddonCatalogError(f"Invalid addon '{key}' in {path}: {e}") from e
    return entries


def load_addon_catalog(user_path: Path | None = None) -> dict[str, AddonEntry]:
    """Load the addon catalog with user additions.

    Args:
        user_path: User catalog file. If None, uses ~/.config/airlinkctl/addons.toml.

    Returns:
        Mapping of addon key to entry, bundled entries first.
    """
    catalog = _load_catalog_file(Path(get_bundled_addons_path()))
    user_entries = _load_catalog_file(user_path or get_user_addons_path())
    if user_entries:
        logger.debug("Loaded %d user addon entries", len(user_entries))
    catalog.update(user_entries)
    return catalog


def resolve_addons(
    keys: tuple[str, ...] | list[str],
    catalog: dict[str, AddonEntry],
) -> list[AddonEntry]:
    """Look up addon keys in the catalog, preserving order.

    Raises:
        UnknownAddonError: If a key is not in the catalog.
    """
    unknown = [k for k in keys if k not in catalog]
    if unknown:
        raise UnknownAddonError(
            f"Unknown addon(s): {', '.join(unknown)}. Available: {', '.join(sorted(catalog))}"
        )
    return [catalog[k] for k in keys]
