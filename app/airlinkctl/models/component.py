"""Component models for installable units.

This module defines the data structures describing a component (panel,
daemon or addon): where its source lives, where it is installed, how it is
built and how it is supervised.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ComponentKind(Enum):
    """Kind of installable component."""

    PANEL = "panel"
    DAEMON = "daemon"
    ADDON = "addon"


@dataclass(frozen=True, slots=True)
class BuildStep:
    """A single build command declared by a component.

    Attributes:
        description: Short text shown while the step runs.
        command: Command and arguments, executed in the component directory.
        env: Extra environment variables for the command.
    """

    description: str
    command: tuple[str, ...]
    env: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ComponentSpec:
    """Describes one installable component.

    Attributes:
        name: Component name (e.g. 'panel').
        kind: Component kind.
        source_url: Git URL the component is cloned from.
        target_dir: Directory the component is installed into.
        branch: Optional branch to clone instead of the default one.
        service_name: systemd unit name without suffix, None for addons.
        service_user: User the service runs as and owns the files.
        start_command: Command the service runs, relative to target_dir.
        after_units: Units the service is ordered after.
        build_steps: Commands run after dependency installation.
    """

    name: str
    kind: ComponentKind
    source_url: str
    target_dir: Path
    branch: str | None = None
    service_name: str | None = None
    service_user: str = "root"
    start_command: tuple[str, ...] = ()
    after_units: tuple[str, ...] = ("network.target",)
    build_steps: tuple[BuildStep, ...] = ()

    def __post_init__(self) -> None:
        """Validate component data after initialization."""
        if not self.name:
            msg = "Component name cannot be empty"
            raise ValueError(msg)
        if self.service_name is not None and not self.start_command:
            msg = f"Component '{self.name}' declares a service but no start command"
            raise ValueError(msg)

    @property
    def has_service(self) -> bool:
        """Check if the component is supervised by its own service unit."""
        return self.service_name is not None

    @property
    def env_path(self) -> Path:
        """Return the path of the component's environment file."""
        return self.target_dir / ".env"


class AddonEntry(BaseModel):
    """Catalog entry for an optional panel addon.

    Attributes:
        display_name: Name shown in menus.
        repo_url: Git URL of the addon repository.
        branch: Branch to clone.
        directory: Directory name under the panel's addon folder.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    display_name: Annotated[str, Field(min_length=1, description="Name shown in menus")]
    repo_url: Annotated[str, Field(min_length=1, description="Git repository URL")]
    branch: Annotated[str, Field(description="Branch to clone")] = "main"
    directory: Annotated[str, Field(min_length=1, description="Target directory name")]

    @field_validator("directory")
    @classmethod
    def validate_directory(cls, v: str) -> str:
        """Reject directory names that would escape the addon folder."""
        if "/" in v or v in (".", ".."):
            msg = f"Addon directory must be a plain name, got '{v}'"
            raise ValueError(msg)
        return v
