"""Data models for airlinkctl.

This module exports the core data structures used throughout the application.
"""

from airlinkctl.models.component import AddonEntry, BuildStep, ComponentKind, ComponentSpec
from airlinkctl.models.config import (
    InstallConfig,
    is_valid_password,
    is_valid_username,
    normalize_username,
)
from airlinkctl.models.host import HostProfile, OsFamily

__all__ = [
    "AddonEntry",
    "BuildStep",
    "ComponentKind",
    "ComponentSpec",
    "HostProfile",
    "InstallConfig",
    "OsFamily",
    "is_valid_password",
    "is_valid_username",
    "normalize_username",
]
