"""Install configuration collected from the operator.

The configuration is collected once, before any install step runs, and is
immutable afterwards. Validation rules:

- Username: 3-20 alphanumeric characters. Invalid input is replaced by
  :data:`DEFAULT_USERNAME` instead of failing the run.
- Password: at least 8 characters with at least one letter and one digit.
"""

import re
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_USERNAME = "admin"
DEFAULT_EMAIL = "admin@example.com"

_USERNAME_RE = re.compile(r"[A-Za-z0-9]{3,20}")
_EMAIL_RE = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")

MIN_PASSWORD_LENGTH = 8


def is_valid_username(value: str) -> bool:
    """Check a username against the 3-20 alphanumeric rule."""
    return bool(_USERNAME_RE.fullmatch(value))


def normalize_username(value: str | None, default: str = DEFAULT_USERNAME) -> str:
    """Return ``value`` if it is a valid username, otherwise ``default``.

    Args:
        value: Candidate username (may be None or empty).
        default: Substitute used for invalid input.

    Returns:
        A valid username.
    """
    candidate = (value or "").strip()
    if is_valid_username(candidate):
        return candidate
    return default


def password_problem(value: str) -> str | None:
    """Describe why a password is rejected.

    Returns:
        Human-readable reason, or None if the password is acceptable.
    """
    if len(value) < MIN_PASSWORD_LENGTH:
        return f"must be at least {MIN_PASSWORD_LENGTH} characters"
    if not any(c.isalpha() for c in value):
        return "must contain at least one letter"
    if not any(c.isdigit() for c in value):
        return "must contain at least one digit"
    return None


def is_valid_password(value: str) -> bool:
    """Check a password against the length/letter/digit rule."""
    return password_problem(value) is None


class InstallConfig(BaseModel):
    """Settings collected from the operator for one install run.

    Attributes:
        panel_name: Display name of the panel.
        panel_port: Port the panel listens on.
        daemon_port: Port the daemon listens on.
        daemon_key: Auth key shared between panel and daemon; generated when None.
        admin_email: Email of the first operator account.
        admin_username: Username of the first operator account.
        admin_password: Password of the first operator account.
        create_admin: Whether to run the admin bootstrap after the panel install.
        addons: Catalog keys of the addons to install.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    panel_name: Annotated[str, Field(min_length=1)] = "Airlink"
    panel_port: Annotated[int, Field(ge=1, le=65535)] = 3000
    daemon_port: Annotated[int, Field(ge=1, le=65535)] = 3002
    daemon_key: str | None = None
    admin_email: str = DEFAULT_EMAIL
    admin_username: str = DEFAULT_USERNAME
    admin_password: str | None = None
    create_admin: bool = False
    addons: tuple[str, ...] = ()

    @field_validator("admin_username", mode="before")
    @classmethod
    def substitute_invalid_username(cls, v: object) -> str:
        """Replace an invalid username by the default instead of failing."""
        return normalize_username(v if isinstance(v, str) else None)

    @field_validator("admin_email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Require a plausible email address."""
        if not _EMAIL_RE.fullmatch(v):
            msg = f"Invalid email address: '{v}'"
            raise ValueError(msg)
        return v

    @field_validator("admin_password")
    @classmethod
    def validate_password(cls, v: str | None) -> str | None:
        """Enforce the password rule when a password is given."""
        if v is None:
            return v
        problem = password_problem(v)
        if problem is not None:
            msg = f"Password {problem}"
            raise ValueError(msg)
        return v

    @property
    def wants_admin(self) -> bool:
        """Check if an admin account should be bootstrapped."""
        return self.create_admin and self.admin_password is not None
