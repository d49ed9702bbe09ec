"""Environment file rendering.

Components are configured through ``KEY=value`` files. Values made only of
safe characters are written bare; everything else is double-quoted with
backslashes and quotes escaped.
"""

import logging
import os
import re
import secrets
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

_KEY_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_BARE_VALUE_RE = re.compile(r"^[A-Za-z0-9_./:@+,-]*$")


def generate_secret(nbytes: int = 32) -> str:
    """Generate a fresh hex secret from the OS CSPRNG."""
    return secrets.token_hex(nbytes)


def _format_value(value: str) -> str:
    if _BARE_VALUE_RE.match(value):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def render_env(options: Mapping[str, str]) -> str:
    """Render options as env file content, preserving insertion order.

    Raises:
        ValueError: If a key is not a valid variable name or a value spans lines.
    """
    lines: list[str] = []
    for key, value in options.items():
        if not _KEY_RE.match(key):
            msg = f"Invalid environment variable name: '{key}'"
            raise ValueError(msg)
        if "\n" in value:
            msg = f"Value of {key} must not contain newlines"
            raise ValueError(msg)
        lines.append(f"{key}={_format_value(value)}")
    return "\n".join(lines) + "\n"


def parse_env(text: str) -> dict[str, str]:
    """Parse env file content written by :func:`render_env`."""
    result: dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        if len(value) >= 2 and value[0] == value[-1] == '"':
            value = value[1:-1].replace('\\"', '"').replace("\\\\", "\\")
        result[key.strip()] = value
    return result


def write_env_file(path: Path, options: Mapping[str, str]) -> Path:
    """Write an env file readable only by its owner.

    The file holds secrets, so it is created with mode 0600.
    """
    content = render_env(options)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(content)
    os.chmod(path, 0o600)
    logger.info("Wrote %s (%d keys)", path, len(options))
    return path


def read_env_file(path: Path) -> dict[str, str]:
    """Read an env file; a missing file yields an empty mapping."""
    try:
        return parse_env(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
