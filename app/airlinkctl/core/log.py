"""Installer log file setup.

Everything printed to the operator and every command run is appended to
one log file. When the configured location is not writable the log falls
back to the working directory.
"""

import logging
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
FALLBACK_LOG_NAME = "airlinkctl.log"

logger = logging.getLogger(__name__)


def _open_handler(path: Path) -> logging.FileHandler:
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, mode="a", encoding="utf-8")


def configure_logging(log_path: Path, *, verbose: bool = False) -> Path:
    """Attach a file handler for the installer log to the root logger.

    Calling this again replaces the handler added by a previous call.

    Args:
        log_path: Preferred log file.
        verbose: Log at DEBUG instead of INFO.

    Returns:
        The path actually used.
    """
    try:
        handler = _open_handler(log_path)
        used = log_path
    except OSError:
        used = Path.cwd() / FALLBACK_LOG_NAME
        handler = _open_handler(used)

    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.set_name("airlinkctl-file")

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == "airlinkctl-file":
            root.removeHandler(existing)
            existing.close()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)

    if used != log_path:
        logger.warning("Cannot write %s, logging to %s", log_path, used)
    logger.debug("Logging to %s", used)
    return used
