"""Repository fetching.

Replaces a component checkout with a fresh shallow clone. An existing
directory is deleted only after a countdown the operator can abort with
Ctrl+C; aborting leaves the directory untouched.
"""

import logging
import shutil
from pathlib import Path

from airlinkctl.core.errors import InstallerError
from airlinkctl.utils.formatting import countdown, print_info
from airlinkctl.utils.shell import CommandError, run_step

logger = logging.getLogger(__name__)


class FetchError(InstallerError):
    """Raised when a repository cannot be cloned."""


class FetchCancelledError(FetchError):
    """Raised when the operator aborts the pre-delete countdown."""


class RepositoryFetcher:
    """Clones component repositories into fixed locations.

    Attributes:
        countdown_seconds: Warning length before an existing checkout is deleted.
        timeout: Upper bound in seconds for the clone.
    """

    def __init__(self, countdown_seconds: int = 5, timeout: float | None = None) -> None:
        self.countdown_seconds = countdown_seconds
        self.timeout = timeout

    def clone_command(self, url: str, target: Path, branch: str | None = None) -> list[str]:
        """Build the shallow clone command."""
        args = ["git", "clone", "-q", "--depth", "1"]
        if branch:
            args += ["--branch", branch]
        args += [url, str(target)]
        return args

    def remove_existing(self, target: Path) -> bool:
        """Delete an existing checkout after the countdown.

        Returns:
            True if a directory was deleted.

        Raises:
            FetchCancelledError: If the operator pressed Ctrl+C during the countdown.
        """
        if not target.exists():
            return False
        if self.countdown_seconds > 0:
            try:
                countdown(self.countdown_seconds, f"{target} exists and will be DELETED")
            except KeyboardInterrupt as e:
                logger.warning("Deletion of %s aborted by operator", target)
                raise FetchCancelledError(f"Aborted: {target} was left untouched") from e
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target)
        else:
            target.unlink()
        logger.info("Deleted %s", target)
        return True

    def fetch(self, url: str, target: Path, branch: str | None = None) -> Path:
        """Replace ``target`` with a shallow clone of ``url``.

        Args:
            url: Repository URL.
            target: Directory to clone into.
            branch: Optional branch to clone.

        Returns:
            The target directory.

        Raises:
            FetchCancelledError: If the operator aborted the countdown.
            FetchError: If the clone fails.
        """
        self.remove_existing(target)
        target.parent.mkdir(parents=True, exist_ok=True)
        print_info(f"Cloning {url}" + (f" ({branch})" if branch else ""))
        try:
            run_step(
                self.clone_command(url, target, branch),
                description=f"Cloning into {target}",
                timeout=self.timeout,
            )
        except CommandError as e:
            raise FetchError(f"Clone of {url} failed: {e}") from e
        return target
