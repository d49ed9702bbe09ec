"""Shell execution utilities.

Provides subprocess execution with proper error handling. ``run_command``
is the plain primitive; ``run_step`` wraps it for long-running install
steps with a spinner, a timeout and fatal error reporting.
"""

import logging
import os
import shlex
import shutil
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from airlinkctl.core.errors import InstallerError
from airlinkctl.utils.formatting import console

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of a shell command execution.

    Attributes:
        stdout: Standard output from the command.
        stderr: Standard error from the command.
        returncode: Exit code of the command.
    """

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if command executed successfully."""
        return self.returncode == 0


class CommandError(InstallerError):
    """Raised when an install step exits non-zero or cannot be started."""

    def __init__(
        self,
        args: Sequence[str],
        result: CommandResult | None = None,
        reason: str = "",
    ) -> None:
        self.argv = list(args)
        self.result = result
        detail = reason
        if result is not None:
            detail = result.stderr.strip() or result.stdout.strip()[-500:]
            detail = f"exit code {result.returncode}" + (f": {detail}" if detail else "")
        super().__init__(f"Command failed ({format_command(args)}): {detail}")


class CommandTimeoutError(CommandError):
    """Raised when an install step exceeds its time budget."""

    def __init__(self, args: Sequence[str], timeout: float) -> None:
        self.timeout = timeout
        super().__init__(args, reason=f"timed out after {timeout:.0f} seconds")


def format_command(args: Sequence[str]) -> str:
    """Render an argument vector as a copy-pasteable shell string."""
    return " ".join(shlex.quote(a) for a in args)


def run_command(
    args: Sequence[str],
    *,
    check: bool = False,
    timeout: float | None = 60.0,
    cwd: str | None = None,
    env: Mapping[str, str] | None = None,
) -> CommandResult:
    """Execute a shell command and return the result.

    Args:
        args: Command and arguments to execute.
        check: If True, raise CalledProcessError on non-zero exit.
        timeout: Maximum time in seconds to wait for command.
        cwd: Working directory for the command. If None, uses current directory.
        env: Additional environment variables (merged with current env).

    Returns:
        CommandResult with stdout, stderr, and returncode.

    Raises:
        subprocess.CalledProcessError: If check=True and command fails.
        subprocess.TimeoutExpired: If command exceeds timeout.
        FileNotFoundError: If command executable is not found.
    """
    result = subprocess.run(
        list(args),
        capture_output=True,
        text=True,
        check=check,
        timeout=timeout,
        cwd=cwd,
        env={**os.environ, **env} if env else None,
    )
    return CommandResult(
        stdout=result.stdout,
        stderr=result.stderr,
        returncode=result.returncode,
    )


def run_step(
    args: Sequence[str],
    *,
    description: str,
    timeout: float | None = None,
    cwd: str | None = None,
    env: Mapping[str, str] | None = None,
) -> CommandResult:
    """Run one install step behind a spinner and fail hard on errors.

    The child process is killed when the timeout expires or when the
    operator presses Ctrl+C; the KeyboardInterrupt then propagates.

    Args:
        args: Command and arguments to execute.
        description: Text shown next to the spinner.
        timeout: Maximum time in seconds, or None to wait indefinitely.
        cwd: Working directory for the command.
        env: Additional environment variables.

    Returns:
        CommandResult of the successful command.

    Raises:
        CommandTimeoutError: If the command exceeds ``timeout``.
        CommandError: If the command exits non-zero or cannot be started.
    """
    logger.info("CMD %s", format_command(args))
    try:
        with console.status(f"[info]{description}...[/]", spinner="dots"):
            result = run_command(args, timeout=timeout, cwd=cwd, env=env)
    except subprocess.TimeoutExpired as e:
        raise CommandTimeoutError(args, timeout or 0.0) from e
    except OSError as e:
        raise CommandError(args, reason=str(e)) from e

    if result.stdout:
        logger.debug("STDOUT %s", result.stdout.strip())
    if result.stderr:
        logger.debug("STDERR %s", result.stderr.strip())
    if not result.success:
        raise CommandError(args, result)
    return result


def command_exists(name: str) -> bool:
    """Check if a command exists in the system PATH.

    Args:
        name: Command name to check.

    Returns:
        True if command exists, False otherwise.
    """
    return shutil.which(name) is not None


def run_interactive(
    args: list[str],
    *,
    cwd: str | None = None,
    env: dict[str, str] | None = None,
) -> int:
    """Execute a command interactively, inheriting the terminal.

    Unlike run_command(), this does NOT capture stdout/stderr, so output
    such as ``journalctl -f`` streams straight to the operator.

    Args:
        args: Command and arguments to execute.
        cwd: Working directory for the command.
        env: Additional environment variables (merged with current env).

    Returns:
        Exit code of the command.

    Raises:
        FileNotFoundError: If command executable is not found.
        OSError: If command cannot be executed.
    """
    full_env = {**os.environ, **(env or {})}
    result = subprocess.run(
        args,
        check=False,
        cwd=cwd,
        env=full_env,
    )
    return result.returncode
