"""First admin account bootstrap.

The panel only allows self-registration while the ``allowRegistration``
setting is on. To create the first operator account the installer:

1. stops the permanent panel unit,
2. opens registration in the panel database,
3. runs the panel as a temporary child process,
4. waits a fixed delay and does a single liveness check,
5. reads the anti-forgery token from ``GET /register`` and posts the form,
6. tears the child process down and closes registration again,
7. starts the permanent unit.

Closing registration is unconditional: it runs on every outcome, fatal
ones included.
"""

from __future__ import annotations

import logging
import sqlite3
import subprocess
import time
from collections.abc import Callable, Iterator, Sequence
from contextlib import AbstractContextManager, closing, contextmanager
from dataclasses import dataclass
from enum import Enum
from html.parser import HTMLParser
from pathlib import Path

import httpx

from airlinkctl.core.errors import InstallerError
from airlinkctl.core.settings import InstallerSettings
from airlinkctl.core.systemd import Systemd
from airlinkctl.models.config import InstallConfig
from airlinkctl.utils.formatting import print_info, print_success, print_warning
from airlinkctl.utils.shell import CommandError, format_command

logger = logging.getLogger(__name__)

SETTINGS_TABLE = "settings"
REGISTRATION_COLUMN = "allowRegistration"
CSRF_FIELD = "_csrf"

# Markers the panel puts into the redirect target or the re-rendered form
_ALREADY_EXISTS_MARKERS = ("user_already_exists", "already exists")
_INVALID_USERNAME_MARKERS = ("invalid_username",)
_WEAK_PASSWORD_MARKERS = ("weak_password",)
_GENERIC_ERROR_MARKERS = ("err=", "error=")

PROCESS_STOP_TIMEOUT = 10.0


class AdminBootstrapError(InstallerError):
    """Raised when the admin account cannot be created and the run must stop."""


class RegistrationOutcome(Enum):
    """Classified result of the registration request."""

    CREATED = "created"
    ALREADY_EXISTS = "already_exists"
    INVALID_USERNAME = "invalid_username"
    WEAK_PASSWORD = "weak_password"
    OTHER_ERROR = "other_error"
    UNEXPECTED_STATUS = "unexpected_status"
    UNREACHABLE = "unreachable"

    @property
    def fatal(self) -> bool:
        """Check if this outcome aborts the install."""
        return self in (RegistrationOutcome.INVALID_USERNAME, RegistrationOutcome.WEAK_PASSWORD)


@dataclass(frozen=True, slots=True)
class RegistrationResult:
    """Result of one registration attempt.

    Attributes:
        outcome: Classified outcome.
        status_code: HTTP status of the form submission, None if not sent.
        detail: Short description for the operator.
    """

    outcome: RegistrationOutcome
    status_code: int | None = None
    detail: str = ""


def _contains(text: str, markers: Sequence[str]) -> bool:
    return any(marker in text for marker in markers)


def classify_registration(
    status_code: int, location: str = "", body: str = ""
) -> RegistrationOutcome:
    """Classify the panel's answer to the registration form.

    Args:
        status_code: HTTP status of the response.
        location: ``Location`` header of a redirect, empty otherwise.
        body: Response body.

    Returns:
        The registration outcome.
    """
    if status_code not in (200, 302):
        return RegistrationOutcome.UNEXPECTED_STATUS
    text = f"{location}\n{body}".lower()
    if _contains(text, _ALREADY_EXISTS_MARKERS):
        return RegistrationOutcome.ALREADY_EXISTS
    if _contains(text, _INVALID_USERNAME_MARKERS):
        return RegistrationOutcome.INVALID_USERNAME
    if _contains(text, _WEAK_PASSWORD_MARKERS):
        return RegistrationOutcome.WEAK_PASSWORD
    if _contains(text, _GENERIC_ERROR_MARKERS):
        return RegistrationOutcome.OTHER_ERROR
    return RegistrationOutcome.CREATED


class _CsrfTokenParser(HTMLParser):
    """Collects the value of the first hidden ``_csrf`` input."""

    def __init__(self) -> None:
        super().__init__()
        self.token: str | None = None

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if self.token is not None or tag != "input":
            return
        fields = dict(attrs)
        if fields.get("name") == CSRF_FIELD:
            self.token = fields.get("value") or ""


def extract_csrf_token(html: str) -> str | None:
    """Return the anti-forgery token of the registration form, if any."""
    parser = _CsrfTokenParser()
    parser.feed(html)
    parser.close()
    return parser.token


class RegistrationClient:
    """HTTP client for the panel's registration endpoint.

    Session cookies are kept between the token request and the form
    submission, since the token is bound to the session.

    Attributes:
        base_url: Panel URL, e.g. ``http://127.0.0.1:3000``.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            follow_redirects=False,
        )

    def close(self) -> None:
        """Close the underlying connection pool."""
        self._client.close()

    def __enter__(self) -> RegistrationClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def is_alive(self) -> bool:
        """Single liveness check: any HTTP answer counts as alive."""
        try:
            self._client.get("/")
        except httpx.RequestError as e:
            logger.warning("Panel at %s not reachable: %s", self.base_url, e)
            return False
        return True

    def fetch_csrf_token(self) -> str | None:
        """Load the registration page and return its anti-forgery token.

        Raises:
            httpx.RequestError: If the panel cannot be reached.
        """
        response = self._client.get("/register")
        if response.status_code != 200:
            logger.warning("GET /register returned HTTP %d", response.status_code)
            return None
        return extract_csrf_token(response.text)

    def register(self, username: str, email: str, password: str) -> RegistrationResult:
        """Submit the registration form once and classify the answer.

        Raises:
            httpx.RequestError: If the panel cannot be reached.
        """
        form = {"username": username, "email": email, "password": password}
        token = self.fetch_csrf_token()
        if token is not None:
            form[CSRF_FIELD] = token
        else:
            logger.info("No anti-forgery token on the registration page")

        response = self._client.post("/register", data=form)
        location = response.headers.get("location", "")
        outcome = classify_registration(response.status_code, location, response.text)
        logger.debug("POST /register -> %d %s (%s)", response.status_code, location, outcome.value)
        return RegistrationResult(
            outcome=outcome,
            status_code=response.status_code,
            detail=location or f"HTTP {response.status_code}",
        )


class SqliteRegistrationSwitch:
    """Toggles the panel's persisted ``allowRegistration`` setting.

    Attributes:
        db_path: Path of the panel's SQLite database.
    """

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path

    def set(self, enabled: bool) -> int:
        """Write the setting.

        Returns:
            Number of updated rows.

        Raises:
            AdminBootstrapError: If the database cannot be updated.
        """
        if not self.db_path.exists():
            raise AdminBootstrapError(f"Panel database not found: {self.db_path}")
        query = f'UPDATE "{SETTINGS_TABLE}" SET "{REGISTRATION_COLUMN}" = ?'
        try:
            with closing(sqlite3.connect(self.db_path)) as conn, conn:
                rows = conn.execute(query, (1 if enabled else 0,)).rowcount
        except sqlite3.Error as e:
            raise AdminBootstrapError(f"Cannot update {self.db_path}: {e}") from e
        if rows == 0:
            print_warning(f"No settings row in {self.db_path}; registration flag not changed")
        logger.info("Set %s=%s (%d rows)", REGISTRATION_COLUMN, enabled, rows)
        return rows


@contextmanager
def registration_window(switch: SqliteRegistrationSwitch) -> Iterator[None]:
    """Open registration for the duration of the block, then close it.

    The close runs on every exit path, exceptions included.
    """
    switch.set(True)
    try:
        yield
    finally:
        switch.set(False)
        print_info("Registration closed")


class TemporaryProcess:
    """Runs a command as a child process for the duration of a ``with`` block.

    On exit the child is terminated, and killed if it does not stop
    within :data:`PROCESS_STOP_TIMEOUT` seconds.
    """

    def __init__(self, args: Sequence[str], cwd: Path, env: dict[str, str] | None = None) -> None:
        self.args = list(args)
        self.cwd = cwd
        self.env = env
        self.process: subprocess.Popen[bytes] | None = None

    def __enter__(self) -> TemporaryProcess:
        logger.info("Starting temporary process: %s", format_command(self.args))
        try:
            self.process = subprocess.Popen(
                self.args,
                cwd=self.cwd,
                env=self.env,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            raise AdminBootstrapError(f"Cannot start the panel: {e}") from e
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def stop(self) -> None:
        """Terminate the child process if it is still running."""
        process = self.process
        if process is None or process.poll() is not None:
            return
        process.terminate()
        try:
            process.wait(timeout=PROCESS_STOP_TIMEOUT)
        except subprocess.TimeoutExpired:
            logger.warning("Temporary process did not stop, killing it")
            process.kill()
            process.wait()
        logger.info("Temporary process stopped")


class AdminBootstrap:
    """Creates the first operator account on a freshly installed panel.

    Collaborators are injectable so that the HTTP boundary and the
    registration switch can be replaced in tests.
    """

    def __init__(
        self,
        settings: InstallerSettings,
        *,
        systemd: Systemd | None = None,
        client: RegistrationClient | None = None,
        switch: SqliteRegistrationSwitch | None = None,
        process_factory: Callable[[], AbstractContextManager[object]] | None = None,
    ) -> None:
        self.settings = settings
        self.systemd = systemd or Systemd(settings.unit_dir)
        self.switch = switch or SqliteRegistrationSwitch(settings.panel_dir / "prisma" / "dev.db")
        self._client = client
        self._process_factory = process_factory

    def panel_process(self) -> AbstractContextManager[object]:
        """Return the supervisor of the temporary panel process."""
        if self._process_factory is not None:
            return self._process_factory()
        return TemporaryProcess(["node", "dist/app.js"], cwd=self.settings.panel_dir)

    def client_for(self, config: InstallConfig) -> RegistrationClient:
        """Return the registration client for the configured panel port."""
        if self._client is not None:
            return self._client
        return RegistrationClient(
            f"http://127.0.0.1:{config.panel_port}",
            timeout=self.settings.http_timeout,
        )

    def run(self, config: InstallConfig) -> RegistrationResult:
        """Create the admin account.

        Returns:
            The registration result for non-fatal outcomes.

        Raises:
            AdminBootstrapError: For invalid-username and weak-password
                outcomes, after registration was closed again.
        """
        if config.admin_password is None:
            raise AdminBootstrapError("No admin password configured")

        service = self.settings.panel_service
        print_info(f"Creating admin account {config.admin_username}")
        self.systemd.stop(service)
        try:
            with registration_window(self.switch), self.panel_process():
                result = self._register(config)
        finally:
            self._restart_panel(service)

        self._report(result, config)
        if result.outcome.fatal:
            raise AdminBootstrapError(f"Admin account not created: {result.outcome.value}")
        return result

    def _register(self, config: InstallConfig) -> RegistrationResult:
        time.sleep(self.settings.bootstrap_delay)
        with self.client_for(config) as client:
            if not client.is_alive():
                return RegistrationResult(RegistrationOutcome.UNREACHABLE, detail=client.base_url)
            try:
                return client.register(
                    config.admin_username, config.admin_email, config.admin_password or ""
                )
            except httpx.RequestError as e:
                return RegistrationResult(RegistrationOutcome.UNREACHABLE, detail=str(e))

    def _restart_panel(self, service: str) -> None:
        if not self.systemd.unit_path(service).exists():
            logger.info("No %s unit installed, not restarting it", service)
            return
        try:
            self.systemd.start(service)
        except CommandError as e:
            print_warning(f"Could not start {service} again: {e}")

    def _report(self, result: RegistrationResult, config: InstallConfig) -> None:
        outcome = result.outcome
        if outcome is RegistrationOutcome.CREATED:
            print_success(f"Admin account {config.admin_username} created")
        elif outcome is RegistrationOutcome.ALREADY_EXISTS:
            print_warning(f"Admin account {config.admin_username} already exists")
        elif outcome is RegistrationOutcome.INVALID_USERNAME:
            logger.error("Panel rejected username %s", config.admin_username)
        elif outcome is RegistrationOutcome.WEAK_PASSWORD:
            logger.error("Panel rejected the admin password as too weak")
        elif outcome is RegistrationOutcome.UNEXPECTED_STATUS:
            print_warning(f"Registration returned HTTP {result.status_code}")
        elif outcome is RegistrationOutcome.UNREACHABLE:
            print_warning(f"Panel not reachable, create the admin manually: {result.detail}")
        else:
            print_warning(f"Registration reported an error: {result.detail}")
