"""Browser session lifecycle with retrying open and a diagnostic log."""

from __future__ import annotations

import logging
from typing import Optional

from ..config import BrowserConfig, RetryConfig
from ..diagnostics import BestEffort, DiagnosticLog, SessionState, format_exception
from ..models import BrowserKind, LogEntry, SessionStatus
from ..waiting import Clock, SystemClock
from .base import BrowserEngine, EngineSession, SessionNotOpenError

LOGGER = logging.getLogger(__name__)

IMPLICIT_WAIT_SECONDS = 30.0


class BrowserController:
    """Owns at most one browser session and the log describing what it did."""

    def __init__(
        self,
        engine: BrowserEngine,
        config: Optional[BrowserConfig] = None,
        retry: Optional[RetryConfig] = None,
        *,
        clock: Optional[Clock] = None,
        state: Optional[SessionState] = None,
    ) -> None:
        self._engine = engine
        self._config = config or BrowserConfig()
        self._retry = retry or RetryConfig()
        self._clock = clock or SystemClock()
        self._state = state or SessionState(log=DiagnosticLog(self._clock))
        self._session: Optional[EngineSession] = None
        self._status = SessionStatus.UNOPENED

    def __enter__(self) -> "BrowserController":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def is_open(self) -> bool:
        return self._status == SessionStatus.OPEN

    @property
    def clock(self) -> Clock:
        return self._clock

    def log(self, message: str) -> None:
        self._state.log.append(message)

    def log_error(self, exc: BaseException) -> None:
        self._state.log.append_error(exc)

    def read_log(self) -> str:
        return self._state.log.render()

    def open(
        self,
        kind: Optional[BrowserKind] = None,
        command_timeout: Optional[float] = None,
    ) -> bool:
        """Open a browser session, retrying transient launch failures.

        Returns ``True`` once a session is open. Non-retryable failures, or
        running out of attempts, leave no session and return ``False``. A
        released controller never opens again.
        """

        kind = kind or self._config.kind
        timeout = command_timeout
        if timeout is None:
            timeout = self._config.command_timeout_seconds
        self.log(f"open_browser: browser: [{kind.value}] command_timeout = {timeout}")
        if self._status == SessionStatus.RELEASED:
            self.log("open_browser: the controller was released; not opening a new session")
            return False
        if self._session is not None:
            self.log("open_browser: quitting the previous session first")
            previous, self._session = self._session, None
            self._quit_session(previous)

        self._status = SessionStatus.OPENING
        max_attempts = self._retry.max_attempts
        for attempt in range(max_attempts):
            self.log(f"open_browser: attempt {attempt + 1} of {max_attempts} for [{kind.value}]")
            try:
                session = self._engine.launch(kind, timeout)
            except Exception as exc:
                error = exc
            else:
                try:
                    session.set_implicit_wait(IMPLICIT_WAIT_SECONDS)
                except Exception as exc:
                    error = exc
                    self._quit_session(session)
                else:
                    self._session = session
                    self._status = SessionStatus.OPEN
                    LOGGER.info("Opened %s browser session", kind.value)
                    return True
            self.log(
                f"open_browser: an exception occurred opening a [{kind.value}]. "
                f"Here are the details: {format_exception(error)}"
            )
            if not self._is_retryable(error):
                break
            if attempt + 1 >= max_attempts:
                self.log(f"open_browser: giving up after {max_attempts} attempts")
                break
            delay_ms = self._retry.delay_ms(attempt)
            self.log(
                "open_browser: the browser could not bind a resource so we are "
                f"going to retry in {delay_ms:.0f} ms"
            )
            self._clock.sleep(delay_ms / 1000)

        LOGGER.warning("Could not open a %s browser session", kind.value)
        self._status = SessionStatus.UNOPENED
        return False

    def close(self) -> None:
        """Close the current page. Requires an open session."""

        session = self.require_session()
        self.log("close_browser")
        session.close()
        self._status = SessionStatus.CLOSED

    def release(self) -> BestEffort[None]:
        """Terminate the session if there is one. Never raises; safe to repeat."""

        session, self._session = self._session, None
        self._status = SessionStatus.RELEASED
        if session is None:
            return BestEffort(None)
        entry = self._quit_session(session)
        return BestEffort(None, degraded=entry is not None, entry=entry)

    def _quit_session(self, session: EngineSession) -> Optional[LogEntry]:
        """Quit ``session``, returning the log entry recorded if that fails."""

        try:
            session.quit()
        except Exception as exc:
            LOGGER.debug("Ignoring failure while quitting browser", exc_info=True)
            return self._state.log.append(f"release: could not quit the browser: {exc}")
        return None

    def capture_screenshot(self) -> BestEffort[Optional[bytes]]:
        """Return the cached screenshot, capturing one from the session if needed."""

        if self._state.screenshot is not None:
            return BestEffort(self._state.screenshot)
        try:
            self._state.screenshot = self.require_session().screenshot()
        except Exception as exc:
            entry = self._state.log.append(
                f"Could not retrieve screenshot. Exception in script: {format_exception(exc)}"
            )
            return BestEffort(self._state.screenshot, degraded=True, entry=entry)
        return BestEffort(self._state.screenshot)

    @property
    def screenshot(self) -> Optional[bytes]:
        return self.capture_screenshot().value

    def take_screenshot(self) -> bytes:
        """Capture a fresh image of the page, bypassing the cache."""

        self.log("take_screenshot: say cheese . . .")
        return self.require_session().screenshot()

    def require_session(self) -> EngineSession:
        if self._session is None or self._status != SessionStatus.OPEN:
            raise SessionNotOpenError(f"No open browser session (status: {self._status.value})")
        return self._session

    def _is_retryable(self, exc: BaseException) -> bool:
        detail = format_exception(exc)
        return any(signature in detail for signature in self._retry.retryable_signatures)
