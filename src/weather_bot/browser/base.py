"""Browser engine abstractions consumed by the session controller."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..models import BrowserKind, Locator


class BrowserError(RuntimeError):
    """Raised when the browser engine fails to carry out a command."""


class ElementNotFoundError(BrowserError):
    """Raised when a locator does not resolve to an element."""


class SessionNotOpenError(BrowserError):
    """Raised when an operation needs a session but none is open."""


class ElementHandle(ABC):
    """An element resolved from a locator on the current page."""

    @abstractmethod
    def click(self) -> None:
        """Click the element."""

    @abstractmethod
    def send_keys(self, text: str) -> None:
        """Type ``text`` into the element as user input."""

    @property
    @abstractmethod
    def text(self) -> str:
        """Rendered text content of the element."""


class EngineSession(ABC):
    """A live browser instance under automated control."""

    @abstractmethod
    def navigate(self, url: str) -> None:
        """Load ``url`` in the current page."""

    @abstractmethod
    def find_element(self, locator: Locator, timeout: Optional[float] = None) -> ElementHandle:
        """Resolve ``locator``.

        ``timeout`` of ``None`` waits for the implicit wait, ``0`` performs a
        single lookup. Raises :class:`ElementNotFoundError` when nothing matches.
        """

    @abstractmethod
    def set_implicit_wait(self, seconds: float) -> None:
        """Set how long lookups keep retrying before giving up."""

    @abstractmethod
    def screenshot(self) -> bytes:
        """Capture the visible page as an image."""

    @abstractmethod
    def close(self) -> None:
        """Close the current page without terminating the browser."""

    @abstractmethod
    def quit(self) -> None:
        """Terminate the browser and every resource it holds."""


class BrowserEngine(ABC):
    """Launches browser sessions."""

    @abstractmethod
    def launch(self, kind: BrowserKind, command_timeout: float) -> EngineSession:
        """Start a browser of ``kind``; raise on failure."""
