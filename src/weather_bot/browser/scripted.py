"""Scripted in-memory browser engine for tests and offline use."""

from __future__ import annotations

from collections import deque
from typing import Deque, Iterable, List, Mapping, Optional, Tuple, Union

from ..models import BrowserKind, Locator
from .base import BrowserEngine, BrowserError, ElementHandle, ElementNotFoundError, EngineSession


class ScriptedElement(ElementHandle):
    """Element that records the interactions performed on it."""

    def __init__(self, text: str = "") -> None:
        self._text = text
        self.clicks = 0
        self.keys: List[str] = []

    def click(self) -> None:
        self.clicks += 1

    def send_keys(self, text: str) -> None:
        self.keys.append(text)

    @property
    def text(self) -> str:
        return self._text


class ScriptedSession(EngineSession):
    """Page with a fixed set of elements, some of which may show up late."""

    def __init__(
        self,
        elements: Optional[Mapping[Locator, ScriptedElement]] = None,
        *,
        screenshot: bytes = b"scripted-screenshot",
        navigate_error: Optional[BaseException] = None,
        screenshot_error: Optional[BaseException] = None,
        quit_error: Optional[BaseException] = None,
    ) -> None:
        self.elements = dict(elements or {})
        self._late: dict[Locator, list] = {}
        self._screenshot = screenshot
        self._navigate_error = navigate_error
        self._screenshot_error = screenshot_error
        self._quit_error = quit_error
        self.navigations: List[str] = []
        self.lookups: List[Tuple[Locator, Optional[float]]] = []
        self.implicit_wait: Optional[float] = None
        self.screenshots_taken = 0
        self.closed = False
        self.quit_calls = 0

    def reveal_after(self, locator: Locator, element: ScriptedElement, misses: int) -> None:
        """Make ``locator`` resolve only after ``misses`` failed lookups."""

        self._late[locator] = [misses, element]

    def navigate(self, url: str) -> None:
        self._check_page()
        if self._navigate_error is not None:
            raise self._navigate_error
        self.navigations.append(url)

    def find_element(self, locator: Locator, timeout: Optional[float] = None) -> ElementHandle:
        self._check_page()
        self.lookups.append((locator, timeout))
        late = self._late.get(locator)
        if late is not None:
            if late[0] > 0:
                late[0] -= 1
            else:
                self.elements[locator] = late[1]
                del self._late[locator]
        element = self.elements.get(locator)
        if element is None:
            raise ElementNotFoundError(f"No element matches {locator}")
        return element

    def set_implicit_wait(self, seconds: float) -> None:
        self.implicit_wait = seconds

    def screenshot(self) -> bytes:
        self._check_page()
        if self._screenshot_error is not None:
            raise self._screenshot_error
        self.screenshots_taken += 1
        return self._screenshot

    def close(self) -> None:
        self._check_page()
        self.closed = True

    def quit(self) -> None:
        self.quit_calls += 1
        if self._quit_error is not None:
            raise self._quit_error

    def _check_page(self) -> None:
        if self.closed:
            raise BrowserError("Browser page is closed")


LaunchOutcome = Union[EngineSession, BaseException]


class ScriptedEngine(BrowserEngine):
    """Return sessions, or raise errors, from a predefined sequence.

    With a ``page`` mapping, every launch past the scripted outcomes serves a
    fresh session whose elements show the mapped text.
    """

    def __init__(
        self,
        outcomes: Iterable[LaunchOutcome] = (),
        *,
        page: Optional[Mapping[Locator, str]] = None,
    ) -> None:
        self._outcomes: Deque[LaunchOutcome] = deque(outcomes)
        self._page = dict(page) if page is not None else None
        self.launches: List[Tuple[BrowserKind, float]] = []

    @classmethod
    def serving(cls, elements: Mapping[str, str]) -> "ScriptedEngine":
        """Engine whose pages hold ``"<strategy>=<value>"`` elements with the given text."""

        return cls(page={Locator.parse(key): text for key, text in elements.items()})

    def launch(self, kind: BrowserKind, command_timeout: float) -> EngineSession:
        self.launches.append((kind, command_timeout))
        if not self._outcomes:
            if self._page is not None:
                return ScriptedSession(
                    {locator: ScriptedElement(text) for locator, text in self._page.items()}
                )
            raise RuntimeError("ScriptedEngine ran out of launch outcomes")
        outcome = self._outcomes.popleft()
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome
