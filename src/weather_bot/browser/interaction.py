"""Locator-based interactions built on the browser session controller."""

from __future__ import annotations

from typing import Optional, Union

from ..config import BrowserConfig
from ..diagnostics import BestEffort, format_exception
from ..models import BrowserKind, Locator
from ..waiting import poll_until
from .base import ElementHandle, ElementNotFoundError
from .controller import BrowserController


class WebBot:
    """High-level browser commands that record every step in the diagnostic log.

    Site-specific scrapers hold a ``WebBot`` and call these methods in order.
    Read-style operations degrade gracefully; actions that need their target
    element propagate the failure.
    """

    def __init__(
        self,
        controller: BrowserController,
        config: Optional[BrowserConfig] = None,
    ) -> None:
        self._controller = controller
        self._config = config or BrowserConfig()

    def __enter__(self) -> "WebBot":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    @property
    def controller(self) -> BrowserController:
        return self._controller

    def open_browser(
        self,
        kind: Optional[BrowserKind] = None,
        command_timeout: Optional[float] = None,
    ) -> bool:
        return self._controller.open(kind, command_timeout)

    def close_browser(self) -> None:
        self._controller.close()

    def release(self) -> BestEffort[None]:
        return self._controller.release()

    def read_log(self) -> str:
        return self._controller.read_log()

    @property
    def screenshot(self) -> Optional[bytes]:
        return self._controller.screenshot

    def navigate(self, url: str) -> bool:
        self._controller.log(f"navigate: url: [{url}]")
        try:
            self._controller.require_session().navigate(url)
        except Exception as exc:
            self._controller.log(f"navigate: Error - {format_exception(exc)}")
            return False
        return True

    def find_element(self, locator: Locator, timeout_seconds: float = 0) -> Optional[ElementHandle]:
        """Resolve ``locator``, polling up to ``timeout_seconds`` when positive.

        Returns ``None`` when the element cannot be found.
        """

        self._controller.log(f"find_element: by: {locator}, timeout_seconds = {timeout_seconds}")
        try:
            session = self._controller.require_session()
            if timeout_seconds > 0:
                return poll_until(
                    lambda: session.find_element(locator, timeout=0),
                    timeout=timeout_seconds,
                    interval=self._config.poll_interval_seconds,
                    clock=self._controller.clock,
                    ignored=(ElementNotFoundError,),
                    message=f"{locator} not found within {timeout_seconds} seconds",
                )
            return session.find_element(locator)
        except Exception as exc:
            self._controller.log(f"find_element: Exception = {format_exception(exc)}")
            return None

    def fill_text_box(self, target: Union[str, Locator], value: str) -> None:
        """Type ``value`` into the text box named ``target`` or matched by it."""

        locator = Locator.by_name(target) if isinstance(target, str) else target
        self._controller.log(f"fill_text_box: by: [{locator}] value: [{value}]")
        self._controller.require_session().find_element(locator).send_keys(value)

    def click(self, locator: Locator, timeout_seconds: Optional[float] = None) -> None:
        if timeout_seconds is None:
            self._controller.log(f"click: {locator}")
            self._controller.require_session().find_element(locator).click()
            return
        self._controller.log(f"click: by = {locator} timeout_seconds = {timeout_seconds}")
        element = self.find_element(locator, timeout_seconds)
        if element is None:
            raise ElementNotFoundError(f"Cannot click {locator}: element not found")
        element.click()

    def click_xpath(self, path: str) -> None:
        self.click(Locator.by_xpath(path))

    def get_text(self, locator: Locator) -> str:
        element = self.find_element(locator)
        if element is None:
            return ""
        return element.text

    def get_text_at_xpath(self, path: str) -> str:
        return self.get_text(Locator.by_xpath(path))

    def wait(self, milliseconds: int) -> None:
        """Pause unconditionally so dynamic page content can settle."""

        self._controller.log(f"wait: milliseconds = {milliseconds}")
        self._controller.clock.sleep(milliseconds / 1000)
