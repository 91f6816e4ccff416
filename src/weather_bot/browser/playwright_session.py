"""Playwright-powered browser engine implementation."""

from __future__ import annotations

import logging
from typing import Any, Optional

from playwright.sync_api import Error, Locator as PlaywrightLocator, Page, sync_playwright
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from ..config import BrowserConfig
from ..models import BrowserKind, Locator
from .base import BrowserEngine, BrowserError, ElementHandle, ElementNotFoundError, EngineSession

LOGGER = logging.getLogger(__name__)

_CHROMIUM_ARGS = [
    "--no-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
]


class PlaywrightElement(ElementHandle):
    """Element handle backed by a Playwright locator."""

    def __init__(self, locator: PlaywrightLocator) -> None:
        self._locator = locator

    def click(self) -> None:
        try:
            self._locator.click()
        except Error as exc:
            raise BrowserError(str(exc)) from exc

    def send_keys(self, text: str) -> None:
        try:
            self._locator.press_sequentially(text)
        except Error as exc:
            raise BrowserError(str(exc)) from exc

    @property
    def text(self) -> str:
        try:
            return self._locator.inner_text()
        except Error as exc:
            raise BrowserError(str(exc)) from exc


class PlaywrightSession(EngineSession):
    """One Playwright driver, browser, context and page."""

    def __init__(self, playwright: Any, browser: Any, context: Any, page: Page) -> None:
        self._playwright = playwright
        self._browser = browser
        self._context = context
        self._page: Optional[Page] = page
        self._implicit_wait = 0.0

    def navigate(self, url: str) -> None:
        page = self._require_page()
        try:
            page.goto(url, wait_until="load")
        except Error as exc:
            raise BrowserError(str(exc)) from exc

    def find_element(self, locator: Locator, timeout: Optional[float] = None) -> ElementHandle:
        page = self._require_page()
        wait = self._implicit_wait if timeout is None else timeout
        matches = page.locator(locator.selector())
        try:
            if wait <= 0:
                # Playwright treats a zero timeout as "wait forever".
                if matches.count() == 0:
                    raise ElementNotFoundError(f"No element matches {locator}")
            else:
                matches.first.wait_for(state="attached", timeout=wait * 1000)
        except PlaywrightTimeoutError as exc:
            raise ElementNotFoundError(
                f"No element matches {locator} after {wait} seconds"
            ) from exc
        except Error as exc:
            raise BrowserError(str(exc)) from exc
        return PlaywrightElement(matches.first)

    def set_implicit_wait(self, seconds: float) -> None:
        self._implicit_wait = seconds

    def screenshot(self) -> bytes:
        page = self._require_page()
        try:
            return page.screenshot()
        except Error as exc:
            raise BrowserError(str(exc)) from exc

    def close(self) -> None:
        page = self._require_page()
        LOGGER.debug("Closing Playwright page")
        self._page = None
        page.close()

    def quit(self) -> None:
        LOGGER.debug("Stopping Playwright browser session")
        try:
            if self._context:
                self._context.close()
        finally:
            try:
                if self._browser:
                    self._browser.close()
            finally:
                if self._playwright:
                    self._playwright.stop()
        self._context = None
        self._browser = None
        self._playwright = None
        self._page = None

    def _require_page(self) -> Page:
        if not self._page:
            raise BrowserError("Browser page is closed")
        return self._page


class PlaywrightEngine(BrowserEngine):
    """Launches Chromium, Firefox or WebKit through Playwright."""

    def __init__(self, config: Optional[BrowserConfig] = None) -> None:
        self._config = config or BrowserConfig()

    def launch(self, kind: BrowserKind, command_timeout: float) -> EngineSession:
        LOGGER.debug("Starting Playwright %s browser", kind.value)
        timeout_ms = command_timeout * 1000
        playwright = sync_playwright().start()
        try:
            browser_type = getattr(playwright, kind.value)
            launch_kwargs: dict[str, Any] = {
                "headless": self._config.headless,
                "timeout": timeout_ms,
            }
            if kind == BrowserKind.CHROMIUM:
                launch_kwargs["args"] = list(_CHROMIUM_ARGS)
            if self._config.driver_path:
                launch_kwargs["executable_path"] = str(self._config.driver_path)
            browser = browser_type.launch(**launch_kwargs)
            context = browser.new_context(
                viewport={
                    "width": self._config.viewport_width,
                    "height": self._config.viewport_height,
                }
            )
            context.set_default_navigation_timeout(timeout_ms)
            page = context.new_page()
        except Exception:
            playwright.stop()
            raise
        return PlaywrightSession(playwright, browser, context, page)
