"""Scraper for today's high temperature on the weather site."""

from __future__ import annotations

import logging
from typing import Optional

from rich.console import Console

from ..browser.interaction import WebBot
from ..config import WeatherSiteConfig
from ..diagnostics import format_exception

LOGGER = logging.getLogger(__name__)

FALLBACK_TEMPERATURE = "Unable to retrieve. Try again later."


class WeatherBot:
    """Reads the forecast high for a location by driving the site's search form."""

    def __init__(
        self,
        web: WebBot,
        site: Optional[WeatherSiteConfig] = None,
        console: Optional[Console] = None,
    ) -> None:
        self._web = web
        self._site = site or WeatherSiteConfig()
        self._console = console or Console()

    @property
    def web(self) -> WebBot:
        return self._web

    def get_todays_high_temp(self, location: str) -> str:
        """Return today's high for ``location``, or a fallback message on failure."""

        site = self._site
        todays_high = FALLBACK_TEMPERATURE
        try:
            self._web.open_browser()
            self._web.navigate(site.url)
            self._web.wait(site.pause_after_navigate_ms)
            self._web.fill_text_box(site.search_field_name, location)
            self._web.wait(site.pause_after_fill_ms)
            self._web.click_xpath(site.search_button_xpath)
            self._web.wait(site.pause_after_search_ms)
            todays_high = self._web.get_text_at_xpath(site.high_temp_xpath)
            self._web.close_browser()
        except Exception as exc:
            LOGGER.warning("Could not read the high temperature for %s: %s", location, exc)
            self._print(f"Error: {format_exception(exc)}")
            self._print("Here's the log")
            self._print(self._web.read_log())
        return todays_high

    def _print(self, text: str) -> None:
        self._console.print(text, markup=False, highlight=False, soft_wrap=True)
