"""Factories for constructing components from configuration."""

from __future__ import annotations

from typing import Optional

from rich.console import Console

from .browser.base import BrowserEngine
from .browser.controller import BrowserController
from .browser.interaction import WebBot
from .browser.playwright_session import PlaywrightEngine
from .browser.scripted import ScriptedEngine
from .config import AppConfig, BrowserConfig
from .sites.weather import WeatherBot
from .waiting import Clock


def build_engine(config: BrowserConfig) -> BrowserEngine:
    if config.engine == "scripted":
        return ScriptedEngine.serving(config.scripted_elements)
    if config.engine == "playwright":
        return PlaywrightEngine(config)
    raise ValueError(f"Unsupported browser engine: {config.engine}")


def build_web_bot(
    config: AppConfig,
    engine: Optional[BrowserEngine] = None,
    clock: Optional[Clock] = None,
) -> WebBot:
    controller = BrowserController(
        engine or build_engine(config.browser),
        config.browser,
        config.retry,
        clock=clock,
    )
    return WebBot(controller, config.browser)


def build_weather_bot(
    config: AppConfig,
    engine: Optional[BrowserEngine] = None,
    console: Optional[Console] = None,
) -> WeatherBot:
    return WeatherBot(build_web_bot(config, engine), config.site, console=console)
