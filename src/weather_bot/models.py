"""Shared models used across the weather bot."""

from __future__ import annotations

import enum
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class BrowserKind(str, enum.Enum):
    """Browser engines a session can be opened with."""

    CHROMIUM = "chromium"
    FIREFOX = "firefox"
    WEBKIT = "webkit"


class LocatorStrategy(str, enum.Enum):
    """How a locator finds an element on the page."""

    NAME = "name"
    XPATH = "xpath"
    CSS = "css"
    ID = "id"


class Locator(BaseModel):
    """Description of how to find an element, resolved lazily against a page."""

    model_config = ConfigDict(frozen=True)

    strategy: LocatorStrategy
    value: str

    @classmethod
    def by_name(cls, name: str) -> "Locator":
        return cls(strategy=LocatorStrategy.NAME, value=name)

    @classmethod
    def by_xpath(cls, path: str) -> "Locator":
        return cls(strategy=LocatorStrategy.XPATH, value=path)

    @classmethod
    def by_css(cls, selector: str) -> "Locator":
        return cls(strategy=LocatorStrategy.CSS, value=selector)

    @classmethod
    def by_id(cls, element_id: str) -> "Locator":
        return cls(strategy=LocatorStrategy.ID, value=element_id)

    @classmethod
    def parse(cls, text: str) -> "Locator":
        """Build a locator from ``"<strategy>=<value>"``, e.g. ``"name=where"``."""

        strategy, sep, value = text.partition("=")
        if not sep or not value:
            raise ValueError(f"Locator must look like '<strategy>=<value>': {text!r}")
        return cls(strategy=LocatorStrategy(strategy.strip().lower()), value=value)

    def selector(self) -> str:
        """Render the locator as a Playwright selector string."""

        if self.strategy == LocatorStrategy.NAME:
            return f'css=[name="{_escape(self.value)}"]'
        if self.strategy == LocatorStrategy.ID:
            return f'css=[id="{_escape(self.value)}"]'
        if self.strategy == LocatorStrategy.XPATH:
            return f"xpath={self.value}"
        return f"css={self.value}"

    def __str__(self) -> str:
        return f"By.{self.strategy.value}: {self.value}"


class SessionStatus(str, enum.Enum):
    """Lifecycle of the browser session owned by a controller."""

    UNOPENED = "unopened"
    OPENING = "opening"
    OPEN = "open"
    CLOSED = "closed"
    RELEASED = "released"


class LogEntry(BaseModel):
    """A single line of the diagnostic log."""

    message: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def render(self) -> str:
        return f"[{self.timestamp:%Y-%m-%d %H:%M:%S}] - {self.message}"


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')
