"""Configuration models for the weather bot."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import BrowserKind

DEFAULT_LOCATIONS = ["Charleston, SC", "Columbia, SC", "Las Vegas, NV"]


class BrowserConfig(BaseModel):
    """Settings for launching and driving the browser."""

    engine: Literal["playwright", "scripted"] = Field(
        default="playwright",
        description="'scripted' serves in-memory pages built from scripted_elements.",
    )
    scripted_elements: dict[str, str] = Field(
        default_factory=dict,
        description="Element text keyed by '<strategy>=<value>' for the scripted engine.",
    )
    kind: BrowserKind = BrowserKind.CHROMIUM
    driver_path: Optional[Path] = Field(
        default=None,
        description="Browser executable to launch instead of the bundled one.",
    )
    command_timeout_seconds: float = Field(default=120.0, gt=0)
    headless: bool = True
    viewport_width: int = 1280
    viewport_height: int = 720
    poll_interval_seconds: float = Field(
        default=0.5,
        gt=0,
        description="Delay between lookups while waiting for an element.",
    )


class RetryConfig(BaseModel):
    """Retry policy applied while opening a browser session."""

    max_attempts: int = Field(default=10, ge=1)
    pause_ms: int = Field(default=1000, ge=0)
    backoff_factor: float = Field(default=0.5, ge=0)
    retryable_signatures: list[str] = Field(
        default_factory=lambda: [
            "Unable to bind to locking port",
            "Resource temporarily unavailable",
        ]
    )

    def delay_ms(self, attempt_index: int) -> float:
        """Pause before retrying after the zero-based ``attempt_index`` failed."""

        return self.pause_ms + attempt_index * self.backoff_factor * self.pause_ms


class WeatherSiteConfig(BaseModel):
    """Markup details of the forecast site."""

    url: str = "http://www.weather.com"
    search_field_name: str = "where"
    search_button_xpath: str = '//*[@id="headerSearchForm"]/button'
    high_temp_xpath: str = (
        '//*[@id="wx-forecast-container"]/div[1]/div[2]/div[7]/div[1]/span[1]'
    )
    pause_after_navigate_ms: int = 1000
    pause_after_fill_ms: int = 2000
    pause_after_search_ms: int = 5000


class AppConfig(BaseSettings):
    """Top-level configuration for a weather bot run."""

    model_config = SettingsConfigDict(
        env_prefix="WEATHER_BOT_",
        env_file=(".env",),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    site: WeatherSiteConfig = Field(default_factory=WeatherSiteConfig)
    locations: list[str] = Field(default_factory=lambda: list(DEFAULT_LOCATIONS))

    @field_validator("locations")
    @classmethod
    def _clean_locations(cls, value: list[str]) -> list[str]:
        cleaned = [location.strip() for location in value if location.strip()]
        if not cleaned:
            raise ValueError("at least one location is required")
        return cleaned


def load_config(
    path: Path | None = None,
    *,
    env_file: Path | None = None,
    **overrides: object,
) -> AppConfig:
    """Layer env values, an optional YAML file and keyword overrides, later layers winning.

    Nested sections merge key by key, so a file that sets ``browser.headless``
    keeps the ``browser.kind`` that came from the environment.
    """

    settings_kwargs: dict[str, object] = {}
    if env_file is not None:
        settings_kwargs["_env_file"] = env_file
    config = AppConfig(**settings_kwargs)
    layers = [layer for layer in (_read_yaml(path) if path else {}, overrides) if layer]
    if not layers:
        return config

    merged = config.model_dump(mode="python")
    for layer in layers:
        _merge_into(merged, layer)
    return AppConfig.model_validate(merged)


def _read_yaml(path: Path) -> dict[str, Any]:
    data = yaml.safe_load(path.read_text()) or {}
    if not isinstance(data, Mapping):
        raise ValueError(f"{path} must hold a mapping of configuration sections")
    return dict(data)


def _merge_into(target: dict[str, Any], updates: Mapping[str, Any]) -> None:
    for key, value in updates.items():
        current = target.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            section = dict(current)
            _merge_into(section, value)
            target[key] = section
        else:
            target[key] = value
