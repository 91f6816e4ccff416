from pathlib import Path

import pytest
from pydantic import ValidationError

from weather_bot.config import DEFAULT_LOCATIONS, RetryConfig, load_config
from weather_bot.models import BrowserKind


def test_load_config_defaults(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)

    config = load_config()

    assert config.browser.kind == BrowserKind.CHROMIUM
    assert config.browser.command_timeout_seconds == 120
    assert config.retry.max_attempts == 10
    assert config.site.search_field_name == "where"
    assert config.locations == DEFAULT_LOCATIONS


def test_load_config_reads_env_file(tmp_path: Path) -> None:
    env_path = tmp_path / ".env"
    env_path.write_text(
        "\n".join(
            [
                "WEATHER_BOT_BROWSER__KIND=firefox",
                "WEATHER_BOT_BROWSER__DRIVER_PATH=/opt/browsers/firefox",
                "WEATHER_BOT_BROWSER__COMMAND_TIMEOUT_SECONDS=45",
                "WEATHER_BOT_RETRY__MAX_ATTEMPTS=3",
            ]
        )
    )

    config = load_config(env_file=env_path)

    assert config.browser.kind == BrowserKind.FIREFOX
    assert config.browser.driver_path == Path("/opt/browsers/firefox")
    assert config.browser.command_timeout_seconds == 45
    assert config.retry.max_attempts == 3


def test_load_config_prioritises_overrides(tmp_path: Path) -> None:
    env_path = tmp_path / ".env"
    env_path.write_text(
        "\n".join(
            [
                "WEATHER_BOT_BROWSER__KIND=webkit",
                "WEATHER_BOT_BROWSER__HEADLESS=false",
            ]
        )
    )

    config_path = tmp_path / "bot.yaml"
    config_path.write_text(
        "\n".join(
            [
                "browser:",
                "  headless: true",
                "locations:",
                "  - Boise, ID",
            ]
        )
    )

    config = load_config(config_path, env_file=env_path, site={"url": "http://localhost:8000"})

    assert config.browser.kind == BrowserKind.WEBKIT
    assert config.browser.headless is True
    assert config.locations == ["Boise, ID"]
    assert config.site.url == "http://localhost:8000"
    assert config.site.search_field_name == "where"


def test_retry_delay_grows_linearly() -> None:
    retry = RetryConfig()

    assert [retry.delay_ms(index) for index in range(4)] == [1000, 1500, 2000, 2500]


def test_locations_are_stripped_and_blanks_dropped(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)

    config = load_config(locations=["  Boise, ID ", "", "   "])

    assert config.locations == ["Boise, ID"]


def test_blank_location_list_is_rejected(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)

    with pytest.raises(ValidationError, match="at least one location is required"):
        load_config(locations=[" ", ""])


def test_yaml_file_must_hold_a_mapping(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    config_path = tmp_path / "bot.yaml"
    config_path.write_text("- Boise, ID\n- Reno, NV\n")

    with pytest.raises(ValueError, match="must hold a mapping"):
        load_config(config_path)


def test_yaml_and_overrides_merge_nested_sections(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    config_path = tmp_path / "bot.yaml"
    config_path.write_text("browser:\n  kind: firefox\n  headless: false\n")

    config = load_config(config_path, browser={"headless": True})

    assert config.browser.kind == BrowserKind.FIREFOX
    assert config.browser.headless is True
