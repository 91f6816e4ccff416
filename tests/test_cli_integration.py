from __future__ import annotations

from typer.testing import CliRunner

from weather_bot.browser.scripted import ScriptedElement, ScriptedEngine, ScriptedSession
from weather_bot.cli import app
from weather_bot.config import AppConfig
from weather_bot.factory import build_weather_bot
from weather_bot.models import BrowserKind, Locator


def _base_config() -> AppConfig:
    return AppConfig.model_validate(
        {
            "browser": {"headless": True},
            "site": {
                "pause_after_navigate_ms": 0,
                "pause_after_fill_ms": 0,
                "pause_after_search_ms": 0,
            },
            "locations": ["Charleston, SC", "Columbia, SC"],
        }
    )


def _forecast_session(config: AppConfig, high: str) -> ScriptedSession:
    site = config.site
    return ScriptedSession(
        {
            Locator.by_name(site.search_field_name): ScriptedElement(),
            Locator.by_xpath(site.search_button_xpath): ScriptedElement(),
            Locator.by_xpath(site.high_temp_xpath): ScriptedElement(high),
        }
    )


def test_run_command_prints_each_location(monkeypatch, tmp_path):
    runner = CliRunner()
    config = _base_config()
    sessions = [_forecast_session(config, "75°"), _forecast_session(config, "80°")]
    engine = ScriptedEngine(sessions)
    load_args: dict[str, object] = {}

    def fake_load_config(path, *, env_file=None, **overrides):  # type: ignore[no-untyped-def]
        load_args["path"] = path
        load_args["env_file"] = env_file
        load_args["overrides"] = overrides
        return config

    monkeypatch.setattr("weather_bot.cli.load_config", fake_load_config)
    monkeypatch.setattr(
        "weather_bot.cli.build_weather_bot",
        lambda cfg: build_weather_bot(cfg, engine=engine),
    )

    config_path = tmp_path / "bot.yaml"
    config_path.write_text("locations: []\n")

    result = runner.invoke(
        app,
        ["run", "--config", str(config_path), "--browser", "firefox", "--headed"],
    )

    assert result.exit_code == 0
    printed = [
        line for line in result.stdout.splitlines() if line.startswith(("Weather Bot", "Today's"))
    ]
    assert printed == [
        "Weather Bot",
        "Today's High Temp in Charleston, SC is 75°.",
        "Today's High Temp in Columbia, SC is 80°.",
    ]
    assert load_args["path"] == config_path
    assert load_args["env_file"] is None
    assert load_args["overrides"] == {
        "browser": {"kind": BrowserKind.FIREFOX, "headless": False},
    }
    assert all(session.quit_calls == 1 for session in sessions)


def test_run_command_passes_location_arguments(monkeypatch):
    runner = CliRunner()
    captured: dict[str, object] = {}

    def fake_load_config(path, *, env_file=None, **overrides):  # type: ignore[no-untyped-def]
        captured["overrides"] = overrides
        return _base_config().model_copy(update={"locations": overrides["locations"]})

    class StubBot:
        def __init__(self) -> None:
            self.web = self
            self.released = False

        def __enter__(self):
            return self

        def __exit__(self, *exc_info) -> None:
            self.released = True

        def get_todays_high_temp(self, location: str) -> str:
            return "Unable to retrieve. Try again later."

    bot = StubBot()
    monkeypatch.setattr("weather_bot.cli.load_config", fake_load_config)
    monkeypatch.setattr("weather_bot.cli.build_weather_bot", lambda cfg: bot)

    result = runner.invoke(app, ["run", "Boise, ID"])

    assert result.exit_code == 0
    assert captured["overrides"] == {"locations": ["Boise, ID"]}
    assert "Today's High Temp in Boise, ID is Unable to retrieve. Try again later." in result.stdout
    assert bot.released


def test_version_command_prints_a_version():
    result = CliRunner().invoke(app, ["version"])

    assert result.exit_code == 0
    assert result.stdout.startswith("weather-bot ")


def test_run_command_with_scripted_engine(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    config_path = tmp_path / "offline.yaml"
    config_path.write_text(
        "\n".join(
            [
                "browser:",
                "  engine: scripted",
                "  scripted_elements:",
                "    'name=where': ''",
                "    'xpath=//*[@id=\"headerSearchForm\"]/button': ''",
                "    'xpath=//*[@id=\"wx-forecast-container\"]/div[1]/div[2]/div[7]/div[1]/span[1]': 64°",
                "site:",
                "  pause_after_navigate_ms: 0",
                "  pause_after_fill_ms: 0",
                "  pause_after_search_ms: 0",
            ]
        )
    )

    result = CliRunner().invoke(app, ["run", "--config", str(config_path), "Boise, ID"])

    assert result.exit_code == 0
    assert "Today's High Temp in Boise, ID is 64°." in result.stdout
