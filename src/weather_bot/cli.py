"""Command line interface for weather-bot."""

from __future__ import annotations

import logging
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from pathlib import Path
from typing import Annotated, Any, Optional

import typer

from .config import load_config
from .factory import build_weather_bot
from .models import BrowserKind

app = typer.Typer(help="Weather Bot entry point")


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Set up logging; --verbose also echoes every diagnostic log entry."""

    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("weather_bot").setLevel(logging.DEBUG if verbose else logging.INFO)


@app.command()
def version() -> None:
    """Print the installed weather-bot version."""

    try:
        installed = get_version("weather-bot")
    except PackageNotFoundError:  # pragma: no cover - source checkout without install
        installed = "0.0.0"
    typer.echo(f"weather-bot {installed}")


@app.command()
def run(
    locations: Annotated[
        Optional[list[str]],
        typer.Argument(help="Locations to look up; defaults to the configured list."),
    ] = None,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to YAML configuration."),
    ] = None,
    env_file: Annotated[
        Optional[Path],
        typer.Option(
            "--env-file",
            help="Path to an .env file with default configuration values.",
        ),
    ] = None,
    browser: Annotated[
        Optional[BrowserKind],
        typer.Option("--browser", help="Browser engine to drive."),
    ] = None,
    headless: Annotated[
        Optional[bool],
        typer.Option("--headless/--headed", help="Run the browser in headless mode (or headed)."),
    ] = None,
) -> None:
    """Print today's high temperature for each location."""

    overrides: dict[str, Any] = {}
    if browser is not None or headless is not None:
        overrides.setdefault("browser", {})
        if browser is not None:
            overrides["browser"]["kind"] = browser
        if headless is not None:
            overrides["browser"]["headless"] = headless
    if locations:
        overrides["locations"] = list(locations)

    config = load_config(config_path, env_file=env_file, **overrides)

    typer.echo("Weather Bot")
    bot = build_weather_bot(config)
    with bot.web:
        for location in config.locations:
            typer.echo(f"Today's High Temp in {location} is {bot.get_todays_high_temp(location)}.")


if __name__ == "__main__":
    app()
