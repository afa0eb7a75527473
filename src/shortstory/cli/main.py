"""Main CLI entry point for ShortStory."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from shortstory import __version__
from shortstory.cli.commands import (
    check_command,
    list_command,
    show_command,
    simulate_command,
)
from shortstory.cli.formatters.json_formatter import JsonFormatter
from shortstory.config import get_logger

logger = get_logger(__name__)
console = Console()

app = typer.Typer(
    name="shortstory",
    help="Parse, inspect and play back .tos short stories",
    pretty_exceptions_enable=False,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command(name="list")(list_command)
app.command(name="ls")(list_command)
app.command(name="show")(show_command)
app.command(name="check")(check_command)
app.command(name="simulate")(simulate_command)


@app.command()
def version(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show ShortStory version."""
    version_info = {"name": "ShortStory", "version": __version__}
    if json_output:
        print(JsonFormatter().format(version_info))
    else:
        console.print(f"ShortStory v{__version__}")


@app.callback()
def main_callback(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
            envvar="SHORTSTORY_CONFIG",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging (INFO level)"),
    ] = False,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Enable debug logging", envvar="SHORTSTORY_DEBUG"),
    ] = False,
) -> None:
    """Configure global options."""
    from shortstory.config import (
        ShortStorySettings,
        clear_settings_cache,
        configure_logging,
        get_settings,
        set_settings,
    )

    if debug:
        os.environ["SHORTSTORY_LOG_LEVEL"] = "DEBUG"
        os.environ["SHORTSTORY_DEBUG"] = "true"
    elif verbose:
        os.environ["SHORTSTORY_LOG_LEVEL"] = "INFO"

    if debug or verbose or config:
        clear_settings_cache()
        if config:
            set_settings(ShortStorySettings.from_multiple_sources([config]))
        configure_logging(get_settings())
        logger.debug("Global options applied", config=str(config) if config else None)


def main() -> None:
    """Run the CLI application."""
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
