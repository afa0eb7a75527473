"""Unified CLI handler for standardized error handling and output."""

from __future__ import annotations

from pathlib import Path
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from shortstory.cli.formatters.json_formatter import JsonFormatter
from shortstory.config import ShortStorySettings, get_logger, get_settings_for_cli
from shortstory.exceptions import ShortStoryError

logger = get_logger(__name__)


class CLIHandler:
    """Unified handler for CLI commands."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize CLI handler.

        Args:
            console: Rich console for output
        """
        self.console = console or Console()
        self.json_formatter = JsonFormatter()

    def load_settings(
        self, config: Path | None = None, stories_dir: Path | None = None
    ) -> ShortStorySettings:
        """Settings for a command, with ``--stories-dir`` taking precedence."""
        overrides = {"stories_dir": stories_dir} if stories_dir else None
        return get_settings_for_cli(config_file=config, cli_overrides=overrides)

    def handle_error(
        self, error: Exception, json_output: bool = False, exit_code: int = 1
    ) -> NoReturn:
        """Report ``error`` and exit.

        Args:
            error: Exception to handle
            json_output: Whether to output JSON
            exit_code: Exit code to use
        """
        logger.error(f"Command failed: {error}", exc_info=error)

        if json_output:
            print(self.json_formatter.format_error_response(error, exit_code))
        elif isinstance(error, ShortStoryError):
            self.console.print(f"[red]Error: {escape(error.message)}[/red]")
            if error.hint:
                self.console.print(f"[yellow]Hint: {escape(error.hint)}[/yellow]")
        else:
            self.console.print(f"[red]Error: {escape(str(error))}[/red]")

        raise typer.Exit(exit_code)

    def handle_success(
        self, message: str, data: Any = None, json_output: bool = False
    ) -> None:
        """Handle success responses consistently."""
        if json_output:
            print(self.json_formatter.format_success(message, data))
        else:
            self.console.print(f"[green]{message}[/green]")
