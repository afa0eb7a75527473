"""Validate story files command."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from shortstory.cli.commands.options import ConfigOption, JsonOption
from shortstory.cli.utils.cli_handler import CLIHandler
from shortstory.parser import StoryParser

console = Console()


def check_command(
    files: Annotated[
        list[Path],
        typer.Argument(
            help="Story files to validate",
            exists=True,
            dir_okay=False,
            readable=True,
        ),
    ],
    max_line_length: Annotated[
        int | None,
        typer.Option(
            "--max-line-length",
            min=20,
            max=300,
            help="Override the wrapping limit",
        ),
    ] = None,
    config: ConfigOption = None,
    json_output: JsonOption = False,
) -> None:
    """Parse story files and report every diagnostic.

    Exits with status 1 if any file fails to parse.
    """
    handler = CLIHandler(console)

    try:
        settings = handler.load_settings(config)
    except Exception as e:
        handler.handle_error(e, json_output)

    parser = StoryParser(
        max_line_length=max_line_length or settings.max_line_length,
        asset_prefixes=settings.asset_path_prefixes,
    )

    reports = []
    for path in files:
        result = parser.parse_file(path)
        reports.append(
            {
                "file": str(path),
                "success": result.success,
                "title": result.story.title,
                "screens": len(result.story.screens),
                "diagnostics": [
                    {"line": d.line_number, "message": d.message}
                    for d in result.diagnostics
                ],
            }
        )

    failed = [report for report in reports if not report["success"]]

    if json_output:
        print(handler.json_formatter.format(reports))
    else:
        for report in reports:
            mark = "[green]OK[/green]" if report["success"] else "[red]FAILED[/red]"
            console.print(f"{mark} {escape(report['file'])}")
            for diagnostic in report["diagnostics"]:
                prefix = (
                    f"line {diagnostic['line']}: " if diagnostic["line"] else ""
                )
                console.print(f"    {prefix}{escape(diagnostic['message'])}")

    if failed:
        raise typer.Exit(1)
    if not json_output:
        noun = "file" if len(reports) == 1 else "files"
        handler.handle_success(f"{len(reports)} story {noun} parsed successfully")
