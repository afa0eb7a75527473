"""Show a single story command."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from shortstory.cli.commands.options import ConfigOption, JsonOption, StoriesDirOption
from shortstory.cli.utils.cli_handler import CLIHandler
from shortstory.library import StoryLibrary
from shortstory.parser.story_models import Story

console = Console()


def _print_story(story: Story, show_lines: bool) -> None:
    console.print(f"[bold cyan]{escape(story.title)}[/bold cyan]")
    if story.ost:
        console.print(f"  OST: {escape(story.ost)}")

    table = Table(title="Screens")
    table.add_column("#", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Background", style="green")
    table.add_column("Transition")
    table.add_column("Lines", justify="right")
    table.add_column("Events", justify="right")

    for index, screen in enumerate(story.screens):
        table.add_row(
            str(index),
            escape(screen.name),
            escape(screen.background_path or "-"),
            screen.transition.value,
            str(len(screen.lines)),
            str(len(screen.timed_events)),
        )
    console.print(table)

    if not show_lines:
        return

    for screen in story.screens:
        console.print(f"\n[bold]{escape(screen.name)}[/bold]")
        for event in screen.timed_events:
            console.print(
                f"  [magenta]@{event.kind.value}[/magenta] "
                f"{escape(event.asset_path)} at {event.start_time:g}s"
            )
        for line in screen.lines:
            if line.is_spacer:
                console.print("")
                continue
            console.print(
                f"  {escape(line.text)} [dim]({line.animation.value}, "
                f"{line.speed.value}, pause={line.pause.value}, "
                f"effect={line.effect.value})[/dim]"
            )


def show_command(
    story_id: Annotated[str, typer.Argument(help="Story identifier, e.g. intro.tos")],
    lines: Annotated[
        bool, typer.Option("--lines", "-l", help="Print every line")
    ] = False,
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Bypass the story cache")
    ] = False,
    stories_dir: StoriesDirOption = None,
    config: ConfigOption = None,
    json_output: JsonOption = False,
) -> None:
    """Load a story and summarize its screens."""
    handler = CLIHandler(console)

    try:
        settings = handler.load_settings(config, stories_dir)
        result = StoryLibrary(settings).load_story(story_id, force_reload=force)
    except Exception as e:
        handler.handle_error(e, json_output)

    if json_output:
        print(
            handler.json_formatter.format(
                {
                    "success": result.success,
                    "story": result.story,
                    "diagnostics": [str(d) for d in result.diagnostics],
                }
            )
        )
        if not result.success:
            raise typer.Exit(1)
        return

    for diagnostic in result.diagnostics:
        colour = "yellow" if result.success else "red"
        console.print(f"[{colour}]{escape(str(diagnostic))}[/{colour}]")

    if not result.success or result.story is None:
        console.print(f"[red]Failed to load story '{escape(story_id)}'[/red]")
        raise typer.Exit(1)

    _print_story(result.story, lines)
