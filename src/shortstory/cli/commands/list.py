"""List available stories command."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from shortstory.cli.commands.options import ConfigOption, JsonOption, StoriesDirOption
from shortstory.cli.utils.cli_handler import CLIHandler
from shortstory.library import StoryLibrary

console = Console()


def list_command(
    stories_dir: StoriesDirOption = None,
    config: ConfigOption = None,
    json_output: JsonOption = False,
) -> None:
    """List every story under the stories directory.

    Each story is parsed so its title, screen count and health can be shown.
    """
    handler = CLIHandler(console)

    try:
        settings = handler.load_settings(config, stories_dir)
        library = StoryLibrary(settings)
        story_ids = library.list_available_stories()
    except Exception as e:
        handler.handle_error(e, json_output)

    rows = []
    for story_id in story_ids:
        result = library.load_story(story_id)
        rows.append(
            {
                "id": story_id,
                "title": result.story.title if result.story else None,
                "screens": len(result.story.screens) if result.story else 0,
                "success": result.success,
                "diagnostics": len(result.diagnostics),
            }
        )

    if json_output:
        print(handler.json_formatter.format(rows))
        return

    if not rows:
        console.print(
            f"[yellow]No stories found in {escape(str(settings.stories_dir))}[/yellow]",
            style="bold",
        )
        return

    table = Table(title="Stories", show_lines=False)
    table.add_column("Story", style="blue")
    table.add_column("Title", style="cyan")
    table.add_column("Screens", style="yellow", justify="right")
    table.add_column("Status")

    for row in rows:
        if not row["success"]:
            status = "[red]failed[/red]"
        elif row["diagnostics"]:
            status = f"[yellow]{row['diagnostics']} warnings[/yellow]"
        else:
            status = "[green]ok[/green]"
        table.add_row(
            escape(row["id"]), escape(row["title"] or "-"), str(row["screens"]), status
        )

    console.print(table)
    console.print(
        f"\n[green]Found {len(rows)} stor{'ies' if len(rows) != 1 else 'y'}[/green]"
    )
