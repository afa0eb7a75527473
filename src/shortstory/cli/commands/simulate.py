"""Headless playback command."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from shortstory.cli.commands.options import ConfigOption, JsonOption, StoriesDirOption
from shortstory.cli.utils.cli_handler import CLIHandler
from shortstory.library import StoryLibrary
from shortstory.playback import FrameClock, PlaybackState, StoryPlayer
from shortstory.timing import get_timing_config

console = Console()


@dataclass
class TimelineEntry:
    """Something observable that happened during a simulated run."""

    time: float
    screen: int
    kind: str
    detail: str


def run_simulation(
    player: StoryPlayer,
    clock: FrameClock,
    story_id: str,
    fps: int,
    max_seconds: float,
) -> list[TimelineEntry] | None:
    """Play ``story_id`` headless and collect its timeline.

    Wait-for-input pauses are continued automatically.

    Returns:
        The timeline, or None if the story could not be started
    """
    timeline: list[TimelineEntry] = []

    def record(kind: str, detail: str) -> None:
        timeline.append(TimelineEntry(clock.elapsed, player.screen_index, kind, detail))

    player.on_screen_changed(
        lambda index: record("screen", player.screen_names()[index] or str(index))
    )
    player.on_story_completed(lambda: record("completed", ""))

    if not player.start_story(story_id):
        return None

    delta = 1.0 / fps
    last_line: tuple[int, int] | None = None
    seen_events: set[int] = set()
    while player.is_playing and clock.elapsed < max_seconds:
        if player.state is PlaybackState.PLAYING_LINE:
            position = (player.screen_index, player.line_index)
            line = player.current_line
            if position != last_line and line is not None and not line.is_spacer:
                record("line", line.text)
            last_line = position
        if player.is_waiting_for_input:
            record("continue", "")
            player.continue_story()

        clock.advance(delta)

        fired = player.fired_event_indices
        if not fired:
            seen_events = set()
        screen = player.current_screen
        for index in sorted(fired - seen_events):
            if screen is not None:
                event = screen.timed_events[index]
                record(event.kind.value, event.asset_path or f"{event.start_time:g}s")
        seen_events = set(fired)

    if player.is_playing:
        record("timeout", f"stopped after {max_seconds:g}s")
        player.stop()
    return timeline


def simulate_command(
    story_id: Annotated[str, typer.Argument(help="Story identifier, e.g. intro.tos")],
    fps: Annotated[
        int, typer.Option("--fps", min=1, max=1000, help="Simulated frame rate")
    ] = 60,
    max_seconds: Annotated[
        float,
        typer.Option("--max-seconds", min=0.1, help="Stop after this much time"),
    ] = 600.0,
    stories_dir: StoriesDirOption = None,
    config: ConfigOption = None,
    json_output: JsonOption = False,
) -> None:
    """Play a story without rendering and print what happens when."""
    handler = CLIHandler(console)

    try:
        settings = handler.load_settings(config, stories_dir)
        timing = get_timing_config(settings)
    except Exception as e:
        handler.handle_error(e, json_output)

    clock = FrameClock()
    player = StoryPlayer(timing, library=StoryLibrary(settings), clock=clock)
    timeline = run_simulation(player, clock, story_id, fps, max_seconds)
    if timeline is None:
        handler.handle_error(
            RuntimeError(f"Failed to start story '{story_id}'"), json_output
        )

    if json_output:
        print(handler.json_formatter.format(timeline))
        return

    table = Table(title=f"Playback of {escape(story_id)}")
    table.add_column("Time", justify="right", style="yellow")
    table.add_column("Screen", justify="right")
    table.add_column("Event", style="cyan")
    table.add_column("Detail")
    for entry in timeline:
        table.add_row(
            f"{entry.time:.2f}", str(entry.screen), entry.kind, escape(entry.detail)
        )
    console.print(table)
