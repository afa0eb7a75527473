"""Parsing of ``@`` timed event lines."""

from __future__ import annotations

from shortstory.exceptions import TimedEventError
from shortstory.parser.keywords import parse_float
from shortstory.parser.story_models import TimedEvent, TimedEventKind


def parse_timed_event(text: str) -> TimedEvent:
    """Parse the body of a timed event line (the part after ``@``).

    Supported commands::

        sfx <asset> | <start>
        vfx <class> | <start> | <duration>
        wait <seconds>
        background <path>

    Args:
        text: Event text without the leading ``@``

    Returns:
        The parsed event

    Raises:
        TimedEventError: If the command is unknown or its arguments malformed
    """
    body = text.strip()
    tokens = body.split()
    if not tokens:
        raise TimedEventError("Empty timed event")

    command = tokens[0].lower()
    remainder = body[len(tokens[0]) :].strip()

    if command == "sfx":
        fields = remainder.split("|")
        if len(fields) < 2:
            raise TimedEventError(
                "Invalid @sfx format (expected: @sfx <path> | <time>)",
                details={"line": text},
            )
        return TimedEvent(
            kind=TimedEventKind.SFX,
            asset_path=fields[0].strip(),
            start_time=parse_float(fields[1]),
        )

    if command == "vfx":
        fields = remainder.split("|")
        if len(fields) < 3:
            raise TimedEventError(
                "Invalid @vfx format (expected: @vfx <class> | <time> | <duration>)",
                details={"line": text},
            )
        return TimedEvent(
            kind=TimedEventKind.VFX,
            asset_path=fields[0].strip(),
            start_time=parse_float(fields[1]),
            duration=parse_float(fields[2]),
        )

    if command == "wait":
        if len(tokens) < 2:
            raise TimedEventError(
                "Invalid @wait format (expected: @wait <duration>)",
                details={"line": text},
            )
        return TimedEvent(kind=TimedEventKind.WAIT, start_time=parse_float(tokens[1]))

    if command == "background":
        if not remainder:
            raise TimedEventError(
                "Invalid @background format (expected: @background <path>)",
                details={"line": text},
            )
        return TimedEvent(kind=TimedEventKind.BACKGROUND_CHANGE, asset_path=remainder)

    raise TimedEventError(f"Unknown timed event command '{command}'")
