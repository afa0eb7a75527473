"""Parser for the line-oriented .tos story format.

A story file has a ``[STORY]`` metadata section followed by any number of
``[SCREEN...]`` sections::

    [STORY]
    title = The Lighthouse
    ost = /Game/Audio/Theme

    [SCREEN_01_INTRO]
    background = /Game/Art/Shore
    transition = crossfade
    @sfx /Game/Audio/Waves | 0.5
    The waves rolled in,
    one after another. | typewriter | pause=long | effect=shake_low

Lines without a ``|`` are continuations buffered until a terminator line
(one containing ``|``) supplies the attributes for the whole block.

Parsing is best effort: malformed input becomes diagnostics and the parser
keeps going. Nothing here raises for bad story text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from shortstory.config import get_logger
from shortstory.exceptions import TimedEventError
from shortstory.parser.keywords import (
    parse_animation,
    parse_effect,
    parse_offset,
    parse_pause,
    parse_speed,
    parse_transition,
)
from shortstory.parser.story_models import (
    SPACER_TEXT,
    LineAnimation,
    Offset,
    PauseKind,
    Story,
    StoryEffect,
    StoryLine,
    StoryScreen,
    StorySpeed,
)
from shortstory.parser.text_wrap import process_text_to_lines
from shortstory.parser.timed_events import parse_timed_event

logger = get_logger(__name__)

SPACER_MARKER = "[SPACER]"
DEFAULT_MAX_LINE_LENGTH = 80
DEFAULT_ASSET_PREFIXES = ("/Game", "/Engine")


@dataclass(frozen=True)
class Diagnostic:
    """A problem found while parsing, tied to a source line when possible."""

    line_number: int | None
    message: str

    def __str__(self) -> str:
        if self.line_number is None:
            return self.message
        return f"Line {self.line_number}: {self.message}"


@dataclass
class ParseResult:
    """Outcome of parsing a story.

    ``story`` is always present, even on failure, so callers can inspect
    whatever was recovered.
    """

    story: Story
    diagnostics: list[Diagnostic] = field(default_factory=list)
    success: bool = False

    @property
    def messages(self) -> list[str]:
        """Diagnostics rendered as strings."""
        return [str(diagnostic) for diagnostic in self.diagnostics]


@dataclass
class LineAttributes:
    """Attributes parsed from a terminator line."""

    text: str
    animation: LineAnimation = LineAnimation.TYPEWRITER
    speed: StorySpeed = StorySpeed.STANDARD
    pause: PauseKind = PauseKind.NONE
    effect: StoryEffect = StoryEffect.NONE
    offset: Offset = Offset()


class ParseState(Enum):
    """Which section the parser is currently inside."""

    NONE = "none"
    STORY_METADATA = "story_metadata"
    SCREEN_CONTENT = "screen_content"


@dataclass
class _ParseContext:
    """Mutable traversal state for a single parse run."""

    story: Story = field(default_factory=Story)
    state: ParseState = ParseState.NONE
    found_story_section: bool = False
    story_metadata: dict[str, str] = field(default_factory=dict)
    pending: list[str] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    line_number: int | None = None

    @property
    def screen(self) -> StoryScreen | None:
        if self.state is not ParseState.SCREEN_CONTENT or not self.story.screens:
            return None
        return self.story.screens[-1]

    def report(self, message: str) -> None:
        """Record a diagnostic against the current source line."""
        self.diagnostics.append(Diagnostic(self.line_number, message))

    def report_document(self, message: str) -> None:
        """Record a diagnostic that belongs to the whole document."""
        self.diagnostics.append(Diagnostic(None, message))


def clean_line(raw: str) -> str:
    """Trim a raw line; comment lines (``#``) become empty."""
    line = raw.strip()
    if line.startswith("#"):
        return ""
    return line


def section_name(line: str) -> str | None:
    """Return the section name if ``line`` is a ``[NAME]`` header.

    ``[SPACER]`` looks like a header but is content, so it returns None.
    """
    if not (line.startswith("[") and line.endswith("]")) or len(line) < 2:
        return None
    name = line[1:-1].strip()
    if not name or name.upper() == "SPACER":
        return None
    return name


def parse_metadata_line(line: str) -> tuple[str, str] | None:
    """Split a ``key = value`` line.

    Lines containing ``|`` are never metadata. Both key and value must be
    non-empty after trimming.
    """
    if "|" in line or "=" not in line:
        return None
    key, _, value = line.partition("=")
    key = key.strip()
    value = value.strip()
    if not key or not value:
        return None
    return key, value


def parse_line_attributes(line: str) -> tuple[LineAttributes | None, list[str]]:
    """Parse a ``TEXT | ANIMATION [| key=value ...]`` terminator line.

    Unknown keywords never reject the line; they fall back to the current
    value and add a warning.

    Args:
        line: Cleaned terminator line

    Returns:
        ``(attributes, warnings)``; attributes is None when the line is
        rejected, in which case warnings holds the reason
    """
    fields = [part.strip() for part in line.split("|")]
    if len(fields) < 2:
        return None, [
            "Invalid story line format "
            f"(expected at least 2 fields, got {len(fields)})"
        ]

    text = fields[0]
    if text.upper() == SPACER_MARKER:
        text = SPACER_TEXT
    elif not text:
        return None, ["Empty text field"]

    warnings: list[str] = []
    attributes = LineAttributes(text=text)

    animation = parse_animation(fields[1])
    if animation is None:
        warnings.append(f"Unknown animation type '{fields[1]}'")
    else:
        attributes.animation = animation

    for param in fields[2:]:
        if not param:
            continue
        if "=" not in param:
            warnings.append(f"Invalid parameter format '{param}' (expected key=value)")
            continue

        raw_key, _, value = param.partition("=")
        raw_key = raw_key.strip()
        key = raw_key.lower()
        value = value.strip()
        if key == "speed":
            speed = parse_speed(value)
            if speed is None:
                warnings.append(f"Unknown speed '{value}'")
            else:
                attributes.speed = speed
        elif key == "pause":
            pause = parse_pause(value)
            if pause is None:
                warnings.append(f"Unknown pause duration '{value}'")
            else:
                attributes.pause = pause
        elif key == "effect":
            effect = parse_effect(value)
            if effect is None:
                warnings.append(f"Unknown effect type '{value}'")
            else:
                attributes.effect = effect
        elif key == "offset":
            offset = parse_offset(value)
            if offset is None:
                warnings.append(f"Invalid offset format '{value}' (expected X,Y)")
            else:
                attributes.offset = offset
        else:
            warnings.append(f"Unknown parameter '{raw_key}'")

    return attributes, warnings


class StoryParser:
    """Parse .tos story text into a Story plus diagnostics."""

    def __init__(
        self,
        max_line_length: int = DEFAULT_MAX_LINE_LENGTH,
        asset_prefixes: tuple[str, ...] | list[str] = DEFAULT_ASSET_PREFIXES,
    ) -> None:
        """Initialize the parser.

        Args:
            max_line_length: Wrapping limit for displayed lines
            asset_prefixes: Background path prefixes that denote asset references
        """
        self.max_line_length = max_line_length
        self.asset_prefixes = tuple(asset_prefixes)

    def parse(self, text: str) -> ParseResult:
        """Parse story text.

        Args:
            text: Full story source

        Returns:
            ParseResult with the recovered story and every diagnostic
        """
        ctx = _ParseContext()

        if not text.strip():
            ctx.report_document("Empty story file")
            return ParseResult(story=ctx.story, diagnostics=ctx.diagnostics)

        for index, raw in enumerate(text.splitlines()):
            ctx.line_number = index + 1
            line = clean_line(raw)
            if not line:
                continue

            name = section_name(line)
            if name is not None:
                self._enter_section(ctx, name)
            elif ctx.state is ParseState.STORY_METADATA:
                self._parse_story_metadata(ctx, line)
            elif ctx.state is ParseState.SCREEN_CONTENT:
                self._parse_screen_content(ctx, line)
            else:
                ctx.report("Content found before [STORY] or [SCREEN] section")

        return self._finish(ctx)

    def parse_file(self, file_path: Path | str) -> ParseResult:
        """Parse a story file.

        Args:
            file_path: Path to the .tos file

        Returns:
            ParseResult; a missing or unreadable file is reported as a
            failed result rather than raised
        """
        path = Path(file_path)
        if not path.is_file():
            return ParseResult(
                story=Story(),
                diagnostics=[Diagnostic(None, f"File not found: {path}")],
            )

        try:
            content = path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Failed to read story file", path=str(path), error=str(e))
            return ParseResult(
                story=Story(),
                diagnostics=[Diagnostic(None, f"Failed to read file: {path}")],
            )

        logger.debug(f"Parsing story file: {path}")
        result = self.parse(content)
        if result.success:
            result.story.source_name = path.name
        return result

    def _enter_section(self, ctx: _ParseContext, name: str) -> None:
        if ctx.pending:
            ctx.report(
                "Orphaned text lines found before section change "
                "(missing metadata line?)"
            )
            ctx.pending.clear()

        upper = name.upper()
        if upper == "STORY":
            ctx.state = ParseState.STORY_METADATA
            ctx.found_story_section = True
        elif upper.startswith("SCREEN"):
            ctx.state = ParseState.SCREEN_CONTENT
            ctx.story.screens.append(StoryScreen(name=name))
        else:
            ctx.report(f"Unknown section [{name}]")

    def _parse_story_metadata(self, ctx: _ParseContext, line: str) -> None:
        parsed = parse_metadata_line(line)
        if parsed is None:
            ctx.report(f"Invalid metadata format: {line}")
            return
        key, value = parsed
        ctx.story_metadata[key.lower()] = value

    def _parse_screen_content(self, ctx: _ParseContext, line: str) -> None:
        screen = ctx.screen
        if screen is None:
            ctx.report("No active screen section")
            return

        if not screen.has_content and not ctx.pending:
            parsed = parse_metadata_line(line)
            if parsed is not None:
                self._apply_screen_metadata(screen, *parsed)
                return

        if line.startswith("@"):
            try:
                screen.timed_events.append(parse_timed_event(line[1:]))
            except TimedEventError as e:
                ctx.report(e.message)
            return

        if line.upper() == SPACER_MARKER:
            if ctx.pending:
                ctx.report(
                    "[SPACER] found inside a pending text block "
                    "(missing metadata line?)"
                )
                ctx.pending.clear()
            screen.lines.append(StoryLine.spacer())
            return

        if "|" not in line:
            ctx.pending.append(line)
            return

        attributes, warnings = parse_line_attributes(line)
        for warning in warnings:
            ctx.report(warning)
        if attributes is None:
            return

        for pending in ctx.pending:
            self._append_block(screen, pending, attributes, PauseKind.LINE_BREAK)
        self._append_block(screen, attributes.text, attributes, attributes.pause)
        screen.lines.append(StoryLine.spacer())
        ctx.pending.clear()

    def _apply_screen_metadata(self, screen: StoryScreen, key: str, value: str) -> None:
        key = key.lower()
        if key == "background":
            screen.background_path = value
            if value.startswith(self.asset_prefixes):
                screen.background_asset = value
        elif key == "transition":
            transition = parse_transition(value)
            if transition is not None:
                screen.transition = transition
        else:
            logger.debug(
                "Ignoring unknown screen metadata", key=key, screen=screen.name
            )

    def _append_block(
        self,
        screen: StoryScreen,
        text: str,
        attributes: LineAttributes,
        pause: PauseKind,
    ) -> None:
        for line_text, line_pause in process_text_to_lines(
            text, pause, self.max_line_length
        ):
            screen.lines.append(
                StoryLine(
                    text=line_text,
                    animation=attributes.animation,
                    speed=attributes.speed,
                    pause=line_pause,
                    effect=attributes.effect,
                    offset=attributes.offset,
                )
            )

    def _finish(self, ctx: _ParseContext) -> ParseResult:
        if ctx.pending:
            ctx.report_document(
                "End of file: Orphaned text lines found (missing metadata line?)",
            )

        story = ctx.story
        if not ctx.found_story_section:
            ctx.report_document("Missing [STORY] section")
            return ParseResult(story=story, diagnostics=ctx.diagnostics)

        story.title = ctx.story_metadata.get("title", story.title)
        story.ost = ctx.story_metadata.get("ost", story.ost)

        if not story.is_valid:
            if not story.title:
                ctx.report_document("Missing 'title' in [STORY] section")
            if not story.screens:
                ctx.report_document("No screens defined (missing [SCREEN_XX] sections)")
            return ParseResult(story=story, diagnostics=ctx.diagnostics)

        return ParseResult(story=story, diagnostics=ctx.diagnostics, success=True)


def parse_story_from_string(
    text: str, max_line_length: int = DEFAULT_MAX_LINE_LENGTH
) -> ParseResult:
    """Parse story text with default asset prefixes."""
    return StoryParser(max_line_length=max_line_length).parse(text)


def parse_story_file(
    file_path: Path | str, max_line_length: int = DEFAULT_MAX_LINE_LENGTH
) -> ParseResult:
    """Parse a story file with default asset prefixes."""
    return StoryParser(max_line_length=max_line_length).parse_file(file_path)
