"""Story file parsing for ShortStory."""

from shortstory.parser.story_models import (
    LineAnimation,
    Offset,
    PauseKind,
    ScreenTransition,
    Story,
    StoryEffect,
    StoryLine,
    StoryScreen,
    StorySpeed,
    TimedEvent,
    TimedEventKind,
)
from shortstory.parser.story_parser import (
    Diagnostic,
    ParseResult,
    StoryParser,
    parse_line_attributes,
    parse_story_file,
    parse_story_from_string,
)
from shortstory.parser.text_wrap import process_text_to_lines, split_text_by_length
from shortstory.parser.timed_events import parse_timed_event

__all__ = [
    "Diagnostic",
    "LineAnimation",
    "Offset",
    "ParseResult",
    "PauseKind",
    "ScreenTransition",
    "Story",
    "StoryEffect",
    "StoryLine",
    "StoryParser",
    "StoryScreen",
    "StorySpeed",
    "TimedEvent",
    "TimedEventKind",
    "parse_line_attributes",
    "parse_story_file",
    "parse_story_from_string",
    "parse_timed_event",
    "process_text_to_lines",
    "split_text_by_length",
]
