"""ShortStory: text-driven cutscene stories.

Parse ``.tos`` story files, compute their reveal timing and play them back
through a frame-driven state machine.
"""

from shortstory.exceptions import ConfigurationError, ShortStoryError
from shortstory.library import LoadResult, StoryCache, StoryLibrary
from shortstory.parser import (
    Diagnostic,
    ParseResult,
    Story,
    StoryLine,
    StoryParser,
    StoryScreen,
    parse_story_file,
    parse_story_from_string,
)
from shortstory.playback import FrameClock, PlaybackState, ScreenState, StoryPlayer
from shortstory.timing import TimingConfig, get_timing_config, load_timing_config

__version__ = "1.0.0"

__all__ = [
    "ConfigurationError",
    "Diagnostic",
    "FrameClock",
    "LoadResult",
    "ParseResult",
    "PlaybackState",
    "ScreenState",
    "ShortStoryError",
    "Story",
    "StoryCache",
    "StoryLibrary",
    "StoryLine",
    "StoryParser",
    "StoryPlayer",
    "StoryScreen",
    "TimingConfig",
    "__version__",
    "get_timing_config",
    "load_timing_config",
    "parse_story_file",
    "parse_story_from_string",
]
