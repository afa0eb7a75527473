"""Data models for parsed short stories."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import NamedTuple


class LineAnimation(str, Enum):
    """How a line's text is revealed."""

    TYPEWRITER = "typewriter"
    LEFT_TO_RIGHT = "left_to_right"
    PARAGRAPH = "paragraph"
    TOP_DOWN = "top_down"
    WORD_RAIN = "word_rain"
    SNAKE = "snake"

    @property
    def has_fixed_duration(self) -> bool:
        """Whether the line reveals over the speed's block duration."""
        return self is not LineAnimation.TYPEWRITER


class StorySpeed(str, Enum):
    """Named timing profile."""

    STANDARD = "standard"
    FAST = "fast"
    SLOW = "slow"


class PauseKind(str, Enum):
    """Pause requested after a line finishes animating."""

    NONE = "none"
    SHORT = "short"
    STANDARD = "standard"
    LONG = "long"
    LINE_BREAK = "line_break"
    WAIT = "wait"


class StoryEffect(str, Enum):
    """Screen effect attached to a line."""

    NONE = "none"
    SHAKE_LOW = "shake_low"
    SHAKE_MED = "shake_med"
    SHAKE_HIGH = "shake_high"
    STORM = "storm"


class ScreenTransition(str, Enum):
    """Transition played when a screen is entered."""

    INSTANT = "instant"
    FADE = "fade"
    CROSSFADE = "crossfade"


class TimedEventKind(str, Enum):
    """Kinds of ``@`` cues scheduled against screen time."""

    SFX = "sfx"
    VFX = "vfx"
    WAIT = "wait"
    BACKGROUND_CHANGE = "background"


# Relative intensity handed to the shake collaborator for each effect
SHAKE_INTENSITY: dict[StoryEffect, float] = {
    StoryEffect.NONE: 0.0,
    StoryEffect.SHAKE_LOW: 0.3,
    StoryEffect.SHAKE_MED: 0.6,
    StoryEffect.SHAKE_HIGH: 1.0,
    StoryEffect.STORM: 0.8,
}


class Offset(NamedTuple):
    """Positional offset applied to a line when rendered."""

    x: float = 0.0
    y: float = 0.0


SPACER_TEXT = " "


@dataclass(frozen=True)
class StoryLine:
    """A single displayed line of text with its annotations."""

    text: str
    animation: LineAnimation = LineAnimation.TYPEWRITER
    speed: StorySpeed = StorySpeed.STANDARD
    pause: PauseKind = PauseKind.NONE
    effect: StoryEffect = StoryEffect.NONE
    offset: Offset = Offset()

    @classmethod
    def spacer(cls) -> StoryLine:
        """Build the blank separator line appended after every text block."""
        return cls(text=SPACER_TEXT)

    @property
    def is_spacer(self) -> bool:
        """Whether this line is a blank separator."""
        return self.text == SPACER_TEXT

    @property
    def shake_intensity(self) -> float:
        """Shake intensity for this line's effect."""
        return SHAKE_INTENSITY[self.effect]


@dataclass(frozen=True)
class TimedEvent:
    """A cue fired once when screen time reaches ``start_time``."""

    kind: TimedEventKind
    start_time: float = 0.0
    duration: float = 0.0  # VFX only
    asset_path: str = ""


@dataclass
class StoryScreen:
    """One screen of a story: background, cues and lines."""

    name: str = ""
    background_path: str = ""
    background_asset: str | None = None
    resolved_background: Path | None = None
    transition: ScreenTransition = ScreenTransition.FADE
    lines: list[StoryLine] = field(default_factory=list)
    timed_events: list[TimedEvent] = field(default_factory=list)

    @property
    def has_content(self) -> bool:
        """Whether any line or timed event has been added."""
        return bool(self.lines or self.timed_events)


@dataclass
class Story:
    """Represents a parsed story file."""

    title: str = ""
    ost: str = ""
    screens: list[StoryScreen] = field(default_factory=list)
    source_name: str = ""

    @property
    def is_valid(self) -> bool:
        """A story needs a title and at least one screen."""
        return bool(self.title) and bool(self.screens)

    def screen_names(self) -> list[str]:
        """Names of all screens in order."""
        return [screen.name for screen in self.screens]

    def find_screen(self, name: str) -> int | None:
        """Index of the screen named ``name`` (case-insensitive), if any."""
        wanted = name.casefold()
        for index, screen in enumerate(self.screens):
            if screen.name.casefold() == wanted:
                return index
        return None
