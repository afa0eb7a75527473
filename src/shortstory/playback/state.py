"""Playback states and per-frame snapshots exposed to renderers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from shortstory.parser.story_models import (
    LineAnimation,
    Offset,
    ScreenTransition,
    StoryEffect,
)


class PlaybackState(str, Enum):
    """State of the story player."""

    IDLE = "idle"
    PLAYING_LINE = "playing_line"
    PAUSING_AFTER_LINE = "pausing_after_line"
    TRANSITIONING_SCREEN = "transitioning_screen"
    COMPLETED = "completed"


@dataclass(frozen=True)
class LineState:
    """Render state of one line on the current screen."""

    full_text: str
    animation: LineAnimation
    effect: StoryEffect
    offset: Offset
    shake_intensity: float = 0.0
    animation_progress: float = 0.0
    current_text_progress: float = 0.0
    past_text_progress: float = 0.0
    is_fully_visible: bool = False
    is_animating: bool = False


@dataclass(frozen=True)
class ScreenState:
    """Snapshot of everything a renderer needs for the current frame."""

    state: PlaybackState = PlaybackState.IDLE
    is_playing: bool = False
    is_complete: bool = False
    is_paused: bool = False
    is_waiting_for_input: bool = False
    screen_index: int = 0
    current_line_index: int = 0
    background_asset: str | None = None
    background_path: str = ""
    ready_background: Path | None = None
    transition: ScreenTransition = ScreenTransition.FADE
    fired_event_indices: frozenset[int] = frozenset()
    lines: list[LineState] = field(default_factory=list)
