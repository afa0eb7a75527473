"""Story playback: the player state machine and its snapshots."""

from shortstory.playback.clock import FrameClock
from shortstory.playback.player import TOP_DOWN_STAGGER, StoryPlayer
from shortstory.playback.state import LineState, PlaybackState, ScreenState

__all__ = [
    "TOP_DOWN_STAGGER",
    "FrameClock",
    "LineState",
    "PlaybackState",
    "ScreenState",
    "StoryPlayer",
]
