"""Keyword tables and permissive value parsing for story annotations."""

from __future__ import annotations

import re

from shortstory.parser.story_models import (
    LineAnimation,
    Offset,
    PauseKind,
    ScreenTransition,
    StoryEffect,
    StorySpeed,
)

ANIMATION_KEYWORDS: dict[str, LineAnimation] = {
    "typewriter": LineAnimation.TYPEWRITER,
    "standard": LineAnimation.TYPEWRITER,
    "alone": LineAnimation.TYPEWRITER,
    "slow": LineAnimation.TYPEWRITER,
    "fast": LineAnimation.TYPEWRITER,
    "left_to_right": LineAnimation.LEFT_TO_RIGHT,
    "lefttoright": LineAnimation.LEFT_TO_RIGHT,
    "top_down": LineAnimation.TOP_DOWN,
    "topdown": LineAnimation.TOP_DOWN,
    "word_rain": LineAnimation.WORD_RAIN,
    "wordrain": LineAnimation.WORD_RAIN,
    "snake": LineAnimation.SNAKE,
    "paragraph": LineAnimation.PARAGRAPH,
    "fade_in": LineAnimation.PARAGRAPH,
    "fadein": LineAnimation.PARAGRAPH,
}

SPEED_KEYWORDS: dict[str, StorySpeed] = {
    "standard": StorySpeed.STANDARD,
    "fast": StorySpeed.FAST,
    "slow": StorySpeed.SLOW,
}

PAUSE_KEYWORDS: dict[str, PauseKind] = {
    "0": PauseKind.NONE,
    "none": PauseKind.NONE,
    "short": PauseKind.SHORT,
    "standard": PauseKind.STANDARD,
    "long": PauseKind.LONG,
}

EFFECT_KEYWORDS: dict[str, StoryEffect] = {
    "none": StoryEffect.NONE,
    "shake_low": StoryEffect.SHAKE_LOW,
    "shakelow": StoryEffect.SHAKE_LOW,
    "shake_med": StoryEffect.SHAKE_MED,
    "shakemed": StoryEffect.SHAKE_MED,
    "shake_medium": StoryEffect.SHAKE_MED,
    "shake_high": StoryEffect.SHAKE_HIGH,
    "shakehigh": StoryEffect.SHAKE_HIGH,
    "storm": StoryEffect.STORM,
}

TRANSITION_KEYWORDS: dict[str, ScreenTransition] = {
    "instant": ScreenTransition.INSTANT,
    "fade": ScreenTransition.FADE,
    "crossfade": ScreenTransition.CROSSFADE,
}

_NUMBER_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_float(value: str) -> float:
    """Parse the leading numeric prefix of ``value``.

    Trailing garbage is ignored and text without a numeric prefix yields 0,
    so ``"1.5s"`` is 1.5 and ``"abc"`` is 0.0.
    """
    match = _NUMBER_PREFIX.match(value.strip())
    if match is None:
        return 0.0
    return float(match.group(0))


def _lookup(table: dict, value: str):
    return table.get(value.strip().lower())


def parse_animation(value: str) -> LineAnimation | None:
    """Map an animation keyword to its kind, or None if unknown."""
    return _lookup(ANIMATION_KEYWORDS, value)


def parse_speed(value: str) -> StorySpeed | None:
    """Map a speed keyword to its profile, or None if unknown."""
    return _lookup(SPEED_KEYWORDS, value)


def parse_pause(value: str) -> PauseKind | None:
    """Map a pause keyword to its kind, or None if unknown."""
    return _lookup(PAUSE_KEYWORDS, value)


def parse_effect(value: str) -> StoryEffect | None:
    """Map an effect keyword to its kind, or None if unknown."""
    return _lookup(EFFECT_KEYWORDS, value)


def parse_transition(value: str) -> ScreenTransition | None:
    """Map a transition keyword to its kind, or None if unknown."""
    return _lookup(TRANSITION_KEYWORDS, value)


def parse_offset(value: str) -> Offset | None:
    """Parse ``X,Y`` into an offset, or None unless exactly two parts."""
    parts = value.split(",")
    if len(parts) != 2:
        return None
    return Offset(parse_float(parts[0]), parse_float(parts[1]))
