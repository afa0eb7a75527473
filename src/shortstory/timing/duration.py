"""Per-character timing model for revealing story lines."""

from __future__ import annotations

from shortstory.parser.story_models import StoryLine
from shortstory.timing.profile import SpeedTiming, TimingConfig


def char_extra_delay(char: str, timing: SpeedTiming) -> float:
    """Extra time owed after ``char`` is revealed."""
    if char.isspace():
        return timing.extra_at_space
    if char in ".!?":
        return timing.extra_at_period
    if char == ":":
        return timing.extra_at_colon
    if char in ",;":
        return timing.extra_at_comma
    return 0.0


def typewriter_duration(text: str, timing: SpeedTiming) -> float:
    """Total time to type out ``text`` character by character."""
    total = 0.0
    for char in text:
        total += timing.per_letter
        total += char_extra_delay(char, timing)
    return total


def line_duration(line: StoryLine, config: TimingConfig) -> float:
    """Seconds a line takes to fully reveal.

    Every animation other than typewriter takes the speed's flat block
    duration regardless of text length.
    """
    timing = config.speed_timing(line.speed)
    if line.animation.has_fixed_duration:
        return timing.block_duration
    return typewriter_duration(line.text, timing)


def char_index_at_time(text: str, timing: SpeedTiming, elapsed: float) -> int:
    """Number of characters of ``text`` visible after ``elapsed`` seconds.

    Each character first spends ``per_letter`` being typed (not yet
    visible), then its punctuation delay (visible). The running clock is
    accumulated in the same order as :func:`typewriter_duration`, so the
    full length is returned exactly when ``elapsed`` reaches that total.
    """
    if elapsed <= 0:
        return 0

    current = 0.0
    for index, char in enumerate(text):
        if elapsed < current + timing.per_letter:
            return index
        current += timing.per_letter

        if elapsed < current + char_extra_delay(char, timing):
            return index + 1
        current += char_extra_delay(char, timing)

    return len(text)
