"""Timing profiles used to pace story playback."""

from __future__ import annotations

from dataclasses import dataclass, field

from shortstory.config import get_logger
from shortstory.exceptions import ConfigurationError
from shortstory.parser.story_models import PauseKind, StorySpeed

logger = get_logger(__name__)


@dataclass(frozen=True)
class SpeedTiming:
    """Per-character costs and block duration for one speed category.

    All values are in seconds.
    """

    per_letter: float = 0.04
    extra_at_space: float = 0.08
    extra_at_period: float = 0.3
    extra_at_comma: float = 0.2
    extra_at_colon: float = 0.4
    block_duration: float = 2.0


@dataclass
class TimingConfig:
    """Fully loaded timing configuration.

    Built by :func:`shortstory.timing.loader.load_timing_config`.
    """

    speeds: dict[StorySpeed, SpeedTiming] = field(default_factory=dict)
    pause_durations: dict[PauseKind, float] = field(default_factory=dict)
    screen_transition_pause: float = 1.5
    fade_window: float = 0.5
    line_break_percent: float = 0.66

    @property
    def line_break_pause(self) -> float:
        """Micro-pause used between wrapped lines."""
        return self.fade_window * self.line_break_percent

    def speed_timing(self, speed: StorySpeed) -> SpeedTiming:
        """Timing for ``speed``, falling back to the standard profile.

        Raises:
            ConfigurationError: If neither profile was loaded
        """
        timing = self.speeds.get(speed) or self.speeds.get(StorySpeed.STANDARD)
        if timing is None:
            logger.error("No speed timing loaded", speed=speed.value)
            raise ConfigurationError(
                f"No timing loaded for speed '{speed.value}'",
                hint="Load the configuration with load_timing_config()",
                details={"loaded_speeds": sorted(s.value for s in self.speeds)},
            )
        return timing

    def pause_duration(self, pause: PauseKind) -> float:
        """Resolve a pause kind to seconds.

        None and LineBreak share the derived line-break micro-pause; the
        named pauses come from the loaded table; anything missing is 0.
        """
        if pause in (PauseKind.NONE, PauseKind.LINE_BREAK):
            return self.line_break_pause
        return self.pause_durations.get(pause, 0.0)
