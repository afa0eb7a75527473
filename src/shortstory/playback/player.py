"""Story playback state machine.

The player owns a private copy of a story and advances through its screens
and lines as an external clock calls :meth:`StoryPlayer.tick`. Renderers
poll :meth:`StoryPlayer.get_screen_state` every frame; nothing here renders,
plays audio or blocks.
"""

from __future__ import annotations

import copy
from collections.abc import Callable
from typing import TYPE_CHECKING, assert_never

from shortstory.config import get_logger
from shortstory.parser.story_models import (
    LineAnimation,
    PauseKind,
    Story,
    StoryLine,
    StoryScreen,
)
from shortstory.playback.clock import FrameClock
from shortstory.playback.state import LineState, PlaybackState, ScreenState
from shortstory.timing.duration import line_duration
from shortstory.timing.profile import TimingConfig

if TYPE_CHECKING:
    from shortstory.library.story_library import StoryLibrary

logger = get_logger(__name__)

# Delay between successive lines of a top-down block
TOP_DOWN_STAGGER = 0.2
BLOCK_ANIMATIONS = frozenset({LineAnimation.PARAGRAPH, LineAnimation.TOP_DOWN})
NOT_STARTED = -1.0

ScreenChangedListener = Callable[[int], None]
StoryCompletedListener = Callable[[], None]


def _clamp01(value: float) -> float:
    return min(max(value, 0.0), 1.0)


class StoryPlayer:
    """Drive a story screen by screen, line by line.

    All calls (``tick`` included) are expected from one thread; the player
    does no locking of its own.
    """

    def __init__(
        self,
        timing: TimingConfig,
        library: StoryLibrary | None = None,
        clock: FrameClock | None = None,
    ) -> None:
        """Initialize the player.

        Args:
            timing: Loaded timing configuration
            library: Library used by :meth:`start_story`
            clock: Clock to attach to while a story plays
        """
        self.timing = timing
        self.library = library
        self.clock = clock
        self.story: Story | None = None
        self._clock_handle: int | None = None
        self._screen_changed: list[ScreenChangedListener] = []
        self._story_completed: list[StoryCompletedListener] = []
        self._reset_counters()

    def _reset_counters(self) -> None:
        self.state = PlaybackState.IDLE
        self.is_playing = False
        self.is_paused = False
        self.is_waiting_for_input = False
        self.screen_index = 0
        self.line_index = 0
        self.screen_elapsed = 0.0
        self.line_elapsed = 0.0
        self.pause_elapsed = 0.0
        self.transition_elapsed = 0.0
        self.line_duration = 0.0
        self.pause_duration = 0.0
        self.fired_event_indices: set[int] = set()
        self.line_start_times: list[float] = []

    # Listeners

    def on_screen_changed(self, listener: ScreenChangedListener) -> None:
        """Call ``listener(screen_index)`` whenever a new screen is entered."""
        self._screen_changed.append(listener)

    def on_story_completed(self, listener: StoryCompletedListener) -> None:
        """Call ``listener()`` when the last screen finishes."""
        self._story_completed.append(listener)

    # Clock

    def _attach_clock(self) -> None:
        if self.clock is not None and self._clock_handle is None:
            self._clock_handle = self.clock.add(self.tick)

    def _detach_clock(self) -> None:
        if self.clock is not None and self._clock_handle is not None:
            self.clock.remove(self._clock_handle)
        self._clock_handle = None

    # Accessors

    @property
    def current_screen(self) -> StoryScreen | None:
        """Screen being played, or None when nothing plays."""
        if not self.is_playing or self.story is None:
            return None
        if self.screen_index >= len(self.story.screens):
            return None
        return self.story.screens[self.screen_index]

    @property
    def current_line(self) -> StoryLine | None:
        """Line under the cursor, or None."""
        screen = self.current_screen
        if screen is None or self.line_index >= len(screen.lines):
            return None
        return screen.lines[self.line_index]

    @property
    def is_complete(self) -> bool:
        """Whether the last story finished playing."""
        return self.state is PlaybackState.COMPLETED

    def screen_names(self) -> list[str]:
        """Names of the screens of the loaded story."""
        if self.story is None:
            return []
        return self.story.screen_names()

    # Lifecycle

    def start(self, story: Story) -> bool:
        """Start playing ``story`` from its first line.

        Args:
            story: Story to play; the player keeps its own copy

        Returns:
            False if the story has no screens or its first screen no lines
        """
        if not story.screens:
            logger.error("Cannot start story without screens", title=story.title)
            return False
        if not story.screens[0].lines:
            logger.error(
                "Cannot start story: first screen has no lines", title=story.title
            )
            return False

        self.story = copy.deepcopy(story)
        self._reset_counters()
        self.line_start_times = [NOT_STARTED] * len(self.story.screens[0].lines)
        self.is_playing = True
        self.state = PlaybackState.PLAYING_LINE
        self._attach_clock()

        self.start_line(0)
        logger.info(
            "Started story",
            title=self.story.title,
            screens=len(self.story.screens),
        )
        self._notify_screen_changed()
        return True

    def start_story(self, story_id: str) -> bool:
        """Load ``story_id`` through the library and start it."""
        if self.library is None:
            logger.error(
                "Cannot start story by id without a library", story=story_id
            )
            return False

        result = self.library.load_story(story_id)
        if not result.success or result.story is None:
            logger.error("Failed to load story", story=story_id)
            return False
        return self.start(result.story)

    def stop(self) -> None:
        """Stop playback and return to idle."""
        if not self.is_playing:
            return
        self._reset_counters()
        self._detach_clock()
        logger.info("Story stopped")

    def set_paused(self, paused: bool) -> None:
        """Freeze or resume playback; ignored when nothing plays."""
        if not self.is_playing:
            return
        self.is_paused = paused
        logger.info("Playback paused" if paused else "Playback resumed")

    def continue_story(self) -> bool:
        """Release a wait-for-input pause.

        Returns:
            False unless the player was waiting for input
        """
        if not self.is_playing or not self.is_waiting_for_input:
            return False
        self.is_waiting_for_input = False
        self.advance_to_next_line_or_screen()
        return True

    def tick(self, delta_time: float) -> None:
        """Advance playback by ``delta_time`` seconds."""
        if not self.is_playing or self.is_paused:
            return

        self.screen_elapsed += delta_time
        self.process_timed_events()

        state = self.state
        if state is PlaybackState.PLAYING_LINE:
            self.line_elapsed += delta_time
            if self.line_elapsed >= self.line_duration:
                self.start_pause()
        elif state is PlaybackState.PAUSING_AFTER_LINE:
            if self.is_waiting_for_input:
                return
            self.pause_elapsed += delta_time
            if self.pause_elapsed >= self.pause_duration:
                self.advance_to_next_line_or_screen()
        elif state is PlaybackState.TRANSITIONING_SCREEN:
            self.transition_elapsed += delta_time
            if self.transition_elapsed >= self.timing.screen_transition_pause:
                self.on_screen_transition_complete()
        elif state is PlaybackState.IDLE or state is PlaybackState.COMPLETED:
            pass
        else:
            assert_never(state)

    # State machine steps

    def start_line(self, index: int) -> None:
        """Begin revealing the line at ``index`` (or the block it starts)."""
        screen = self.current_screen
        if screen is None or not 0 <= index < len(screen.lines):
            logger.error("Invalid line index", line=index, screen=self.screen_index)
            return

        lines = screen.lines
        line = lines[index]

        if line.animation in BLOCK_ANIMATIONS:
            block_end = index
            while (
                block_end + 1 < len(lines)
                and lines[block_end + 1].animation is line.animation
            ):
                block_end += 1

            delay = 0.0
            total = 0.0
            for i in range(index, block_end + 1):
                self.line_start_times[i] = self.screen_elapsed + delay
                total = max(total, delay + line_duration(lines[i], self.timing))
                if line.animation is LineAnimation.TOP_DOWN:
                    delay += TOP_DOWN_STAGGER

            self.line_duration = total
            self.line_index = block_end
            logger.debug(
                "Started block",
                animation=line.animation.value,
                lines=block_end - index + 1,
                duration=total,
            )
        else:
            self.line_duration = line_duration(line, self.timing)
            self.line_start_times[index] = self.screen_elapsed
            self.line_index = index
            logger.debug(
                "Started line",
                line=index,
                screen=self.screen_index,
                duration=self.line_duration,
            )

        self.line_elapsed = 0.0
        self.state = PlaybackState.PLAYING_LINE

    def start_pause(self) -> None:
        """Enter the pause that follows the current line."""
        line = self.current_line
        pause = line.pause if line is not None else PauseKind.NONE

        if pause is PauseKind.WAIT:
            self.is_waiting_for_input = True
            self.pause_duration = 0.0
        else:
            self.pause_duration = self.timing.pause_duration(pause)

        self.pause_elapsed = 0.0
        self.state = PlaybackState.PAUSING_AFTER_LINE

    def advance_to_next_line_or_screen(self) -> None:
        """Move the cursor on, switching screens after the last line."""
        screen = self.current_screen
        if screen is None:
            return

        self.line_index += 1
        if self.line_index < len(screen.lines):
            self.start_line(self.line_index)
        else:
            self.advance_to_next_screen()

    def advance_to_next_screen(self) -> None:
        """Transition to the next screen or complete the story."""
        if self.story is None:
            return

        next_index = self.screen_index + 1
        if next_index < len(self.story.screens):
            self._enter_screen(next_index)
            logger.info(
                "Advanced to screen",
                screen=next_index,
                last=len(self.story.screens) - 1,
            )
        else:
            self._complete()

    def on_screen_transition_complete(self) -> None:
        """Start the new screen once its transition pause is over."""
        screen = self.current_screen
        if screen is None:
            return
        if screen.lines:
            self.start_line(0)
        else:
            logger.warning("Screen has no lines", screen=self.screen_index)
            self.advance_to_next_screen()

    def process_timed_events(self) -> None:
        """Mark every due, not yet fired timed event on this screen as fired."""
        screen = self.current_screen
        if screen is None:
            return

        for index, event in enumerate(screen.timed_events):
            if index in self.fired_event_indices:
                continue
            if self.screen_elapsed >= event.start_time:
                self.fired_event_indices.add(index)
                logger.debug(
                    "Timed event reached",
                    index=index,
                    kind=event.kind.value,
                    asset=event.asset_path,
                    start_time=event.start_time,
                )

    def _enter_screen(self, index: int) -> None:
        if self.story is None:
            logger.error("No story loaded", screen=index)
            return
        self.screen_index = index
        self.line_index = 0
        self.screen_elapsed = 0.0
        self.line_elapsed = 0.0
        self.pause_elapsed = 0.0
        self.transition_elapsed = 0.0
        self.is_waiting_for_input = False
        self.fired_event_indices.clear()
        self.line_start_times = [NOT_STARTED] * len(self.story.screens[index].lines)
        self.state = PlaybackState.TRANSITIONING_SCREEN
        self._notify_screen_changed()

    def _complete(self) -> None:
        self.is_playing = False
        self.is_paused = False
        self.is_waiting_for_input = False
        self.state = PlaybackState.COMPLETED
        self._detach_clock()
        logger.info("Story completed")
        for listener in list(self._story_completed):
            listener()

    def _notify_screen_changed(self) -> None:
        for listener in list(self._screen_changed):
            listener(self.screen_index)

    # Seeking

    def skip_to_next_screen(self) -> bool:
        """Jump to the next screen; rejected on the last one."""
        story = self._playing_story("skip_to_next_screen")
        if story is None:
            return False
        if self.screen_index >= len(story.screens) - 1:
            logger.warning("Already at last screen", screen=self.screen_index)
            return False
        self.advance_to_next_screen()
        return True

    def skip_to_previous_screen(self) -> bool:
        """Jump back one screen; rejected on the first one."""
        if self._playing_story("skip_to_previous_screen") is None:
            return False
        if self.screen_index <= 0:
            logger.warning("Already at first screen")
            return False
        self._enter_screen(self.screen_index - 1)
        return True

    def go_to_screen(self, index: int) -> bool:
        """Restart playback at screen ``index``."""
        story = self._playing_story("go_to_screen")
        if story is None:
            return False
        if not 0 <= index < len(story.screens):
            logger.warning(
                "Invalid screen index",
                screen=index,
                valid_range=f"0-{len(story.screens) - 1}",
            )
            return False
        self._enter_screen(index)
        return True

    def jump_to_screen(self, index: int) -> bool:
        """Operator override of :meth:`go_to_screen`."""
        logger.info("Jumping to screen", origin=self.screen_index, target=index)
        return self.go_to_screen(index)

    def go_to_screen_by_name(self, name: str) -> bool:
        """Restart playback at the screen called ``name`` (case-insensitive)."""
        story = self._playing_story("go_to_screen_by_name")
        if story is None:
            return False
        index = story.find_screen(name)
        if index is None:
            logger.warning("Unknown screen name", screen=name)
            return False
        return self.go_to_screen(index)

    def skip_current_line(self) -> bool:
        """Finish the current line instantly, as if it had played out."""
        if self._playing_story("skip_current_line") is None:
            return False
        if self.state is not PlaybackState.PLAYING_LINE:
            logger.warning("Not currently playing a line", state=self.state.value)
            return False

        remaining = self.line_duration - self.line_elapsed
        self.screen_elapsed += remaining
        self.line_elapsed = self.line_duration
        self.start_pause()
        return True

    def _playing_story(self, operation: str) -> Story | None:
        if self.is_playing and self.story is not None:
            return self.story
        logger.warning("No story is currently playing", operation=operation)
        return None

    # Snapshot

    def get_screen_state(self) -> ScreenState:
        """Build the render snapshot for the current frame."""
        screen = self.current_screen
        if screen is None:
            return ScreenState(
                state=self.state,
                is_playing=self.is_playing,
                is_complete=self.is_complete,
                screen_index=self.screen_index,
                current_line_index=self.line_index,
            )

        lines = [
            self._line_state(line, self._start_time(index))
            for index, line in enumerate(screen.lines)
        ]
        return ScreenState(
            state=self.state,
            is_playing=self.is_playing,
            is_complete=self.is_complete,
            is_paused=self.is_paused,
            is_waiting_for_input=self.is_waiting_for_input,
            screen_index=self.screen_index,
            current_line_index=self.line_index,
            background_asset=screen.background_asset,
            background_path=screen.background_path,
            ready_background=screen.resolved_background,
            transition=screen.transition,
            fired_event_indices=frozenset(self.fired_event_indices),
            lines=lines,
        )

    def _start_time(self, index: int) -> float:
        if index < len(self.line_start_times):
            return self.line_start_times[index]
        return NOT_STARTED

    def _line_state(self, line: StoryLine, start_time: float) -> LineState:
        if start_time < 0:
            return LineState(
                full_text=line.text,
                animation=line.animation,
                effect=line.effect,
                offset=line.offset,
                shake_intensity=line.shake_intensity,
            )

        local_time = self.screen_elapsed - start_time
        duration = line_duration(line, self.timing)
        if duration > 0:
            progress = _clamp01(local_time / duration)
            past = _clamp01((local_time - self.timing.fade_window) / duration)
        else:
            progress = past = 1.0

        if not line.text:
            current_text = past_text = 1.0
        else:
            current_text, past_text = progress, past

        return LineState(
            full_text=line.text,
            animation=line.animation,
            effect=line.effect,
            offset=line.offset,
            shake_intensity=line.shake_intensity,
            animation_progress=progress,
            current_text_progress=current_text,
            past_text_progress=past_text,
            is_fully_visible=progress >= 1.0,
            is_animating=progress < 1.0,
        )
