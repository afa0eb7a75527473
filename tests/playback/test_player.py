"""Tests for the story playback state machine."""

from __future__ import annotations

import pytest

from shortstory.library import StoryLibrary
from shortstory.parser import parse_story_from_string
from shortstory.parser.story_models import (
    LineAnimation,
    PauseKind,
    Story,
    StoryEffect,
    StoryLine,
    StoryScreen,
    StorySpeed,
    TimedEvent,
    TimedEventKind,
)
from shortstory.playback import (
    TOP_DOWN_STAGGER,
    FrameClock,
    PlaybackState,
    StoryPlayer,
)


def make_story(*screens: list[StoryLine], names: list[str] | None = None) -> Story:
    names = names or [f"SCREEN_{i + 1}" for i in range(len(screens))]
    return Story(
        title="Test",
        screens=[
            StoryScreen(name=name, lines=list(lines))
            for name, lines in zip(names, screens, strict=True)
        ],
    )


def block_story(animation: str) -> Story:
    text = f"[STORY]\ntitle = T\n[SCREEN_1]\nA\nB\nC | {animation}\n"
    return parse_story_from_string(text).story


@pytest.fixture
def player(timing) -> StoryPlayer:
    return StoryPlayer(timing)


class TestLifecycle:
    """Starting, stopping and pausing."""

    def test_start(self, player):
        changed: list[int] = []
        player.on_screen_changed(changed.append)

        assert player.start(make_story([StoryLine("Hi.")]))
        assert player.is_playing
        assert player.state is PlaybackState.PLAYING_LINE
        assert player.line_duration == pytest.approx(0.42)
        assert changed == [0]

    def test_start_rejects_empty_stories(self, player):
        assert not player.start(Story(title="Empty"))
        assert not player.start(make_story([]))
        assert not player.is_playing
        assert player.state is PlaybackState.IDLE

    def test_player_keeps_its_own_copy(self, player):
        story = make_story([StoryLine("Hi.")])
        player.start(story)
        story.screens.clear()
        assert player.screen_names() == ["SCREEN_1"]

    def test_stop(self, player):
        player.start(make_story([StoryLine("Hi.")]))
        player.tick(0.1)
        player.stop()

        assert not player.is_playing
        assert player.state is PlaybackState.IDLE
        assert player.screen_elapsed == 0.0
        player.tick(1.0)
        assert player.state is PlaybackState.IDLE

    def test_paused_tick_changes_nothing(self, player):
        player.start(make_story([StoryLine("Hello there.")]))
        player.tick(0.1)
        player.set_paused(True)
        before = (
            player.state,
            player.screen_elapsed,
            player.line_elapsed,
            player.line_index,
        )

        player.tick(5.0)
        assert (
            player.state,
            player.screen_elapsed,
            player.line_elapsed,
            player.line_index,
        ) == before
        assert player.get_screen_state().is_paused

        player.set_paused(False)
        player.tick(0.1)
        assert player.screen_elapsed == pytest.approx(0.2)

    def test_paused_tick_holds_timed_events(self, player):
        story = make_story([StoryLine("Hello there.")])
        story.screens[0].timed_events = [
            TimedEvent(kind=TimedEventKind.SFX, start_time=0.5, asset_path="bell")
        ]
        player.start(story)
        player.tick(0.1)
        player.set_paused(True)

        player.tick(5.0)
        assert player.fired_event_indices == set()
        assert player.screen_elapsed == pytest.approx(0.1)
        assert player.get_screen_state().fired_event_indices == frozenset()

        player.set_paused(False)
        player.tick(0.5)
        assert player.fired_event_indices == {0}
        assert player.state is PlaybackState.PLAYING_LINE

    def test_paused_tick_holds_line_pause(self, player):
        player.start(make_story([StoryLine("Hi.", pause=PauseKind.LONG)]))
        player.tick(0.5)
        player.tick(0.1)
        assert player.state is PlaybackState.PAUSING_AFTER_LINE
        assert player.pause_elapsed == pytest.approx(0.1)
        player.set_paused(True)

        player.tick(5.0)
        assert player.state is PlaybackState.PAUSING_AFTER_LINE
        assert player.pause_elapsed == pytest.approx(0.1)
        assert player.screen_elapsed == pytest.approx(0.6)

        player.set_paused(False)
        player.tick(0.1)
        assert player.pause_elapsed == pytest.approx(0.2)

    def test_paused_tick_holds_screen_transition(self, player):
        story = make_story([StoryLine("Hi.")], [StoryLine("Yo.")])
        story.screens[1].timed_events = [
            TimedEvent(kind=TimedEventKind.VFX, start_time=0.2, duration=1.0)
        ]
        player.start(story)
        assert player.skip_to_next_screen()
        player.tick(0.1)
        player.set_paused(True)

        player.tick(5.0)
        assert player.state is PlaybackState.TRANSITIONING_SCREEN
        assert player.transition_elapsed == pytest.approx(0.1)
        assert player.fired_event_indices == set()

        player.set_paused(False)
        player.tick(0.2)
        assert player.fired_event_indices == {0}
        assert player.state is PlaybackState.TRANSITIONING_SCREEN

    def test_set_paused_ignored_when_idle(self, player):
        player.set_paused(True)
        assert not player.is_paused

    def test_start_story_through_library(self, timing, sample_story_file):
        player = StoryPlayer(timing, library=StoryLibrary())
        assert player.start_story("lighthouse.tos")
        assert player.screen_names() == ["SCREEN_01_INTRO", "SCREEN_02_TOWER"]
        assert player.current_line.text == "The waves rolled in,"

    def test_start_story_failures(self, timing):
        assert not StoryPlayer(timing).start_story("lighthouse.tos")
        player = StoryPlayer(timing, library=StoryLibrary())
        assert not player.start_story("missing.tos")


class TestProgression:
    """Line, pause and screen transitions driven by tick."""

    def test_full_story(self, player, timing):
        changed: list[int] = []
        completed: list[bool] = []
        player.on_screen_changed(changed.append)
        player.on_story_completed(lambda: completed.append(True))
        player.start(make_story([StoryLine("Hi.")], [StoryLine("Yo.")]))

        player.tick(0.5)
        assert player.state is PlaybackState.PAUSING_AFTER_LINE
        assert player.pause_duration == pytest.approx(timing.line_break_pause)

        player.tick(0.5)
        assert player.state is PlaybackState.TRANSITIONING_SCREEN
        assert player.screen_index == 1
        assert player.screen_elapsed == 0.0
        assert changed == [0, 1]

        player.tick(1.0)
        assert player.state is PlaybackState.TRANSITIONING_SCREEN
        player.tick(0.6)
        assert player.state is PlaybackState.PLAYING_LINE
        assert player.line_index == 0

        player.tick(0.5)
        player.tick(0.5)
        assert player.state is PlaybackState.COMPLETED
        assert player.is_complete
        assert not player.is_playing
        assert completed == [True]

    def test_named_pause_duration(self, player):
        player.start(make_story([StoryLine("Hi.", pause=PauseKind.LONG)]))
        player.tick(0.5)
        assert player.pause_duration == 2.0
        player.tick(1.9)
        assert player.state is PlaybackState.PAUSING_AFTER_LINE
        player.tick(0.2)
        assert player.state is PlaybackState.COMPLETED

    def test_wait_pause_needs_input(self, player):
        player.start(
            make_story([StoryLine("Hi.", pause=PauseKind.WAIT), StoryLine("Next")])
        )
        assert not player.continue_story()

        player.tick(0.5)
        assert player.is_waiting_for_input
        player.tick(10.0)
        assert player.state is PlaybackState.PAUSING_AFTER_LINE
        assert player.line_index == 0
        assert player.get_screen_state().is_waiting_for_input

        assert player.continue_story()
        assert not player.is_waiting_for_input
        assert player.line_index == 1
        assert player.state is PlaybackState.PLAYING_LINE
        assert not player.continue_story()

    def test_top_down_block_is_staggered(self, player, timing):
        player.start(block_story("top_down"))

        assert player.line_index == 2
        block = timing.speeds[StorySpeed.STANDARD].block_duration
        assert player.line_duration == pytest.approx(2 * TOP_DOWN_STAGGER + block)
        assert player.line_start_times[:3] == pytest.approx([0.0, 0.2, 0.4])
        assert player.line_start_times[3] < 0

    def test_paragraph_block_starts_together(self, player):
        player.start(block_story("paragraph"))
        assert player.line_index == 2
        assert player.line_duration == pytest.approx(2.0)
        assert player.line_start_times[:3] == [0.0, 0.0, 0.0]

    def test_other_animations_play_line_by_line(self, player):
        player.start(block_story("word_rain"))
        assert player.line_index == 0
        assert player.line_duration == 2.0

    def test_empty_screen_is_skipped_after_transition(self, player):
        story = make_story([StoryLine("Hi.")], [], [StoryLine("End.")])
        player.start(story)
        player.tick(0.5)
        player.tick(0.5)
        assert player.screen_index == 1

        player.tick(2.0)
        assert player.screen_index == 2
        assert player.state is PlaybackState.TRANSITIONING_SCREEN


class TestTimedEvents:
    """Timed events fire once, in declaration order, per screen visit."""

    def test_events_fire_when_due(self, player):
        story = make_story([StoryLine("A long line of text to read.")])
        story.screens[0].timed_events = [
            TimedEvent(kind=TimedEventKind.SFX, start_time=0.5, asset_path="late"),
            TimedEvent(kind=TimedEventKind.VFX, start_time=0.1, duration=2.0),
        ]
        player.start(story)

        player.tick(0.2)
        assert player.fired_event_indices == {1}
        player.tick(0.4)
        assert player.fired_event_indices == {0, 1}
        assert player.get_screen_state().fired_event_indices == frozenset({0, 1})

    def test_zero_time_event_fires_on_first_tick(self, player):
        story = make_story([StoryLine("Hi.")])
        story.screens[0].timed_events = [TimedEvent(kind=TimedEventKind.SFX)]
        player.start(story)
        assert player.fired_event_indices == set()
        player.tick(0.0)
        assert player.fired_event_indices == {0}

    def test_events_reset_on_screen_change(self, player):
        story = make_story([StoryLine("Hi.")], [StoryLine("Yo.")])
        story.screens[0].timed_events = [TimedEvent(kind=TimedEventKind.SFX)]
        player.start(story)
        player.tick(0.1)
        assert player.skip_to_next_screen()
        assert player.fired_event_indices == set()


class TestNavigation:
    """Seeking between screens and lines."""

    @pytest.fixture
    def three_screens(self, player):
        story = make_story(
            [StoryLine("One.")],
            [StoryLine("Two.")],
            [StoryLine("Three.")],
            names=["SCREEN_A", "SCREEN_B", "SCREEN_C"],
        )
        player.start(story)
        return player

    def test_requires_playing(self, player):
        assert not player.skip_to_next_screen()
        assert not player.skip_to_previous_screen()
        assert not player.go_to_screen(0)
        assert not player.go_to_screen_by_name("SCREEN_A")
        assert not player.skip_current_line()

    def test_rejected_after_stop_and_completion(self, player):
        player.start(make_story([StoryLine("Hi.")], [StoryLine("Yo.")]))
        player.stop()
        assert not player.go_to_screen(1)
        assert not player.go_to_screen_by_name("SCREEN_2")
        assert not player.skip_to_next_screen()
        assert player.state is PlaybackState.IDLE

        player.start(make_story([StoryLine("Hi.")]))
        player.tick(10.0)
        player.tick(10.0)
        assert player.is_complete
        assert not player.jump_to_screen(0)
        assert not player.skip_to_previous_screen()
        assert not player.skip_current_line()
        assert player.state is PlaybackState.COMPLETED

    def test_next_and_previous(self, three_screens):
        player = three_screens
        assert not player.skip_to_previous_screen()
        assert player.skip_to_next_screen()
        assert player.screen_index == 1
        assert player.state is PlaybackState.TRANSITIONING_SCREEN
        assert player.skip_to_previous_screen()
        assert player.screen_index == 0

    def test_next_rejected_on_last_screen(self, three_screens):
        assert three_screens.go_to_screen(2)
        assert not three_screens.skip_to_next_screen()
        assert three_screens.is_playing

    def test_go_to_screen_bounds(self, three_screens):
        assert not three_screens.go_to_screen(3)
        assert not three_screens.go_to_screen(-1)
        assert three_screens.jump_to_screen(2)
        assert three_screens.screen_index == 2

    def test_go_to_screen_by_name(self, three_screens):
        changed: list[int] = []
        three_screens.on_screen_changed(changed.append)
        assert three_screens.go_to_screen_by_name("screen_b")
        assert three_screens.screen_index == 1
        assert changed == [1]
        assert not three_screens.go_to_screen_by_name("SCREEN_Z")

    def test_skip_current_line(self, player):
        player.start(make_story([StoryLine("Hi.")]))
        player.tick(0.1)

        assert player.skip_current_line()
        assert player.state is PlaybackState.PAUSING_AFTER_LINE
        assert player.screen_elapsed == pytest.approx(0.42)
        progress = player.get_screen_state().lines[0].animation_progress
        assert progress == pytest.approx(1.0)
        assert not player.skip_current_line()


class TestScreenState:
    """Render snapshots."""

    def test_idle_snapshot(self, player):
        state = player.get_screen_state()
        assert state.state is PlaybackState.IDLE
        assert not state.is_playing
        assert state.lines == []

    def test_line_progress(self, player):
        story = make_story([StoryLine("abcd"), StoryLine("next")])
        story.screens[0].background_asset = "/Game/Art/Sky"
        player.start(story)

        state = player.get_screen_state()
        assert state.background_asset == "/Game/Art/Sky"
        assert state.lines[0].is_animating
        assert state.lines[0].animation_progress == 0.0
        assert not state.lines[1].is_animating
        assert state.lines[1].animation_progress == 0.0

        player.tick(0.08)
        line = player.get_screen_state().lines[0]
        assert line.animation_progress == pytest.approx(0.5)
        assert line.current_text_progress == pytest.approx(0.5)
        assert line.past_text_progress == 0.0

        player.tick(0.1)
        line = player.get_screen_state().lines[0]
        assert line.is_fully_visible
        assert not line.is_animating
        assert line.animation_progress == 1.0

    @pytest.mark.parametrize(
        ("effect", "intensity"),
        [
            (StoryEffect.NONE, 0.0),
            (StoryEffect.SHAKE_LOW, 0.3),
            (StoryEffect.SHAKE_MED, 0.6),
            (StoryEffect.SHAKE_HIGH, 1.0),
            (StoryEffect.STORM, 0.8),
        ],
    )
    def test_shake_intensity_follows_effect(self, player, effect, intensity):
        player.start(make_story([StoryLine("Boom.", effect=effect), StoryLine("x")]))
        lines = player.get_screen_state().lines
        assert lines[0].effect is effect
        assert lines[0].shake_intensity == intensity
        assert lines[1].shake_intensity == 0.0

    def test_past_text_trails_by_fade_window(self, player, timing):
        player.start(make_story([StoryLine("x", animation=LineAnimation.PARAGRAPH)]))
        player.tick(1.5)
        line = player.get_screen_state().lines[0]
        assert line.animation_progress == pytest.approx(0.75)
        expected = (1.5 - timing.fade_window) / 2.0
        assert line.past_text_progress == pytest.approx(expected)

    def test_zero_duration_line_is_complete(self, player):
        player.start(make_story([StoryLine(""), StoryLine("after")]))
        line = player.get_screen_state().lines[0]
        assert line.animation_progress == 1.0
        assert line.current_text_progress == 1.0
        assert line.past_text_progress == 1.0
        assert line.is_fully_visible


class TestClockDriven:
    """Players attached to a frame clock."""

    def test_clock_drives_and_detaches(self, timing):
        clock = FrameClock()
        player = StoryPlayer(timing, clock=clock)
        player.start(make_story([StoryLine("Hi.")]))
        assert len(clock) == 1

        clock.advance(0.5)
        assert player.state is PlaybackState.PAUSING_AFTER_LINE
        clock.advance(0.5)
        assert player.is_complete
        assert len(clock) == 0

    def test_stop_detaches(self, timing):
        clock = FrameClock()
        player = StoryPlayer(timing, clock=clock)
        player.start(make_story([StoryLine("Hi.")]))
        player.stop()
        assert len(clock) == 0
