"""Loading timing configuration from external tables."""

from __future__ import annotations

from collections.abc import Iterator

from shortstory.config import ShortStorySettings, get_logger, get_settings
from shortstory.exceptions import ConfigurationError
from shortstory.parser.keywords import parse_float
from shortstory.parser.story_models import PauseKind, StorySpeed
from shortstory.timing.profile import SpeedTiming, TimingConfig
from shortstory.timing.sources import CsvTableSource, Row, TimingTableSource

logger = get_logger(__name__)

GLOBAL_TABLE = "ShortStoryGlobal"
SPEED_TABLES: dict[StorySpeed, str] = {
    StorySpeed.STANDARD: "Speed_Standard",
    StorySpeed.FAST: "Speed_Fast",
    StorySpeed.SLOW: "Speed_Slow",
}

_PAUSE_NAMES: dict[str, PauseKind] = {
    "None": PauseKind.NONE,
    "Short": PauseKind.SHORT,
    "Standard": PauseKind.STANDARD,
    "Long": PauseKind.LONG,
}

_TRANSITION_FIELDS: dict[str, str] = {
    "ScreenPause": "screen_transition_pause",
    "FadeWindow": "fade_window",
    "LineBreakPercent": "line_break_percent",
}

_SPEED_FIELDS: dict[str, str] = {
    "PerLetter": "per_letter",
    "ExtraAtSpace": "extra_at_space",
    "ExtraAtPeriod": "extra_at_period",
    "ExtraAtComma": "extra_at_comma",
    "ExtraAtColon": "extra_at_colon",
    "BlockDuration": "block_duration",
}


def _data_rows(rows: list[Row]) -> Iterator[tuple[str, str, float]]:
    """Yield ``(first, name, value)`` for every usable row."""
    for row in rows:
        if not row or not "".join(row).strip():
            continue
        if row[0].lstrip().startswith("---"):
            continue
        if len(row) < 3:
            continue
        yield row[0].strip(), row[1].strip(), parse_float(row[2])


def _require_table(source: TimingTableSource, name: str) -> list[Row]:
    rows = source.read_table(name)
    if rows is None:
        location = source.describe(name)
        logger.error("Missing required timing table", table=name, location=location)
        raise ConfigurationError(
            message=f"Missing required config file: {location}",
            hint="Timing tables are required; defaults are never substituted.",
            details={"table": name, "location": location},
        )
    return rows


def load_speed_timing(rows: list[Row]) -> SpeedTiming:
    """Build a speed profile from ``(_, Name, Value)`` rows.

    Names that are absent keep their default value.
    """
    values: dict[str, float] = {}
    for _, name, value in _data_rows(rows):
        field_name = _SPEED_FIELDS.get(name)
        if field_name is not None:
            values[field_name] = value
    return SpeedTiming(**values)


def load_timing_config(source: TimingTableSource) -> TimingConfig:
    """Load the global table and every speed table from ``source``.

    Args:
        source: Where to read the tables from

    Returns:
        The assembled timing configuration

    Raises:
        ConfigurationError: If any required table is missing
    """
    config = TimingConfig()

    for category, name, value in _data_rows(_require_table(source, GLOBAL_TABLE)):
        if category == "Pause":
            pause = _PAUSE_NAMES.get(name)
            if pause is not None:
                config.pause_durations[pause] = value
        elif category == "Transition":
            field_name = _TRANSITION_FIELDS.get(name)
            if field_name is not None:
                setattr(config, field_name, value)

    logger.info(
        "Loaded global timing table",
        pauses=len(config.pause_durations),
        screen_pause=config.screen_transition_pause,
        fade_window=config.fade_window,
    )

    for speed, table in SPEED_TABLES.items():
        timing = load_speed_timing(_require_table(source, table))
        config.speeds[speed] = timing
        logger.debug(f"Loaded {table}", timing=timing)

    return config


_timing_config: TimingConfig | None = None


def get_timing_config(settings: ShortStorySettings | None = None) -> TimingConfig:
    """Load the timing configuration once per process.

    Args:
        settings: Settings that name the config directory (global ones if None)

    Returns:
        Cached timing configuration

    Raises:
        ConfigurationError: If any required table is missing
    """
    global _timing_config
    if _timing_config is None:
        settings = settings or get_settings()
        source = CsvTableSource(settings.config_directory)
        _timing_config = load_timing_config(source)
    return _timing_config


def reset_timing_config() -> None:
    """Drop the cached timing configuration."""
    global _timing_config
    _timing_config = None
