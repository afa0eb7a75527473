"""Timing model: speed profiles, pause resolution and line durations."""

from shortstory.timing.duration import (
    char_extra_delay,
    char_index_at_time,
    line_duration,
    typewriter_duration,
)
from shortstory.timing.loader import (
    get_timing_config,
    load_timing_config,
    reset_timing_config,
)
from shortstory.timing.profile import SpeedTiming, TimingConfig
from shortstory.timing.sources import (
    CsvTableSource,
    InMemoryTableSource,
    TimingTableSource,
)

__all__ = [
    "CsvTableSource",
    "InMemoryTableSource",
    "SpeedTiming",
    "TimingConfig",
    "TimingTableSource",
    "char_extra_delay",
    "char_index_at_time",
    "get_timing_config",
    "line_duration",
    "load_timing_config",
    "reset_timing_config",
    "typewriter_duration",
]
