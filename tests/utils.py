"""Shared test data and helpers."""

from __future__ import annotations

import re
from pathlib import Path

SAMPLE_STORY = """\
# A short sample story
[STORY]
title = The Lighthouse
ost = /Game/Audio/Theme

[SCREEN_01_INTRO]
background = /Game/Art/Shore
transition = crossfade
@sfx /Game/Audio/Waves | 0.5
The waves rolled in,
one after another. | typewriter | pause=long | effect=shake_low

[SCREEN_02_TOWER]
background = art/tower.png
@vfx BP_Fog | 1.0 | 3.0
Up the stairs. | top_down | speed=fast
"""

GLOBAL_ROWS = [
    ["---", "Name", "Value"],
    ["Pause", "None", "0"],
    ["Pause", "Short", "0.5"],
    ["Pause", "Standard", "1.0"],
    ["Pause", "Long", "2.0"],
    ["Transition", "ScreenPause", "1.5"],
    ["Transition", "FadeWindow", "0.5"],
    ["Transition", "LineBreakPercent", "0.66"],
]


def speed_rows(per_letter: float, block: float) -> list[list[str]]:
    """Rows for one speed table."""
    return [
        ["---", "Name", "Value"],
        ["1", "PerLetter", str(per_letter)],
        ["2", "ExtraAtSpace", "0.08"],
        ["3", "ExtraAtPeriod", "0.3"],
        ["4", "ExtraAtComma", "0.2"],
        ["5", "ExtraAtColon", "0.4"],
        ["6", "BlockDuration", str(block)],
    ]


TIMING_TABLES = {
    "ShortStoryGlobal": GLOBAL_ROWS,
    "Speed_Standard": speed_rows(0.04, 2.0),
    "Speed_Fast": speed_rows(0.02, 1.0),
    "Speed_Slow": speed_rows(0.08, 3.0),
}


def write_timing_tables(directory: Path) -> None:
    """Write the standard timing tables as CSV files into ``directory``."""
    directory.mkdir(parents=True, exist_ok=True)
    for name, rows in TIMING_TABLES.items():
        lines = [",".join(row) for row in rows]
        (directory / f"{name}.csv").write_text("\n".join(lines) + "\n")


def strip_ansi_codes(text: str) -> str:
    """Strip ANSI escape sequences and box drawing characters from CLI output."""
    text = re.compile(r"\x1b\[[0-9;]*[A-Za-z]").sub("", text)
    return re.compile(r"[━─│┃┏┓┗┛┡┩╭╮╰╯├┤┬┴┼]").sub("", text)
