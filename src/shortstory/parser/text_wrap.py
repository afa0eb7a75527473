"""Splitting annotated text into displayable physical lines."""

from __future__ import annotations

from shortstory.parser.story_models import PauseKind

MANUAL_BREAK = "\\\\"


def split_text_by_length(text: str, max_length: int) -> list[str]:
    """Wrap ``text`` into pieces of at most ``max_length`` characters.

    Each cut is made at the last space at or before ``max_length``; a word
    longer than the limit is cut hard at the limit. A non-positive limit
    disables wrapping.

    Args:
        text: Text to wrap
        max_length: Maximum characters per piece

    Returns:
        Trimmed pieces in reading order; empty for empty text
    """
    if not text:
        return []
    if max_length <= 0:
        return [text]

    pieces: list[str] = []
    remaining = text
    while len(remaining) > max_length:
        split_at = remaining.rfind(" ", 0, max_length + 1)
        if split_at <= 0:
            split_at = max_length
        pieces.append(remaining[:split_at].strip())
        remaining = remaining[split_at:].lstrip()

    if remaining:
        pieces.append(remaining.strip())
    return pieces


def process_text_to_lines(
    text: str, pause: PauseKind, max_length: int
) -> list[tuple[str, PauseKind]]:
    """Break a chunk of text into physical lines with their pauses.

    The chunk is first split on the manual ``\\\\`` marker, then every piece
    is wrapped. Only the final physical line keeps ``pause``; all earlier
    lines get a line-break pause.

    Args:
        text: Raw chunk text
        pause: Pause requested for the chunk
        max_length: Wrapping limit

    Returns:
        ``(text, pause)`` pairs in reading order
    """
    segments: list[str] = []
    for manual_segment in text.split(MANUAL_BREAK):
        segments.extend(split_text_by_length(manual_segment.strip(), max_length))

    last = len(segments) - 1
    return [
        (segment, pause if index == last else PauseKind.LINE_BREAK)
        for index, segment in enumerate(segments)
    ]
