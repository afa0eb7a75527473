"""Thread-safe in-memory cache of parsed stories."""

from __future__ import annotations

import threading

from shortstory.config import get_logger
from shortstory.parser.story_models import Story

logger = get_logger(__name__)


class StoryCache:
    """Parsed stories keyed by story identifier.

    A single lock guards the whole map, so a concurrent clear can never
    interleave with a concurrent insert.
    """

    def __init__(self) -> None:
        """Initialize an empty cache."""
        self._stories: dict[str, Story] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Story | None:
        """Return the cached story for ``key``, if any."""
        with self._lock:
            return self._stories.get(key)

    def put(self, key: str, story: Story) -> None:
        """Store ``story`` under ``key``, replacing any existing entry."""
        with self._lock:
            self._stories[key] = story
        logger.debug("Cached story", key=key, screens=len(story.screens))

    def contains(self, key: str) -> bool:
        """Whether ``key`` is cached."""
        with self._lock:
            return key in self._stories

    def invalidate(self, key: str) -> bool:
        """Drop ``key``.

        Returns:
            True if an entry was removed
        """
        with self._lock:
            removed = self._stories.pop(key, None) is not None
        return removed

    def invalidate_all(self) -> int:
        """Drop every entry.

        Returns:
            Number of entries removed
        """
        with self._lock:
            count = len(self._stories)
            self._stories.clear()
        return count

    def keys(self) -> list[str]:
        """Snapshot of cached identifiers, sorted."""
        with self._lock:
            return sorted(self._stories)

    def __len__(self) -> int:
        with self._lock:
            return len(self._stories)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.contains(key)
