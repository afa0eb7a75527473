"""Story discovery, loading and caching."""

from shortstory.library.cache import StoryCache
from shortstory.library.story_library import LoadResult, StoryLibrary

__all__ = ["LoadResult", "StoryCache", "StoryLibrary"]
