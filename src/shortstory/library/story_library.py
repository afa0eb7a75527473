"""Discovering, loading and caching story files."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path

from shortstory.config import ShortStorySettings, get_logger, get_settings
from shortstory.library.cache import StoryCache
from shortstory.parser.story_models import Story, StoryScreen
from shortstory.parser.story_parser import Diagnostic, StoryParser

logger = get_logger(__name__)


@dataclass
class LoadResult:
    """Outcome of loading a story through the library."""

    story: Story | None
    success: bool
    diagnostics: list[Diagnostic] = field(default_factory=list)
    from_cache: bool = False


class StoryLibrary:
    """Entry point for finding and loading stories under a stories directory."""

    def __init__(
        self,
        settings: ShortStorySettings | None = None,
        cache: StoryCache | None = None,
        parser: StoryParser | None = None,
    ) -> None:
        """Initialize the library.

        Args:
            settings: Settings to use (global settings if None)
            cache: Story cache to share (a private one if None)
            parser: Parser to use (one built from settings if None)
        """
        self.settings = settings or get_settings()
        self.cache = cache if cache is not None else StoryCache()
        self.parser = parser or StoryParser(
            max_line_length=self.settings.max_line_length,
            asset_prefixes=self.settings.asset_path_prefixes,
        )

    @property
    def stories_directory(self) -> Path:
        """Root directory searched for stories."""
        return self.settings.stories_dir

    def story_path(self, story_id: str) -> Path:
        """Absolute path of the file behind ``story_id``."""
        return self.stories_directory / story_id

    def list_available_stories(self) -> list[str]:
        """List story identifiers (relative POSIX paths), sorted.

        Returns:
            Identifiers of every story file found recursively
        """
        root = self.stories_directory
        if not root.is_dir():
            logger.warning("Stories directory does not exist", path=str(root))
            return []

        pattern = f"*{self.settings.story_extension}"
        stories = sorted(
            path.relative_to(root).as_posix()
            for path in root.rglob(pattern)
            if path.is_file()
        )
        logger.info(f"Found {len(stories)} stories", path=str(root))
        return stories

    def load_story(self, story_id: str, force_reload: bool = False) -> LoadResult:
        """Load a story, using the cache unless ``force_reload`` is set.

        Args:
            story_id: Story identifier relative to the stories directory
            force_reload: Skip the cache read and overwrite the entry

        Returns:
            LoadResult; the story is a copy, never the cached instance
        """
        if not story_id:
            logger.error("Cannot load story: empty story identifier")
            return LoadResult(
                story=None,
                success=False,
                diagnostics=[Diagnostic(None, "Empty story identifier")],
            )

        if not force_reload:
            cached = self.cache.get(story_id)
            if cached is not None:
                logger.debug("Story cache hit", story=story_id)
                return LoadResult(
                    story=copy.deepcopy(cached), success=True, from_cache=True
                )

        path = self.story_path(story_id)
        result = self.parser.parse_file(path)

        if not result.success:
            logger.error(
                "Failed to parse story",
                story=story_id,
                errors=result.messages,
            )
            return LoadResult(
                story=None, success=False, diagnostics=result.diagnostics
            )

        if result.diagnostics:
            logger.warning(
                "Story parsed with warnings",
                story=story_id,
                warnings=result.messages,
            )

        story = result.story
        for screen in story.screens:
            screen.resolved_background = self.resolve_background(
                screen, path.parent
            )

        self.cache.put(story_id, story)
        logger.info(
            "Loaded story",
            story=story_id,
            title=story.title,
            screens=len(story.screens),
        )
        return LoadResult(
            story=copy.deepcopy(story), success=True, diagnostics=result.diagnostics
        )

    def resolve_background(self, screen: StoryScreen, base_dir: Path) -> Path | None:
        """Find the image file behind a screen's raw background path.

        Asset references are resolved elsewhere and are left alone. Other
        paths are tried as absolute, then relative to the story's directory,
        the stories root and the project directory.

        Args:
            screen: Screen whose background to resolve
            base_dir: Directory containing the story file

        Returns:
            Path of an existing file, or None
        """
        raw = screen.background_path
        if not raw or screen.background_asset:
            return None

        candidate = Path(raw)
        if candidate.is_absolute():
            search = [candidate]
        else:
            search = [
                base_dir / candidate,
                self.stories_directory / candidate,
                self.settings.project_dir / candidate,
            ]

        for path in search:
            if path.is_file():
                return path.resolve()

        logger.warning(
            "Background image not found",
            screen=screen.name,
            background=raw,
            searched=[str(path) for path in search],
        )
        return None

    def is_story_cached(self, story_id: str) -> bool:
        """Whether ``story_id`` is in the cache."""
        return self.cache.contains(story_id)

    def clear_cached_story(self, story_id: str) -> bool:
        """Remove one story from the cache."""
        removed = self.cache.invalidate(story_id)
        if removed:
            logger.info("Cleared cached story", story=story_id)
        else:
            logger.debug("Story was not cached", story=story_id)
        return removed

    def clear_all_cached_stories(self) -> int:
        """Empty the cache."""
        count = self.cache.invalidate_all()
        logger.info(f"Cleared {count} cached stories")
        return count
