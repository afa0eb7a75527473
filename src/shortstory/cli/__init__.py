"""ShortStory command line interface."""

from shortstory.cli.main import app, main

__all__ = ["app", "main"]
