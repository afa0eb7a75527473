"""Output formatters for the ShortStory CLI."""

from shortstory.cli.formatters.json_formatter import JsonFormatter

__all__ = ["JsonFormatter"]
