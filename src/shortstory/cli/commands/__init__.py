"""ShortStory CLI commands."""

from shortstory.cli.commands.check import check_command
from shortstory.cli.commands.list import list_command
from shortstory.cli.commands.show import show_command
from shortstory.cli.commands.simulate import simulate_command

__all__ = ["check_command", "list_command", "show_command", "simulate_command"]
