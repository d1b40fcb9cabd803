"""CLI commands for cinedex."""

from .directives import directives_command
from .init import init_command
from .search import search_command

__all__ = ["directives_command", "init_command", "search_command"]
