"""Output formatters for the cinedex CLI."""

from .json_formatter import JsonFormatter

__all__ = ["JsonFormatter"]
