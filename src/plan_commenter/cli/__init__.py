"""Command-line interface package for the plan commenter."""

from .app import build_parser, format_error_command, main, run

__all__ = [
    "build_parser",
    "format_error_command",
    "main",
    "run",
]
