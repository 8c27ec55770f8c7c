"""CLI-facing helpers for the link checker command."""

from .reporting import exit_code_for, format_error, merge_options, summary_message

__all__ = [
    "exit_code_for",
    "format_error",
    "merge_options",
    "summary_message",
]
