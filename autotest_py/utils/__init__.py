"""Utility functions."""

from .terminal import (
    console,
    create_table,
    format_result_color,
    format_status_color,
    progress_message,
    results_table,
)

__all__ = [
    "console",
    "create_table",
    "format_result_color",
    "format_status_color",
    "progress_message",
    "results_table",
]
