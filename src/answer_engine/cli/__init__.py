"""
CLI Module

Output formatting utilities for the answer-engine command line.
"""

from .formatting import (
    format_table,
    format_verdict,
    format_match_result,
    format_match_details,
    display_error,
)

__all__ = [
    "format_table",
    "format_verdict",
    "format_match_result",
    "format_match_details",
    "display_error",
]
