"""
Utils Module

Logging configuration and timing helpers.
"""

from .logging import (
    setup_logging,
    get_logger,
    get_evaluation_logger,
    EvaluationLoggerAdapter,
    PerformanceTimer,
    JSONFormatter,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "get_evaluation_logger",
    "EvaluationLoggerAdapter",
    "PerformanceTimer",
    "JSONFormatter",
]
