"""
Core Module

Foundational components used across the engine: configuration
management and custom exceptions.
"""

from .config import get_config, set_config, reload_config, AppConfig
from .exceptions import (
    AnswerEngineException,
    ConfigurationError,
    InvalidQuestionSpec,
    UnparsableNumericAnswer,
    NormalizerUnavailable,
    ValidationError,
)

__all__ = [
    "get_config",
    "set_config",
    "reload_config",
    "AppConfig",
    "AnswerEngineException",
    "ConfigurationError",
    "InvalidQuestionSpec",
    "UnparsableNumericAnswer",
    "NormalizerUnavailable",
    "ValidationError",
]
