"""
Custom Exception Classes

Application-specific exception classes for answer evaluation. Only
InvalidQuestionSpec is allowed to escape the evaluator; the others are
raised and recovered internally.
"""

from typing import Optional, Any, Dict


class AnswerEngineException(Exception):
    """Base exception class for all answer engine errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(AnswerEngineException):
    """Raised when there's an issue with configuration setup or validation."""
    pass


class InvalidQuestionSpec(AnswerEngineException):
    """Raised when a question lacks a field its type requires."""

    def __init__(self, message: str, question_type: Optional[str] = None,
                 field_name: Optional[str] = None, **kwargs):
        super().__init__(message, kwargs)
        self.question_type = question_type
        self.field_name = field_name


class UnparsableNumericAnswer(AnswerEngineException):
    """Raised when a numerical submission cannot be read as a number."""

    def __init__(self, message: str, submission: Optional[str] = None, **kwargs):
        super().__init__(message, kwargs)
        self.submission = submission


class NormalizerUnavailable(AnswerEngineException):
    """Raised when the primary text normalizer fails or times out."""

    def __init__(self, message: str, normalizer: Optional[str] = None, **kwargs):
        super().__init__(message, kwargs)
        self.normalizer = normalizer


class ValidationError(AnswerEngineException):
    """Raised when a value supplied by the caller is out of bounds."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 invalid_value: Optional[Any] = None, **kwargs):
        super().__init__(message, kwargs)
        self.field_name = field_name
        self.invalid_value = invalid_value
