"""
Logging Setup

Root logger wiring for the answer engine: a quiet console stream, a
rotating log file at the configured level, and optional JSON records that
carry the question type and matching stage of each evaluation.
"""

import json
import logging
import logging.handlers
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from ..core.config import get_config

# Record attributes set through ``extra=`` that JSON output keeps
CONTEXT_FIELDS = ('question_type', 'stage')

FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s:%(lineno)d - %(message)s'

SIZE_UNITS = (
    ('GB', 1024 ** 3),
    ('MB', 1024 ** 2),
    ('KB', 1024),
    ('B', 1),
)
DEFAULT_MAX_BYTES = 10 * 1024 * 1024


class JSONFormatter(logging.Formatter):
    """Render each record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        for name in CONTEXT_FIELDS:
            if hasattr(record, name):
                payload[name] = getattr(record, name)

        if record.exc_info:
            payload['exception'] = self.formatException(record.exc_info)

        return json.dumps(payload)


class EvaluationLoggerAdapter(logging.LoggerAdapter):
    """Stamps every record with the question type being evaluated."""

    def process(self, msg: str, kwargs: dict) -> tuple:
        kwargs['extra'] = {**self.extra, **kwargs.get('extra', {})}
        return msg, kwargs


def setup_logging(config=None, enable_json: bool = False) -> None:
    """
    Replace the root logger's handlers with the engine's console and file
    handlers.

    Args:
        config: Application configuration (global config if None)
        enable_json: Emit JSON records instead of plain text
    """
    settings = (config or get_config()).logging
    file_level = _level(settings.level)

    log_file = Path(settings.file)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(_level(settings.console_level))

    file_handler = logging.handlers.RotatingFileHandler(
        filename=log_file,
        maxBytes=_parse_size(settings.max_size),
        backupCount=settings.backup_count,
        encoding='utf-8'
    )
    file_handler.setLevel(file_level)

    if enable_json:
        console_handler.setFormatter(JSONFormatter())
        file_handler.setFormatter(JSONFormatter())
    else:
        console_handler.setFormatter(logging.Formatter(settings.format))
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(file_level)
    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)

    # NLTK reports corpus lookups at INFO
    logging.getLogger('nltk').setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        f"Logging to {log_file} at {settings.level} (console {settings.console_level})"
    )


def get_logger(name: str) -> logging.Logger:
    """Return the module logger for ``name``."""
    return logging.getLogger(name)


def get_evaluation_logger(name: str, question_type: str) -> EvaluationLoggerAdapter:
    """Logger whose records carry ``question_type`` for structured output."""
    return EvaluationLoggerAdapter(get_logger(name), {'question_type': question_type})


def _level(name: str) -> int:
    return getattr(logging, name.upper())


def _parse_size(size_str: str) -> int:
    """
    Convert a size such as '10MB' or '512 KB' to bytes.

    Unreadable sizes fall back to 10MB.
    """
    size_str = size_str.upper().strip()

    for unit, multiplier in SIZE_UNITS:
        if not size_str.endswith(unit):
            continue
        try:
            return int(float(size_str[:-len(unit)].strip()) * multiplier)
        except ValueError:
            break

    return DEFAULT_MAX_BYTES


class PerformanceTimer:
    """Context manager that logs how long a block of work took."""

    def __init__(self, operation: str, logger: Optional[logging.Logger] = None):
        """
        Args:
            operation: Description used in the log messages
            logger: Logger to report to (this module's if None)
        """
        self.operation = operation
        self.logger = logger or get_logger(__name__)
        self.duration: Optional[float] = None
        self._started: Optional[float] = None

    def __enter__(self):
        self._started = time.perf_counter()
        self.logger.debug(f"Started {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration = time.perf_counter() - self._started

        if exc_type is None:
            self.logger.info(f"Completed {self.operation} in {self.duration:.3f}s")
        else:
            self.logger.error(f"Failed {self.operation} after {self.duration:.3f}s: {exc_val}")
