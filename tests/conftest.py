"""
Pytest Configuration

Global test configuration and fixtures for the answer engine test suite.
"""

import logging
import logging.handlers
import tempfile
from pathlib import Path

import pytest

from answer_engine.core.config import AppConfig, set_config
from answer_engine.evaluation.grader import AnswerEvaluator
from answer_engine.evaluation.matcher import FuzzyMatcher
from answer_engine.evaluation.normalizer import FallbackNormalizer

ENV_OVERRIDES = (
    'ANSWER_ENGINE_LOG_LEVEL',
    'ANSWER_ENGINE_NORMALIZER',
    'ANSWER_ENGINE_NORMALIZER_TIMEOUT',
    'DEBUG',
    'ENVIRONMENT',
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep environment overrides from leaking into configuration tests."""
    for name in ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)
    yield
    set_config(None)


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Undo handlers installed by setup_logging during a test."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if type(handler) in (logging.StreamHandler, logging.handlers.RotatingFileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


@pytest.fixture
def temp_dir():
    """Provide a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def test_config(temp_dir):
    """Configuration using the dependency-free normalizer."""
    return AppConfig.from_dict({
        'app': {'name': 'Test Answer Engine', 'version': 'test'},
        'normalizer': {'backend': 'fallback'},
        'logging': {'level': 'DEBUG', 'file': str(temp_dir / 'test.log')},
    })


@pytest.fixture
def matcher(test_config):
    """Fuzzy matcher running on the fallback normalizer."""
    return FuzzyMatcher(normalizer=FallbackNormalizer(), config=test_config)


@pytest.fixture
def evaluator(test_config):
    """Answer evaluator running on the fallback normalizer."""
    return AnswerEvaluator(config=test_config, normalizer=FallbackNormalizer())
