"""
Commands Package

CLI commands organized into focused modules:
- match.py - Fuzzy matching, similarity and normalization inspection
- evaluate.py - Scoring a submission against a question file
- review.py - Near-miss review of answer pairs
"""

from .match import match, similarity, normalize
from .evaluate import evaluate
from .review import review

__all__ = [
    'match',
    'similarity',
    'normalize',
    'evaluate',
    'review',
]
