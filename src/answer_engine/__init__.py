"""
Answer Evaluation Engine

Scores quiz answers: exact choices, numerical answers within a tolerance,
ordered sequences with partial credit, and free text through a gated
fuzzy matching pipeline.
"""

__version__ = "1.0.0"

from .evaluation import (
    AnswerEvaluator,
    FuzzyMatcher,
    QuestionSpec,
    QuestionType,
    Verdict,
    evaluate,
    fuzzy_match,
    jaro_winkler_similarity,
    levenshtein_distance,
    levenshtein_similarity,
    score_sequence,
)
from .core.exceptions import InvalidQuestionSpec

__all__ = [
    "AnswerEvaluator",
    "FuzzyMatcher",
    "QuestionSpec",
    "QuestionType",
    "Verdict",
    "evaluate",
    "fuzzy_match",
    "jaro_winkler_similarity",
    "levenshtein_distance",
    "levenshtein_similarity",
    "score_sequence",
    "InvalidQuestionSpec",
]
