"""
Evaluation Module

Answer scoring: string similarity primitives, text normalization, the
fuzzy matching pipeline, sequence scoring and the per-type evaluator.
"""

from .similarity import levenshtein_distance, levenshtein_similarity, jaro_winkler_similarity
from .normalizer import (
    NormalizedText,
    TextNormalizer,
    FallbackNormalizer,
    NLTKNormalizer,
    GuardedNormalizer,
    build_normalizer,
)
from .matcher import FuzzyMatcher, MatchResult, MatchStage, fuzzy_match
from .sequence import SequenceScore, score_sequence
from .grader import (
    AnswerEvaluator,
    QuestionSpec,
    QuestionType,
    Verdict,
    evaluate,
    parse_numeric_submission,
)

__all__ = [
    "levenshtein_distance",
    "levenshtein_similarity",
    "jaro_winkler_similarity",
    "NormalizedText",
    "TextNormalizer",
    "FallbackNormalizer",
    "NLTKNormalizer",
    "GuardedNormalizer",
    "build_normalizer",
    "FuzzyMatcher",
    "MatchResult",
    "MatchStage",
    "fuzzy_match",
    "SequenceScore",
    "score_sequence",
    "AnswerEvaluator",
    "QuestionSpec",
    "QuestionType",
    "Verdict",
    "evaluate",
    "parse_numeric_submission",
]
