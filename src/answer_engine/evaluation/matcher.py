"""
Answer Matching System

Gated fuzzy matching of free-text quiz answers against a reference answer.
Each stage may reject (or, at the designated success checks, accept) and
short-circuit the pipeline; a submission is only accepted if it survives
every rejection gate before an acceptance check.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from fuzzywuzzy import fuzz

from ..core.config import AppConfig, get_config
from ..utils.logging import get_logger
from .normalizer import NormalizedText, TextNormalizer, build_normalizer
from .similarity import jaro_winkler_similarity, levenshtein_similarity

logger = get_logger(__name__)


class MatchStage(str, Enum):
    """Pipeline stages, in evaluation order."""
    MIN_LENGTH = "min_length"
    EXACT = "exact"
    LENGTH_RATIO = "length_ratio"
    NORMALIZE = "normalize"
    NORMALIZED_EQUALITY = "normalized_equality"
    CHARACTER_OVERLAP = "character_overlap"
    SINGLE_WORD = "single_word"
    COMMON_START = "common_start"
    WORD_LEVEL = "word_level"
    FINAL_SIMILARITY = "final_similarity"


@dataclass
class MatchContext:
    """Working state for one comparison."""
    submitted: str
    correct: str
    normalized_submitted: Optional[NormalizedText] = None
    normalized_correct: Optional[NormalizedText] = None
    degraded: bool = False
    overlap_ratio: float = 0.0
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def submitted_text(self) -> str:
        if self.degraded or self.normalized_submitted is None or not self.normalized_submitted.normalized:
            return self.submitted
        return self.normalized_submitted.normalized

    @property
    def correct_text(self) -> str:
        if self.degraded or self.normalized_correct is None or not self.normalized_correct.normalized:
            return self.correct
        return self.normalized_correct.normalized

    @property
    def submitted_tokens(self) -> List[str]:
        if self.degraded or self.normalized_submitted is None:
            return self.submitted.split()
        return list(self.normalized_submitted.tokens)

    @property
    def correct_tokens(self) -> List[str]:
        if self.degraded or self.normalized_correct is None:
            return self.correct.split()
        return list(self.normalized_correct.tokens)


@dataclass
class MatchResult:
    """Result of answer matching."""
    is_match: bool
    stage: MatchStage
    similarity: float
    details: Dict[str, Any]
    normalized_answer: str
    normalized_expected: str


class FuzzyMatcher:
    """Decides whether a free-text submission matches a reference answer."""

    def __init__(self, normalizer: Optional[TextNormalizer] = None,
                 config: Optional[AppConfig] = None):
        """
        Initialize the fuzzy matcher.

        Args:
            normalizer: Text normalizer (built from config if None)
            config: Application configuration (global config if None)
        """
        self.config = config or get_config()
        self.thresholds = self.config.matching
        self.normalizer = normalizer or build_normalizer(self.config)

        self.stages: List[Tuple[MatchStage, Callable[[MatchContext], Optional[bool]]]] = [
            (MatchStage.MIN_LENGTH, self._min_length_gate),
            (MatchStage.EXACT, self._exact_match),
            (MatchStage.LENGTH_RATIO, self._length_ratio_gate),
            (MatchStage.NORMALIZE, self._normalize),
            (MatchStage.NORMALIZED_EQUALITY, self._normalized_equality),
            (MatchStage.CHARACTER_OVERLAP, self._character_overlap_gate),
            (MatchStage.SINGLE_WORD, self._single_word_gate),
            (MatchStage.COMMON_START, self._common_start_gate),
            (MatchStage.WORD_LEVEL, self._word_level_match),
            (MatchStage.FINAL_SIMILARITY, self._final_similarity),
        ]

    def match(self, submitted: str, correct: str) -> bool:
        """Return True if ``submitted`` is accepted as ``correct``."""
        return self.match_result(submitted, correct).is_match

    def match_result(self, submitted: str, correct: str) -> MatchResult:
        """Run the pipeline and report the stage that decided it."""
        ctx = MatchContext(
            submitted=(submitted or "").strip().lower(),
            correct=(correct or "").strip().lower(),
        )

        for stage, check in self.stages:
            decision = check(ctx)
            if decision is not None:
                logger.debug(
                    f"Match {ctx.submitted!r} vs {ctx.correct!r}: {decision} at {stage.value}",
                    extra={'stage': stage.value}
                )
                return self._result(ctx, decision, stage)

        return self._result(ctx, False, MatchStage.FINAL_SIMILARITY)

    def explain(self, submitted: str, correct: str) -> MatchResult:
        """
        Run the pipeline and attach review diagnostics.

        The fuzzywuzzy scores are informational only and never influence
        the decision.
        """
        result = self.match_result(submitted, correct)
        a, b = result.normalized_answer, result.normalized_expected
        result.details.update({
            'ratio': fuzz.ratio(a, b) / 100.0,
            'partial_ratio': fuzz.partial_ratio(a, b) / 100.0,
            'token_sort_ratio': fuzz.token_sort_ratio(a, b) / 100.0,
            'token_set_ratio': fuzz.token_set_ratio(a, b) / 100.0,
        })
        return result

    def _result(self, ctx: MatchContext, decision: bool, stage: MatchStage) -> MatchResult:
        details = dict(ctx.details)
        details['degraded'] = ctx.degraded
        return MatchResult(
            is_match=decision,
            stage=stage,
            similarity=levenshtein_similarity(ctx.submitted_text, ctx.correct_text),
            details=details,
            normalized_answer=ctx.submitted_text,
            normalized_expected=ctx.correct_text,
        )

    # Pipeline stages. Each returns None to continue, or a final decision.

    def _min_length_gate(self, ctx: MatchContext) -> Optional[bool]:
        """Single letters never match, even against a short correct answer."""
        minimum = self.thresholds.min_length
        if len(ctx.submitted) < minimum or len(ctx.correct) < minimum:
            return False
        return None

    def _exact_match(self, ctx: MatchContext) -> Optional[bool]:
        if ctx.submitted == ctx.correct:
            return True
        return None

    def _length_ratio_gate(self, ctx: MatchContext) -> Optional[bool]:
        """Reject truncations ("York") and padded answers."""
        submitted_len = len(ctx.submitted)
        correct_len = len(ctx.correct)
        lower = max(self.thresholds.min_submitted_length, self.thresholds.min_length_ratio * correct_len)
        upper = self.thresholds.max_length_ratio * correct_len

        ctx.details['length_bounds'] = (lower, upper)
        if submitted_len < lower or submitted_len > upper:
            return False
        return None

    def _normalize(self, ctx: MatchContext) -> Optional[bool]:
        try:
            ctx.normalized_submitted = self.normalizer.normalize(ctx.submitted)
            ctx.normalized_correct = self.normalizer.normalize(ctx.correct)
        except Exception as e:
            logger.warning(f"Normalization failed, comparing raw text: {e}")
            ctx.degraded = True
            ctx.normalized_submitted = None
            ctx.normalized_correct = None
        return None

    def _normalized_equality(self, ctx: MatchContext) -> Optional[bool]:
        if ctx.degraded:
            return None

        submitted, correct = ctx.normalized_submitted, ctx.normalized_correct
        if submitted.normalized and submitted.normalized == correct.normalized:
            return True
        if submitted.stemmed and submitted.stemmed == correct.stemmed:
            return True
        return None

    def _character_overlap_gate(self, ctx: MatchContext) -> Optional[bool]:
        submitted_chars = set(ctx.submitted)
        correct_chars = set(ctx.correct)
        largest = max(len(submitted_chars), len(correct_chars))

        ctx.overlap_ratio = len(submitted_chars & correct_chars) / largest if largest else 0.0
        ctx.details['overlap_ratio'] = ctx.overlap_ratio

        if ctx.overlap_ratio < self.thresholds.char_overlap_threshold:
            return False
        return None

    def _single_word_gate(self, ctx: MatchContext) -> Optional[bool]:
        """A one-word answer must resemble at least one word of the reference."""
        words = ctx.submitted.split()
        if len(words) != 1:
            return None

        word = words[0]
        for correct_word in ctx.correct.split():
            if word == correct_word or word in correct_word or correct_word in word:
                return None
            if jaro_winkler_similarity(word, correct_word) >= self.thresholds.single_word_similarity:
                return None
        return False

    def _common_start_gate(self, ctx: MatchContext) -> Optional[bool]:
        if ctx.submitted[0] != ctx.correct[0] and \
                ctx.overlap_ratio < self.thresholds.common_start_overlap_threshold:
            return False
        return None

    def _word_level_match(self, ctx: MatchContext) -> Optional[bool]:
        """Compare significant words (longer than two characters) pairwise."""
        min_len = self.thresholds.significant_word_length
        submitted_words = [w for w in ctx.submitted_tokens if len(w) > min_len]
        correct_words = [w for w in ctx.correct_tokens if len(w) > min_len]
        if not submitted_words or not correct_words:
            return None

        def similar(a: str, b: str, threshold: float) -> bool:
            return a == b or jaro_winkler_similarity(a, b) >= threshold

        related = any(
            similar(a, b, self.thresholds.related_word_similarity)
            for a in submitted_words for b in correct_words
        )
        if not related:
            return False

        matched = sum(
            1 for a in submitted_words
            if any(similar(a, b, self.thresholds.word_match_similarity) for b in correct_words)
        )
        word_ratio = matched / max(len(submitted_words), len(correct_words))
        ctx.details['word_match_ratio'] = word_ratio

        if word_ratio >= self.thresholds.word_match_ratio:
            return True
        return None

    def _final_similarity(self, ctx: MatchContext) -> Optional[bool]:
        similarity = levenshtein_similarity(ctx.submitted_text, ctx.correct_text)
        ctx.details['final_similarity'] = similarity
        return similarity >= self.thresholds.final_similarity_threshold


def fuzzy_match(submitted: str, correct: str,
                normalizer: Optional[TextNormalizer] = None,
                config: Optional[AppConfig] = None) -> bool:
    """Decide whether ``submitted`` matches ``correct``."""
    return FuzzyMatcher(normalizer=normalizer, config=config).match(submitted, correct)
