"""
Answer Grading System

Dispatches a submitted answer to the scoring rule for its question type
and returns a Verdict. Grading is a pure function of the question and the
submission: nothing is cached or recorded between calls.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from ..core.config import AppConfig, get_config
from ..core.exceptions import InvalidQuestionSpec, UnparsableNumericAnswer, ValidationError
from ..utils.logging import get_evaluation_logger, get_logger, PerformanceTimer
from .matcher import FuzzyMatcher
from .normalizer import TextNormalizer
from .sequence import score_sequence

logger = get_logger(__name__)

Submission = Union[str, Sequence[str]]


class QuestionType(str, Enum):
    """Question types a quiz can contain."""
    MULTIPLE_CHOICE = "multiple_choice"
    OPEN_TEXT = "open_text"
    SEQUENCE = "sequence"
    TRUE_FALSE = "true_false"
    NUMERICAL = "numerical"
    IMAGE = "image"
    AUDIO = "audio"
    VIDEO = "video"


@dataclass(frozen=True)
class QuestionSpec:
    """The scoring-relevant part of a question."""
    type: QuestionType
    correct_answer: Optional[str] = None
    sequence_reference: Optional[Tuple[str, ...]] = None
    numeric_answer: Optional[Decimal] = None
    numeric_tolerance: Optional[Decimal] = None
    points: int = 1
    numeric_scale: Optional[int] = None  # decimal places; engine default if None

    def __post_init__(self):
        try:
            object.__setattr__(self, 'type', QuestionType(self.type))
        except ValueError as e:
            raise InvalidQuestionSpec(f"Unknown question type: {self.type!r}", field_name='type') from e

        if isinstance(self.points, bool) or not isinstance(self.points, int) or self.points <= 0:
            raise InvalidQuestionSpec(
                f"Points must be a positive integer, got {self.points!r}",
                question_type=self.type.value, field_name='points'
            )

        if self.numeric_scale is not None and (
                isinstance(self.numeric_scale, bool) or not isinstance(self.numeric_scale, int)
                or self.numeric_scale < 0):
            raise InvalidQuestionSpec(
                f"Numeric scale must be a non-negative integer, got {self.numeric_scale!r}",
                question_type=self.type.value, field_name='numeric_scale'
            )

        if self.sequence_reference is not None:
            if isinstance(self.sequence_reference, str):
                raise InvalidQuestionSpec(
                    "sequence_reference must be a list of items, not a string",
                    question_type=self.type.value, field_name='sequence_reference'
                )
            object.__setattr__(self, 'sequence_reference', tuple(self.sequence_reference))
        for name in ('numeric_answer', 'numeric_tolerance'):
            value = getattr(self, name)
            if value is not None and not isinstance(value, Decimal):
                object.__setattr__(self, name, _to_decimal(value, name, self.type))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "QuestionSpec":
        """
        Build a QuestionSpec from a caller mapping.

        Accepts both this engine's field names and the quiz backend's
        column names (sequence_items, numerical_answer, numerical_tolerance).
        """
        if 'type' not in data:
            raise InvalidQuestionSpec("Question is missing its type", field_name='type')

        def pick(*keys):
            for key in keys:
                if data.get(key) is not None:
                    return data[key]
            return None

        kwargs = {
            'type': data['type'],
            'correct_answer': pick('correct_answer'),
            'sequence_reference': pick('sequence_reference', 'sequence_items'),
            'numeric_answer': pick('numeric_answer', 'numerical_answer'),
            'numeric_tolerance': pick('numeric_tolerance', 'numerical_tolerance'),
            'points': 1 if data.get('points') is None else data['points'],
        }
        if data.get('numeric_scale') is not None:
            kwargs['numeric_scale'] = data['numeric_scale']
        return cls(**kwargs)


@dataclass(frozen=True)
class Verdict:
    """Outcome of evaluating one submission."""
    is_correct: Optional[bool]
    points_awarded: int
    explanation: str = ""


def _to_decimal(value: Any, field_name: str, question_type: QuestionType) -> Decimal:
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as e:
        raise InvalidQuestionSpec(
            f"{field_name} is not a number: {value!r}",
            question_type=question_type.value, field_name=field_name
        ) from e
    if not number.is_finite():
        raise InvalidQuestionSpec(
            f"{field_name} must be finite, got {value!r}",
            question_type=question_type.value, field_name=field_name
        )
    return number


def _quantize(value: Decimal, scale: int) -> Decimal:
    return value.quantize(Decimal(1).scaleb(-scale), rounding=ROUND_HALF_UP)


def _quantize_field(value: Decimal, scale: int, question: "QuestionSpec", field_name: str) -> Decimal:
    try:
        return _quantize(value, scale)
    except InvalidOperation as e:
        raise InvalidQuestionSpec(
            f"{field_name} {value} does not fit scale {scale}",
            question_type=question.type.value, field_name=field_name
        ) from e


def parse_numeric_submission(submission: str, scale: Optional[int] = None) -> Decimal:
    """
    Parse a numerical answer. Handles 15, 015, 15.0, 15,5 (EU decimal) and
    inner spaces such as "1 000".

    Args:
        submission: Raw answer text
        scale: Decimal places to round to (no rounding if None)

    Raises:
        UnparsableNumericAnswer: If the text is not a single finite number
    """
    if not isinstance(submission, str) or not submission.strip():
        raise UnparsableNumericAnswer("Empty numerical answer", submission=submission)

    cleaned = submission.strip().replace(" ", "")
    if "," in cleaned and "." not in cleaned:
        cleaned = cleaned.replace(",", ".")

    try:
        number = Decimal(cleaned)
    except InvalidOperation as e:
        raise UnparsableNumericAnswer(f"Not a number: {submission!r}", submission=submission) from e

    if not number.is_finite():
        raise UnparsableNumericAnswer(f"Not a finite number: {submission!r}", submission=submission)

    if scale is None:
        return number
    try:
        return _quantize(number, scale)
    except InvalidOperation as e:
        raise UnparsableNumericAnswer(f"Number out of range: {submission!r}", submission=submission) from e


class AnswerEvaluator:
    """Scores submissions by dispatching on question type."""

    def __init__(self, config: Optional[AppConfig] = None,
                 normalizer: Optional[TextNormalizer] = None,
                 matcher: Optional[FuzzyMatcher] = None):
        """
        Initialize the evaluator.

        Args:
            config: Application configuration (global config if None)
            normalizer: Normalizer for the default matcher
            matcher: Fuzzy matcher for text and media questions
        """
        self.config = config or get_config()
        self.matcher = matcher or FuzzyMatcher(normalizer=normalizer, config=self.config)

        self.scorers: Dict[QuestionType, Callable[[QuestionSpec, Submission], Verdict]] = {
            QuestionType.MULTIPLE_CHOICE: self._score_choice,
            QuestionType.TRUE_FALSE: self._score_choice,
            QuestionType.NUMERICAL: self._score_numerical,
            QuestionType.SEQUENCE: self._score_sequence,
            QuestionType.OPEN_TEXT: self._score_text,
            QuestionType.IMAGE: self._score_text,
            QuestionType.AUDIO: self._score_text,
            QuestionType.VIDEO: self._score_text,
        }

    def evaluate(self, question: QuestionSpec, submission: Submission) -> Verdict:
        """
        Evaluate a single submission.

        Args:
            question: The question being answered
            submission: A string, or a list of strings for sequence questions

        Returns:
            Verdict with correctness and points

        Raises:
            InvalidQuestionSpec: If the question lacks a field its type requires
        """
        scorer = self.scorers.get(question.type)
        if scorer is None:
            return Verdict(is_correct=None, points_awarded=0,
                           explanation=f"{question.type.value} requires manual scoring")

        log = get_evaluation_logger(__name__, question.type.value)
        try:
            verdict = scorer(question, submission)
        except InvalidQuestionSpec as e:
            log.error(f"Cannot evaluate {question.type.value} question: {e}")
            raise

        log.debug(f"Evaluated {question.type.value}: correct={verdict.is_correct}, points={verdict.points_awarded}")
        return verdict

    def evaluate_batch(self, items: Iterable[Tuple[QuestionSpec, Submission]]) -> List[Verdict]:
        """Evaluate many (question, submission) pairs independently."""
        items = list(items)
        with PerformanceTimer(f"evaluating {len(items)} submissions", logger):
            verdicts = [self.evaluate(question, submission) for question, submission in items]

        logger.info(f"Batch evaluation complete: {sum(1 for v in verdicts if v.is_correct)}/{len(verdicts)} correct")
        return verdicts

    def manual_verdict(self, question: QuestionSpec, is_correct: bool, points: int) -> Verdict:
        """
        Record a host's manual decision.

        Raises:
            ValidationError: If points fall outside 0..question.points
        """
        if isinstance(points, bool) or not isinstance(points, int) or not 0 <= points <= question.points:
            raise ValidationError(
                f"Points must be between 0 and {question.points}",
                field_name='points', invalid_value=points
            )
        return Verdict(is_correct=bool(is_correct), points_awarded=points, explanation="manual")

    def _score_choice(self, question: QuestionSpec, submission: Submission) -> Verdict:
        expected = self._require(question, 'correct_answer')
        if not isinstance(submission, str):
            return Verdict(False, 0, "expected a single answer")

        is_correct = submission.strip().lower() == expected.strip().lower()
        return self._all_or_nothing(question, is_correct, "exact choice")

    def _score_numerical(self, question: QuestionSpec, submission: Submission) -> Verdict:
        answer = self._require(question, 'numeric_answer')
        tolerance = question.numeric_tolerance if question.numeric_tolerance is not None else Decimal(0)
        if tolerance < 0:
            raise InvalidQuestionSpec(
                f"numeric_tolerance must not be negative, got {tolerance}",
                question_type=question.type.value, field_name='numeric_tolerance'
            )

        scale = question.numeric_scale if question.numeric_scale is not None else self.config.scoring.numeric_scale
        try:
            parsed = parse_numeric_submission(submission, scale=scale)
        except UnparsableNumericAnswer as e:
            logger.debug(f"Numerical answer rejected: {e}")
            return Verdict(False, 0, "not a number")

        answer = _quantize_field(answer, scale, question, 'numeric_answer')

        # Tolerance is an absolute bound and is never rounded to the scale
        is_correct = abs(parsed - answer) <= tolerance
        return self._all_or_nothing(question, is_correct, f"within ±{tolerance}" if is_correct else f"outside ±{tolerance}")

    def _score_sequence(self, question: QuestionSpec, submission: Submission) -> Verdict:
        reference = self._require(question, 'sequence_reference')
        if isinstance(submission, str) or not isinstance(submission, (list, tuple)):
            return Verdict(False, 0, "expected an ordered list")

        partial = min(self.config.scoring.sequence_partial_points, question.points)
        score = score_sequence(list(submission), reference, question.points, partial_points=partial)
        explanation = f"{score.correct_count}/{len(reference)} in place"
        if score.swapped_pairs:
            explanation += f", {score.swapped_pairs} adjacent swap(s)"
        return Verdict(score.is_correct, score.points_awarded, explanation)

    def _score_text(self, question: QuestionSpec, submission: Submission) -> Verdict:
        expected = self._require(question, 'correct_answer')
        if not isinstance(submission, str):
            return Verdict(False, 0, "expected a single answer")

        result = self.matcher.match_result(submission, expected)
        return self._all_or_nothing(question, result.is_match, f"fuzzy match decided at {result.stage.value}")

    @staticmethod
    def _all_or_nothing(question: QuestionSpec, is_correct: bool, explanation: str) -> Verdict:
        return Verdict(is_correct, question.points if is_correct else 0, explanation)

    @staticmethod
    def _require(question: QuestionSpec, field_name: str) -> Any:
        value = getattr(question, field_name)
        if value is None or (isinstance(value, (str, tuple)) and len(value) == 0):
            raise InvalidQuestionSpec(
                f"{question.type.value} question has no {field_name}",
                question_type=question.type.value, field_name=field_name
            )
        return value


def evaluate(question: QuestionSpec, submission: Submission,
             config: Optional[AppConfig] = None) -> Verdict:
    """Evaluate one submission with a freshly built evaluator."""
    return AnswerEvaluator(config=config).evaluate(question, submission)
