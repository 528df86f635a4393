"""
Unit tests for the answer evaluator.
"""

from decimal import Decimal

import pytest

from answer_engine.core.exceptions import InvalidQuestionSpec, UnparsableNumericAnswer, ValidationError
from answer_engine.evaluation.grader import (
    QuestionSpec,
    QuestionType,
    Verdict,
    evaluate,
    parse_numeric_submission,
)


class TestQuestionSpec:
    """Test cases for QuestionSpec construction."""

    def test_type_accepts_string(self):
        question = QuestionSpec(type="open_text", correct_answer="Paris")
        assert question.type is QuestionType.OPEN_TEXT

    def test_unknown_type(self):
        with pytest.raises(InvalidQuestionSpec) as exc_info:
            QuestionSpec(type="essay")
        assert exc_info.value.field_name == 'type'

    @pytest.mark.parametrize("points", [0, -1, True, 1.5])
    def test_points_must_be_positive_integer(self, points):
        with pytest.raises(InvalidQuestionSpec):
            QuestionSpec(type=QuestionType.MULTIPLE_CHOICE, correct_answer="A", points=points)

    def test_numeric_fields_become_decimals(self):
        question = QuestionSpec(type=QuestionType.NUMERICAL, numeric_answer=0.1, numeric_tolerance="0.05")
        assert question.numeric_answer == Decimal("0.1")
        assert question.numeric_tolerance == Decimal("0.05")

    @pytest.mark.parametrize("value", ["abc", "NaN", "Infinity"])
    def test_numeric_answer_must_be_finite_number(self, value):
        with pytest.raises(InvalidQuestionSpec):
            QuestionSpec(type=QuestionType.NUMERICAL, numeric_answer=value)

    def test_negative_scale_rejected(self):
        with pytest.raises(InvalidQuestionSpec):
            QuestionSpec(type=QuestionType.NUMERICAL, numeric_answer=1, numeric_scale=-1)

    def test_sequence_reference_must_be_a_list(self):
        with pytest.raises(InvalidQuestionSpec):
            QuestionSpec(type=QuestionType.SEQUENCE, sequence_reference="ABC")

    def test_sequence_reference_is_frozen(self):
        question = QuestionSpec(type=QuestionType.SEQUENCE, sequence_reference=["A", "B"])
        assert question.sequence_reference == ("A", "B")

    def test_from_dict_accepts_backend_column_names(self):
        question = QuestionSpec.from_dict({
            'type': 'numerical',
            'numerical_answer': '12.5',
            'numerical_tolerance': 0.5,
            'points': None,
        })

        assert question.numeric_answer == Decimal("12.5")
        assert question.numeric_tolerance == Decimal("0.5")
        assert question.points == 1

    def test_from_dict_sequence_items(self):
        question = QuestionSpec.from_dict({'type': 'sequence', 'sequence_items': ['A', 'B'], 'points': 3})
        assert question.sequence_reference == ('A', 'B')
        assert question.points == 3

    def test_from_dict_requires_type(self):
        with pytest.raises(InvalidQuestionSpec):
            QuestionSpec.from_dict({'correct_answer': 'Paris'})

    def test_from_dict_zero_points_rejected(self):
        with pytest.raises(InvalidQuestionSpec) as exc_info:
            QuestionSpec.from_dict({'type': 'multiple_choice', 'correct_answer': 'A', 'points': 0})
        assert exc_info.value.field_name == 'points'


class TestParseNumericSubmission:
    """Test cases for parse_numeric_submission."""

    @pytest.mark.parametrize("text,expected", [
        ("15", "15"),
        ("015", "15"),
        ("15.0", "15"),
        ("15,5", "15.5"),
        (" -3.25 ", "-3.25"),
        ("1 000", "1000"),
    ])
    def test_parses(self, text, expected):
        assert parse_numeric_submission(text) == Decimal(expected)

    def test_rounds_to_scale(self):
        assert parse_numeric_submission("2.71828", scale=2) == Decimal("2.72")
        assert parse_numeric_submission("2.5", scale=0) == Decimal("3")

    @pytest.mark.parametrize("text", ["", "   ", "abc", "12abc", "1,000.5.0", "NaN", "inf", None])
    def test_rejects(self, text):
        with pytest.raises(UnparsableNumericAnswer):
            parse_numeric_submission(text)

    def test_out_of_range_for_scale(self):
        with pytest.raises(UnparsableNumericAnswer):
            parse_numeric_submission("1e100", scale=4)


class TestAnswerEvaluator:
    """Test cases for AnswerEvaluator dispatch."""

    def test_multiple_choice_is_case_insensitive(self, evaluator):
        question = QuestionSpec(type=QuestionType.MULTIPLE_CHOICE, correct_answer="Paris", points=3)

        assert evaluator.evaluate(question, "paris") == Verdict(True, 3, "exact choice")
        assert evaluator.evaluate(question, "  PARIS ").is_correct is True

    def test_multiple_choice_never_fuzzy(self, evaluator):
        question = QuestionSpec(type=QuestionType.MULTIPLE_CHOICE, correct_answer="Amsterdam")
        verdict = evaluator.evaluate(question, "Amsterdm")

        assert verdict.is_correct is False
        assert verdict.points_awarded == 0

    def test_true_false(self, evaluator):
        question = QuestionSpec(type=QuestionType.TRUE_FALSE, correct_answer="True", points=2)

        assert evaluator.evaluate(question, "true").points_awarded == 2
        assert evaluator.evaluate(question, "false").points_awarded == 0

    def test_choice_rejects_list_submission(self, evaluator):
        question = QuestionSpec(type=QuestionType.MULTIPLE_CHOICE, correct_answer="A")
        assert evaluator.evaluate(question, ["A"]).is_correct is False

    @pytest.mark.parametrize("submission,is_correct", [
        ("100", True),
        ("105", True),
        ("95", True),
        ("106", False),
        ("94", False),
        ("100,0", True),
        ("abc", False),
        ("", False),
        ("1e100", False),
    ])
    def test_numerical_tolerance_is_inclusive(self, evaluator, submission, is_correct):
        question = QuestionSpec(type=QuestionType.NUMERICAL, numeric_answer=100, numeric_tolerance=5, points=2)
        verdict = evaluator.evaluate(question, submission)

        assert verdict.is_correct is is_correct
        assert verdict.points_awarded == (2 if is_correct else 0)

    def test_numerical_decimal_tolerance(self, evaluator):
        question = QuestionSpec(type=QuestionType.NUMERICAL, numeric_answer="3.14", numeric_tolerance="0.01")

        assert evaluator.evaluate(question, "3.15").is_correct is True
        assert evaluator.evaluate(question, "3,13").is_correct is True
        assert evaluator.evaluate(question, "3.16").is_correct is False

    def test_numerical_without_tolerance_is_exact(self, evaluator):
        question = QuestionSpec(type=QuestionType.NUMERICAL, numeric_answer=42)

        assert evaluator.evaluate(question, "42.0").is_correct is True
        assert evaluator.evaluate(question, "42.5").is_correct is False

    def test_numerical_uses_default_scale(self, evaluator):
        question = QuestionSpec(type=QuestionType.NUMERICAL, numeric_answer=10)

        assert evaluator.evaluate(question, "10.00004").is_correct is True
        assert evaluator.evaluate(question, "10.0001").is_correct is False

    def test_numerical_question_scale(self, evaluator):
        question = QuestionSpec(type=QuestionType.NUMERICAL, numeric_answer=10, numeric_scale=0)

        assert evaluator.evaluate(question, "10.4").is_correct is True
        assert evaluator.evaluate(question, "10.5").is_correct is False

    def test_numerical_tolerance_finer_than_scale_is_not_widened(self, evaluator):
        question = QuestionSpec(
            type=QuestionType.NUMERICAL, numeric_answer=10, numeric_tolerance="0.5", numeric_scale=0
        )

        assert evaluator.evaluate(question, "10.4").is_correct is True
        assert evaluator.evaluate(question, "11").is_correct is False

    def test_numerical_tolerance_below_default_scale_is_kept(self, evaluator):
        question = QuestionSpec(type=QuestionType.NUMERICAL, numeric_answer=10, numeric_tolerance="0.00005")

        assert evaluator.evaluate(question, "10.00004").is_correct is True
        verdict = evaluator.evaluate(question, "10.0001")
        assert verdict.is_correct is False
        assert verdict.points_awarded == 0

    def test_numerical_list_submission_is_incorrect(self, evaluator):
        question = QuestionSpec(type=QuestionType.NUMERICAL, numeric_answer=1)
        assert evaluator.evaluate(question, ["1"]).is_correct is False

    def test_sequence_partial_credit(self, evaluator):
        question = QuestionSpec(
            type=QuestionType.SEQUENCE,
            sequence_reference=["First", "Second", "Third"],
            points=5,
        )

        verdict = evaluator.evaluate(question, ["Second", "First", "Third"])
        assert verdict.is_correct is True
        assert verdict.points_awarded == 1

        assert evaluator.evaluate(question, ["First", "Second", "Third"]).points_awarded == 5
        assert evaluator.evaluate(question, ["Third", "First", "Second"]).points_awarded == 0

    def test_sequence_accepts_tuple_submission(self, evaluator):
        question = QuestionSpec(type=QuestionType.SEQUENCE, sequence_reference=["A", "B"])
        assert evaluator.evaluate(question, ("A", "B")).is_correct is True

    def test_sequence_rejects_string_submission(self, evaluator):
        question = QuestionSpec(type=QuestionType.SEQUENCE, sequence_reference=["A", "B"])
        assert evaluator.evaluate(question, "A B") == Verdict(False, 0, "expected an ordered list")

    def test_open_text_uses_fuzzy_matching(self, evaluator):
        question = QuestionSpec(type=QuestionType.OPEN_TEXT, correct_answer="Amsterdam", points=2)

        verdict = evaluator.evaluate(question, "Amsterdm")
        assert verdict.is_correct is True
        assert verdict.points_awarded == 2
        assert "final_similarity" in verdict.explanation

        assert evaluator.evaluate(question, "Rotterdam").points_awarded == 0

    @pytest.mark.parametrize("question_type", [QuestionType.IMAGE, QuestionType.AUDIO, QuestionType.VIDEO])
    def test_media_questions_match_like_open_text(self, evaluator, question_type):
        question = QuestionSpec(type=question_type, correct_answer="Eiffel Tower")

        assert evaluator.evaluate(question, "eiffel tower").is_correct is True
        assert evaluator.evaluate(question, "Tower").is_correct is False

    @pytest.mark.parametrize("question,field_name", [
        (QuestionSpec(type=QuestionType.NUMERICAL), 'numeric_answer'),
        (QuestionSpec(type=QuestionType.OPEN_TEXT), 'correct_answer'),
        (QuestionSpec(type=QuestionType.OPEN_TEXT, correct_answer=""), 'correct_answer'),
        (QuestionSpec(type=QuestionType.MULTIPLE_CHOICE), 'correct_answer'),
        (QuestionSpec(type=QuestionType.SEQUENCE), 'sequence_reference'),
        (QuestionSpec(type=QuestionType.SEQUENCE, sequence_reference=[]), 'sequence_reference'),
    ])
    def test_missing_required_field(self, evaluator, question, field_name):
        with pytest.raises(InvalidQuestionSpec) as exc_info:
            evaluator.evaluate(question, "anything")

        assert exc_info.value.field_name == field_name
        assert exc_info.value.question_type == question.type.value

    def test_negative_tolerance(self, evaluator):
        question = QuestionSpec(type=QuestionType.NUMERICAL, numeric_answer=1, numeric_tolerance=-1)
        with pytest.raises(InvalidQuestionSpec):
            evaluator.evaluate(question, "1")

    def test_unscored_type_goes_to_manual_review(self, evaluator):
        del evaluator.scorers[QuestionType.VIDEO]
        question = QuestionSpec(type=QuestionType.VIDEO, correct_answer="Jaws")

        verdict = evaluator.evaluate(question, "Jaws")
        assert verdict.is_correct is None
        assert verdict.points_awarded == 0

    def test_idempotent(self, evaluator):
        question = QuestionSpec(type=QuestionType.OPEN_TEXT, correct_answer="New York")
        assert evaluator.evaluate(question, "New Yrk") == evaluator.evaluate(question, "New Yrk")

    def test_evaluate_batch(self, evaluator):
        items = [
            (QuestionSpec(type=QuestionType.MULTIPLE_CHOICE, correct_answer="Paris"), "paris"),
            (QuestionSpec(type=QuestionType.OPEN_TEXT, correct_answer="Amsterdam"), "Amsterdm"),
            (QuestionSpec(type=QuestionType.SEQUENCE, sequence_reference=["First", "Second", "Third"]),
             ["Second", "First", "Third"]),
            (QuestionSpec(type=QuestionType.NUMERICAL, numeric_answer=7), "seven"),
        ]

        verdicts = evaluator.evaluate_batch(items)
        assert [v.is_correct for v in verdicts] == [True, True, True, False]
        assert [v.points_awarded for v in verdicts] == [1, 1, 1, 0]


class TestManualVerdict:
    """Test cases for AnswerEvaluator.manual_verdict."""

    def setup_method(self):
        self.question = QuestionSpec(type=QuestionType.VIDEO, correct_answer="Jaws", points=3)

    def test_records_decision(self, evaluator):
        assert evaluator.manual_verdict(self.question, True, 2) == Verdict(True, 2, "manual")

    @pytest.mark.parametrize("points", [-1, 4, True, 1.0])
    def test_points_out_of_bounds(self, evaluator, points):
        with pytest.raises(ValidationError) as exc_info:
            evaluator.manual_verdict(self.question, True, points)
        assert exc_info.value.field_name == 'points'


class TestEvaluateFunction:
    """Test cases for the module-level evaluate helper."""

    def test_end_to_end(self, test_config):
        question = QuestionSpec(type=QuestionType.MULTIPLE_CHOICE, correct_answer="Paris", points=4)
        assert evaluate(question, "paris", config=test_config) == Verdict(True, 4, "exact choice")
