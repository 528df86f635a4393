"""
Sequence Scoring

Scores an ordered list answer against the reference order. A perfect
order earns full points; a single adjacent swap with everything else in
place earns a flat consolation point.
"""

from dataclasses import dataclass
from typing import Sequence

PARTIAL_CREDIT_POINTS = 1


@dataclass(frozen=True)
class SequenceScore:
    """Outcome of comparing a submitted order to the reference order."""
    is_correct: bool
    points_awarded: int
    correct_count: int
    swapped_pairs: int


def score_sequence(submitted: Sequence[str], reference: Sequence[str], points: int,
                   partial_points: int = PARTIAL_CREDIT_POINTS) -> SequenceScore:
    """
    Score a submitted ordering.

    Items are compared with exact string equality; extra submitted items
    beyond the reference length are ignored.

    Args:
        submitted: Items in the order the team gave them
        reference: Items in the correct order
        points: Points for a fully correct order
        partial_points: Flat points for a single adjacent swap

    Returns:
        SequenceScore with the verdict and the position counts behind it
    """
    n = min(len(submitted), len(reference))

    correct_count = sum(1 for i in range(n) if submitted[i] == reference[i])
    swapped_pairs = sum(
        1 for i in range(n - 1)
        if reference[i] == submitted[i + 1] and reference[i + 1] == submitted[i]
    )

    if correct_count == len(reference):
        return SequenceScore(True, points, correct_count, swapped_pairs)

    if correct_count == len(reference) - 2 and swapped_pairs == 1:
        return SequenceScore(True, partial_points, correct_count, swapped_pairs)

    return SequenceScore(False, 0, correct_count, swapped_pairs)
