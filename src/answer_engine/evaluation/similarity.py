"""
String Similarity Primitives

Levenshtein edit distance and Jaro-Winkler similarity. Both operate on
Unicode code points and are case-sensitive; callers lower-case first.
"""

from rapidfuzz.distance import Levenshtein

WINKLER_PREFIX_WEIGHT = 0.1
WINKLER_MAX_PREFIX = 4


def levenshtein_distance(a: str, b: str) -> int:
    """
    Minimum number of single-character insertions, deletions and
    substitutions needed to turn ``a`` into ``b``.
    """
    return Levenshtein.distance(a, b)


def levenshtein_similarity(a: str, b: str) -> float:
    """
    Edit-distance similarity in [0.0, 1.0].

    Two empty strings are identical (1.0); an empty string against a
    non-empty one scores 0.0.
    """
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    if not a or not b:
        return 0.0
    return 1.0 - levenshtein_distance(a, b) / longest


def jaro_winkler_similarity(a: str, b: str) -> float:
    """
    Jaro-Winkler similarity in [0.0, 1.0].

    Characters of ``a`` are matched greedily, left to right, against the
    first unmatched equal character of ``b`` inside the match window.
    The Jaro score is then boosted by 0.1 per shared leading character,
    up to four, whatever the Jaro score.

    Args:
        a: First string
        b: Second string

    Returns:
        Similarity score, 1.0 for identical strings
    """
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0

    window = max(len(a), len(b)) // 2 - 1
    if window < 0:
        return 0.0

    a_matched = [False] * len(a)
    b_matched = [False] * len(b)
    matches = 0

    for i, char in enumerate(a):
        start = max(0, i - window)
        end = min(i + window + 1, len(b))
        for j in range(start, end):
            if b_matched[j] or b[j] != char:
                continue
            a_matched[i] = True
            b_matched[j] = True
            matches += 1
            break

    if matches == 0:
        return 0.0

    transpositions = 0
    k = 0
    for i, char in enumerate(a):
        if not a_matched[i]:
            continue
        while not b_matched[k]:
            k += 1
        if char != b[k]:
            transpositions += 1
        k += 1

    jaro = (
        matches / len(a)
        + matches / len(b)
        + (matches - transpositions / 2) / matches
    ) / 3

    prefix = 0
    for char_a, char_b in zip(a[:WINKLER_MAX_PREFIX], b[:WINKLER_MAX_PREFIX]):
        if char_a != char_b:
            break
        prefix += 1

    return jaro + prefix * WINKLER_PREFIX_WEIGHT * (1 - jaro)
