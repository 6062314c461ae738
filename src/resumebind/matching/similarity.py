"""String similarity used to score placeholder/field pairs."""

from typing import Callable

SimilarityFn = Callable[[str, str], float]


def _forward_matches(first: str, second: str) -> int:
    """
    Count characters of ``first`` matched in order against ``second``.

    Each character of ``first`` consumes the next unused occurrence in
    ``second``; characters with no remaining occurrence are skipped.
    """
    matches = 0
    position = 0

    for char in first:
        found = second.find(char, position)
        if found != -1:
            matches += 1
            position = found + 1

    return matches


def string_similarity(first: str, second: str) -> float:
    """
    Calculate a case-insensitive similarity score between two strings.

    The score is ``2 * matches / (len1 + len2)`` where ``matches`` is the
    greedy in-order character match count, taken in whichever scan direction
    matches more so the measure is symmetric.

    Returns:
        Score from 0.0 to 1.0, where 1.0 is an exact match
    """
    first = first.lower()
    second = second.lower()

    if not first and not second:
        return 1.0
    if not first or not second:
        return 0.0
    if first == second:
        return 1.0

    matches = max(_forward_matches(first, second), _forward_matches(second, first))
    return 2 * matches / (len(first) + len(second))
