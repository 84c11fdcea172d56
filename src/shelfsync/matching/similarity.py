# ABOUTME: Edit-distance similarity between two normalized strings.
# ABOUTME: Returns a bounded score in [0.0, 1.0] derived from Levenshtein distance.

from rapidfuzz.distance import Levenshtein


def levenshtein_distance(a: str, b: str) -> int:
    """Classic edit distance with unit cost for insert, delete and substitute."""
    return Levenshtein.distance(a, b)


def similarity(a: str, b: str) -> float:
    """Score how similar two strings are.

    Exact (case-sensitive) equality short-circuits to 1.0 before the
    empty-string check, so two empty strings are identical. Otherwise the
    distance is computed on lowercased text and scaled by the longer of the
    two original lengths.
    """
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0

    distance = levenshtein_distance(a.lower(), b.lower())
    max_length = max(len(a), len(b))
    return max(0.0, 1.0 - distance / max_length)
