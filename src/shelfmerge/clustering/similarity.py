"""String similarity between comparison keys.

Pure, deterministic functions; safe to call from parallel workers.
"""

from rapidfuzz.distance import JaroWinkler, Levenshtein

__all__ = ["similarity", "edit_distance", "length_ratio"]


def similarity(key_a: str, key_b: str) -> float:
    """Jaro-Winkler similarity of two keys.

    The pair is ordered before scoring so that
    ``similarity(a, b) == similarity(b, a)`` holds exactly.

    Parameters
    ----------
    key_a : str
        First comparison key.
    key_b : str
        Second comparison key.

    Returns
    -------
    float
        Similarity in [0, 1]; 1.0 for identical keys, 0.0 when either key
        is empty and the other is not.
    """
    if key_a == key_b:
        return 1.0
    first, second = sorted((key_a, key_b))
    return float(JaroWinkler.similarity(first, second, prefix_weight=0.1))


def edit_distance(key_a: str, key_b: str) -> int:
    """Levenshtein distance between two keys."""
    return int(Levenshtein.distance(key_a, key_b))


def length_ratio(key_a: str, key_b: str) -> float:
    """Shorter length over longer length, 1.0 for two empty keys."""
    longest = max(len(key_a), len(key_b))
    if longest == 0:
        return 1.0
    return min(len(key_a), len(key_b)) / longest
