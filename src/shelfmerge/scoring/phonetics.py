"""Phonetic skeletons for transliteration matching.

A skeleton keeps the first letter of each token, folds common
transliteration digraphs, collapses doubled letters and drops vowels.
Two spellings with the same skeleton are treated as phonetic variants
("dostoevsky" / "dostoyevsky" -> "dstvsk").
"""

__all__ = ["phonetic_skeleton"]

# Applied in order; longer patterns first.
_FOLDS: tuple[tuple[str, str], ...] = (
    ("tch", "ch"),
    ("sch", "sh"),
    ("kh", "h"),
    ("ph", "f"),
    ("ck", "k"),
    ("gh", "g"),
    ("th", "t"),
    ("dh", "d"),
    ("ou", "u"),
    ("oo", "u"),
    ("ks", "x"),
    ("cz", "ch"),
    ("w", "v"),
    ("q", "k"),
    ("y", "i"),
    ("j", "i"),
)

_VOWELS = frozenset("aeiou")


def _token_skeleton(token: str) -> str:
    for pattern, replacement in _FOLDS:
        token = token.replace(pattern, replacement)

    collapsed: list[str] = []
    for char in token:
        if not collapsed or collapsed[-1] != char:
            collapsed.append(char)

    if not collapsed:
        return ""
    head, tail = collapsed[0], collapsed[1:]
    return head + "".join(c for c in tail if c not in _VOWELS)


def phonetic_skeleton(key: str) -> str:
    """Compute the phonetic skeleton of a comparison key.

    Parameters
    ----------
    key : str
        Canonical key (folded, space separated).

    Returns
    -------
    str
        Space-separated skeletons, one per token.
    """
    return " ".join(_token_skeleton(token) for token in key.split())
