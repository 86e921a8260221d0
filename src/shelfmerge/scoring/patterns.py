"""Classification of the variant relationship between two keys.

Rules are tried in a fixed order and the first match wins:
abbreviation, prefix/suffix, compound, typo, transliteration, other.
"""

from dataclasses import dataclass

from shelfmerge.clustering.similarity import edit_distance, length_ratio
from shelfmerge.models import EntityRecord, VariantPattern
from shelfmerge.normalize._helpers import (
    collapse_whitespace,
    fold_text,
    replace_punctuation,
)
from shelfmerge.scoring.phonetics import phonetic_skeleton

__all__ = [
    "VariantPattern",
    "AbbreviationAlignment",
    "align_abbreviation",
    "classify_pattern",
    "classify_entities",
    "TYPO_MAX_EDITS",
    "TYPO_MIN_LENGTH_RATIO",
]

TYPO_MAX_EDITS = 2
TYPO_MIN_LENGTH_RATIO = 0.8

# Longest run of concatenated initials read as one token ("jrr").
MAX_INITIALS_RUN = 4


@dataclass(frozen=True, slots=True)
class AbbreviationAlignment:
    """Token alignment of an abbreviated key against a full key.

    Attributes
    ----------
    abbreviated_key : str
        Key carrying the initials.
    full_key : str
        Key with the spelled-out tokens.
    abbreviated_positions : int
        Full-key tokens covered by an initial.
    exact_tokens : int
        Tokens equal on both sides.
    """

    abbreviated_key: str
    full_key: str
    abbreviated_positions: int
    exact_tokens: int


def _align(abbrev: list[str], full: list[str]) -> tuple[int, int, int] | None:
    """Walk both token lists; return (abbreviated, exact, runs) or None."""
    j = 0
    abbreviated = exact = runs = 0
    for token in abbrev:
        if j >= len(full):
            return None
        if token == full[j]:
            exact += 1
            j += 1
            continue
        if len(token) == 1 and len(full[j]) > 1 and full[j][0] == token:
            abbreviated += 1
            j += 1
            continue
        n = len(token)
        if (
            1 < n <= MAX_INITIALS_RUN
            and j + n <= len(full)
            and all(full[j + k][0] == token[k] for k in range(n))
        ):
            abbreviated += n
            runs += 1
            j += n
            continue
        return None

    if j != len(full) or abbreviated == 0:
        return None
    return abbreviated, exact, runs


def align_abbreviation(key_a: str, key_b: str) -> AbbreviationAlignment | None:
    """Align two keys as abbreviation and full form, in either direction.

    A position aligns when the tokens are equal, when a one-letter token is
    the initial of the other side's token, or when a short token spells the
    initials of several consecutive tokens ("jrr" / "john ronald reuel").
    Concatenated initials only count alongside at least one exact token,
    otherwise any short word would read as initials.

    Parameters
    ----------
    key_a : str
        First comparison key.
    key_b : str
        Second comparison key.

    Returns
    -------
    AbbreviationAlignment | None
        Alignment, or None when the keys do not line up.

    Examples
    --------
        >>> align_abbreviation("j r r tolkien", "john ronald reuel tolkien").abbreviated_positions
        3
        >>> align_abbreviation("italo calvino", "umberto eco") is None
        True
    """
    if key_a == key_b:
        return None

    tokens_a, tokens_b = key_a.split(), key_b.split()
    for abbrev_key, abbrev, full_key, full in (
        (key_a, tokens_a, key_b, tokens_b),
        (key_b, tokens_b, key_a, tokens_a),
    ):
        aligned = _align(abbrev, full)
        if aligned is None:
            continue
        abbreviated, exact, runs = aligned
        if runs and not exact:
            continue
        return AbbreviationAlignment(
            abbreviated_key=abbrev_key,
            full_key=full_key,
            abbreviated_positions=abbreviated,
            exact_tokens=exact,
        )
    return None


def _affix_pattern(tokens_a: list[str], tokens_b: list[str]) -> VariantPattern | None:
    short, long = sorted((tokens_a, tokens_b), key=len)
    if not short or len(short) == len(long):
        return None
    if long[-len(short) :] == short:
        return VariantPattern.PREFIX
    if long[: len(short)] == short:
        return VariantPattern.SUFFIX
    return None


def classify_pattern(key_a: str, key_b: str) -> VariantPattern:
    """Label the variant relationship between two comparison keys.

    Parameters
    ----------
    key_a : str
        First comparison key.
    key_b : str
        Second comparison key.

    Returns
    -------
    VariantPattern
        First matching pattern; ``OTHER`` when none applies. Identical keys
        classify as ``TYPO`` (the display texts differ only in case, accents
        or punctuation).
    """
    if align_abbreviation(key_a, key_b) is not None:
        return VariantPattern.ABBREVIATION

    tokens_a, tokens_b = key_a.split(), key_b.split()

    affix = _affix_pattern(tokens_a, tokens_b)
    if affix is not None:
        return affix

    if tokens_a != tokens_b and sorted(tokens_a) == sorted(tokens_b):
        return VariantPattern.COMPOUND

    if (
        edit_distance(key_a, key_b) <= TYPO_MAX_EDITS
        and length_ratio(key_a, key_b) >= TYPO_MIN_LENGTH_RATIO
    ):
        return VariantPattern.TYPO

    if key_a and phonetic_skeleton(key_a) == phonetic_skeleton(key_b):
        return VariantPattern.TRANSLITERATION

    return VariantPattern.OTHER


def _surface_tokens(text: str) -> list[str]:
    """Display text folded like a key, but in stored word order."""
    return collapse_whitespace(replace_punctuation(fold_text(text), " ")).split()


def classify_entities(a: EntityRecord, b: EntityRecord) -> VariantPattern:
    """Classify two entities, seeing through key-level name reordering.

    Canonicalization already turns "King, Stephen" into "stephen king", so
    two such records have equal keys. When the stored word order differs
    the pair is reported as ``COMPOUND`` rather than a zero-distance typo.
    """
    if a.canonical_key == b.canonical_key:
        surface_a = _surface_tokens(a.display_text)
        surface_b = _surface_tokens(b.display_text)
        if surface_a != surface_b and sorted(surface_a) == sorted(surface_b):
            return VariantPattern.COMPOUND
    return classify_pattern(a.canonical_key, b.canonical_key)
