"""Confidence scoring for duplicate candidates.

A pair's confidence starts at the raw Jaro-Winkler similarity and is
adjusted by the classified pattern and structural differences. A cluster
is only as trustworthy as its weakest pair.
"""

import math
from collections.abc import Iterable

from shelfmerge.clustering.similarity import edit_distance, similarity
from shelfmerge.errors import DataIntegrityError
from shelfmerge.models import EntityRecord, PairScore, VariantPattern
from shelfmerge.scoring.patterns import align_abbreviation, classify_entities

__all__ = [
    "INITIALS_BONUS",
    "EDIT_DISTANCE_PENALTY",
    "EDIT_DISTANCE_LIMIT",
    "LENGTH_PENALTY",
    "LENGTH_DIFF_LIMIT",
    "adjust_confidence",
    "score_pair",
    "cluster_confidence",
]

INITIALS_BONUS = 0.05
EDIT_DISTANCE_PENALTY = 0.05
EDIT_DISTANCE_LIMIT = 3
LENGTH_PENALTY = 0.10
LENGTH_DIFF_LIMIT = 0.5


def _length_difference(key_a: str, key_b: str) -> float:
    longest = max(len(key_a), len(key_b))
    if longest == 0:
        return 0.0
    return abs(len(key_a) - len(key_b)) / longest


def adjust_confidence(
    base: float,
    pattern: VariantPattern,
    *,
    initials_match: bool,
    distance: int,
    length_difference: float,
) -> float:
    """Apply pattern bonus and structural penalties to a similarity.

    Parameters
    ----------
    base : float
        Raw similarity in [0, 1].
    pattern : VariantPattern
        Classified relationship.
    initials_match : bool
        Whether abbreviated tokens lined up with the full name's initials.
    distance : int
        Edit distance between the keys.
    length_difference : float
        ``|len(a) - len(b)| / max(len(a), len(b))``.

    Returns
    -------
    float
        Confidence clamped to [0, 1].

    Raises
    ------
    DataIntegrityError
        If the result is not a finite number.
    """
    value = base
    if pattern is VariantPattern.ABBREVIATION and initials_match:
        value += INITIALS_BONUS
    if distance > EDIT_DISTANCE_LIMIT:
        value -= EDIT_DISTANCE_PENALTY
    if length_difference > LENGTH_DIFF_LIMIT:
        value -= LENGTH_PENALTY

    if not math.isfinite(value):
        raise DataIntegrityError(f"Confidence is not a finite number: {value!r}")
    return min(1.0, max(0.0, value))


def score_pair(
    primary: EntityRecord,
    duplicate: EntityRecord,
    similarity_value: float | None = None,
) -> PairScore:
    """Score how likely ``duplicate`` denotes the same thing as ``primary``.

    Parameters
    ----------
    primary : EntityRecord
        Surviving entity.
    duplicate : EntityRecord
        Candidate duplicate.
    similarity_value : float | None, optional
        Precomputed similarity of the keys. Computed when None.

    Returns
    -------
    PairScore
        Pattern, penalty inputs and final confidence.
    """
    key_p, key_d = primary.canonical_key, duplicate.canonical_key
    if similarity_value is None:
        similarity_value = similarity(key_p, key_d)

    pattern = classify_entities(primary, duplicate)
    initials_match = (
        pattern is VariantPattern.ABBREVIATION and align_abbreviation(key_p, key_d) is not None
    )
    distance = edit_distance(key_p, key_d)

    confidence = adjust_confidence(
        similarity_value,
        pattern,
        initials_match=initials_match,
        distance=distance,
        length_difference=_length_difference(key_p, key_d),
    )
    return PairScore(
        primary_id=primary.id,
        duplicate_id=duplicate.id,
        similarity=similarity_value,
        pattern=pattern,
        initials_match=initials_match,
        edit_distance=distance,
        confidence=confidence,
    )


def cluster_confidence(scores: Iterable[PairScore]) -> float:
    """Weakest-link confidence of a cluster.

    Parameters
    ----------
    scores : Iterable[PairScore]
        Pair scores of every duplicate against the primary.

    Returns
    -------
    float
        Minimum pair confidence.

    Raises
    ------
    DataIntegrityError
        If ``scores`` is empty.
    """
    values = [score.confidence for score in scores]
    if not values:
        raise DataIntegrityError("Cannot score a cluster without pairs")
    return min(values)
