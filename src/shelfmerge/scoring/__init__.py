"""Pattern classification and confidence scoring."""

from shelfmerge.scoring.confidence import (
    adjust_confidence,
    cluster_confidence,
    score_pair,
)
from shelfmerge.scoring.patterns import (
    AbbreviationAlignment,
    VariantPattern,
    align_abbreviation,
    classify_entities,
    classify_pattern,
)
from shelfmerge.scoring.phonetics import phonetic_skeleton

__all__ = [
    "AbbreviationAlignment",
    "VariantPattern",
    "adjust_confidence",
    "align_abbreviation",
    "classify_entities",
    "classify_pattern",
    "cluster_confidence",
    "phonetic_skeleton",
    "score_pair",
]
