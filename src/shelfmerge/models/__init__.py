"""Core data types for deduplication runs."""

from shelfmerge.models.entities import EntityKind, EntityRecord, PersonFields
from shelfmerge.models.results import (
    DeduplicationResult,
    DuplicateGroup,
    FailedGroup,
    MergeStats,
    PairScore,
    VariantPattern,
)

__all__ = [
    "EntityKind",
    "EntityRecord",
    "PersonFields",
    "VariantPattern",
    "PairScore",
    "DuplicateGroup",
    "MergeStats",
    "FailedGroup",
    "DeduplicationResult",
]
