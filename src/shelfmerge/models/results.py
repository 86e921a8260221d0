"""Report types produced by scoring, the orchestrator and the merge engine.

All types here are immutable reports; none of them is persisted.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any

from shelfmerge.models.entities import EntityKind

__all__ = [
    "VariantPattern",
    "PairScore",
    "DuplicateGroup",
    "MergeStats",
    "FailedGroup",
    "DeduplicationResult",
]


class VariantPattern(StrEnum):
    """Relationship between a duplicate and its primary.

    Attributes
    ----------
    ABBREVIATION : str
        Initials versus spelled-out name ("J.R.R. Tolkien").
    PREFIX : str
        Extra leading token(s) ("The Dark Tower" / "Dark Tower").
    SUFFIX : str
        Extra trailing token(s) ("Harry Potter Series" / "Harry Potter").
    COMPOUND : str
        Same tokens, different order ("Tolkien John" / "John Tolkien").
    TRANSLITERATION : str
        Phonetic spelling variant ("Dostoevsky" / "Dostoyevskiy").
    TYPO : str
        Small edit distance without structure.
    OTHER : str
        Unclassified.
    """

    ABBREVIATION = "abbreviation"
    PREFIX = "prefix"
    SUFFIX = "suffix"
    COMPOUND = "compound"
    TRANSLITERATION = "transliteration"
    TYPO = "typo"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class PairScore:
    """Confidence judgement for one (primary, duplicate) pair.

    Attributes
    ----------
    primary_id : int
        Primary entity id.
    duplicate_id : int
        Duplicate entity id.
    similarity : float
        Raw Jaro-Winkler similarity of the comparison keys.
    pattern : VariantPattern
        Classified variant relationship.
    initials_match : bool
        Whether an abbreviation lined up with the full name's initials.
    edit_distance : int
        Levenshtein distance used for the penalty.
    confidence : float
        Final confidence in [0, 1].
    """

    primary_id: int
    duplicate_id: int
    similarity: float
    pattern: VariantPattern
    initials_match: bool
    edit_distance: int
    confidence: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "primary_id": self.primary_id,
            "duplicate_id": self.duplicate_id,
            "similarity": self.similarity,
            "pattern": self.pattern.value,
            "initials_match": self.initials_match,
            "edit_distance": self.edit_distance,
            "confidence": self.confidence,
        }


@dataclass(frozen=True, slots=True)
class DuplicateGroup:
    """A cluster accepted for merge, with its surviving primary.

    Attributes
    ----------
    kind : EntityKind
        Entity kind of every member.
    primary_id : int
        Surviving record.
    primary_display_text : str
        Stored name of the primary.
    duplicate_ids : tuple[int, ...]
        Records to eliminate, sorted; never contains ``primary_id``.
    duplicate_display_texts : tuple[str, ...]
        Stored names aligned with ``duplicate_ids``.
    confidence : float
        Weakest-link cluster confidence.
    edge_count : int
        Similarity edges that linked the cluster.
    scores : tuple[PairScore, ...]
        Per-duplicate scores against the primary.
    """

    kind: EntityKind
    primary_id: int
    primary_display_text: str
    duplicate_ids: tuple[int, ...]
    duplicate_display_texts: tuple[str, ...]
    confidence: float
    edge_count: int
    scores: tuple[PairScore, ...] = ()

    @property
    def member_ids(self) -> tuple[int, ...]:
        """Primary followed by duplicates."""
        return (self.primary_id, *self.duplicate_ids)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "kind": self.kind.value,
            "primary_id": self.primary_id,
            "primary_display_text": self.primary_display_text,
            "duplicate_ids": list(self.duplicate_ids),
            "duplicate_display_texts": list(self.duplicate_display_texts),
            "confidence": self.confidence,
            "edge_count": self.edge_count,
            "scores": [score.to_dict() for score in self.scores],
        }


@dataclass(frozen=True)
class MergeStats:
    """Outcome of one committed merge transaction.

    Attributes
    ----------
    kind : EntityKind
        Merged entity kind.
    primary_id : int
        Surviving record.
    merged_ids : tuple[int, ...]
        Eliminated records, in the order they were merged.
    rows_updated_by_table : Mapping[str, int]
        Referencing table -> rows rewritten to the primary. Read-only.
    rows_collapsed_by_table : Mapping[str, int]
        Junction table -> rows dropped because they duplicated an
        existing primary row.
    """

    kind: EntityKind
    primary_id: int
    merged_ids: tuple[int, ...]
    rows_updated_by_table: Mapping[str, int] = field(default_factory=dict)
    rows_collapsed_by_table: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Read-only copies
        for name in ("rows_updated_by_table", "rows_collapsed_by_table"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    @property
    def total_rows_updated(self) -> int:
        """Sum of rewritten rows over all tables."""
        return sum(self.rows_updated_by_table.values())

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "kind": self.kind.value,
            "primary_id": self.primary_id,
            "merged_ids": list(self.merged_ids),
            "rows_updated_by_table": dict(self.rows_updated_by_table),
            "rows_collapsed_by_table": dict(self.rows_collapsed_by_table),
        }


@dataclass(frozen=True, slots=True)
class FailedGroup:
    """A group whose merge was rolled back.

    Attributes
    ----------
    group : DuplicateGroup
        The group that failed.
    reason : str
        Error message.
    error_type : str
        Exception class name (e.g. "NotFoundError").
    """

    group: DuplicateGroup
    reason: str
    error_type: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "group": self.group.to_dict(),
            "reason": self.reason,
            "error_type": self.error_type,
        }


@dataclass
class DeduplicationResult:
    """Aggregate report of one deduplication run for one entity kind.

    Attributes
    ----------
    kind : EntityKind
        Entity kind processed.
    total_entities_considered : int
        Entities handed to the run, including excluded ones.
    duplicate_groups : list[DuplicateGroup]
        Groups that passed the confidence and frequency filters.
    merge_stats : list[MergeStats] | None
        Committed merges; None when no merge was attempted.
    skipped_low_confidence_count : int
        Clusters below ``min_confidence``.
    skipped_low_frequency_count : int
        Clusters linked by fewer than ``min_frequency`` edges.
    excluded_entity_ids : list[int]
        Entities whose display text produced an empty key.
    failed_groups : list[FailedGroup]
        Groups whose merge failed and was rolled back.
    dry_run : bool
        True when storage was not touched.
    """

    kind: EntityKind
    total_entities_considered: int
    duplicate_groups: list[DuplicateGroup] = field(default_factory=list)
    merge_stats: list[MergeStats] | None = None
    skipped_low_confidence_count: int = 0
    skipped_low_frequency_count: int = 0
    excluded_entity_ids: list[int] = field(default_factory=list)
    failed_groups: list[FailedGroup] = field(default_factory=list)
    dry_run: bool = True

    @property
    def merged_count(self) -> int:
        """Number of groups merged successfully."""
        return len(self.merge_stats) if self.merge_stats else 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "kind": self.kind.value,
            "total_entities_considered": self.total_entities_considered,
            "duplicate_groups": [group.to_dict() for group in self.duplicate_groups],
            "merge_stats": (
                [stats.to_dict() for stats in self.merge_stats]
                if self.merge_stats is not None
                else None
            ),
            "skipped_low_confidence_count": self.skipped_low_confidence_count,
            "skipped_low_frequency_count": self.skipped_low_frequency_count,
            "excluded_entity_ids": list(self.excluded_entity_ids),
            "failed_groups": [failed.to_dict() for failed in self.failed_groups],
            "dry_run": self.dry_run,
        }
