"""Deduplication configuration."""

from dataclasses import asdict, dataclass
from typing import Any

from shelfmerge.clustering.models import DEFAULT_THRESHOLD, ClusteringConfig
from shelfmerge.errors import ValidationError
from shelfmerge.models import EntityKind

__all__ = ["DeduplicationConfig", "DEFAULT_MIN_CONFIDENCE", "DEFAULT_MIN_FREQUENCY"]

# Person names carry more accidental near-matches than titles.
DEFAULT_MIN_CONFIDENCE: dict[EntityKind, float] = {
    EntityKind.PERSON: 0.90,
    EntityKind.PUBLISHER: 0.85,
    EntityKind.SERIES: 0.85,
    EntityKind.TAG: 0.85,
    EntityKind.ROLE: 0.85,
}

DEFAULT_MIN_FREQUENCY = 1


@dataclass
class DeduplicationConfig:
    """Configuration for one deduplication run.

    Dry run is the default: nothing is written unless ``auto_merge`` is set
    **and** ``dry_run`` is cleared.

    Attributes
    ----------
    min_confidence : float
        Minimum cluster confidence to accept a group (default: 0.90).
    min_frequency : int
        Minimum number of similarity edges linking a cluster (default: 1).
    auto_merge : bool
        Merge accepted groups (default: False).
    dry_run : bool
        Report only, never touch storage (default: True).
    threshold : float
        Similarity threshold for clustering (default: 0.85).
    prebucket : bool
        Only compare keys sharing a first character (default: False).
    """

    min_confidence: float = DEFAULT_MIN_CONFIDENCE[EntityKind.PERSON]
    min_frequency: int = DEFAULT_MIN_FREQUENCY
    auto_merge: bool = False
    dry_run: bool = True
    threshold: float = DEFAULT_THRESHOLD
    prebucket: bool = False

    def __post_init__(self) -> None:
        """Validate ranges."""
        if not 0.0 <= self.min_confidence <= 1.0:
            raise ValidationError(
                f"min_confidence must be in [0, 1], got {self.min_confidence}"
            )

        if self.min_frequency < 0:
            raise ValidationError(f"min_frequency must be >= 0, got {self.min_frequency}")

        if not 0.0 <= self.threshold <= 1.0:
            raise ValidationError(f"threshold must be in [0, 1], got {self.threshold}")

    @classmethod
    def for_kind(cls, kind: EntityKind, **overrides: Any) -> "DeduplicationConfig":
        """Build a config with the kind's default confidence.

        Parameters
        ----------
        kind : EntityKind
            Entity kind to deduplicate.
        **overrides : Any
            Explicit field values; ``None`` values are ignored.

        Returns
        -------
        DeduplicationConfig
            Validated configuration.
        """
        values = {key: value for key, value in overrides.items() if value is not None}
        values.setdefault("min_confidence", DEFAULT_MIN_CONFIDENCE[EntityKind(kind)])
        return cls(**values)

    @property
    def merges_enabled(self) -> bool:
        """Whether this run may write to storage."""
        return self.auto_merge and not self.dry_run

    def clustering_config(self) -> ClusteringConfig:
        """Clustering options derived from this config."""
        return ClusteringConfig(threshold=self.threshold, prebucket=self.prebucket)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)
