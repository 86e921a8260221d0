"""Data models for similarity clustering."""

from dataclasses import dataclass
from typing import Any

from shelfmerge.errors import ValidationError

__all__ = ["SimilarityEdge", "Cluster", "ClusteringConfig", "DEFAULT_THRESHOLD"]

DEFAULT_THRESHOLD = 0.85


@dataclass(frozen=True, slots=True)
class SimilarityEdge:
    """Undirected similarity link between two entities.

    Attributes
    ----------
    a_id : int
        Smaller entity id.
    b_id : int
        Larger entity id.
    similarity : float
        Jaro-Winkler similarity of the comparison keys, in [0, 1].
    """

    a_id: int
    b_id: int
    similarity: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"a_id": self.a_id, "b_id": self.b_id, "similarity": self.similarity}


@dataclass(frozen=True, slots=True)
class Cluster:
    """Transitively linked group of likely-same entities.

    Attributes
    ----------
    member_ids : tuple[int, ...]
        Entity ids in the cluster, ascending; at least two.
    edges : tuple[SimilarityEdge, ...]
        Edges at or above the threshold that linked the members.
    """

    member_ids: tuple[int, ...]
    edges: tuple[SimilarityEdge, ...]

    @property
    def size(self) -> int:
        """Number of members."""
        return len(self.member_ids)

    def similarity_between(self, a_id: int, b_id: int) -> float | None:
        """Similarity of a direct edge, or None when not directly linked."""
        lo, hi = min(a_id, b_id), max(a_id, b_id)
        for edge in self.edges:
            if edge.a_id == lo and edge.b_id == hi:
                return edge.similarity
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "member_ids": list(self.member_ids),
            "edges": [edge.to_dict() for edge in self.edges],
        }


@dataclass(frozen=True)
class ClusteringConfig:
    """Configuration for similarity clustering.

    Attributes
    ----------
    threshold : float
        Minimum similarity for two entities to be linked, by default 0.85.
    prebucket : bool
        Only compare keys sharing a first character, by default False.
        Trades recall for speed on very large catalogs.
    """

    threshold: float = DEFAULT_THRESHOLD
    prebucket: bool = False

    def __post_init__(self) -> None:
        """Validate threshold range."""
        if not 0.0 <= self.threshold <= 1.0:
            raise ValidationError(f"threshold must be in [0, 1], got {self.threshold}")
