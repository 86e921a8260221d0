"""Primary (surviving record) selection for a duplicate cluster."""

from collections.abc import Sequence

from shelfmerge.models import EntityRecord

__all__ = ["select_primary"]


def select_primary(members: Sequence[EntityRecord]) -> EntityRecord:
    """Select the record that survives a merge.

    Selection is based on lexicographic tuple ranking:
    1. spelled out (no one-letter initials) before abbreviated
    2. longer display text before shorter
    3. tie-breaker: smallest id

    Parameters
    ----------
    members : Sequence[EntityRecord]
        Cluster members.

    Returns
    -------
    EntityRecord
        Primary record.

    Raises
    ------
    ValueError
        If members is empty.
    """
    if not members:
        raise ValueError("Cannot select primary from empty cluster")

    def ranking_key(entity: EntityRecord) -> tuple[bool, int, int]:
        """Compute ranking key for primary selection."""
        return (
            entity.is_abbreviated,  # False (spelled out) comes first
            -len(entity.display_text.strip()),
            entity.id,
        )

    return min(members, key=ranking_key)
