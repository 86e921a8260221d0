"""Deduplication orchestrator.

Chains the components into one deterministic run for one entity kind:

    canonical entities -> clusters -> primary + pair scores
    -> confidence / frequency filters -> invariant checks
    -> (optional) one merge transaction per accepted group

Nothing is written unless ``auto_merge`` is set and ``dry_run`` is
cleared. A failing group is rolled back and recorded; the run goes on.
"""

import math
from collections.abc import Iterable, Mapping, Sequence
from typing import Protocol

from shelfmerge.audit.logger import AuditLogger
from shelfmerge.clustering import Cluster, build_clusters
from shelfmerge.engine.config import DeduplicationConfig
from shelfmerge.engine.primary import select_primary
from shelfmerge.errors import DataIntegrityError, MergeError, ValidationError
from shelfmerge.models import (
    DeduplicationResult,
    DuplicateGroup,
    EntityKind,
    EntityRecord,
    FailedGroup,
    MergeStats,
)
from shelfmerge.reporting import Reporter, SilentReporter
from shelfmerge.scoring import cluster_confidence, score_pair

__all__ = ["Merger", "run", "evaluate_cluster"]


class Merger(Protocol):
    """Anything that can merge one group atomically."""

    def merge(self, primary_id: int, duplicate_ids: Sequence[int]) -> MergeStats:
        """Merge ``duplicate_ids`` into ``primary_id``."""
        ...


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def _resolve_kind(entities: Sequence[EntityRecord], kind: EntityKind | None) -> EntityKind:
    """Return the single kind shared by all entities."""
    kinds = {entity.kind for entity in entities}
    if kind is not None:
        kinds.add(EntityKind(kind))

    if not kinds:
        raise ValidationError("Cannot infer entity kind from an empty entity list")
    if len(kinds) > 1:
        names = ", ".join(sorted(str(k) for k in kinds))
        raise ValidationError(f"A run handles one entity kind, got: {names}")
    return kinds.pop()


def _check_invariants(groups: Sequence[DuplicateGroup]) -> None:
    """Reject group sets that must never reach the merge engine."""
    seen: set[int] = set()
    for group in groups:
        if not group.duplicate_ids:
            raise DataIntegrityError(f"Group with primary {group.primary_id} has no duplicates")
        if group.primary_id in group.duplicate_ids:
            raise DataIntegrityError(
                f"Primary {group.primary_id} is listed among its own duplicates"
            )
        if not math.isfinite(group.confidence) or not 0.0 <= group.confidence <= 1.0:
            raise DataIntegrityError(
                f"Group with primary {group.primary_id} has invalid confidence "
                f"{group.confidence!r}"
            )

        members = set(group.member_ids)
        overlap = seen & members
        if overlap:
            raise DataIntegrityError(f"Entities {sorted(overlap)} belong to more than one group")
        seen |= members


# ---------------------------------------------------------------------------
# Cluster evaluation
# ---------------------------------------------------------------------------


def evaluate_cluster(
    cluster: Cluster,
    entities_by_id: Mapping[int, EntityRecord],
) -> DuplicateGroup:
    """Select the primary and score every duplicate against it.

    Parameters
    ----------
    cluster : Cluster
        Cluster with at least two members.
    entities_by_id : Mapping[int, EntityRecord]
        Lookup of the entities the cluster was built from.

    Returns
    -------
    DuplicateGroup
        Candidate group with weakest-link confidence.
    """
    members = [entities_by_id[entity_id] for entity_id in cluster.member_ids]
    primary = select_primary(members)
    duplicates = [member for member in members if member.id != primary.id]

    scores = tuple(
        score_pair(primary, duplicate, cluster.similarity_between(primary.id, duplicate.id))
        for duplicate in duplicates
    )

    return DuplicateGroup(
        kind=primary.kind,
        primary_id=primary.id,
        primary_display_text=primary.display_text,
        duplicate_ids=tuple(d.id for d in duplicates),
        duplicate_display_texts=tuple(d.display_text for d in duplicates),
        confidence=cluster_confidence(scores),
        edge_count=len(cluster.edges),
        scores=scores,
    )


# ---------------------------------------------------------------------------
# Merge phase
# ---------------------------------------------------------------------------


def _merge_groups(
    result: DeduplicationResult,
    merger: Merger,
    reporter: Reporter,
    logger: AuditLogger | None,
) -> None:
    """Merge each accepted group in its own transaction."""
    merged: list[MergeStats] = []
    total = len(result.duplicate_groups)

    for index, group in enumerate(result.duplicate_groups, start=1):
        try:
            stats = merger.merge(group.primary_id, group.duplicate_ids)
        except MergeError as exc:
            failed = FailedGroup(group=group, reason=str(exc), error_type=type(exc).__name__)
            result.failed_groups.append(failed)
            reporter.error(
                f"Merging {group.kind} {list(group.duplicate_ids)} into "
                f"{group.primary_id} failed: {exc}"
            )
            if logger:
                logger.group_failed(failed)
        else:
            merged.append(stats)
            reporter.status(
                f"Merged {group.kind} {list(stats.merged_ids)} into {stats.primary_id}"
            )
            if logger:
                logger.group_merged(stats)
        reporter.progress(index, total)

    result.merge_stats = merged


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def run(
    entities: Iterable[EntityRecord],
    config: DeduplicationConfig | None = None,
    *,
    kind: EntityKind | None = None,
    merger: Merger | None = None,
    reporter: Reporter | None = None,
    logger: AuditLogger | None = None,
) -> DeduplicationResult:
    """Find duplicate groups for one entity kind and optionally merge them.

    Parameters
    ----------
    entities : Iterable[EntityRecord]
        Canonicalized entities, all of one kind.
    config : DeduplicationConfig | None, optional
        Run configuration. If None, uses the kind's defaults (dry run).
    kind : EntityKind | None, optional
        Entity kind; required only when ``entities`` may be empty.
    merger : Merger | None, optional
        Merge engine, required when merging is enabled.
    reporter : Reporter | None, optional
        Receiver for status, progress and non-fatal errors.
    logger : AuditLogger | None, optional
        Audit logger for group events. If None, no logging.

    Returns
    -------
    DeduplicationResult
        Groups found, skip counters and, when merging ran, merge stats and
        failed groups.

    Raises
    ------
    ValidationError
        If entities mix kinds, or merging is enabled without a merger.
    DataIntegrityError
        If clustering or scoring produced an invalid group set.

    Examples
    --------
        >>> from shelfmerge.normalize import make_entity
        >>> people = [
        ...     make_entity(EntityKind.PERSON, 1, "Stephen King"),
        ...     make_entity(EntityKind.PERSON, 2, "King, Stephen"),
        ... ]
        >>> run(people).duplicate_groups[0].duplicate_ids
        (1,)
    """
    entities = list(entities)
    kind = _resolve_kind(entities, kind)

    if config is None:
        config = DeduplicationConfig.for_kind(kind)
    if reporter is None:
        reporter = SilentReporter()
    if config.merges_enabled and merger is None:
        raise ValidationError("auto_merge with dry_run disabled requires a merger")

    result = DeduplicationResult(
        kind=kind,
        total_entities_considered=len(entities),
        dry_run=not config.merges_enabled,
    )

    candidates: list[EntityRecord] = []
    for entity in entities:
        if entity.canonical_key:
            candidates.append(entity)
            continue
        result.excluded_entity_ids.append(entity.id)
        reporter.error(
            f"Skipping {kind} {entity.id}: {entity.display_text!r} has no comparable text"
        )

    reporter.status(f"Clustering {len(candidates)} {kind} entities")
    clusters = build_clusters(candidates, config.clustering_config())
    entities_by_id = {entity.id: entity for entity in candidates}

    for index, cluster in enumerate(clusters, start=1):
        reporter.progress(index, len(clusters))

        if len(cluster.edges) < config.min_frequency:
            result.skipped_low_frequency_count += 1
            continue

        group = evaluate_cluster(cluster, entities_by_id)
        if group.confidence < config.min_confidence:
            result.skipped_low_confidence_count += 1
            continue

        result.duplicate_groups.append(group)
        if logger:
            logger.group_found(group)

    _check_invariants(result.duplicate_groups)
    reporter.status(f"Found {len(result.duplicate_groups)} {kind} duplicate groups")

    if config.merges_enabled and merger is not None:
        _merge_groups(result, merger, reporter, logger)

    return result
