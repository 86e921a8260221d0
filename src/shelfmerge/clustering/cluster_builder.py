"""Build clusters of likely-same entities from pairwise similarity."""

from collections import defaultdict
from collections.abc import Iterator, Sequence
from itertools import combinations

from shelfmerge.clustering.models import Cluster, ClusteringConfig, SimilarityEdge
from shelfmerge.clustering.similarity import similarity
from shelfmerge.clustering.union_find import UnionFind
from shelfmerge.errors import DataIntegrityError
from shelfmerge.models import EntityRecord

__all__ = ["build_clusters", "compute_edges"]


def build_clusters(
    entities: Sequence[EntityRecord],
    config: ClusteringConfig | None = None,
) -> list[Cluster]:
    """Group entities whose comparison keys are similar.

    Clustering is transitive: if A~B and B~C clear the threshold, A, B and
    C share a cluster even when A~C alone would not. This catches chains
    of small variations at the cost of precision; the weakest-link
    confidence applied later compensates.

    Parameters
    ----------
    entities : Sequence[EntityRecord]
        Entities of a single kind. Entities with an empty key never link.
    config : ClusteringConfig | None, optional
        Clustering configuration. If None, uses defaults.

    Returns
    -------
    list[Cluster]
        Clusters with at least two members, sorted by lowest member id.

    Raises
    ------
    DataIntegrityError
        If two entities share an id.
    """
    if config is None:
        config = ClusteringConfig()

    ordered = _sorted_unique(entities)
    edges = compute_edges(ordered, config)

    uf: UnionFind[int] = UnionFind()
    for edge in edges:
        uf.union(edge.a_id, edge.b_id)

    root_edges: dict[int, list[SimilarityEdge]] = defaultdict(list)
    for edge in edges:
        root_edges[uf.find(edge.a_id)].append(edge)

    clusters: list[Cluster] = []
    for component in uf.get_components():
        if len(component) < 2:
            continue
        member_ids = tuple(sorted(component))
        clusters.append(
            Cluster(
                member_ids=member_ids,
                edges=tuple(root_edges[uf.find(member_ids[0])]),
            )
        )

    clusters.sort(key=lambda c: c.member_ids[0])
    return clusters


def compute_edges(
    entities: Sequence[EntityRecord],
    config: ClusteringConfig,
) -> list[SimilarityEdge]:
    """Compare candidate pairs and keep those at or above the threshold.

    Parameters
    ----------
    entities : Sequence[EntityRecord]
        Entities sorted by id.
    config : ClusteringConfig
        Threshold and bucketing options.

    Returns
    -------
    list[SimilarityEdge]
        Edges in deterministic (a_id, b_id) order.
    """
    edges: list[SimilarityEdge] = []
    for left, right in _candidate_pairs(entities, config.prebucket):
        score = similarity(left.canonical_key, right.canonical_key)
        if score >= config.threshold:
            edges.append(SimilarityEdge(a_id=left.id, b_id=right.id, similarity=score))

    edges.sort(key=lambda e: (e.a_id, e.b_id))
    return edges


def _sorted_unique(entities: Sequence[EntityRecord]) -> list[EntityRecord]:
    """Stable-sort by id, dropping empty keys and rejecting repeated ids."""
    seen: set[int] = set()
    for entity in entities:
        if entity.id in seen:
            raise DataIntegrityError(f"Entity id {entity.id} appears more than once")
        seen.add(entity.id)

    return sorted((e for e in entities if e.canonical_key), key=lambda e: e.id)


def _candidate_pairs(
    entities: Sequence[EntityRecord],
    prebucket: bool,
) -> Iterator[tuple[EntityRecord, EntityRecord]]:
    """Yield pairs to compare, left id always smaller than right id."""
    if not prebucket:
        yield from combinations(entities, 2)
        return

    buckets: dict[str, list[EntityRecord]] = defaultdict(list)
    for entity in entities:
        buckets[entity.canonical_key[0]].append(entity)

    for bucket_key in sorted(buckets):
        yield from combinations(buckets[bucket_key], 2)
