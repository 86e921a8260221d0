"""Similarity clustering of entities.

Pairwise Jaro-Winkler similarity between comparison keys, grouped
transitively with Union-Find (DSU).
"""

from shelfmerge.clustering.cluster_builder import build_clusters, compute_edges
from shelfmerge.clustering.models import (
    DEFAULT_THRESHOLD,
    Cluster,
    ClusteringConfig,
    SimilarityEdge,
)
from shelfmerge.clustering.similarity import edit_distance, length_ratio, similarity
from shelfmerge.clustering.union_find import UnionFind

__all__ = [
    "DEFAULT_THRESHOLD",
    "Cluster",
    "ClusteringConfig",
    "SimilarityEdge",
    "UnionFind",
    "build_clusters",
    "compute_edges",
    "edit_distance",
    "length_ratio",
    "similarity",
]
