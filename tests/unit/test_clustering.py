"""Tests for similarity, Union-Find and cluster building."""

from collections.abc import Callable

import pytest

from shelfmerge.clustering import (
    ClusteringConfig,
    UnionFind,
    build_clusters,
    edit_distance,
    length_ratio,
    similarity,
)
from shelfmerge.errors import DataIntegrityError, ValidationError
from shelfmerge.models import EntityKind, EntityRecord
from shelfmerge.normalize import make_entity

# ---------------------------------------------------------------------------
# Union-Find
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_union_find_basic() -> None:
    """Test basic Union-Find operations."""
    uf: UnionFind[int] = UnionFind()

    uf.union(1, 2)
    uf.union(2, 3)

    assert uf.find(1) == uf.find(2) == uf.find(3)

    uf.union(4, 5)
    assert uf.find(4) == uf.find(5)
    assert uf.find(4) != uf.find(1)


@pytest.mark.unit
def test_union_find_components() -> None:
    """Test getting connected components."""
    uf: UnionFind[int] = UnionFind()

    uf.union(1, 2)
    uf.union(2, 3)
    uf.union(4, 5)

    component_sets = [set(comp) for comp in uf.get_components()]

    assert len(component_sets) == 2
    assert {1, 2, 3} in component_sets
    assert {4, 5} in component_sets


@pytest.mark.unit
def test_union_find_long_chain() -> None:
    """Test a long chain collapses into one component without recursion limits."""
    uf: UnionFind[int] = UnionFind()

    for i in range(5000):
        uf.union(i, i + 1)

    assert uf.find(0) == uf.find(5000)
    assert len(uf.get_components()) == 1


# ---------------------------------------------------------------------------
# Similarity
# ---------------------------------------------------------------------------


@pytest.mark.unit
@pytest.mark.parametrize(
    ("a", "b"),
    [
        ("stephen king", "stephen edwin king"),
        ("italo calvino", "umberto eco"),
        ("autore", "author"),
        ("a", ""),
    ],
)
def test_similarity_is_symmetric(a: str, b: str) -> None:
    """Test similarity(a, b) equals similarity(b, a) exactly."""
    assert similarity(a, b) == similarity(b, a)


@pytest.mark.unit
def test_similarity_bounds() -> None:
    """Test identical keys score 1.0 and unrelated keys score low."""
    assert similarity("stephen king", "stephen king") == 1.0
    assert similarity("", "") == 1.0
    assert 0.0 <= similarity("italo calvino", "umberto eco") < 0.85
    assert similarity("stephen king", "stephen edwin king") == pytest.approx(0.9167, abs=1e-3)


@pytest.mark.unit
def test_edit_distance_and_length_ratio() -> None:
    """Test the structural helpers used by scoring."""
    assert edit_distance("margaret atwood", "margaret atwod") == 1
    assert edit_distance("autore", "author") == 2
    assert length_ratio("abcd", "ab") == 0.5
    assert length_ratio("", "") == 1.0


# ---------------------------------------------------------------------------
# Cluster building
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_inverted_and_extended_names_cluster(
    make_entities: Callable[..., list[EntityRecord]],
) -> None:
    """Test "Stephen King" variants form one cluster with three edges."""
    entities = make_entities({1: "Stephen King", 2: "Stephen Edwin King", 3: "King, Stephen"})

    clusters = build_clusters(entities, ClusteringConfig(threshold=0.85))

    assert len(clusters) == 1
    assert clusters[0].member_ids == (1, 2, 3)
    assert len(clusters[0].edges) == 3
    assert clusters[0].similarity_between(3, 1) == 1.0
    assert clusters[0].similarity_between(1, 4) is None


@pytest.mark.unit
def test_unrelated_names_do_not_cluster(
    make_entities: Callable[..., list[EntityRecord]],
) -> None:
    """Test unrelated names stay apart at the default threshold."""
    entities = make_entities({1: "Italo Calvino", 2: "Umberto Eco"})

    assert build_clusters(entities) == []


@pytest.mark.unit
def test_transitive_chain_joins_one_cluster() -> None:
    """Test A~B and B~C put A, B and C together even if A~C is weak."""
    entities = [
        make_entity(EntityKind.TAG, 1, "abcdefgh"),
        make_entity(EntityKind.TAG, 2, "abcdefxy"),
        make_entity(EntityKind.TAG, 3, "abcdwzxy"),
    ]
    config = ClusteringConfig(threshold=0.85)

    assert similarity("abcdefgh", "abcdefxy") >= 0.85
    assert similarity("abcdefxy", "abcdwzxy") >= 0.85
    assert similarity("abcdefgh", "abcdwzxy") < 0.85

    clusters = build_clusters(entities, config)

    assert len(clusters) == 1
    assert clusters[0].member_ids == (1, 2, 3)
    assert len(clusters[0].edges) == 2


@pytest.mark.unit
def test_clusters_are_disjoint_and_sorted(
    make_entities: Callable[..., list[EntityRecord]],
) -> None:
    """Test every entity lands in at most one cluster and order is by lowest id."""
    entities = make_entities(
        {
            9: "Margaret Atwod",
            1: "Stephen King",
            4: "Margaret Atwood",
            2: "King, Stephen",
            7: "Umberto Eco",
        }
    )

    clusters = build_clusters(entities)
    seen: list[int] = [i for cluster in clusters for i in cluster.member_ids]

    assert [c.member_ids for c in clusters] == [(1, 2), (4, 9)]
    assert len(seen) == len(set(seen))


@pytest.mark.unit
def test_input_order_does_not_change_clusters(
    make_entities: Callable[..., list[EntityRecord]],
) -> None:
    """Test clustering is deterministic regardless of input order."""
    names = {1: "Stephen King", 2: "Stephen Edwin King", 3: "King, Stephen", 4: "Umberto Eco"}
    forward = make_entities(names)

    assert build_clusters(forward) == build_clusters(list(reversed(forward)))


@pytest.mark.unit
def test_empty_keys_never_link(make_entities: Callable[..., list[EntityRecord]]) -> None:
    """Test entities without a key are left out of clustering."""
    entities = make_entities({1: "...", 2: "", 3: "Stephen King"})

    assert build_clusters(entities) == []


@pytest.mark.unit
def test_duplicate_ids_raise(make_entities: Callable[..., list[EntityRecord]]) -> None:
    """Test a repeated id is a data integrity error."""
    entities = make_entities({1: "Stephen King"}) * 2

    with pytest.raises(DataIntegrityError, match="more than once"):
        build_clusters(entities)


@pytest.mark.unit
def test_prebucket_only_compares_same_first_letter() -> None:
    """Test prebucketing skips pairs across first letters."""
    entities = [
        make_entity(EntityKind.TAG, 1, "fantasy"),
        make_entity(EntityKind.TAG, 2, "phantasy"),
        make_entity(EntityKind.TAG, 3, "horror"),
        make_entity(EntityKind.TAG, 4, "Horror"),
    ]

    full = build_clusters(entities, ClusteringConfig(prebucket=False))
    bucketed = build_clusters(entities, ClusteringConfig(prebucket=True))

    assert [c.member_ids for c in full] == [(1, 2), (3, 4)]
    assert [c.member_ids for c in bucketed] == [(3, 4)]


@pytest.mark.unit
@pytest.mark.parametrize("threshold", [-0.1, 1.5])
def test_invalid_threshold_rejected(threshold: float) -> None:
    """Test thresholds outside [0, 1] are rejected."""
    with pytest.raises(ValidationError):
        ClusteringConfig(threshold=threshold)
