"""Union-Find (Disjoint Set Union) over entity ids."""

from collections.abc import Hashable
from typing import Generic, TypeVar

T = TypeVar("T", bound=Hashable)


class UnionFind(Generic[T]):
    """Union-Find data structure with path compression and union by rank.

    Attributes
    ----------
    parent : dict[T, T]
        Parent pointers for each element.
    rank : dict[T, int]
        Rank (approximate tree height) for each root.
    """

    def __init__(self) -> None:
        """Initialize empty Union-Find structure."""
        self.parent: dict[T, T] = {}
        self.rank: dict[T, int] = {}

    def make_set(self, x: T) -> None:
        """Create a new singleton set containing x (no-op if present)."""
        if x not in self.parent:
            self.parent[x] = x
            self.rank[x] = 0

    def find(self, x: T) -> T:
        """Find root of set containing x with path compression.

        Parameters
        ----------
        x : T
            Element to find; added as a singleton when unknown.

        Returns
        -------
        T
            Root of set containing x.
        """
        self.make_set(x)

        root = x
        while self.parent[root] != root:
            root = self.parent[root]

        while self.parent[x] != root:
            self.parent[x], x = root, self.parent[x]

        return root

    def union(self, x: T, y: T) -> None:
        """Union sets containing x and y using union by rank."""
        root_x = self.find(x)
        root_y = self.find(y)

        if root_x == root_y:
            return

        if self.rank[root_x] < self.rank[root_y]:
            self.parent[root_x] = root_y
        elif self.rank[root_x] > self.rank[root_y]:
            self.parent[root_y] = root_x
        else:
            self.parent[root_y] = root_x
            self.rank[root_x] += 1

    def get_components(self) -> list[list[T]]:
        """Get all connected components, in first-seen order.

        Returns
        -------
        list[list[T]]
            Components; elements keep their insertion order.
        """
        components_dict: dict[T, list[T]] = {}

        for element in self.parent:
            components_dict.setdefault(self.find(element), []).append(element)

        return list(components_dict.values())
