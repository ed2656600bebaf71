"""Disjoint-set forest with path compression and union by rank.

Instances are scoped to a single algorithm call (Kruskal, Stoer-Wagner,
undirected cycle detection) and never shared.
"""

from __future__ import annotations

from typing import Dict, Generic, Hashable, Iterable, Iterator, List, Set, TypeVar

from graphengine.errors import NodeNotFound

T = TypeVar("T", bound=Hashable)


class UnionFind(Generic[T]):
    """Union-find over hashable elements.

    ``find`` compresses paths iteratively, ``union`` links by rank. When two
    roots have equal rank the second root is attached under the first, so
    the structure is deterministic for a fixed sequence of operations.

    Example:
        >>> uf = UnionFind(["a", "b", "c"])
        >>> uf.union("a", "b")
        True
        >>> uf.union("b", "a")
        False
        >>> uf.connected("a", "c")
        False
    """

    def __init__(self, elements: Iterable[T] = ()) -> None:
        self._parent: Dict[T, T] = {}
        self._rank: Dict[T, int] = {}
        self._set_count = 0
        for element in elements:
            self.make_set(element)

    def make_set(self, element: T) -> None:
        """Add ``element`` as a singleton set. No-op if already present."""
        if element in self._parent:
            return
        self._parent[element] = element
        self._rank[element] = 0
        self._set_count += 1

    def find(self, element: T) -> T:
        """Return the representative of ``element``'s set.

        Raises:
            NodeNotFound: If ``element`` was never added.
        """
        parent = self._parent
        if element not in parent:
            raise NodeNotFound(element, f"Element '{element}' is not in the union-find.")
        root = element
        while parent[root] != root:
            root = parent[root]
        # Second pass: point every node on the path directly at the root.
        while parent[element] != root:
            parent[element], element = root, parent[element]
        return root

    def union(self, a: T, b: T) -> bool:
        """Merge the sets of ``a`` and ``b``.

        Returns:
            False if they were already in the same set, True otherwise.
        """
        root_a = self.find(a)
        root_b = self.find(b)
        if root_a == root_b:
            return False
        rank_a = self._rank[root_a]
        rank_b = self._rank[root_b]
        if rank_a < rank_b:
            root_a, root_b = root_b, root_a
        self._parent[root_b] = root_a
        if rank_a == rank_b:
            self._rank[root_a] += 1
        self._set_count -= 1
        return True

    def connected(self, a: T, b: T) -> bool:
        return self.find(a) == self.find(b)

    @property
    def set_count(self) -> int:
        """Number of disjoint sets."""
        return self._set_count

    def groups(self) -> List[Set[T]]:
        """Return all sets, ordered by first insertion of any member."""
        by_root: Dict[T, Set[T]] = {}
        for element in self._parent:
            by_root.setdefault(self.find(element), set()).add(element)
        return list(by_root.values())

    def __contains__(self, element: object) -> bool:
        return element in self._parent

    def __len__(self) -> int:
        return len(self._parent)

    def __iter__(self) -> Iterator[T]:
        return iter(self._parent)
