"""UnionFind (Disjoint Set Union) over corpus positions.

The hash strategy links neighbouring positions of a sorted bucket,
longest common run first, to recover the groups sharing each run length.
"""

from typing import Generic, Hashable, TypeVar

T = TypeVar("T", bound=Hashable)


class UnionFind(Generic[T]):
    """Union-Find with path compression and union by size.

    Attributes:
        parent: Mapping from each element to its parent in the tree structure.
        set_size: Size of the set rooted at each root element.
    """

    def __init__(self) -> None:
        self.parent: dict[T, T] = {}
        self.set_size: dict[T, int] = {}

    def find(self, x: T) -> T:
        """Find the root of x, adding x as a singleton if unseen.

        Iterative so that long chains cannot hit the recursion limit.
        """
        if x not in self.parent:
            self.parent[x] = x
            self.set_size[x] = 1
            return x

        root = x
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[x] != root:
            self.parent[x], x = root, self.parent[x]
        return root

    def union(self, x: T, y: T) -> None:
        """Merge the sets containing x and y; the larger set's root survives."""
        root_x = self.find(x)
        root_y = self.find(y)
        if root_x == root_y:
            return
        if self.set_size[root_x] < self.set_size[root_y]:
            root_x, root_y = root_y, root_x
        self.parent[root_y] = root_x
        self.set_size[root_x] += self.set_size.pop(root_y)

    def get_groups(self) -> dict[T, list[T]]:
        """Get all connected components as {root: [members]}, members in insertion order."""
        groups: dict[T, list[T]] = {}
        for node in self.parent:
            groups.setdefault(self.find(node), []).append(node)
        return groups

    def is_connected(self, x: T, y: T) -> bool:
        return self.find(x) == self.find(y)

    def size(self) -> int:
        """Number of elements."""
        return len(self.parent)

    def num_groups(self) -> int:
        return len(self.set_size)
