"""Array-backed disjoint-set forest over integer cell ids."""

from __future__ import annotations

import numpy as np


class UnionFind:
    """Union by rank with path compression."""

    def __init__(self, size: int) -> None:
        if size < 0:
            raise ValueError("size must be non-negative")
        self.parent = np.arange(size, dtype=np.int64)
        self.rank = np.zeros(size, dtype=np.int64)

    def __len__(self) -> int:
        return int(self.parent.shape[0])

    def find(self, x: int) -> int:
        root = x
        while self.parent[root] != root:
            root = int(self.parent[root])
        while self.parent[x] != root:
            nxt = int(self.parent[x])
            self.parent[x] = root
            x = nxt
        return root

    def union(self, a: int, b: int) -> bool:
        """Merge the sets holding `a` and `b`; False when already joined."""

        ra = self.find(a)
        rb = self.find(b)
        if ra == rb:
            return False
        if self.rank[ra] < self.rank[rb]:
            self.parent[ra] = rb
        elif self.rank[ra] > self.rank[rb]:
            self.parent[rb] = ra
        else:
            self.parent[rb] = ra
            self.rank[ra] += 1
        return True

    def connected(self, a: int, b: int) -> bool:
        return self.find(a) == self.find(b)
