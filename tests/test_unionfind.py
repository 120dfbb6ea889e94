from __future__ import annotations

from topomap.unionfind import UnionFind


def test_union_and_find_group_elements() -> None:
    forest = UnionFind(6)

    assert forest.union(0, 1)
    assert forest.union(1, 2)
    assert not forest.union(0, 2)
    assert forest.union(4, 5)

    assert forest.connected(0, 2)
    assert forest.connected(4, 5)
    assert not forest.connected(2, 4)
    assert forest.find(3) == 3
    assert len(forest) == 6


def test_path_compression_points_at_root() -> None:
    forest = UnionFind(8)
    for i in range(7):
        forest.union(i, i + 1)

    root = forest.find(7)
    for i in range(8):
        forest.find(i)
        assert int(forest.parent[i]) == root
