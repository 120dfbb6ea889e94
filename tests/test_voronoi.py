from __future__ import annotations

import numpy as np

from topomap.geometry import polygon_area
from topomap.rng import create_rng
from topomap.voronoi import build_tessellation, delaunay_neighbors


def _random_points(seed: str, count: int, width: float, height: float) -> np.ndarray:
    gen = create_rng(seed)
    return np.array([(gen.uniform(5, width - 5), gen.uniform(5, height - 5)) for _ in range(count)])


def test_cells_tile_the_canvas() -> None:
    points = _random_points("tile", 30, 400.0, 300.0)
    tess = build_tessellation(points, 400.0, 300.0)

    assert tess.valid.all()
    total = sum(polygon_area(poly) for poly in tess.polygons)
    assert np.isclose(total, 400.0 * 300.0)


def test_cell_vertices_are_nearest_to_their_own_site() -> None:
    points = _random_points("nearest", 20, 200.0, 200.0)
    tess = build_tessellation(points, 200.0, 200.0)

    for i, poly in enumerate(tess.polygons):
        for vertex in poly:
            dists = np.hypot(points[:, 0] - vertex[0], points[:, 1] - vertex[1])
            assert dists[i] <= dists.min() + 1e-6


def test_neighbors_are_symmetric() -> None:
    points = _random_points("sym", 25, 300.0, 200.0)
    neighbors = delaunay_neighbors(points)

    for i, adj in enumerate(neighbors):
        assert list(adj) == sorted(adj)
        for j in adj:
            assert i in neighbors[j]
    tess = build_tessellation(points, 300.0, 200.0)
    assert all(i < j for i, j in tess.adjacent_pairs())


def test_duplicate_site_is_marked_invalid() -> None:
    points = np.array([(10.0, 10.0), (90.0, 20.0), (50.0, 80.0), (10.0, 10.0), (60.0, 40.0)])
    tess = build_tessellation(points, 100.0, 100.0)

    assert int((~tess.valid).sum()) == 1
    assert tess.cell_area(0) > 0.0 or tess.cell_area(3) > 0.0


def test_collinear_sites_degrade_without_raising() -> None:
    points = np.array([(10.0, 50.0), (30.0, 50.0), (50.0, 50.0), (70.0, 50.0)])
    tess = build_tessellation(points, 100.0, 100.0)

    assert len(tess.polygons) == 4
    assert tess.adjacent_pairs() == []


def test_single_and_double_sites() -> None:
    single = build_tessellation(np.array([(5.0, 5.0)]), 10.0, 10.0)
    assert np.isclose(single.cell_area(0), 100.0)

    double = build_tessellation(np.array([(2.0, 5.0), (8.0, 5.0)]), 10.0, 10.0)
    assert double.adjacent_pairs() == [(0, 1)]
    assert np.isclose(double.cell_area(0), 50.0)
