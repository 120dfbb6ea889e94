"""Delaunay triangulation and canvas-clipped Voronoi cells."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import structlog
from scipy.spatial import Delaunay, QhullError

from topomap.geometry import bisector_clip, polygon_area, rectangle

logger = structlog.get_logger()

_MIN_CELL_AREA = 1e-9


@dataclass(frozen=True)
class Tessellation:
    """Voronoi cells of `points` clipped to the canvas, indexed like `points`.

    `polygons[i]` is None when cell i is degenerate (duplicate site, empty
    after clipping); such cells are excluded from banding and merging.
    """

    points: np.ndarray
    polygons: list[np.ndarray | None]
    neighbors: list[tuple[int, ...]]
    width: float
    height: float

    @property
    def valid(self) -> np.ndarray:
        return np.array([poly is not None for poly in self.polygons], dtype=bool)

    def cell_area(self, index: int) -> float:
        poly = self.polygons[index]
        return 0.0 if poly is None else polygon_area(poly)

    def adjacent_pairs(self) -> list[tuple[int, int]]:
        """Delaunay edges (i < j) as index pairs."""

        pairs = []
        for i, adj in enumerate(self.neighbors):
            for j in adj:
                if j > i:
                    pairs.append((i, j))
        return pairs


def delaunay_neighbors(points: np.ndarray) -> list[tuple[int, ...]]:
    """Sorted Delaunay neighbor lists; empty lists when triangulation fails."""

    count = points.shape[0]
    if count < 3:
        if count == 2 and not np.array_equal(points[0], points[1]):
            return [(1,), (0,)]
        return [() for _ in range(count)]
    try:
        tri = Delaunay(points)
    except QhullError as exc:
        logger.warning("delaunay triangulation failed", points=count, error=str(exc).splitlines()[0])
        return [() for _ in range(count)]

    indptr, indices = tri.vertex_neighbor_vertices
    return [tuple(sorted(int(j) for j in indices[indptr[i] : indptr[i + 1]])) for i in range(count)]


def build_tessellation(points: np.ndarray, width: float, height: float) -> Tessellation:
    """Triangulate `points` and derive each site's Voronoi cell within the canvas."""

    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    neighbors = delaunay_neighbors(pts)
    bounds = rectangle(0.0, 0.0, float(width), float(height))

    polygons: list[np.ndarray | None] = []
    for i in range(pts.shape[0]):
        if pts.shape[0] > 1 and not neighbors[i]:
            polygons.append(None)
            continue
        poly = bounds
        for j in neighbors[i]:
            poly = bisector_clip(poly, pts[i], pts[j])
            if poly.shape[0] < 3:
                break
        if poly.shape[0] < 3 or polygon_area(poly) <= _MIN_CELL_AREA:
            polygons.append(None)
        else:
            polygons.append(poly)

    invalid = sum(1 for poly in polygons if poly is None)
    logger.debug("tessellation built", cells=len(polygons), invalid=invalid)
    return Tessellation(points=pts, polygons=polygons, neighbors=neighbors, width=float(width), height=float(height))
