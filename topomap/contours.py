"""Isoline extraction from heightmaps."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import structlog
from contourpy import LineType, contour_generator

from topomap.heightfield import Heightmap

logger = structlog.get_logger()


@dataclass(frozen=True)
class Contour:
    """All isolines at one elevation threshold.

    `polygons` is a list of polygons, each a list of rings; a ring is an (N, 2)
    array of grid-space (x, y) points whose last point repeats the first.
    """

    value: float
    polygons: list[list[np.ndarray]]

    @property
    def ring_count(self) -> int:
        return sum(len(polygon) for polygon in self.polygons)


def contour_thresholds(heightmap: Heightmap, levels: int) -> np.ndarray:
    """Evenly spaced thresholds strictly inside the heightmap's value range."""

    levels = max(1, int(levels))
    lo = heightmap.min
    span = heightmap.max - lo
    if span <= 0.0:
        span = 1.0
    steps = np.arange(1, levels + 1, dtype=np.float64) / float(levels + 1)
    return lo + span * steps


def extract_contours(heightmap: Heightmap, levels: int) -> list[Contour]:
    """Trace closed isolines for `levels` thresholds, ascending by value.

    The grid is padded with one ring of cells below every threshold so each
    isoline closes; crossings inside the padding snap onto the grid edge.
    Cell samples sit at cell centres (x + 0.5, y + 0.5).
    """

    width = heightmap.width
    height = heightmap.height
    padded = np.pad(heightmap.values, 1, mode="constant", constant_values=heightmap.min - 1.0)
    coord_x = np.clip(np.arange(width + 2, dtype=np.float64) - 0.5, 0.0, float(width))
    coord_y = np.clip(np.arange(height + 2, dtype=np.float64) - 0.5, 0.0, float(height))
    generator = contour_generator(coord_x, coord_y, padded, line_type=LineType.Separate)

    contours: list[Contour] = []
    for threshold in contour_thresholds(heightmap, levels):
        rings = [_close_ring(_snap_to_edges(line, width, height)) for line in generator.lines(float(threshold))]
        rings = [ring for ring in rings if ring.shape[0] >= 4]
        contours.append(Contour(value=float(threshold), polygons=[[ring] for ring in rings]))

    logger.debug(
        "contours extracted",
        levels=len(contours),
        rings=sum(c.ring_count for c in contours),
    )
    return contours


def _snap_to_edges(line: np.ndarray, width: int, height: int) -> np.ndarray:
    # Interior crossings never fall within half a cell of the edge.
    pts = np.array(line, dtype=np.float64)
    pts[:, 0] = np.where(pts[:, 0] < 0.5, 0.0, np.where(pts[:, 0] > width - 0.5, float(width), pts[:, 0]))
    pts[:, 1] = np.where(pts[:, 1] < 0.5, 0.0, np.where(pts[:, 1] > height - 0.5, float(height), pts[:, 1]))
    return pts


def _close_ring(ring: np.ndarray) -> np.ndarray:
    if ring.shape[0] and not np.array_equal(ring[0], ring[-1]):
        return np.vstack([ring, ring[:1]])
    return ring
