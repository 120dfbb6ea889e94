"""Terrain-aware territorial zone synthesis.

Seed points are biased toward heightmap peaks and valleys, tessellated into
Voronoi cells, banded by elevation, merged across gentle same-band borders,
and a non-adjacent subset of the largest merged regions becomes the zones.
"""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Sequence

import numpy as np
import structlog

from topomap.config import ZoneConfig
from topomap.geometry import polygon_area
from topomap.heightfield import Heightmap
from topomap.rng import Mulberry32
from topomap.unionfind import UnionFind
from topomap.voronoi import Tessellation, build_tessellation

logger = structlog.get_logger()

_NEIGHBOR_OFFSETS = [(-1, -1), (-1, 0), (-1, 1), (0, -1), (0, 1), (1, -1), (1, 0), (1, 1)]


@dataclass(frozen=True)
class Extremum:
    x: int
    y: int
    value: float


@dataclass(frozen=True)
class Region:
    """Merged group of same-band cells."""

    cells: tuple[int, ...]
    centroid: tuple[float, float]
    area: float


@dataclass(frozen=True)
class Zone:
    """One selected, labeled region ready for rendering."""

    cells: tuple[int, ...]
    polygons: tuple[np.ndarray, ...]
    centroid: tuple[float, float]
    area: float
    highlighted: bool
    label: str


@dataclass(frozen=True)
class ZoneSynthesisResult:
    """Zones plus the intermediate geometry they were selected from."""

    points: np.ndarray
    grid_coords: np.ndarray
    tessellation: Tessellation
    bands: np.ndarray
    band_edges: np.ndarray
    gradient_threshold: float
    cell_groups: list[tuple[int, ...]]
    regions: list[Region]
    candidates: list[Region]
    target_zone_count: int
    zones: list[Zone]


def find_extrema(values: np.ndarray) -> tuple[list[Extremum], list[Extremum]]:
    """Strict 8-neighbor local maxima and minima of interior cells, row-major."""

    if values.ndim != 2:
        raise ValueError("values must be 2D")
    height, width = values.shape
    if height < 3 or width < 3:
        return [], []

    centre = values[1:-1, 1:-1]
    is_max = np.ones(centre.shape, dtype=bool)
    is_min = np.ones(centre.shape, dtype=bool)
    for dy, dx in _NEIGHBOR_OFFSETS:
        neighbour = values[1 + dy : height - 1 + dy, 1 + dx : width - 1 + dx]
        is_max &= neighbour < centre
        is_min &= neighbour > centre

    maxima = [Extremum(int(x) + 1, int(y) + 1, float(centre[y, x])) for y, x in zip(*np.nonzero(is_max))]
    minima = [Extremum(int(x) + 1, int(y) + 1, float(centre[y, x])) for y, x in zip(*np.nonzero(is_min))]
    return maxima, minima


def subsample_extrema(extrema: Sequence[Extremum], target: int, rng: Mulberry32) -> list[Extremum]:
    """Greedy farthest-point subset of `target` extrema, seeded by a shuffle."""

    if target <= 0:
        return []
    if len(extrema) <= target:
        return list(extrema)

    shuffled = rng.shuffle(extrema)
    coords = np.array([(e.x, e.y) for e in shuffled], dtype=np.float64)
    min_dist = np.sum((coords - coords[0]) ** 2, axis=1)
    used = np.zeros(len(shuffled), dtype=bool)
    used[0] = True
    selected = [shuffled[0]]

    while len(selected) < target:
        masked = np.where(used, -1.0, min_dist)
        best = int(np.argmax(masked))
        if used[best]:
            break
        used[best] = True
        selected.append(shuffled[best])
        min_dist = np.minimum(min_dist, np.sum((coords - coords[best]) ** 2, axis=1))
    return selected


def place_seed_points(
    heightmap: Heightmap,
    canvas_width: float,
    canvas_height: float,
    rng: Mulberry32,
    config: ZoneConfig,
) -> np.ndarray:
    """Mix jittered terrain extrema with uniform random points, in canvas space."""

    total = rng.integer(*config.seed_count_range)
    maxima, minima = find_extrema(heightmap.values)
    extrema = maxima + minima

    terrain_target = int(total * config.terrain_fraction + 0.5)
    terrain_count = min(terrain_target, len(extrema))
    random_count = total - terrain_count

    scale_x = canvas_width / heightmap.width
    scale_y = canvas_height / heightmap.height
    jitter = min(canvas_width, canvas_height) * config.jitter_fraction
    lo_x = canvas_width * config.edge_inset_fraction
    hi_x = canvas_width * (1.0 - config.edge_inset_fraction)
    lo_y = canvas_height * config.edge_inset_fraction
    hi_y = canvas_height * (1.0 - config.edge_inset_fraction)

    points: list[tuple[float, float]] = []
    for ext in subsample_extrema(extrema, terrain_count, rng):
        cx = min(hi_x, max(lo_x, ext.x * scale_x + rng.uniform(-jitter, jitter)))
        cy = min(hi_y, max(lo_y, ext.y * scale_y + rng.uniform(-jitter, jitter)))
        points.append((cx, cy))

    for _ in range(random_count):
        points.append((rng.uniform(lo_x, hi_x), rng.uniform(lo_y, hi_y)))

    logger.debug(
        "zone seeds placed",
        total=total,
        maxima=len(maxima),
        minima=len(minima),
        terrain=terrain_count,
        random=random_count,
    )
    return np.array(points, dtype=np.float64).reshape(-1, 2)


def band_edges_from_thresholds(thresholds: Sequence[float], desired_bands: int) -> np.ndarray:
    """Evenly subsample sorted contour thresholds into band edges."""

    values = np.sort(np.asarray(thresholds, dtype=np.float64))
    step = max(1, len(values) // max(1, desired_bands))
    return values[step::step]


def assign_band(value: float, edges: np.ndarray) -> int:
    """Index of the first edge above `value`; len(edges) when none is."""

    return int(np.searchsorted(edges, value, side="right"))


def steepness(values: np.ndarray, a: tuple[int, int], b: tuple[int, int]) -> float:
    """|height difference| / Euclidean grid distance between two grid cells."""

    dx = b[0] - a[0]
    dy = b[1] - a[1]
    dist = math.hypot(dx, dy)
    if dist == 0.0:
        return 0.0
    return abs(float(values[b[1], b[0]]) - float(values[a[1], a[0]])) / dist


def merge_cells(
    tessellation: Tessellation,
    bands: np.ndarray,
    grid_coords: np.ndarray,
    values: np.ndarray,
    percentile: float,
) -> tuple[UnionFind, float]:
    """Union same-band Delaunay neighbors whose steepness is within the adaptive limit."""

    pairs: list[tuple[int, int, float]] = []
    for i, j in tessellation.adjacent_pairs():
        if bands[i] < 0 or bands[j] < 0 or bands[i] != bands[j]:
            continue
        grad = steepness(values, tuple(grid_coords[i]), tuple(grid_coords[j]))
        pairs.append((i, j, grad))

    if pairs:
        ordered = sorted(p[2] for p in pairs)
        idx = min(len(ordered) - 1, int(len(ordered) * percentile))
        threshold = ordered[idx]
    else:
        threshold = math.inf

    forest = UnionFind(len(bands))
    for i, j, grad in pairs:
        if grad <= threshold:
            forest.union(i, j)
    return forest, threshold


def assemble_regions(
    tessellation: Tessellation,
    forest: UnionFind,
    bands: np.ndarray,
) -> list[tuple[int, ...]]:
    """Group valid cells by union-find root, in order of first member."""

    groups: dict[int, list[int]] = {}
    for i in range(len(bands)):
        if bands[i] < 0:
            continue
        groups.setdefault(forest.find(i), []).append(i)
    return [tuple(cells) for cells in groups.values()]


def region_from_cells(tessellation: Tessellation, cells: Sequence[int]) -> Region:
    total = 0.0
    cx = 0.0
    cy = 0.0
    for idx in cells:
        poly = tessellation.polygons[idx]
        if poly is None:
            continue
        area = polygon_area(poly)
        total += area
        cx += tessellation.points[idx, 0] * area
        cy += tessellation.points[idx, 1] * area
    if total > 0.0:
        centroid = (cx / total, cy / total)
    else:
        centroid = tuple(float(v) for v in tessellation.points[list(cells)].mean(axis=0))
    return Region(cells=tuple(cells), centroid=(float(centroid[0]), float(centroid[1])), area=total)


def select_non_adjacent(
    candidates: Sequence[Region],
    tessellation: Tessellation,
    target: int,
) -> list[Region]:
    """Greedy pick in the given order; no shared or Delaunay-adjacent cells."""

    selected: list[Region] = []
    used: set[int] = set()
    blocked: set[int] = set()
    for candidate in candidates:
        if len(selected) >= target:
            break
        if any(c in used or c in blocked for c in candidate.cells):
            continue
        selected.append(candidate)
        for c in candidate.cells:
            used.add(c)
            for n in tessellation.neighbors[c]:
                if n not in used:
                    blocked.add(n)
    return selected


def synthesize_zones(
    heightmap: Heightmap,
    thresholds: Sequence[float],
    canvas_width: float,
    canvas_height: float,
    rng: Mulberry32,
    *,
    config: ZoneConfig | None = None,
) -> ZoneSynthesisResult:
    """Run the full zone pipeline for one render pass."""

    if canvas_width <= 0 or canvas_height <= 0:
        raise ValueError("canvas dimensions must be positive")

    cfg = config or ZoneConfig()
    values = heightmap.values

    points = place_seed_points(heightmap, canvas_width, canvas_height, rng, cfg)
    tessellation = build_tessellation(points, canvas_width, canvas_height)

    desired_bands = rng.integer(*cfg.band_count_range)
    edges = band_edges_from_thresholds(thresholds, desired_bands)

    grid_coords = np.empty((points.shape[0], 2), dtype=np.int64)
    grid_coords[:, 0] = np.clip(np.floor(points[:, 0] * heightmap.width / canvas_width), 0, heightmap.width - 1)
    grid_coords[:, 1] = np.clip(np.floor(points[:, 1] * heightmap.height / canvas_height), 0, heightmap.height - 1)

    bands = np.full(points.shape[0], -1, dtype=np.int64)
    for i, poly in enumerate(tessellation.polygons):
        if poly is None:
            continue
        gx, gy = grid_coords[i]
        bands[i] = assign_band(float(values[gy, gx]), edges)

    forest, gradient_threshold = merge_cells(tessellation, bands, grid_coords, values, cfg.gradient_percentile)
    cell_groups = assemble_regions(tessellation, forest, bands)

    regions = [
        region_from_cells(tessellation, cells) for cells in cell_groups if len(cells) >= cfg.min_region_cells
    ]
    regions.sort(key=lambda r: -r.area)

    centre_x = canvas_width / 2.0
    centre_y = canvas_height / 2.0
    exclusion = min(canvas_width, canvas_height) * cfg.center_exclusion_fraction
    candidates = [
        r for r in regions if math.hypot(r.centroid[0] - centre_x, r.centroid[1] - centre_y) > exclusion
    ]

    target = rng.integer(*cfg.zone_count_range)
    chosen = select_non_adjacent(candidates, tessellation, target)
    zones = _label_zones(chosen, tessellation, rng, cfg)

    logger.debug(
        "zones synthesized",
        cells=int(points.shape[0]),
        bands=int(edges.shape[0]) + 1,
        gradient_threshold=gradient_threshold,
        regions=len(regions),
        candidates=len(candidates),
        target=target,
        zones=len(zones),
    )
    return ZoneSynthesisResult(
        points=points,
        grid_coords=grid_coords,
        tessellation=tessellation,
        bands=bands,
        band_edges=edges,
        gradient_threshold=gradient_threshold,
        cell_groups=cell_groups,
        regions=regions,
        candidates=candidates,
        target_zone_count=target,
        zones=zones,
    )


def _label_zones(
    chosen: Sequence[Region],
    tessellation: Tessellation,
    rng: Mulberry32,
    config: ZoneConfig,
) -> list[Zone]:
    count = len(chosen)
    highlight_count = min(rng.integer(*config.highlight_count_range), count)
    highlighted: set[int] = set()
    while len(highlighted) < highlight_count:
        highlighted.add(int(rng.random() * count))

    labels = list(config.labels) or ["ZONE"]
    for i in range(min(count, len(labels))):
        j = i + int(rng.random() * (len(labels) - i))
        labels[i], labels[j] = labels[j], labels[i]

    zones = []
    for zi, region in enumerate(chosen):
        polygons = tuple(tessellation.polygons[c] for c in region.cells if tessellation.polygons[c] is not None)
        zones.append(
            Zone(
                cells=region.cells,
                polygons=polygons,
                centroid=region.centroid,
                area=region.area,
                highlighted=zi in highlighted,
                label=labels[zi % len(labels)],
            )
        )
    return zones
