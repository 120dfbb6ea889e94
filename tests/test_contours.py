from __future__ import annotations

import numpy as np

from topomap.config import NoiseConfig
from topomap.contours import contour_thresholds, extract_contours
from topomap.geometry import polygon_area
from topomap.heightfield import as_heightmap, generate_heightmap
from topomap.rng import RngStream


def _bump(width: int = 40, height: int = 30, sigma: float = 8.0) -> np.ndarray:
    yy, xx = np.indices((height, width), dtype=np.float64)
    return np.exp(-(((xx - width / 2) ** 2) + ((yy - height / 2) ** 2)) / (2.0 * sigma**2))


def test_scenario_thresholds_span_generated_range() -> None:
    heightmap = generate_heightmap(
        100,
        50,
        RngStream("abc"),
        config=NoiseConfig(scale=0.006, octaves=4, persistence=0.5, lacunarity=2.0),
    )
    contours = extract_contours(heightmap, 10)
    values = np.array([c.value for c in contours])

    assert len(contours) == 10
    assert np.all(np.diff(values) > 0)
    assert heightmap.min < values[0]
    assert values[-1] < heightmap.max
    assert np.allclose(values, contour_thresholds(heightmap, 10))


def test_thresholds_exclude_extremes_evenly() -> None:
    heightmap = as_heightmap(np.array([[0.0, 1.0], [2.0, 4.0]]))

    assert np.allclose(contour_thresholds(heightmap, 3), [1.0, 2.0, 3.0])


def test_flat_heightmap_yields_empty_but_ordered_levels() -> None:
    heightmap = as_heightmap(np.full((10, 12), 0.25))
    contours = extract_contours(heightmap, 4)

    assert [c.polygons for c in contours] == [[], [], [], []]
    assert np.all(np.diff([c.value for c in contours]) > 0)


def test_single_bump_gives_one_closed_ring_per_level() -> None:
    heightmap = as_heightmap(_bump())
    contours = extract_contours(heightmap, 6)

    areas = []
    for contour in contours:
        assert contour.ring_count == 1
        ring = contour.polygons[0][0]
        assert np.array_equal(ring[0], ring[-1])
        assert ring.shape[0] >= 4
        areas.append(polygon_area(ring))

    assert all(a > b for a, b in zip(areas, areas[1:]))


def test_rings_touching_the_border_close_along_it() -> None:
    ramp = np.tile(np.linspace(0.0, 1.0, 20), (10, 1))
    contours = extract_contours(as_heightmap(ramp), 3)

    for contour in contours:
        assert contour.ring_count == 1
        ring = contour.polygons[0][0]
        assert np.array_equal(ring[0], ring[-1])
        assert ring[:, 0].min() >= 0.0
        assert ring[:, 0].max() == 20.0
        assert ring[:, 1].min() == 0.0
        assert ring[:, 1].max() == 10.0


def test_two_peaks_give_two_rings_at_high_threshold() -> None:
    left = _bump(60, 30, 4.0)
    right = np.roll(left, 20, axis=1)
    field = np.roll(left, -15, axis=1) + right
    contours = extract_contours(as_heightmap(field), 1)

    assert contours[0].ring_count == 2


def test_ring_points_stay_inside_grid_extent() -> None:
    heightmap = generate_heightmap(48, 32, RngStream("bounds"), config=NoiseConfig(scale=0.05))
    for contour in extract_contours(heightmap, 8):
        for polygon in contour.polygons:
            for ring in polygon:
                assert ring[:, 0].min() >= 0.0 and ring[:, 0].max() <= 48.0
                assert ring[:, 1].min() >= 0.0 and ring[:, 1].max() <= 32.0
                assert np.array_equal(ring[0], ring[-1])


def test_corner_peak_snaps_border_crossings_onto_the_edge() -> None:
    values = np.zeros((5, 5))
    values[0, 0] = 1.0
    contours = extract_contours(as_heightmap(values), 1)

    assert contours[0].ring_count == 1
    ring = contours[0].polygons[0][0]
    assert np.array_equal(ring[0], ring[-1])
    points = {(float(x), float(y)) for x, y in ring[:-1]}
    assert points == {(1.0, 0.5), (0.5, 1.0), (0.0, 0.5), (0.5, 0.0)}
