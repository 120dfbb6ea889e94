from __future__ import annotations

import hashlib

import numpy as np

from topomap.config import MapConfig
from topomap.derive import hillshade
from topomap.engine import TerrainEngine
from topomap.render import render_map


def _hash_bytes(payload: bytes) -> str:
    return hashlib.sha256(payload).hexdigest()


def test_separate_engines_produce_identical_outputs() -> None:
    config = MapConfig(width=320, height=180, seed="MistyForge", contour_levels=12)

    run_a = TerrainEngine().render(config)
    run_b = TerrainEngine().render(config)

    assert _hash_bytes(run_a.heightmap.values.tobytes()) == _hash_bytes(run_b.heightmap.values.tobytes())
    assert [c.value for c in run_a.contours] == [c.value for c in run_b.contours]
    for contour_a, contour_b in zip(run_a.contours, run_b.contours):
        rings_a = [ring for polygon in contour_a.polygons for ring in polygon]
        rings_b = [ring for polygon in contour_b.polygons for ring in polygon]
        assert len(rings_a) == len(rings_b)
        assert all(np.array_equal(a, b) for a, b in zip(rings_a, rings_b))
    assert [(z.cells, z.label, z.highlighted) for z in run_a.zones] == [
        (z.cells, z.label, z.highlighted) for z in run_b.zones
    ]

    hill_a = hillshade(run_a.heightmap.values, z_factor=40.0)
    hill_b = hillshade(run_b.heightmap.values, z_factor=40.0)
    assert _hash_bytes(hill_a.tobytes()) == _hash_bytes(hill_b.tobytes())

    image_a = render_map(run_a).tobytes()
    image_b = render_map(run_b).tobytes()
    assert _hash_bytes(image_a) == _hash_bytes(image_b)


def test_zone_pass_does_not_disturb_heightmap_stream() -> None:
    base = MapConfig(width=320, height=180, seed="MistyForge", contour_levels=12)
    with_zones = TerrainEngine().render(base)
    without_zones = TerrainEngine().render(MapConfig(width=320, height=180, seed="MistyForge", show_zones=False))

    assert np.array_equal(with_zones.heightmap.values, without_zones.heightmap.values)
