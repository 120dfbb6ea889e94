from __future__ import annotations

import numpy as np
import pytest

from topomap.derive import height_preview_u16, hillshade


def _cone(size: int = 64) -> np.ndarray:
    y, x = np.mgrid[0:size, 0:size]
    center = size // 2
    return -np.hypot(x - center, y - center) / 10.0


def test_hillshade_z_factor_changes_output() -> None:
    shade_1x = hillshade(_cone(), z_factor=1.0)
    shade_40x = hillshade(_cone(), z_factor=40.0)

    assert shade_1x.dtype == np.uint8
    assert not np.array_equal(shade_1x, shade_40x)
    assert float(shade_40x.std()) > float(shade_1x.std())


def test_flat_hillshade_is_uniform() -> None:
    shade = hillshade(np.zeros((8, 8)))

    assert np.all(shade == shade[0, 0])
    assert shade[0, 0] == round(np.sin(np.deg2rad(45.0)) * 255.0)


def test_hillshade_rejects_bad_input() -> None:
    with pytest.raises(ValueError):
        hillshade(np.zeros(5))
    with pytest.raises(ValueError):
        hillshade(np.zeros((4, 4)), cell_size=0.0)


def test_height_preview_stretches_full_range() -> None:
    preview = height_preview_u16(np.array([[-2.0, 0.0], [1.0, 2.0]]))

    assert preview.dtype == np.uint16
    assert preview.min() == 0
    assert preview.max() == 65535
    assert np.array_equal(height_preview_u16(np.ones((3, 3))), np.zeros((3, 3), dtype=np.uint16))
