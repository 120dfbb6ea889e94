"""Derived raster previews of heightmaps."""

from __future__ import annotations

import numpy as np


def hillshade(
    values: np.ndarray,
    *,
    cell_size: float = 1.0,
    azimuth_deg: float = 315.0,
    altitude_deg: float = 45.0,
    z_factor: float = 1.0,
) -> np.ndarray:
    """Compute an 8-bit grayscale hillshade from a heightmap in grid units."""

    if values.ndim != 2:
        raise ValueError("values must be a 2D array")
    if cell_size <= 0:
        raise ValueError("cell_size must be positive")

    dz_dy, dz_dx = np.gradient(values.astype(np.float64), cell_size, cell_size)
    dz_dx = dz_dx * float(z_factor)
    dz_dy = dz_dy * float(z_factor)

    slope = np.pi / 2.0 - np.arctan(np.hypot(dz_dx, dz_dy))
    aspect = np.arctan2(-dz_dx, dz_dy)

    azimuth = np.deg2rad(azimuth_deg)
    altitude = np.deg2rad(altitude_deg)

    shaded = np.sin(altitude) * np.sin(slope) + np.cos(altitude) * np.cos(slope) * np.cos(azimuth - aspect)
    return np.round(np.clip(shaded, 0.0, 1.0) * 255.0).astype(np.uint8)


def height_preview_u16(values: np.ndarray) -> np.ndarray:
    """Stretch the full value range of `values` to 16-bit grayscale."""

    lo = float(values.min())
    hi = float(values.max())
    scale = max(hi - lo, 1e-12)
    norm = np.clip((values - lo) / scale, 0.0, 1.0)
    return np.round(norm * 65535.0).astype(np.uint16)
