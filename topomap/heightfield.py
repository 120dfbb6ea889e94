"""Fractal heightmap synthesis."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import structlog

from topomap.config import NoiseConfig
from topomap.noise import GradientNoise2D, fbm_grid
from topomap.rng import RngStream

logger = structlog.get_logger()


@dataclass(frozen=True)
class Heightmap:
    """Read-only elevation grid indexed as values[y, x]."""

    values: np.ndarray
    width: int
    height: int

    @property
    def min(self) -> float:
        return float(self.values.min())

    @property
    def max(self) -> float:
        return float(self.values.max())


def as_heightmap(values: np.ndarray) -> Heightmap:
    """Wrap a 2D array as an immutable `Heightmap` (copied, float64)."""

    arr = np.array(values, dtype=np.float64, copy=True)
    if arr.ndim != 2:
        raise ValueError("heightmap values must be 2D")
    arr.setflags(write=False)
    height, width = arr.shape
    return Heightmap(values=arr, width=width, height=height)


def generate_heightmap(
    width: int,
    height: int,
    rng: RngStream,
    *,
    config: NoiseConfig | None = None,
) -> Heightmap:
    """Generate a deterministic fractal heightmap of `width` x `height` cells."""

    if width <= 0 or height <= 0:
        raise ValueError("width and height must be positive")

    cfg = config or NoiseConfig()
    noise = GradientNoise2D(rng.generator())
    values = fbm_grid(
        noise,
        width,
        height,
        scale=cfg.scale,
        octaves=cfg.octaves,
        persistence=cfg.persistence,
        lacunarity=cfg.lacunarity,
    )
    heightmap = as_heightmap(values)
    logger.debug(
        "heightmap generated",
        width=width,
        height=height,
        octaves=cfg.octaves,
        min=heightmap.min,
        max=heightmap.max,
    )
    return heightmap
