"""Seeded 2D gradient noise used by the heightmap synthesizer."""

from __future__ import annotations

import numpy as np

from topomap.rng import Mulberry32

_GRADIENTS = np.array(
    [
        (1.0, 1.0),
        (-1.0, 1.0),
        (1.0, -1.0),
        (-1.0, -1.0),
        (1.0, 0.0),
        (-1.0, 0.0),
        (0.0, 1.0),
        (0.0, -1.0),
    ],
    dtype=np.float64,
)


def _fade(t: np.ndarray) -> np.ndarray:
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def build_permutation(rng: Mulberry32) -> np.ndarray:
    """Shuffle 0..255 with `rng` and double it to 512 entries."""

    perm = np.array(rng.shuffle(range(256)), dtype=np.int64)
    return np.concatenate([perm, perm])


class GradientNoise2D:
    """Continuous Perlin-style gradient noise in approximately [-1, 1]."""

    def __init__(self, rng: Mulberry32) -> None:
        self.perm = build_permutation(rng)

    def _corner(self, ix: np.ndarray, iy: np.ndarray, dx: np.ndarray, dy: np.ndarray) -> np.ndarray:
        gi = self.perm[ix + self.perm[iy]] & 7
        grad = _GRADIENTS[gi]
        return grad[..., 0] * dx + grad[..., 1] * dy

    def sample(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        """Evaluate noise at arbitrary float coordinates (broadcast arrays)."""

        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        x, y = np.broadcast_arrays(x, y)

        x0 = np.floor(x)
        y0 = np.floor(y)
        fx = x - x0
        fy = y - y0
        ix = x0.astype(np.int64) & 255
        iy = y0.astype(np.int64) & 255
        ix1 = (ix + 1) & 255
        iy1 = (iy + 1) & 255

        n00 = self._corner(ix, iy, fx, fy)
        n10 = self._corner(ix1, iy, fx - 1.0, fy)
        n01 = self._corner(ix, iy1, fx, fy - 1.0)
        n11 = self._corner(ix1, iy1, fx - 1.0, fy - 1.0)

        u = _fade(fx)
        v = _fade(fy)
        top = n00 + u * (n10 - n00)
        bottom = n01 + u * (n11 - n01)
        return top + v * (bottom - top)


def fbm_grid(
    noise: GradientNoise2D,
    width: int,
    height: int,
    *,
    scale: float,
    octaves: int,
    persistence: float,
    lacunarity: float,
) -> np.ndarray:
    """Sum `octaves` layers of `noise` over a width x height lattice, unnormalized."""

    if width <= 0 or height <= 0:
        raise ValueError("width and height must be positive")

    yy, xx = np.indices((height, width), dtype=np.float64)
    field = np.zeros((height, width), dtype=np.float64)
    for octave in range(max(1, int(octaves))):
        freq = scale * lacunarity**octave
        amplitude = persistence**octave
        field += amplitude * noise.sample(xx * freq, yy * freq)
    return field
