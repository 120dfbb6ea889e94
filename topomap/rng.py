"""Deterministic string-seeded RNG streams.

The stream is reproducible bit-for-bit across platforms: the seed string is
folded to a 32-bit state with an xmur3-style hash over its UTF-16 code units,
and that state drives a Mulberry32 generator. All arithmetic is modulo 2**32.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, TypeVar

_MASK32 = 0xFFFFFFFF
_TWO_POW_32 = 4294967296.0

T = TypeVar("T")


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK32


def _rotl(value: int, bits: int) -> int:
    return ((value << bits) | (value >> (32 - bits))) & _MASK32


def _utf16_units(text: str) -> list[int]:
    data = text.encode("utf-16-le", errors="surrogatepass")
    return [data[i] | (data[i + 1] << 8) for i in range(0, len(data), 2)]


def hash_seed(seed: str) -> int:
    """Fold `seed` into an unsigned 32-bit integer state."""

    units = _utf16_units(seed)
    h = (1779033703 ^ len(units)) & _MASK32
    for unit in units:
        h = _imul(h ^ unit, 3432918353)
        h = _rotl(h, 13)
    h = _imul(h ^ (h >> 16), 2246822507)
    h = _imul(h ^ (h >> 13), 3266489909)
    return (h ^ (h >> 16)) & _MASK32


class Mulberry32:
    """Mulberry32 generator yielding floats in [0, 1)."""

    def __init__(self, state: int) -> None:
        self.state = int(state) & _MASK32
        self.draws = 0

    def __call__(self) -> float:
        return self.random()

    def random(self) -> float:
        self.draws += 1
        self.state = (self.state + 0x6D2B79F5) & _MASK32
        t = self.state
        t = _imul(t ^ (t >> 15), t | 1)
        t = (t ^ ((t + _imul(t ^ (t >> 7), t | 61)) & _MASK32)) & _MASK32
        return ((t ^ (t >> 14)) & _MASK32) / _TWO_POW_32

    def uniform(self, low: float, high: float) -> float:
        return low + self.random() * (high - low)

    def integer(self, low: int, high: int) -> int:
        """Uniform integer in the inclusive range [low, high]."""

        return int(self.random() * (high - low + 1)) + low

    def shuffle(self, items: Sequence[T]) -> list[T]:
        """Return a Fisher-Yates shuffled copy of `items`."""

        out = list(items)
        for i in range(len(out) - 1, 0, -1):
            j = int(self.random() * (i + 1))
            out[i], out[j] = out[j], out[i]
        return out


@dataclass(frozen=True)
class RngStream:
    """Immutable seed handle that forks independent per-layer streams."""

    seed: str

    def fork(self, layer: str) -> "RngStream":
        if not layer:
            raise ValueError("fork key must be non-empty")
        return RngStream(f"{self.seed}_{layer}")

    @property
    def state(self) -> int:
        return hash_seed(self.seed)

    def generator(self) -> Mulberry32:
        return Mulberry32(self.state)


def create_rng(seed: str) -> Mulberry32:
    """Shorthand for `RngStream(seed).generator()`."""

    return RngStream(seed).generator()
