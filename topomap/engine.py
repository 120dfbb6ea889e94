"""Terrain engine: cached heightmap and contours, per-pass zones."""

from __future__ import annotations

from dataclasses import dataclass
import threading
from typing import Callable, Generic, Hashable, TypeVar

import structlog

from topomap.config import MapConfig, grid_dimensions
from topomap.contours import Contour, extract_contours
from topomap.heightfield import Heightmap, generate_heightmap
from topomap.rng import RngStream
from topomap.zones import Zone, ZoneSynthesisResult, synthesize_zones

logger = structlog.get_logger()

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass(frozen=True)
class HeightmapKey:
    seed: str
    grid_width: int
    grid_height: int
    scale: float
    octaves: int
    persistence: float
    lacunarity: float

    @classmethod
    def from_config(cls, config: MapConfig) -> "HeightmapKey":
        grid_width, grid_height = grid_dimensions(config.width, config.height)
        noise = config.noise_config()
        return cls(
            seed=config.seed,
            grid_width=grid_width,
            grid_height=grid_height,
            scale=noise.scale,
            octaves=noise.octaves,
            persistence=noise.persistence,
            lacunarity=noise.lacunarity,
        )


@dataclass(frozen=True)
class ContourKey:
    heightmap: HeightmapKey
    levels: int


class MemoSlot(Generic[K, V]):
    """Single-entry memo replaced whenever the key differs."""

    def __init__(self) -> None:
        self.key: K | None = None
        self.value: V | None = None
        self.hits = 0
        self.misses = 0

    def get_or_compute(self, key: K, compute: Callable[[], V]) -> V:
        if self.key is not None and self.key == key:
            self.hits += 1
            return self.value  # type: ignore[return-value]
        self.misses += 1
        value = compute()
        self.key = key
        self.value = value
        return value

    def clear(self) -> None:
        self.key = None
        self.value = None


class TerrainCache:
    """Heightmap and contour memoization owned by one engine."""

    def __init__(self) -> None:
        self.heightmaps: MemoSlot[HeightmapKey, Heightmap] = MemoSlot()
        self.contours: MemoSlot[ContourKey, list[Contour]] = MemoSlot()
        self.lock = threading.RLock()

    def clear(self) -> None:
        with self.lock:
            self.heightmaps.clear()
            self.contours.clear()


@dataclass(frozen=True)
class EngineOutput:
    """Everything rendering collaborators consume for one pass."""

    config: MapConfig
    heightmap: Heightmap
    grid_width: int
    grid_height: int
    contours: list[Contour]
    zones: list[Zone]
    zone_result: ZoneSynthesisResult | None


class TerrainEngine:
    """Produces heightmap, contour set and zones for a `MapConfig`."""

    def __init__(self, cache: TerrainCache | None = None) -> None:
        self.cache = cache or TerrainCache()

    def heightmap(self, config: MapConfig) -> Heightmap:
        cfg = config.clamped()
        key = HeightmapKey.from_config(cfg)

        def _compute() -> Heightmap:
            logger.info("generating heightmap", seed=key.seed, grid=(key.grid_width, key.grid_height))
            return generate_heightmap(
                key.grid_width,
                key.grid_height,
                RngStream(key.seed),
                config=cfg.noise_config(),
            )

        with self.cache.lock:
            return self.cache.heightmaps.get_or_compute(key, _compute)

    def contours(self, config: MapConfig) -> list[Contour]:
        cfg = config.clamped()
        key = ContourKey(HeightmapKey.from_config(cfg), cfg.contour_levels)
        with self.cache.lock:
            heightmap = self.heightmap(cfg)
            return self.cache.contours.get_or_compute(key, lambda: extract_contours(heightmap, key.levels))

    def zones(self, config: MapConfig) -> ZoneSynthesisResult:
        """Recompute zones from the dedicated `zones` stream; never cached."""

        cfg = config.clamped()
        heightmap = self.heightmap(cfg)
        thresholds = [c.value for c in self.contours(cfg)]
        rng = RngStream(cfg.seed).fork("zones").generator()
        return synthesize_zones(heightmap, thresholds, cfg.width, cfg.height, rng, config=cfg.zones)

    def render(self, config: MapConfig) -> EngineOutput:
        cfg = config.clamped()
        heightmap = self.heightmap(cfg)
        contours = self.contours(cfg)
        zone_result = self.zones(cfg) if cfg.show_zones else None
        zones = zone_result.zones if zone_result is not None else []
        logger.info(
            "render pass complete",
            contours=len(contours),
            zones=len(zones),
            heightmap_hits=self.cache.heightmaps.hits,
            contour_hits=self.cache.contours.hits,
        )
        return EngineOutput(
            config=cfg,
            heightmap=heightmap,
            grid_width=heightmap.width,
            grid_height=heightmap.height,
            contours=contours,
            zones=zones,
            zone_result=zone_result,
        )
