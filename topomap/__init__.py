"""Procedural contour terrain map generation package."""

from .config import DEFAULT_HEIGHT, DEFAULT_WIDTH, MapConfig, NoiseConfig, ZoneConfig
from .engine import EngineOutput, TerrainEngine

__all__ = [
    "DEFAULT_WIDTH",
    "DEFAULT_HEIGHT",
    "MapConfig",
    "NoiseConfig",
    "ZoneConfig",
    "TerrainEngine",
    "EngineOutput",
]
