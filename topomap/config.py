"""Configuration models for terrain map generation."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from typing import Any


DEFAULT_WIDTH = 1920
DEFAULT_HEIGHT = 1080
MIN_DIMENSION = 100
GRID_SIZE = 250

THEMES = ("light", "dark")
CONTOUR_COLOR_MODES = ("mono", "elevation", "fade")

RESOLUTION_PRESETS: dict[str, tuple[int, int] | None] = {
    "1080p": (1920, 1080),
    "1440p": (2560, 1440),
    "4k": (3840, 2160),
    "phone": (1170, 2532),
    "ultrawide": (3440, 1440),
    "custom": None,
}

ZONE_LABELS: tuple[str, ...] = (
    "SECTOR ALPHA",
    "SECTOR DELTA",
    "OUTPOST 07",
    "RELAY POINT",
    "SURVEY AREA",
    "EXCLUSION ZONE",
    "BASIN WATCH",
    "RIDGE ARRAY",
    "DEPOT 12",
    "SIGNAL FIELD",
    "NORTH FLANK",
    "DRY VALLEY",
)


@dataclass(frozen=True)
class NoiseConfig:
    """Fractal noise parameters for heightmap synthesis."""

    scale: float = 0.006
    octaves: int = 4
    persistence: float = 0.5
    lacunarity: float = 2.0


@dataclass(frozen=True)
class ZoneConfig:
    """Controls terrain-aware zone synthesis."""

    seed_count_range: tuple[int, int] = (25, 40)
    terrain_fraction: float = 0.6
    jitter_fraction: float = 0.015
    edge_inset_fraction: float = 0.02
    band_count_range: tuple[int, int] = (5, 8)
    gradient_percentile: float = 0.75
    min_region_cells: int = 2
    center_exclusion_fraction: float = 0.15
    zone_count_range: tuple[int, int] = (3, 5)
    highlight_count_range: tuple[int, int] = (1, 2)
    labels: tuple[str, ...] = ZONE_LABELS


@dataclass(frozen=True)
class RenderConfig:
    """Presentation constants for the raster renderer."""

    index_contour_period: int = 5
    contour_width: float = 0.6
    index_contour_width: float = 1.4
    fade_min_alpha: float = 0.15
    zone_tint_alpha: float = 0.08
    zone_hatch_alpha: float = 0.15
    zone_hatch_width: float = 0.8
    zone_border_alpha: float = 0.2
    zone_highlight_alpha: float = 0.5
    zone_highlight_width: float = 1.5
    zone_label_alpha: float = 0.6
    zone_label_scale: float = 0.012


@dataclass(frozen=True)
class MapConfig:
    """Complete parameter set for one rendered terrain map."""

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    preset: str = "1080p"
    theme: str = "light"
    accent_color: str = "#FFE600"
    seed: str = "quiet-harbor-0001"
    noise_scale: float = 0.006
    octaves: int = 4
    persistence: float = 0.5
    lacunarity: float = 2.0
    contour_levels: int = 20
    contour_color_mode: str = "mono"
    show_grid: bool = True
    show_annotations: bool = True
    show_cjk_text: bool = True
    show_frames: bool = True
    show_accents: bool = True
    show_scan_lines: bool = True
    show_data_panel: bool = True
    show_reticles: bool = True
    show_corner_data: bool = True
    show_zones: bool = True
    show_hero_text: bool = False
    zones: ZoneConfig = field(default_factory=ZoneConfig)
    render: RenderConfig = field(default_factory=RenderConfig)

    def clamped(self) -> "MapConfig":
        """Return a copy with out-of-range values clamped to their minimum."""

        theme = self.theme if self.theme in THEMES else "light"
        mode = self.contour_color_mode if self.contour_color_mode in CONTOUR_COLOR_MODES else "mono"
        return replace(
            self,
            width=max(MIN_DIMENSION, int(self.width)),
            height=max(MIN_DIMENSION, int(self.height)),
            octaves=max(1, int(self.octaves)),
            contour_levels=max(1, int(self.contour_levels)),
            theme=theme,
            contour_color_mode=mode,
        )

    def noise_config(self) -> NoiseConfig:
        return NoiseConfig(
            scale=float(self.noise_scale),
            octaves=int(self.octaves),
            persistence=float(self.persistence),
            lacunarity=float(self.lacunarity),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def grid_dimensions(width: int, height: int, grid_size: int = GRID_SIZE) -> tuple[int, int]:
    """Aspect-locked heightmap grid size with `grid_size` cells on the longer axis."""

    width = max(MIN_DIMENSION, int(width))
    height = max(MIN_DIMENSION, int(height))
    aspect = width / height
    if aspect >= 1.0:
        return grid_size, max(2, _round_half_up(grid_size / aspect))
    return max(2, _round_half_up(grid_size * aspect)), grid_size


def apply_resolution_preset(config: MapConfig, preset: str) -> MapConfig:
    """Switch to a named resolution preset; `custom` keeps the current size."""

    if preset not in RESOLUTION_PRESETS:
        raise ValueError(f"unknown resolution preset: {preset}")
    size = RESOLUTION_PRESETS[preset]
    if size is None:
        return replace(config, preset=preset)
    return replace(config, preset=preset, width=size[0], height=size[1])


def _round_half_up(value: float) -> int:
    return int(value + 0.5)
