"""Theme palettes and contour stroke styling."""

from __future__ import annotations

from dataclasses import dataclass, replace

from matplotlib.colors import LinearSegmentedColormap, to_rgb

from topomap.config import RenderConfig

RGB = tuple[int, int, int]


@dataclass(frozen=True)
class ThemePalette:
    background: str
    contour_line: str
    contour_index: str
    grid_major: str
    grid_minor: str
    grid_label: str
    text_primary: str
    text_secondary: str
    accent: str
    frame_line: str


PALETTES: dict[str, ThemePalette] = {
    "light": ThemePalette(
        background="#e8e6e1",
        contour_line="#b4b0a8",
        contour_index="#7d7970",
        grid_major="#cfccc5",
        grid_minor="#dcd9d3",
        grid_label="#9c988f",
        text_primary="#1c1c1c",
        text_secondary="#5c5a55",
        accent="#ffe600",
        frame_line="#3a3935",
    ),
    "dark": ThemePalette(
        background="#111214",
        contour_line="#34373c",
        contour_index="#5d6168",
        grid_major="#24262a",
        grid_minor="#1a1c1f",
        grid_label="#4a4d53",
        text_primary="#e9e9e9",
        text_secondary="#9a9ea6",
        accent="#ffe600",
        frame_line="#c9ccd1",
    ),
}


@dataclass(frozen=True)
class ContourStyle:
    color: RGB
    width: float
    alpha: float
    is_index: bool


def get_palette(theme: str, accent_color: str | None = None) -> ThemePalette:
    palette = PALETTES.get(theme, PALETTES["light"])
    if accent_color:
        try:
            to_rgb(accent_color)
        except ValueError:
            return palette
        palette = replace(palette, accent=accent_color)
    return palette


def to_rgb8(color: str) -> RGB:
    r, g, b = to_rgb(color)
    return (int(round(r * 255)), int(round(g * 255)), int(round(b * 255)))


def contour_style(
    index: int,
    total: int,
    mode: str,
    palette: ThemePalette,
    config: RenderConfig | None = None,
) -> ContourStyle:
    """Stroke for contour `index` of `total`; every Nth contour is an index line."""

    cfg = config or RenderConfig()
    is_index = index % cfg.index_contour_period == 0
    t = index / (total - 1) if total > 1 else 0.0
    width = cfg.index_contour_width if is_index else cfg.contour_width

    if mode == "elevation":
        cmap = LinearSegmentedColormap.from_list("elevation", [palette.contour_line, palette.accent])
        r, g, b, _ = cmap(t)
        color = (int(round(r * 255)), int(round(g * 255)), int(round(b * 255)))
        return ContourStyle(color, width, 1.0, is_index)

    color = to_rgb8(palette.contour_index if is_index else palette.contour_line)
    if mode == "fade":
        return ContourStyle(color, width, cfg.fade_min_alpha + (1.0 - cfg.fade_min_alpha) * t, is_index)
    return ContourStyle(color, width, 1.0, is_index)
