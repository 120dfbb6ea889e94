"""Raster rendering of contour and zone layers with Pillow."""

from __future__ import annotations

from functools import lru_cache

import numpy as np
import structlog
from PIL import Image, ImageChops, ImageDraw, ImageFont

from topomap.config import RenderConfig
from topomap.contours import Contour
from topomap.engine import EngineOutput
from topomap.geometry import bounding_box
from topomap.palette import ThemePalette, contour_style, get_palette, to_rgb8
from topomap.zones import Zone

logger = structlog.get_logger()

LABEL_FONT_CANDIDATES = ("DejaVuSans-Bold.ttf", "Arial Bold.ttf", "arialbd.ttf")


@lru_cache(maxsize=16)
def load_label_font(size: int) -> ImageFont.ImageFont | ImageFont.FreeTypeFont:
    """Load a bold label font, falling back to Pillow's built-in font."""

    for name in LABEL_FONT_CANDIDATES:
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    logger.warning("label font unavailable, using default", size=size)
    return ImageFont.load_default(size=size)


def render_map(output: EngineOutput, palette: ThemePalette | None = None) -> Image.Image:
    """Draw background, contours and zones for one engine pass."""

    cfg = output.config
    pal = palette or get_palette(cfg.theme, cfg.accent_color)
    size = (cfg.width, cfg.height)

    canvas = Image.new("RGBA", size, to_rgb8(pal.background) + (255,))
    scale_x = cfg.width / output.grid_width
    scale_y = cfg.height / output.grid_height

    draw_contours(canvas, output.contours, scale_x, scale_y, cfg.contour_color_mode, pal, cfg.render)
    if cfg.show_zones:
        draw_zones(canvas, output.zones, pal, cfg.render)
    return canvas.convert("RGB")


def draw_contours(
    canvas: Image.Image,
    contours: list[Contour],
    scale_x: float,
    scale_y: float,
    mode: str,
    palette: ThemePalette,
    config: RenderConfig,
) -> None:
    total = len(contours)
    opaque = ImageDraw.Draw(canvas)
    for i, contour in enumerate(contours):
        style = contour_style(i, total, mode, palette, config)
        width = max(1, int(round(style.width)))
        alpha = int(round(style.alpha * 255))
        if alpha >= 255:
            _stroke_rings(opaque, contour, scale_x, scale_y, style.color + (255,), width)
            continue
        layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        _stroke_rings(ImageDraw.Draw(layer), contour, scale_x, scale_y, style.color + (alpha,), width)
        canvas.alpha_composite(layer)


def _stroke_rings(
    draw: ImageDraw.ImageDraw,
    contour: Contour,
    scale_x: float,
    scale_y: float,
    fill: tuple[int, int, int, int],
    width: int,
) -> None:
    for polygon in contour.polygons:
        for ring in polygon:
            if ring.shape[0] < 2:
                continue
            pts = ring * np.array([scale_x, scale_y])
            draw.line([tuple(p) for p in pts], fill=fill, width=width, joint="curve")


def draw_zones(canvas: Image.Image, zones: list[Zone], palette: ThemePalette, config: RenderConfig) -> None:
    width, height = canvas.size
    frame = to_rgb8(palette.frame_line)
    accent = to_rgb8(palette.accent)
    spacing = max(3, round(width / 300))
    font_size = max(8, round(min(width, height) * config.zone_label_scale))

    for zone in zones:
        if not zone.polygons:
            continue
        mask = Image.new("L", canvas.size, 0)
        mask_draw = ImageDraw.Draw(mask)
        for poly in zone.polygons:
            mask_draw.polygon([tuple(p) for p in poly], fill=255)

        tint = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        tint.paste(frame + (int(round(config.zone_tint_alpha * 255)),), mask=mask)
        canvas.alpha_composite(tint)

        # 45 degree hatch across the zone bounding box, clipped to the cells.
        min_x, min_y, max_x, max_y = bounding_box(list(zone.polygons))
        box_w = max_x - min_x
        box_h = max_y - min_y
        hatch = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        hatch_draw = ImageDraw.Draw(hatch)
        hatch_fill = frame + (int(round(config.zone_hatch_alpha * 255)),)
        d = -box_h
        while d < box_w + box_h:
            hatch_draw.line(
                [(min_x + d, max_y), (min_x + d + box_h, min_y)],
                fill=hatch_fill,
                width=max(1, int(round(config.zone_hatch_width))),
            )
            d += spacing
        alpha = ImageChops.multiply(hatch.getchannel("A"), mask)
        hatch.putalpha(alpha)
        canvas.alpha_composite(hatch)

        border = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        border_draw = ImageDraw.Draw(border)
        if zone.highlighted:
            outline = accent + (int(round(config.zone_highlight_alpha * 255)),)
            stroke = max(1, int(round(config.zone_highlight_width)))
        else:
            outline = frame + (int(round(config.zone_border_alpha * 255)),)
            stroke = 1
        for poly in zone.polygons:
            pts = [tuple(p) for p in poly]
            border_draw.line(pts + pts[:1], fill=outline, width=stroke)
        canvas.alpha_composite(border)

        label = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        ImageDraw.Draw(label).text(
            zone.centroid,
            zone.label,
            fill=to_rgb8(palette.text_secondary) + (int(round(config.zone_label_alpha * 255)),),
            font=load_label_font(font_size),
            anchor="mm",
        )
        canvas.alpha_composite(label)
