from __future__ import annotations

from dataclasses import replace

import numpy as np
import pytest
from PIL import Image, ImageFont

from topomap.config import MapConfig, RenderConfig
from topomap.engine import TerrainEngine
from topomap.palette import PALETTES, contour_style, get_palette, to_rgb8
from topomap.render import draw_zones, load_label_font, render_map
from topomap.zones import Zone

SMALL = MapConfig(width=240, height=160, seed="render-check", contour_levels=12)


def test_render_matches_canvas_size() -> None:
    image = render_map(TerrainEngine().render(SMALL))

    assert image.mode == "RGB"
    assert image.size == (240, 160)


def test_contour_color_mode_changes_pixels() -> None:
    engine = TerrainEngine()
    mono = np.asarray(render_map(engine.render(SMALL)))
    elevation = np.asarray(render_map(engine.render(replace(SMALL, contour_color_mode="elevation"))))

    assert not np.array_equal(mono, elevation)


def test_theme_sets_background() -> None:
    config = replace(SMALL, theme="dark", contour_levels=1, show_zones=False)
    image = render_map(TerrainEngine().render(config))
    colors = {color for _, color in image.getcolors(maxcolors=240 * 160)}

    assert to_rgb8(PALETTES["dark"].background) in colors


def test_zone_layer_only_touches_zone_interior() -> None:
    background = (255, 255, 255, 255)
    canvas = Image.new("RGBA", (200, 200), background)
    square = np.array([[50.0, 50.0], [150.0, 50.0], [150.0, 150.0], [50.0, 150.0]])
    zone = Zone(
        cells=(0,),
        polygons=(square,),
        centroid=(100.0, 100.0),
        area=10000.0,
        highlighted=True,
        label="SECTOR ALPHA",
    )

    draw_zones(canvas, [zone], get_palette("light"), RenderConfig())

    assert canvas.getpixel((10, 10)) == background
    assert canvas.getpixel((190, 120)) == background
    assert canvas.getpixel((100, 60)) != background


def test_contour_style_marks_every_fifth_line() -> None:
    palette = get_palette("light")
    styles = [contour_style(i, 11, "mono", palette) for i in range(11)]

    assert [s.is_index for s in styles] == [i % 5 == 0 for i in range(11)]
    assert styles[0].width > styles[1].width
    assert styles[0].color == to_rgb8(palette.contour_index)
    assert styles[1].color == to_rgb8(palette.contour_line)


def test_fade_and_elevation_styles_span_the_range() -> None:
    palette = get_palette("light", "#00ff00")

    assert contour_style(0, 10, "fade", palette).alpha == pytest.approx(0.15)
    assert contour_style(9, 10, "fade", palette).alpha == pytest.approx(1.0)
    assert contour_style(9, 10, "elevation", palette).color == (0, 255, 0)
    assert contour_style(0, 10, "elevation", palette).color == to_rgb8(palette.contour_line)


def test_invalid_accent_keeps_theme_accent() -> None:
    assert get_palette("dark", "not-a-color").accent == PALETTES["dark"].accent


def test_label_font_falls_back_to_default(monkeypatch) -> None:
    def _missing(*_args, **_kwargs):
        raise OSError("cannot open resource")

    monkeypatch.setattr(ImageFont, "truetype", _missing)
    load_label_font.cache_clear()
    try:
        font = load_label_font(14)
    finally:
        load_label_font.cache_clear()

    assert font is not None
    assert font.getbbox("ZONE")[2] > 0
