"""CLI entry point for terrain map generation."""

from __future__ import annotations

import argparse
from dataclasses import replace
from datetime import datetime, timezone
import logging
from pathlib import Path
import platform
import shutil
import tempfile
import time

import numpy as np
import structlog

from topomap.config import (
    CONTOUR_COLOR_MODES,
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    RESOLUTION_PRESETS,
    THEMES,
    MapConfig,
    apply_resolution_preset,
)
from topomap.derive import height_preview_u16, hillshade
from topomap.engine import TerrainEngine
from topomap.io import (
    clean_output_dir,
    contours_to_json,
    resolve_output_dir,
    write_height_npy,
    write_json,
    write_png_u16,
    write_png_u8,
    zones_to_json,
)
from topomap.permalink import config_to_payload, decode_config, encode_config
from topomap.render import render_map
from topomap.seed import SeedError, normalize_seed, random_seed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Deterministic contour terrain map generator")
    parser.add_argument("--seed", default=None, help="Any seed string; a random readable seed when omitted")
    parser.add_argument("--config", default=None, help="Encoded permalink config to start from")
    parser.add_argument("--out", default="out", help="Output root directory")
    parser.add_argument("--preset", choices=tuple(RESOLUTION_PRESETS), default=None, help="Resolution preset")
    parser.add_argument("--w", type=int, default=None, help=f"Output width in pixels (default {DEFAULT_WIDTH})")
    parser.add_argument("--h", type=int, default=None, help=f"Output height in pixels (default {DEFAULT_HEIGHT})")
    parser.add_argument("--scale", type=float, default=None, help="Base noise scale (smaller = larger landmasses)")
    parser.add_argument("--octaves", type=int, default=None, help="Number of noise octaves")
    parser.add_argument("--persistence", type=float, default=None, help="Per-octave amplitude decay")
    parser.add_argument("--lacunarity", type=float, default=None, help="Per-octave frequency growth")
    parser.add_argument("--levels", type=int, default=None, help="Contour level count")
    parser.add_argument("--theme", choices=THEMES, default=None, help="Color theme")
    parser.add_argument("--accent", default=None, help="Accent color, e.g. '#FFE600'")
    parser.add_argument("--contour-mode", choices=CONTOUR_COLOR_MODES, default=None, help="Contour coloring")
    parser.add_argument(
        "--zones",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Draw territory zones",
    )
    parser.add_argument("--overwrite", action="store_true", help="Overwrite files in existing output directory")
    parser.add_argument(
        "--json",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Write geometry and metadata JSON files",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Engine log verbosity",
    )
    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(format="%(message)s", level=getattr(logging, level))
    # basicConfig is a no-op once handlers exist; the level must still apply.
    logging.getLogger().setLevel(getattr(logging, level))
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def build_config(args: argparse.Namespace, parser: argparse.ArgumentParser) -> MapConfig:
    config = MapConfig(seed=random_seed())
    if args.config is not None:
        decoded = decode_config(args.config)
        if decoded is None:
            print("Ignoring malformed --config payload; using defaults")
        else:
            config = decoded

    if args.preset is not None:
        config = apply_resolution_preset(config, args.preset)

    overrides = {
        "width": args.w,
        "height": args.h,
        "noise_scale": args.scale,
        "octaves": args.octaves,
        "persistence": args.persistence,
        "lacunarity": args.lacunarity,
        "contour_levels": args.levels,
        "theme": args.theme,
        "accent_color": args.accent,
        "contour_color_mode": args.contour_mode,
        "show_zones": args.zones,
    }
    if args.seed is not None:
        try:
            overrides["seed"] = normalize_seed(args.seed)
        except SeedError as exc:
            parser.error(str(exc))
    if args.w is not None or args.h is not None:
        overrides["preset"] = "custom"
    config = replace(config, **{k: v for k, v in overrides.items() if v is not None})
    return config.clamped()


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    config = build_config(args, parser)
    engine = TerrainEngine()

    generation_start = time.perf_counter()
    output = engine.render(config)
    generation_seconds = time.perf_counter() - generation_start

    render_start = time.perf_counter()
    image = render_map(output)
    render_seconds = time.perf_counter() - render_start

    heightmap = output.heightmap
    permalink = encode_config(config)

    out_dir = resolve_output_dir(args.out, config.seed, config.width, config.height, overwrite=args.overwrite)
    stage_dir = Path(tempfile.mkdtemp(prefix=".staging-", dir=str(out_dir.parent)))
    try:
        image.save(stage_dir / "map.png")
        write_height_npy(stage_dir / "height.npy", heightmap.values)
        write_png_u16(stage_dir / "height_16.png", height_preview_u16(heightmap.values))
        write_png_u8(stage_dir / "hillshade.png", hillshade(heightmap.values, z_factor=40.0))
        if args.json:
            deterministic_meta = {
                "config": config_to_payload(config),
                "permalink": permalink,
                "grid_width": output.grid_width,
                "grid_height": output.grid_height,
                "height_min": heightmap.min,
                "height_max": heightmap.max,
                "contour_thresholds": [c.value for c in output.contours],
                "contour_ring_counts": [c.ring_count for c in output.contours],
                "zone_count": len(output.zones),
                "zone_labels": [zone.label for zone in output.zones],
            }
            meta = {
                **deterministic_meta,
                "generated_at_utc": datetime.now(timezone.utc).isoformat(),
                "generation_seconds": generation_seconds,
                "render_seconds": render_seconds,
                "python_version": platform.python_version(),
                "numpy_version": np.__version__,
            }
            write_json(
                stage_dir / "geometry.json",
                {"contours": contours_to_json(output.contours), "zones": zones_to_json(output.zones)},
            )
            write_json(stage_dir / "deterministic_meta.json", deterministic_meta)
            write_json(stage_dir / "meta.json", meta)

        clean_output_dir(out_dir, out_root=Path(args.out))
        for child in stage_dir.iterdir():
            shutil.move(str(child), str(out_dir / child.name))
    finally:
        shutil.rmtree(stage_dir, ignore_errors=True)

    print(f"Generated map: {out_dir}")
    print(f"Seed: {config.seed}; grid {output.grid_width}x{output.grid_height}")
    print(
        "Contours: "
        f"{len(output.contours)} levels, "
        f"{sum(c.ring_count for c in output.contours)} rings, "
        f"range {heightmap.min:.3f}..{heightmap.max:.3f}"
    )
    print(f"Zones: {len(output.zones)} ({', '.join(zone.label for zone in output.zones) or 'none'})")
    print(f"Generation time: {generation_seconds:.3f} s; render time: {render_seconds:.3f} s")
    print(f"Permalink: #{permalink}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
