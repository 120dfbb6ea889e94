"""Output serialization for generated map artifacts."""

from __future__ import annotations

import json
from pathlib import Path
import re
import shutil
from typing import Any

import numpy as np
from PIL import Image

from topomap.contours import Contour
from topomap.zones import Zone

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def seed_dirname(seed: str) -> str:
    """Filesystem-safe directory name for an arbitrary seed string."""

    cleaned = _UNSAFE_CHARS.sub("_", seed).strip("._")
    return cleaned or "seed"


def resolve_output_dir(
    out_root: str | Path,
    seed: str,
    width: int,
    height: int,
    *,
    overwrite: bool,
) -> Path:
    """Create and return the output directory for one generation run."""

    target = Path(out_root) / seed_dirname(seed) / f"{width}x{height}"
    if target.exists() and any(target.iterdir()) and not overwrite:
        raise FileExistsError(
            f"Output directory already exists and is not empty: {target}. Use --overwrite to replace files."
        )
    target.mkdir(parents=True, exist_ok=True)
    return target


def clean_output_dir(target: Path, *, out_root: Path) -> None:
    """Delete all children of `target`, which must live under `out_root`."""

    target_r = target.resolve()
    target_r.relative_to(out_root.resolve())
    for child in target_r.iterdir():
        if child.is_symlink() or child.is_file():
            child.unlink()
        elif child.is_dir():
            shutil.rmtree(child)


def write_height_npy(path: str | Path, values: np.ndarray) -> None:
    np.save(Path(path), values.astype(np.float64), allow_pickle=False)


def write_png_u16(path: str | Path, raster_u16: np.ndarray) -> None:
    Image.fromarray(raster_u16.astype(np.uint16)).save(Path(path))


def write_png_u8(path: str | Path, raster_u8: np.ndarray) -> None:
    Image.fromarray(raster_u8.astype(np.uint8)).save(Path(path))


def write_json(path: str | Path, payload: dict[str, Any]) -> None:
    text = json.dumps(payload, indent=2, sort_keys=True)
    Path(path).write_text(text + "\n", encoding="utf-8")


def contours_to_json(contours: list[Contour]) -> list[dict[str, Any]]:
    return [
        {
            "value": contour.value,
            "coordinates": [[ring.round(4).tolist() for ring in polygon] for polygon in contour.polygons],
        }
        for contour in contours
    ]


def zones_to_json(zones: list[Zone]) -> list[dict[str, Any]]:
    return [
        {
            "label": zone.label,
            "highlighted": zone.highlighted,
            "centroid": [round(zone.centroid[0], 4), round(zone.centroid[1], 4)],
            "area": round(zone.area, 4),
            "cells": list(zone.cells),
            "polygons": [poly.round(4).tolist() for poly in zone.polygons],
        }
        for zone in zones
    ]
