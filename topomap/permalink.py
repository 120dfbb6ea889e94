"""Compact shareable encoding of `MapConfig`."""

from __future__ import annotations

import base64
import binascii
from dataclasses import fields, replace
import json
from typing import Any

import structlog

from topomap.config import MapConfig

logger = structlog.get_logger()

# Persisted keys in encoded order; nested zone/render settings are not shared.
_FIELD_KEYS: dict[str, str] = {
    "width": "width",
    "height": "height",
    "preset": "preset",
    "theme": "theme",
    "accent_color": "accentColor",
    "seed": "seed",
    "noise_scale": "noiseScale",
    "octaves": "octaves",
    "persistence": "persistence",
    "lacunarity": "lacunarity",
    "contour_levels": "contourLevels",
    "contour_color_mode": "contourColorMode",
    "show_grid": "showGrid",
    "show_annotations": "showAnnotations",
    "show_cjk_text": "showCjkText",
    "show_frames": "showFrames",
    "show_accents": "showAccents",
    "show_scan_lines": "showScanLines",
    "show_data_panel": "showDataPanel",
    "show_reticles": "showReticles",
    "show_corner_data": "showCornerData",
    "show_zones": "showZones",
    "show_hero_text": "showHeroText",
}


def config_to_payload(config: MapConfig) -> dict[str, Any]:
    return {key: getattr(config, name) for name, key in _FIELD_KEYS.items()}


def encode_config(config: MapConfig) -> str:
    """Base64 of the compact JSON form of `config`."""

    text = json.dumps(config_to_payload(config), separators=(",", ":"), ensure_ascii=False)
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def decode_config(encoded: str | None) -> MapConfig | None:
    """Decode a permalink payload; malformed input yields None, never an exception."""

    if not isinstance(encoded, str):
        return None
    raw = encoded.strip()
    if raw.startswith("#"):
        raw = raw[1:]
    if not raw:
        return None

    try:
        text = base64.b64decode(raw, validate=True).decode("utf-8")
        payload = json.loads(text)
    except (binascii.Error, UnicodeDecodeError, ValueError, RecursionError) as exc:
        logger.info("permalink rejected", reason=type(exc).__name__)
        return None

    if not isinstance(payload, dict):
        return None
    if not _is_int(payload.get("width")) or not isinstance(payload.get("seed"), str):
        logger.info("permalink rejected", reason="missing width or seed")
        return None
    return payload_to_config(payload)


def payload_to_config(payload: dict[str, Any]) -> MapConfig:
    """Build a clamped config, keeping only fields whose type matches the default."""

    defaults = MapConfig()
    types = {f.name: type(getattr(defaults, f.name)) for f in fields(MapConfig)}
    updates: dict[str, Any] = {}
    for name, key in _FIELD_KEYS.items():
        if key not in payload:
            continue
        value = payload[key]
        expected = types[name]
        if expected is bool:
            if isinstance(value, bool):
                updates[name] = value
        elif expected is int:
            if _is_int(value):
                updates[name] = int(value)
        elif expected is float:
            if _is_number(value):
                updates[name] = float(value)
        elif isinstance(value, expected):
            updates[name] = value
    return replace(defaults, **updates).clamped()


def _is_int(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
