"""Planar polygon helpers shared by tessellation and zone synthesis."""

from __future__ import annotations

import numpy as np


def polygon_area(polygon: np.ndarray) -> float:
    """Unsigned polygon area by the shoelace formula."""

    pts = np.asarray(polygon, dtype=np.float64)
    if pts.shape[0] < 3:
        return 0.0
    x = pts[:, 0]
    y = pts[:, 1]
    x_prev = np.roll(x, 1)
    y_prev = np.roll(y, 1)
    return float(abs(np.sum(x_prev * y - x * y_prev)) / 2.0)


def rectangle(x0: float, y0: float, x1: float, y1: float) -> np.ndarray:
    return np.array([(x0, y0), (x1, y0), (x1, y1), (x0, y1)], dtype=np.float64)


def clip_half_plane(polygon: np.ndarray, normal: np.ndarray, offset: float) -> np.ndarray:
    """Clip a convex polygon to the half-plane ``dot(p, normal) <= offset``."""

    if polygon.shape[0] == 0:
        return polygon
    side = polygon @ normal - offset
    out: list[np.ndarray] = []
    count = polygon.shape[0]
    for i in range(count):
        cur = polygon[i]
        nxt = polygon[(i + 1) % count]
        d_cur = side[i]
        d_nxt = side[(i + 1) % count]
        if d_cur <= 0.0:
            out.append(cur)
        if (d_cur < 0.0 < d_nxt) or (d_nxt < 0.0 < d_cur):
            t = d_cur / (d_cur - d_nxt)
            out.append(cur + t * (nxt - cur))
    if not out:
        return np.empty((0, 2), dtype=np.float64)
    return np.array(out, dtype=np.float64)


def bisector_clip(polygon: np.ndarray, site: np.ndarray, other: np.ndarray) -> np.ndarray:
    """Keep the part of `polygon` closer to `site` than to `other`."""

    normal = other - site
    midpoint = (site + other) / 2.0
    return clip_half_plane(polygon, normal, float(midpoint @ normal))


def bounding_box(polygons: list[np.ndarray]) -> tuple[float, float, float, float]:
    stacked = np.vstack(polygons)
    return (
        float(stacked[:, 0].min()),
        float(stacked[:, 1].min()),
        float(stacked[:, 0].max()),
        float(stacked[:, 1].max()),
    )
