from __future__ import annotations
from typing import Iterable, Tuple

import cv2
import numpy as np

from .config import DEFAULTS
from .events import GazePoint

# width of each colour band in the blue -> green -> yellow -> red ramp
BAND = 0.25


def _kernel(radius: int) -> np.ndarray:
    """Linear falloff max(0, 1 - d/r) on a (2r+1)x(2r+1) grid."""
    d = np.arange(-radius, radius + 1, dtype=np.float64)
    dist = np.sqrt(d[None, :] ** 2 + d[:, None] ** 2)
    return np.maximum(0.0, 1.0 - dist / radius)


def _round_half_up(a: np.ndarray) -> np.ndarray:
    return np.floor(a + 0.5)


def density_field(points: Iterable[GazePoint], width: int, height: int, radius: int = 30) -> np.ndarray:
    """
    Accumulate a (height, width) attention field. Points whose rounded position
    falls outside the field contribute nothing; kernels are clipped at the edges.
    """
    field = np.zeros((height, width), dtype=np.float64)
    xy = np.array([(p.x, p.y) for p in points], dtype=np.float64).reshape(-1, 2)
    if xy.size == 0 or width <= 0 or height <= 0:
        return field
    xy = _round_half_up(xy).astype(np.int64)
    inside = (xy[:, 0] >= 0) & (xy[:, 0] < width) & (xy[:, 1] >= 0) & (xy[:, 1] < height)
    xy = xy[inside]
    if xy.size == 0:
        return field

    if radius <= 0:
        np.add.at(field, (xy[:, 1], xy[:, 0]), 1.0)
        return field

    # identical cells are merged and visited in sorted order, so the result
    # does not depend on the order the points arrived in
    cells, counts = np.unique(xy, axis=0, return_counts=True)
    k = _kernel(radius)
    for (x, y), n in zip(cells, counts):
        x0, x1 = max(0, x - radius), min(width, x + radius + 1)
        y0, y1 = max(0, y - radius), min(height, y + radius + 1)
        field[y0:y1, x0:x1] += n * k[y0 - (y - radius):y1 - (y - radius), x0 - (x - radius):x1 - (x - radius)]
    return field


def normalize(field: np.ndarray) -> np.ndarray:
    peak = float(field.max()) if field.size else 0.0
    return field / (peak or 1.0)


def colorize(v: np.ndarray) -> np.ndarray:
    """Map normalized density in [0,1] to RGBA uint8 through four linear bands."""
    v = np.clip(v, 0.0, 1.0)
    r = np.zeros_like(v); g = np.zeros_like(v); b = np.zeros_like(v); a = np.zeros_like(v)

    # blue
    m = v < BAND
    t = v[m] / BAND
    b[m] = 255 * t; a[m] = 128 * t
    # green
    m = (v >= BAND) & (v < 2 * BAND)
    t = (v[m] - BAND) / BAND
    g[m] = 255 * t; b[m] = 255 * (1 - t); a[m] = 128 + 64 * t
    # yellow
    m = (v >= 2 * BAND) & (v < 3 * BAND)
    t = (v[m] - 2 * BAND) / BAND
    r[m] = 255 * t; g[m] = 255; a[m] = 192 + 32 * t
    # red
    m = v >= 3 * BAND
    t = (v[m] - 3 * BAND) / BAND
    r[m] = 255; g[m] = 255 * (1 - t); a[m] = 224

    rgba = np.stack([r, g, b, a], axis=-1)
    return np.clip(_round_half_up(rgba), 0, 255).astype(np.uint8)


def render(points: Iterable[GazePoint], width: int = DEFAULTS["heatmap_width"],
           height: int = DEFAULTS["heatmap_height"], radius: int = DEFAULTS["heatmap_radius"]) -> np.ndarray:
    """
    Full recompute over a snapshot of gaze points. Returns an RGBA buffer of shape
    (height, width, 4); an empty point set gives alpha 0 everywhere.
    """
    return colorize(normalize(density_field(points, width, height, radius)))


def encode_png(rgba: np.ndarray) -> bytes:
    ok, buf = cv2.imencode(".png", cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGRA))
    if not ok:
        raise RuntimeError("PNG encoding failed")
    return buf.tobytes()


def peak_cell(field: np.ndarray) -> Tuple[int, int]:
    """(x, y) of the densest cell."""
    y, x = np.unravel_index(int(np.argmax(field)), field.shape)
    return int(x), int(y)
