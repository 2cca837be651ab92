"""
Mask geometry: centroid and row-sampled centerline of the path mask.

The mask is a per-pixel foreground probability grid (H x W, values 0..1).
It may arrive flat (W*H, row-major) as produced by the model wrapper,
or already shaped.
"""

from __future__ import annotations

from typing import List, Optional

import numpy as np

from .models import Point


def as_grid(mask, width: int, height: int) -> np.ndarray:
    """
    Return the mask as a float32 (height, width) array without copying
    when possible. Raises ValueError on a size mismatch.
    """
    arr = np.asarray(mask, dtype=np.float32)
    if arr.ndim == 3 and arr.shape[0] == 1:
        arr = arr[0]
    if arr.ndim == 1:
        if arr.size != width * height:
            raise ValueError(f"flat mask has {arr.size} values, expected {width * height}")
        return arr.reshape(height, width)
    if arr.shape != (height, width):
        raise ValueError(f"mask shape {arr.shape} does not match ({height}, {width})")
    return arr


def count_foreground(grid: np.ndarray, threshold: float = 0.5) -> int:
    return int(np.count_nonzero(grid > threshold))


def compute_centroid(grid: np.ndarray, threshold: float = 0.5) -> Optional[Point]:
    """
    Mean (x, y) of all cells above threshold.
    None when nothing is above threshold (no foreground this frame).
    """
    ys, xs = np.nonzero(grid > threshold)
    if xs.size == 0:
        return None
    return float(xs.mean()), float(ys.mean())


def extract_centerline(grid: np.ndarray, threshold: float = 0.5, row_step: int = 20) -> List[Point]:
    """
    One point per sampled row (0, row_step, 2*row_step, ...): the midpoint
    between the leftmost and rightmost foreground pixel of that row.

    Rows without foreground, or with a single-pixel span, are skipped.
    Points come out ordered top to bottom (strictly increasing y).
    """
    h, w = grid.shape[:2]
    if h == 0 or w == 0:
        return []

    ys = np.arange(0, h, row_step)
    rows = grid[::row_step] > threshold

    has_pixel = rows.any(axis=1)
    min_x = rows.argmax(axis=1)
    max_x = (w - 1) - rows[:, ::-1].argmax(axis=1)

    keep = has_pixel & (max_x > min_x)

    return [
        ((float(x0) + float(x1)) / 2.0, float(y))
        for x0, x1, y in zip(min_x[keep], max_x[keep], ys[keep])
    ]
