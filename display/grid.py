from __future__ import annotations

from typing import List

import numpy as np


def downsample_mask(
    grid: np.ndarray,
    *,
    grid_w: int = 32,
    grid_h: int = 32,
    threshold: float = 0.5,
    occ_threshold: float = 0.20,
) -> List[int]:
    """
    Convert a path probability mask into a coarse 0/1 grid for the OLED.
    A cell is 1 when at least `occ_threshold` of its pixels are path.
    """
    if grid is None or grid.size == 0:
        return [0] * (grid_w * grid_h)

    h, w = grid.shape[:2]
    fg = grid > threshold

    if h < grid_h or w < grid_w:
        # mask smaller than the grid: plain sampling
        ys = np.linspace(0, h - 1, grid_h).astype(int)
        xs = np.linspace(0, w - 1, grid_w).astype(int)
        return [1 if fg[y, x] else 0 for y in ys for x in xs]

    # crop so the mask divides evenly into cells
    bh = h // grid_h
    bw = w // grid_w
    cropped = fg[: bh * grid_h, : bw * grid_w].astype(np.uint8)

    # (grid_h, bh, grid_w, bw) -> mean per cell
    blocks = cropped.reshape(grid_h, bh, grid_w, bw)
    cell_mean = blocks.mean(axis=(1, 3))

    occ = (cell_mean >= occ_threshold).astype(np.uint8)
    return [int(x) for x in occ.reshape(-1)]
