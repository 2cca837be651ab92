from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
from PIL import Image


@dataclass
class SegmentationResult:
    mask: np.ndarray          # (H, W) float32 path probability, 0..1
    confidence: float
    bbox: Optional[Tuple[float, float, float, float]] = None  # cx, cy, w, h in mask pixels
    class_id: int = 0


def safe_class_map(mask: np.ndarray) -> np.ndarray:
    """
    Ensure mask is integer (class-id map). Some pipelines output float32;
    values are near integers, so round and cast.
    """
    if mask is None:
        return mask
    if np.issubdtype(mask.dtype, np.floating):
        return np.rint(mask).astype(np.int32, copy=False)
    if not np.issubdtype(mask.dtype, np.integer):
        return mask.astype(np.int32, copy=False)
    return mask


def class_map_to_mask(cls_map: np.ndarray, path_class: int) -> np.ndarray:
    """1.0 where the pixel belongs to the path class, else 0.0."""
    cls_map = safe_class_map(cls_map)
    return (cls_map == path_class).astype(np.float32)


def resize_mask(mask: np.ndarray, size: Tuple[int, int] = (640, 640)) -> np.ndarray:
    """Resize a probability mask to (width, height) with bilinear sampling."""
    mask = np.asarray(mask, dtype=np.float32)
    h, w = mask.shape[:2]
    if (w, h) == tuple(size):
        return mask
    img = Image.fromarray(mask).resize(size, Image.BILINEAR)
    return np.clip(np.asarray(img, dtype=np.float32), 0.0, 1.0)


def overlay_mask(image: Image.Image, mask: np.ndarray, threshold: float = 0.5) -> Image.Image:
    """Paint mask pixels above threshold semi-transparent green over the image."""
    base = image.convert("RGBA")
    fg = (np.asarray(mask) > threshold).astype(np.uint8) * 120
    alpha = Image.fromarray(fg).resize(base.size, Image.NEAREST)
    green = Image.new("RGBA", base.size, (0, 255, 0, 0))
    green.putalpha(alpha)
    return Image.alpha_composite(base, green).convert("RGB")
