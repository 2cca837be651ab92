"""
Vision collaborators for path guidance.

- inference backends producing a path probability mask:
  IMX500 on-sensor segmentation, YOLOv8-seg (ultralytics)
- frame sources: Picamera2 (IMX500), OpenCV webcam

Hardware/ML modules are imported on demand by the app so that the
guidance core and its tests do not need picamera2 or ultralytics.
"""

from .inference import (
    SegmentationResult,
    class_map_to_mask,
    overlay_mask,
    resize_mask,
    safe_class_map,
)
from .imx500_models import IMX500Paths, PATHS, DEFAULT_PATH_CLASS, assert_paths_exist, resolve_model

__all__ = [
    "SegmentationResult",
    "class_map_to_mask",
    "overlay_mask",
    "resize_mask",
    "safe_class_map",
    "IMX500Paths",
    "PATHS",
    "DEFAULT_PATH_CLASS",
    "assert_paths_exist",
    "resolve_model",
]
