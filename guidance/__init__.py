"""
Path guidance core.

Turns a per-frame path segmentation mask into a spoken directional hint:
- mask geometry (centroid, row-sampled centerline)
- least-squares centerline fit and angle
- offset / turn classification
- decision fusion (turn > offset)
- announcement throttle and frame admission gate

Hardware and model collaborators (camera, inference, speech, display)
live in their own packages and are injected into GuidanceSession.
"""

from .admission import AdmissionStats, FrameAdmissionController
from .announcer import AnnouncementThrottle
from .classifier import PathAnalyzer
from .config import GuidanceConfig
from .decision import decide
from .fitter import angle_from_slope, fit_centerline
from .geometry import as_grid, compute_centroid, count_foreground, extract_centerline
from .models import (
    Announcement,
    FitResult,
    FitStatus,
    FrameOutcome,
    Instruction,
    LineFit,
    Offset,
    PathAnalysis,
    Turn,
    VisualizationSnapshot,
)
from .pipeline import BlindPathGuide, snapshot_from

__all__ = [
    "AdmissionStats",
    "Announcement",
    "AnnouncementThrottle",
    "BlindPathGuide",
    "FitResult",
    "FitStatus",
    "FrameAdmissionController",
    "FrameOutcome",
    "GuidanceConfig",
    "Instruction",
    "LineFit",
    "Offset",
    "PathAnalysis",
    "PathAnalyzer",
    "Turn",
    "VisualizationSnapshot",
    "angle_from_slope",
    "as_grid",
    "compute_centroid",
    "count_foreground",
    "decide",
    "extract_centerline",
    "fit_centerline",
    "snapshot_from",
]
