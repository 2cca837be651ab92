from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, List

from guidance.models import VisualizationSnapshot


@dataclass
class DisplayState:
    # analysis result for this frame
    snapshot: Optional[VisualizationSnapshot] = None

    # left panel: downsampled path mask, 0/1 list of size grid_w * grid_h
    grid_occ: Optional[List[int]] = None
    grid_w: int = 32
    grid_h: int = 32

    # mask coordinate space (centroid / fit are expressed in it)
    frame_w: int = 640
    frame_h: int = 640

    # right panel
    instruction: Optional[str] = None
    confidence: Optional[float] = None
    fps: Optional[float] = None

    # optional message (e.g., startup/shutdown)
    message: Optional[str] = None
