from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

Point = Tuple[float, float]


class Offset(Enum):
    LEFT = -1
    CENTER = 0
    RIGHT = 1


class Turn(Enum):
    RIGHT = -1
    STRAIGHT = 0
    LEFT = 1


class Instruction:
    TURN_LEFT = "turn left ahead"
    TURN_RIGHT = "turn right ahead"
    ADJUST_LEFT = "adjust left"
    ADJUST_RIGHT = "adjust right"


class FitStatus(Enum):
    OK = "ok"
    INSUFFICIENT = "insufficient"  # fewer centerline points than required
    DEGENERATE = "degenerate"      # least-squares denominator below epsilon


class Announcement(Enum):
    SPOKEN = "spoken"
    SUPPRESSED = "suppressed"  # identical message inside the interval
    DROPPED = "dropped"        # speech not ready


@dataclass(frozen=True)
class LineFit:
    """x = slope * y + intercept"""

    slope: float
    intercept: float

    def x_at(self, y: float) -> float:
        return self.slope * y + self.intercept


@dataclass(frozen=True)
class FitResult:
    status: FitStatus
    fit: Optional[LineFit] = None
    points: int = 0

    @property
    def ok(self) -> bool:
        return self.status is FitStatus.OK


@dataclass
class PathAnalysis:
    """Everything computed from one mask."""

    centroid: Optional[Point]
    centerline: List[Point] = field(default_factory=list)
    fit: FitResult = field(default_factory=lambda: FitResult(FitStatus.INSUFFICIENT))
    angle: Optional[float] = None
    offset: Offset = Offset.CENTER
    offset_source: str = "default"  # centerline | centroid | default
    offset_px: Optional[float] = None
    turn: Turn = Turn.STRAIGHT


@dataclass(frozen=True)
class VisualizationSnapshot:
    centroid: Point
    offset: Offset
    turn: Turn
    angle: Optional[float]
    fit: Optional[LineFit] = None


@dataclass
class FrameOutcome:
    analysis: PathAnalysis
    instruction: Optional[str]
    announcement: Optional[Announcement] = None
