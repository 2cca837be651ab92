from __future__ import annotations

import math
from typing import Sequence

from .models import FitResult, FitStatus, LineFit, Point


def fit_centerline(
    centerline: Sequence[Point],
    min_points: int = 3,
    epsilon: float = 1e-3,
) -> FitResult:
    """
    Ordinary least squares of x = a * y + b over the centerline points.

    y is the independent variable because the path runs roughly vertically
    through the frame.
    """
    n = len(centerline)
    if n < min_points:
        return FitResult(FitStatus.INSUFFICIENT, points=n)

    sum_x = 0.0
    sum_y = 0.0
    sum_xy = 0.0
    sum_yy = 0.0
    for x, y in centerline:
        sum_x += x
        sum_y += y
        sum_xy += x * y
        sum_yy += y * y

    denom = n * sum_yy - sum_y * sum_y
    if abs(denom) < epsilon:
        return FitResult(FitStatus.DEGENERATE, points=n)

    a = (n * sum_xy - sum_x * sum_y) / denom
    b = (sum_x * sum_yy - sum_y * sum_xy) / denom
    return FitResult(FitStatus.OK, LineFit(slope=a, intercept=b), points=n)


def angle_from_slope(slope: float) -> float:
    """
    Degrees. Positive => turn left ahead, negative => turn right ahead.
    """
    return math.degrees(math.atan(slope))
