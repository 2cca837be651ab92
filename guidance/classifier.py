from __future__ import annotations

from typing import Optional

from .config import GuidanceConfig
from .fitter import angle_from_slope, fit_centerline
from .geometry import as_grid, compute_centroid, extract_centerline
from .models import FitResult, Offset, PathAnalysis, Turn


class PathAnalyzer:
    """
    Offset (Left/Center/Right) and turn (Left/Right/Straight) from a path mask.

    Offset uses the fitted centerline evaluated at mid-frame height and
    falls back to the centroid when the centerline is empty or the fit fails.
    Turn uses the fitted slope only; no fit => Straight.
    """

    def __init__(self, cfg: Optional[GuidanceConfig] = None, debug: bool = False):
        self.cfg = cfg or GuidanceConfig()
        self.debug = debug

    # ----- helpers -----

    def grid(self, mask):
        return as_grid(mask, self.cfg.image_width, self.cfg.image_height)

    def classify_offset(self, x: float) -> Offset:
        offset = x - self.cfg.center_x
        dead_zone = self.cfg.offset_dead_zone
        if offset < -dead_zone:
            return Offset.LEFT
        if offset > dead_zone:
            return Offset.RIGHT
        return Offset.CENTER

    def classify_turn(self, angle: Optional[float]) -> Turn:
        if angle is None:
            return Turn.STRAIGHT
        th = self.cfg.turn_angle_threshold
        if angle > th:
            return Turn.LEFT
        if angle < -th:
            return Turn.RIGHT
        return Turn.STRAIGHT

    def _fit(self, centerline) -> FitResult:
        return fit_centerline(
            centerline,
            min_points=self.cfg.min_centerline_points,
            epsilon=self.cfg.fit_epsilon,
        )

    # ----- single operations -----

    def offset_from_centroid(self, mask) -> Offset:
        centroid = compute_centroid(self.grid(mask), self.cfg.mask_threshold)
        if centroid is None:
            return Offset.CENTER
        return self.classify_offset(centroid[0])

    def offset_from_fit(self, mask) -> Offset:
        grid = self.grid(mask)
        centerline = extract_centerline(grid, self.cfg.mask_threshold, self.cfg.row_step)
        result = self._fit(centerline) if centerline else None
        if result is None or not result.ok:
            return self.offset_from_centroid(grid)
        return self.classify_offset(result.fit.x_at(self.cfg.mid_y))

    def centerline_angle(self, mask) -> Optional[float]:
        grid = self.grid(mask)
        centerline = extract_centerline(grid, self.cfg.mask_threshold, self.cfg.row_step)
        result = self._fit(centerline)
        if not result.ok:
            return None
        return angle_from_slope(result.fit.slope)

    def detect_turn(self, mask) -> Turn:
        return self.classify_turn(self.centerline_angle(mask))

    # ----- whole frame -----

    def analyze(self, mask) -> PathAnalysis:
        """Centroid, centerline and fit computed once, then both classifiers."""
        cfg = self.cfg
        grid = self.grid(mask)

        centroid = compute_centroid(grid, cfg.mask_threshold)
        centerline = extract_centerline(grid, cfg.mask_threshold, cfg.row_step)
        fit = self._fit(centerline)

        analysis = PathAnalysis(centroid=centroid, centerline=centerline, fit=fit)

        if fit.ok:
            analysis.angle = angle_from_slope(fit.fit.slope)
            mid_x = fit.fit.x_at(cfg.mid_y)
            analysis.offset_px = mid_x - cfg.center_x
            analysis.offset = self.classify_offset(mid_x)
            analysis.offset_source = "centerline"
        elif centroid is not None:
            analysis.offset_px = centroid[0] - cfg.center_x
            analysis.offset = self.classify_offset(centroid[0])
            analysis.offset_source = "centroid"

        analysis.turn = self.classify_turn(analysis.angle)

        if self.debug:
            if fit.ok:
                print(
                    f"[GUIDE] centerline points={fit.points} slope={fit.fit.slope:.4f} "
                    f"intercept={fit.fit.intercept:.1f} angle={analysis.angle:.1f}"
                )
            else:
                print(f"[GUIDE] centerline fit {fit.status.value} (points={fit.points})")
            print(
                f"[GUIDE] offset={analysis.offset.name} via {analysis.offset_source} "
                f"turn={analysis.turn.name}"
            )

        return analysis
