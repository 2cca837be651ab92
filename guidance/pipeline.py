from __future__ import annotations

from typing import Optional

from .announcer import AnnouncementThrottle
from .classifier import PathAnalyzer
from .config import GuidanceConfig
from .decision import decide
from .geometry import count_foreground
from .models import FrameOutcome, PathAnalysis, VisualizationSnapshot


def snapshot_from(analysis: PathAnalysis) -> Optional[VisualizationSnapshot]:
    if analysis.centroid is None:
        return None
    return VisualizationSnapshot(
        centroid=analysis.centroid,
        offset=analysis.offset,
        turn=analysis.turn,
        angle=analysis.angle,
        fit=analysis.fit.fit,
    )


class BlindPathGuide:
    """
    mask -> geometry -> fit -> classify -> decide -> throttled speech.

    Synchronous and stateless per frame; the only state kept between frames
    is the throttle's last spoken record.
    """

    def __init__(self, cfg: Optional[GuidanceConfig] = None, speech=None, debug: bool = False):
        self.cfg = cfg or GuidanceConfig()
        self.debug = debug
        self.analyzer = PathAnalyzer(self.cfg, debug=debug)
        self.throttle = AnnouncementThrottle(speech, interval=self.cfg.speak_interval, debug=debug)

    def process_mask(self, mask, now: Optional[float] = None) -> FrameOutcome:
        analysis = self.analyzer.analyze(mask)
        instruction = decide(analysis.offset, analysis.turn)

        announcement = None
        if instruction is not None:
            announcement = self.throttle.announce(instruction, now)
            if self.debug:
                print(f"[GUIDE] instruction: {instruction} ({announcement.value})")
        elif self.debug:
            print("[GUIDE] keep direction")

        return FrameOutcome(analysis=analysis, instruction=instruction, announcement=announcement)

    def analyze_for_visualization(self, mask) -> Optional[VisualizationSnapshot]:
        return snapshot_from(self.analyzer.analyze(mask))

    def speak(self, message: str):
        return self.throttle.speak_now(message)

    def debug_info(self, mask) -> str:
        analysis = self.analyzer.analyze(mask)
        grid = self.analyzer.grid(mask)
        instruction = decide(analysis.offset, analysis.turn)

        if analysis.centroid is not None:
            centroid_txt = f"({analysis.centroid[0]:.1f}, {analysis.centroid[1]:.1f})"
        else:
            centroid_txt = "not detected"
        angle_txt = f"{analysis.angle:.1f} deg" if analysis.angle is not None else "n/a"

        lines = [
            "=== path guidance debug ===",
            f"foreground: {count_foreground(grid, self.cfg.mask_threshold)}",
            f"centroid: {centroid_txt}",
            f"centerline points: {len(analysis.centerline)} (fit {analysis.fit.status.value})",
            f"offset: {analysis.offset.name.lower()} (via {analysis.offset_source})",
            f"angle: {angle_txt}",
            f"turn: {analysis.turn.name.lower()}",
            f"decision: {instruction or 'none'}",
        ]
        return "\n".join(lines)
