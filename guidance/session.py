from __future__ import annotations

import time
from typing import Optional

from display.grid import downsample_mask
from display.models import DisplayState

from .admission import FrameAdmissionController
from .config import GuidanceConfig
from .models import FrameOutcome
from .pipeline import BlindPathGuide, snapshot_from


class GuidanceSession:
    """
    Owns the collaborators of one guidance run:
    - inference backend (run_inference(frame, conf) -> SegmentationResult | None)
    - speech service (optional)
    - display service (optional)
    - event logger (optional)

    Frame sources call handle_frame(...) from their own thread.
    """

    def __init__(
        self,
        backend,
        cfg: Optional[GuidanceConfig] = None,
        *,
        speech=None,
        display=None,
        logger=None,
        debug: bool = False,
    ):
        self.cfg = cfg or GuidanceConfig()
        self.backend = backend
        self.speech = speech
        self.display = display
        self.logger = logger
        self.debug = debug

        self.admission = FrameAdmissionController(self.cfg.min_process_interval)
        self.guide = BlindPathGuide(self.cfg, speech=speech, debug=debug)

        self.last_outcome: Optional[FrameOutcome] = None
        self.last_confidence: Optional[float] = None
        self._t0 = time.time()
        self._opened = False

    # ----- lifecycle -----

    def open(self) -> "GuidanceSession":
        if self._opened:
            return self
        self._t0 = time.time()
        self._opened = True
        try:
            if self.speech is not None:
                self.speech.open()
            if self.display is not None:
                self.display.start()
            opener = getattr(self.backend, "open", None)
            if callable(opener):
                opener()
        except Exception:
            self.close()
            raise
        self._log("session_start", config=self.cfg)
        print("[GUIDE] Session started")
        return self

    def close(self) -> None:
        if not self._opened:
            return
        self._opened = False
        print("[GUIDE] Shutting down")
        try:
            self._log("session_stop", stats=self.admission.stats())
        finally:
            for name, target in (
                ("backend", self.backend),
                ("display", self.display),
                ("speech", self.speech),
                ("logger", self.logger),
            ):
                if target is None:
                    continue
                stopper = getattr(target, "close", None) or getattr(target, "stop", None)
                if not callable(stopper):
                    continue
                try:
                    stopper()
                except Exception as e:
                    print(f"[WARN] Failed to close {name}:", e)

    def __enter__(self) -> "GuidanceSession":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ----- frames -----

    def handle_frame(self, frame, now: Optional[float] = None) -> bool:
        """
        Returns False when the frame was dropped by the admission gate.
        Never raises for inference or pipeline failures.
        """
        with self.admission.admit(now) as accepted:
            if not accepted:
                return False
            self._process(frame, now)
        return True

    def process_mask(self, mask, now: Optional[float] = None) -> FrameOutcome:
        """Run the pipeline on an already computed mask (no admission gate)."""
        outcome = self.guide.process_mask(mask, now)
        self.last_outcome = outcome
        self._publish(mask, outcome)
        return outcome

    def _infer(self, frame):
        try:
            return self.backend.run_inference(frame, self.cfg.inference_confidence)
        except Exception as e:
            print("[WARN] Inference failed:", e)
            self._log("inference_error", error=str(e))
            return None

    def _process(self, frame, now: Optional[float]) -> None:
        result = self._infer(frame)
        if result is None:
            self.last_outcome = None
            self.last_confidence = None
            self._clear_display()
            self._log("no_detection")
            return

        self.last_confidence = result.confidence
        try:
            self.process_mask(result.mask, now)
        except Exception as e:
            print("[WARN] Guidance pipeline failed:", e)
            self.last_outcome = None
            self._clear_display()

    # ----- sinks -----

    def _publish(self, mask, outcome: FrameOutcome) -> None:
        a = outcome.analysis
        if outcome.instruction is not None:
            self._log(
                "decision",
                instruction=outcome.instruction,
                announcement=outcome.announcement.value if outcome.announcement else None,
                offset=a.offset.name,
                offset_source=a.offset_source,
                turn=a.turn.name,
                angle=a.angle,
            )

        if self.display is None:
            return
        snapshot = snapshot_from(a)
        if snapshot is None:
            self._clear_display()
            return

        grid = self.guide.analyzer.grid(mask)
        self.display.update(DisplayState(
            snapshot=snapshot,
            grid_occ=downsample_mask(grid, threshold=self.cfg.mask_threshold),
            frame_w=self.cfg.image_width,
            frame_h=self.cfg.image_height,
            instruction=outcome.instruction,
            confidence=self.last_confidence,
            fps=self.fps(),
        ))

    def _clear_display(self) -> None:
        if self.display is not None:
            self.display.clear()

    def _log(self, event: str, **fields) -> None:
        if self.logger is None:
            return
        try:
            self.logger.write(event, **fields)
        except Exception as e:
            print("[WARN] Event log write failed:", e)

    def fps(self) -> float:
        elapsed = time.time() - self._t0
        return self.admission.processed_frames / elapsed if elapsed > 0 else 0.0
