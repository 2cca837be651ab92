from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Optional


@dataclass
class AdmissionStats:
    total_frames: int
    processed_frames: int
    dropped_busy: int
    dropped_interval: int
    last_pipeline_sec: float


class FrameAdmissionController:
    """
    Single-flight + minimum interval gate in front of inference.

    A frame is dropped (never queued) when another one is still in flight
    or when less than `min_interval` seconds passed since the last accepted
    frame. Both checks run under one mutex.
    """

    def __init__(self, min_interval: float = 0.150):
        self.min_interval = float(min_interval)

        self._lock = threading.Lock()
        self._processing = False
        self._last_accepted: Optional[float] = None
        self._started_at: float = 0.0

        self.total_frames = 0
        self.processed_frames = 0
        self.dropped_busy = 0
        self.dropped_interval = 0
        self.last_pipeline_sec = 0.0

    @property
    def processing(self) -> bool:
        return self._processing

    def try_acquire(self, now: Optional[float] = None) -> bool:
        now = time.time() if now is None else float(now)
        with self._lock:
            self.total_frames += 1

            if self._processing:
                self.dropped_busy += 1
                return False

            if self._last_accepted is not None and (now - self._last_accepted) < self.min_interval:
                self.dropped_interval += 1
                return False

            self._processing = True
            self._last_accepted = now
            self._started_at = time.time()
            self.processed_frames += 1
            return True

    def release(self) -> None:
        with self._lock:
            if self._processing:
                self.last_pipeline_sec = time.time() - self._started_at
            self._processing = False

    @contextmanager
    def admit(self, now: Optional[float] = None):
        """
        Yields True when the frame may proceed; the lock is released on exit
        whatever happens inside the block.
        """
        if not self.try_acquire(now):
            yield False
            return
        try:
            yield True
        finally:
            self.release()

    def stats(self) -> AdmissionStats:
        with self._lock:
            return AdmissionStats(
                total_frames=self.total_frames,
                processed_frames=self.processed_frames,
                dropped_busy=self.dropped_busy,
                dropped_interval=self.dropped_interval,
                last_pipeline_sec=self.last_pipeline_sec,
            )

    def summary(self, camera_fps: float = 30.0) -> str:
        st = self.stats()
        rate = (st.processed_frames / st.total_frames * camera_fps) if st.total_frames > 0 else 0.0
        return "\n".join([
            f"total frames: {st.total_frames}",
            f"processed frames: {st.processed_frames}",
            f"dropped (busy/interval): {st.dropped_busy}/{st.dropped_interval}",
            f"inference fps: {rate:.1f}",
            f"last pipeline: {st.last_pipeline_sec * 1000.0:.0f} ms",
        ])
