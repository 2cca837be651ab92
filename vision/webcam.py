from __future__ import annotations

import threading
import time
from typing import Callable, Optional

import cv2


class WebcamFrameSource:
    """
    OpenCV capture thread. Every frame (BGR ndarray) is handed to on_frame;
    the receiver decides whether to process or drop it.
    """

    def __init__(self, index: int = 0, width: int = 1280, height: int = 720):
        self.index = int(index)
        self.width = int(width)
        self.height = int(height)

        self._cap: Optional[cv2.VideoCapture] = None
        self._th: Optional[threading.Thread] = None
        self._stop_evt = threading.Event()
        self.frames = 0
        self._t0 = time.time()

    def start(self, on_frame: Callable[[object], object]) -> None:
        if self._th is not None:
            return
        self._cap = cv2.VideoCapture(self.index)
        if not self._cap.isOpened():
            raise RuntimeError(f"Cannot open camera index {self.index}")
        self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)

        self._stop_evt.clear()
        self._t0 = time.time()
        self._th = threading.Thread(target=self._run, args=(on_frame,), name="WebcamFrameSource", daemon=True)
        self._th.start()
        print(f"[VISION] Webcam {self.index} started")

    def _run(self, on_frame) -> None:
        while not self._stop_evt.is_set():
            ok, frame = self._cap.read()
            if not ok:
                print("[WARN] Camera read failed")
                time.sleep(0.1)
                continue
            self.frames += 1
            on_frame(frame)

    def fps(self) -> float:
        elapsed = time.time() - self._t0
        return self.frames / elapsed if elapsed > 0 else 0.0

    def stop(self) -> None:
        self._stop_evt.set()
        th = self._th
        self._th = None
        if th:
            th.join(timeout=2.0)
        if self._cap is not None:
            self._cap.release()
            self._cap = None
