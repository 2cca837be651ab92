from __future__ import annotations

import threading
import time
from typing import Optional

from .config import DisplayConfig
from .models import DisplayState
from .renderer import render


class DisplayService:
    """
    Background renderer for the guidance visualization.

    update(...) stores the newest state and marks it dirty; the render
    thread picks it up at most max_fps times per second. clear() blanks
    the panel (no detection this frame).
    """

    def __init__(self, cfg: Optional[DisplayConfig] = None, enabled: bool = True, device=None):
        self.cfg = cfg or DisplayConfig()
        self.enabled = enabled

        self._dev = device
        self._owns_dev = device is None
        self._th: Optional[threading.Thread] = None
        self._stop_evt = threading.Event()

        self._lock = threading.Lock()
        self._state: Optional[DisplayState] = None
        self._dirty = False

        self._last_draw = 0.0
        self.frames_drawn = 0
        self.clears = 0

    def start(self) -> None:
        if not self.enabled:
            return
        if self._th is not None:
            return

        if self._dev is None:
            from .device import OLEDDevice

            self._dev = OLEDDevice(self.cfg)
        self._stop_evt.clear()

        self._th = threading.Thread(target=self._run, name="DisplayService", daemon=True)
        self._th.start()

    def stop(self) -> None:
        self._stop_evt.set()
        th = self._th
        self._th = None
        if th:
            th.join(timeout=2.0)

        if self._dev is not None and self.cfg.clear_on_stop:
            try:
                self._dev.clear()
            except Exception as e:
                print("[DISPLAY] clear on stop failed:", e)

        if self._dev is not None and self._owns_dev:
            try:
                self._dev.close()
            except Exception as e:
                print("[DISPLAY] device close failed:", e)
            self._dev = None

    def update(self, state: DisplayState) -> None:
        if not self.enabled:
            return
        with self._lock:
            self._state = state
            self._dirty = True

    def clear(self) -> None:
        if not self.enabled:
            return
        with self._lock:
            self._state = None
            self._dirty = True

    def _take(self):
        with self._lock:
            if not self._dirty:
                return False, None
            self._dirty = False
            return True, self._state

    def _run(self) -> None:
        assert self._dev is not None

        max_fps = float(self.cfg.max_fps) if self.cfg.max_fps and self.cfg.max_fps > 0 else 10.0
        min_dt = 1.0 / max_fps

        while not self._stop_evt.is_set():
            now = time.time()
            if (now - self._last_draw) < min_dt:
                time.sleep(0.01)
                continue

            dirty, st = self._take()
            if not dirty:
                time.sleep(0.01)
                continue

            try:
                if st is None:
                    self._dev.clear()
                    self.clears += 1
                else:
                    self._dev.show(render(st))
                    self.frames_drawn += 1
                self._last_draw = time.time()
            except Exception as e:
                print("[DISPLAY] render/show failed:", e)
                time.sleep(self.cfg.error_backoff_sec)
