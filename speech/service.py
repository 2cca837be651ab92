from __future__ import annotations

import threading
import time
from typing import Callable, Optional

import pyttsx3

from .config import SpeechConfig


class SpeechService:
    """
    Text-to-speech worker around pyttsx3.

    - the engine is created and driven on its own thread (pyttsx3 is not
      thread safe), using the external event loop (startLoop(False) + iterate())
    - speak(...) may be called from any thread
    - flush-and-replace: one pending slot; a newer message replaces an unspoken
      one and interrupts the one currently playing
    - calls before the engine is ready are dropped
    """

    def __init__(
        self,
        cfg: Optional[SpeechConfig] = None,
        engine_factory: Optional[Callable[[], object]] = None,
    ):
        self.cfg = cfg or SpeechConfig()
        self._engine_factory = engine_factory or pyttsx3.init

        self._th: Optional[threading.Thread] = None
        self._stop_evt = threading.Event()
        self._ready_evt = threading.Event()

        self._lock = threading.Lock()
        self._pending: Optional[str] = None

        self.spoken = 0
        self.interrupted = 0

    @property
    def ready(self) -> bool:
        return self._ready_evt.is_set()

    def open(self) -> None:
        if self._th is not None:
            return
        self._stop_evt.clear()
        self._th = threading.Thread(target=self._run, name="SpeechService", daemon=True)
        self._th.start()

    def wait_ready(self, timeout: float = 5.0) -> bool:
        return self._ready_evt.wait(timeout)

    def close(self) -> None:
        self._stop_evt.set()
        th = self._th
        self._th = None
        if th:
            th.join(timeout=2.0)
        self._ready_evt.clear()

    def speak(self, text: str) -> bool:
        if not self.ready:
            return False
        with self._lock:
            self._pending = text
        return True

    # ----- worker -----

    def _configure(self, engine) -> None:
        engine.setProperty("rate", self.cfg.rate)
        engine.setProperty("volume", self.cfg.volume)
        if self.cfg.voice_id:
            engine.setProperty("voice", self.cfg.voice_id)

    def _step(self, engine) -> None:
        with self._lock:
            text = self._pending
            self._pending = None

        if text is not None:
            if engine.isBusy():
                engine.stop()
                self.interrupted += 1
            engine.say(text, self.cfg.utterance_name)
            self.spoken += 1

        engine.iterate()

    def _run(self) -> None:
        try:
            engine = self._engine_factory()
            self._configure(engine)
            engine.startLoop(False)
        except Exception as e:
            print("[SPEECH] Engine init failed:", e)
            return

        self._ready_evt.set()
        print("[SPEECH] Ready")

        try:
            while not self._stop_evt.is_set():
                self._step(engine)
                time.sleep(self.cfg.poll_interval)
        except Exception as e:
            print("[SPEECH] Worker stopped:", e)
        finally:
            self._ready_evt.clear()
            try:
                engine.endLoop()
            except Exception as e:
                print("[SPEECH] endLoop failed:", e)
