from __future__ import annotations

import threading
import time
from typing import Optional

from .models import Announcement


class AnnouncementThrottle:
    """
    Dedup + rate limit in front of the speech collaborator.

    The same message is not repeated within `interval` seconds.
    A different message always goes through.

    speech: anything with a `ready` flag and `speak(text)`.
    """

    def __init__(self, speech=None, interval: float = 2.0, debug: bool = False):
        self.speech = speech
        self.interval = float(interval)
        self.debug = debug

        self._lock = threading.Lock()
        self.last_message: Optional[str] = None
        self.last_time: float = 0.0

    def _speech_ready(self) -> bool:
        return self.speech is not None and bool(getattr(self.speech, "ready", False))

    def announce(self, message: str, now: Optional[float] = None) -> Announcement:
        now = time.time() if now is None else float(now)

        if not self._speech_ready():
            if self.debug:
                print(f"[SPEECH] not ready, dropped: {message}")
            return Announcement.DROPPED

        with self._lock:
            if message == self.last_message and (now - self.last_time) < self.interval:
                if self.debug:
                    print(f"[SPEECH] suppressed ({now - self.last_time:.2f}s since last): {message}")
                return Announcement.SUPPRESSED

            self.speech.speak(message)
            self.last_message = message
            self.last_time = now

        return Announcement.SPOKEN

    def speak_now(self, message: str, now: Optional[float] = None) -> Announcement:
        """Manual announcement, no dedup."""
        now = time.time() if now is None else float(now)
        if not self._speech_ready():
            return Announcement.DROPPED
        with self._lock:
            self.speech.speak(message)
            self.last_message = message
            self.last_time = now
        return Announcement.SPOKEN
