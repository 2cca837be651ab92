from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SpeechConfig:
    # pyttsx3 properties
    rate: int = 170          # words per minute
    volume: float = 1.0      # 0..1
    voice_id: Optional[str] = None  # None = engine default

    # worker loop tick
    poll_interval: float = 0.02

    # utterance name passed to the engine (shows up in callbacks)
    utterance_name: str = "path_guide"
