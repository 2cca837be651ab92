from .config import SpeechConfig
from .service import SpeechService

__all__ = ["SpeechConfig", "SpeechService"]
