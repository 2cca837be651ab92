import json
import os
import time
from dataclasses import asdict, is_dataclass
from enum import Enum
from typing import Any, Optional


def _safe(obj: Any) -> Any:
    """
    Convert dataclasses / enums / tuples to JSON-serializable structures.
    """
    if obj is None:
        return None
    if isinstance(obj, Enum):
        return obj.name
    if is_dataclass(obj) and not isinstance(obj, type):
        return {k: _safe(v) for k, v in asdict(obj).items()}
    if isinstance(obj, dict):
        return {str(k): _safe(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_safe(v) for v in obj]
    if isinstance(obj, (str, int, float, bool)):
        return obj
    return str(obj)


class EventLogger:
    """
    Guidance events as JSON Lines, one record per line:
    {"ts": ..., "event": "decision", "instruction": "turn left ahead", ...}
    """

    def __init__(self, log_dir: str = "logs", filename: Optional[str] = None, version: Optional[str] = None):
        os.makedirs(log_dir, exist_ok=True)
        if filename is None:
            filename = time.strftime("guide_%Y%m%d_%H%M%S.jsonl")
        self.path = os.path.join(log_dir, filename)
        self._f = open(self.path, "a", buffering=1)  # line-buffered
        print(f"[LOG] Writing events to: {self.path}")
        self.version = version

    def close(self):
        if not self._f.closed:
            self._f.close()

    def write(self, event: str, **fields):
        rec = {
            "ts": time.time(),
            "event": event,
            **{k: _safe(v) for k, v in fields.items()},
        }
        if self.version and "version" not in rec:
            rec["version"] = self.version
        self._f.write(json.dumps(rec, ensure_ascii=False) + "\n")
