import numpy as np
import pytest

SIZE = 640


def blank_mask() -> np.ndarray:
    return np.zeros((SIZE, SIZE), dtype=np.float32)


def rect_mask(x0: int, x1: int, y0: int, y1: int, value: float = 1.0) -> np.ndarray:
    """Foreground on columns x0..x1 and rows y0..y1 (inclusive)."""
    m = blank_mask()
    m[y0:y1 + 1, x0:x1 + 1] = value
    return m


def stripe_mask(x_top: float, x_at: float, y_at: float = 620.0, half_width: int = 40) -> np.ndarray:
    """
    Straight stripe whose centre is x_top at y=0 and x_at at y=y_at,
    extended over the whole frame height.
    """
    m = blank_mask()
    slope = (x_at - x_top) / y_at
    for y in range(SIZE):
        c = x_top + slope * y
        x0 = max(0, int(np.round(c - half_width)))
        x1 = min(SIZE - 1, int(np.round(c + half_width)))
        m[y, x0:x1 + 1] = 1.0
    return m


class FakeSpeech:
    def __init__(self, ready: bool = True):
        self.ready = ready
        self.spoken = []
        self.opened = False
        self.closed = False

    def speak(self, text):
        self.spoken.append(text)
        return True

    def open(self):
        self.opened = True

    def close(self):
        self.closed = True


@pytest.fixture
def speech():
    return FakeSpeech()
