from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DisplayConfig:
    # SH1106 on I2C bus 1, address 0x3C
    i2c_bus: int = 1
    i2c_address: int = 0x3C
    width: int = 128
    height: int = 64
    rotate: int = 0  # 0..3 -> 0/90/180/270 degrees
    contrast: int = 255  # 0..255

    # redraw at most this often; a newer snapshot replaces an undrawn one
    max_fps: float = 10.0

    # pause after a failed render/show before trying again
    error_backoff_sec: float = 0.2

    # blank the panel when the service stops
    clear_on_stop: bool = True
