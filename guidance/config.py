from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GuidanceConfig:
    # mask grid (model output size)
    image_width: int = 640
    image_height: int = 640

    # foreground probability cut
    mask_threshold: float = 0.5

    # centerline sampling
    row_step: int = 20
    min_centerline_points: int = 3
    fit_epsilon: float = 1e-3

    # offset dead-zone as share of frame width (15% => 96px on 640)
    offset_dead_zone_ratio: float = 0.15

    # turn threshold in degrees
    turn_angle_threshold: float = 10.0

    # same instruction is not repeated within this window (seconds)
    speak_interval: float = 2.0

    # at most one inference every 150 ms (~6-7 FPS)
    min_process_interval: float = 0.150

    # passed to the inference backend
    inference_confidence: float = 0.25

    def __post_init__(self):
        if self.image_width <= 0 or self.image_height <= 0:
            raise ValueError("image size must be positive")
        if self.row_step < 1:
            raise ValueError("row_step must be >= 1")
        if self.min_centerline_points < 2:
            raise ValueError("min_centerline_points must be >= 2")
        if not 0.0 <= self.offset_dead_zone_ratio <= 0.5:
            raise ValueError("offset_dead_zone_ratio must be within [0, 0.5]")
        if self.turn_angle_threshold < 0:
            raise ValueError("turn_angle_threshold must be >= 0")
        if self.speak_interval < 0 or self.min_process_interval < 0:
            raise ValueError("intervals must be >= 0")

    @property
    def center_x(self) -> float:
        return self.image_width / 2.0

    @property
    def mid_y(self) -> float:
        return self.image_height / 2.0

    @property
    def offset_dead_zone(self) -> float:
        return self.image_width * self.offset_dead_zone_ratio
