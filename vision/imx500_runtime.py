from __future__ import annotations

import time
from typing import Callable, Optional, Tuple

from picamera2 import Picamera2, CompletedRequest
from picamera2.devices import IMX500
from picamera2.devices.imx500 import NetworkIntrinsics

from .imx500_models import DEFAULT_PATH_CLASS
from .inference import SegmentationResult, class_map_to_mask, resize_mask


class Imx500PathSegmenter:
    """
    IMX500 on-sensor segmentation exposed as an inference backend.

    The network runs on the camera; run_inference(...) only reads the class
    map attached to a completed request and turns it into a path probability
    mask of mask_size. Class maps carry no per-detection score: the
    reported confidence is the share of path pixels, conf_threshold is
    ignored and min_coverage decides whether anything was detected.
    """

    def __init__(
        self,
        model_path: str,
        *,
        path_class: int = DEFAULT_PATH_CLASS,
        mask_size: Tuple[int, int] = (640, 640),
        min_coverage: float = 0.0,
    ):
        self.model_path = model_path
        self.path_class = int(path_class)
        self.mask_size = (int(mask_size[0]), int(mask_size[1]))
        self.min_coverage = float(min_coverage)

        self.imx500: Optional[IMX500] = None
        self.intrinsics: Optional[NetworkIntrinsics] = None

    def open(self) -> None:
        if self.imx500 is not None:
            return
        # IMX500 must be created before Picamera2
        self.imx500 = IMX500(self.model_path)

        intr = self.imx500.network_intrinsics
        if not intr:
            intr = NetworkIntrinsics()
            intr.task = "segmentation"
        elif intr.task != "segmentation":
            raise RuntimeError("Network is not a segmentation task")
        intr.update_with_defaults()
        self.intrinsics = intr

        self.imx500.show_network_fw_progress_bar()

    def run_inference(self, request: CompletedRequest, conf_threshold: float = 0.0) -> Optional[SegmentationResult]:
        if self.imx500 is None:
            raise RuntimeError("Imx500PathSegmenter.open() was not called")

        np_outputs = self.imx500.get_outputs(metadata=request.get_metadata())
        if not np_outputs or np_outputs[0] is None:
            return None

        path = class_map_to_mask(np_outputs[0], self.path_class)
        coverage = float(path.mean()) if path.size else 0.0
        if coverage <= self.min_coverage:
            return None

        return SegmentationResult(
            mask=resize_mask(path, self.mask_size),
            confidence=coverage,
            class_id=self.path_class,
        )

    def close(self) -> None:
        self.imx500 = None


class Imx500FrameSource:
    """
    Picamera2 for the IMX500 camera; every completed request is handed to
    on_frame (called on the libcamera callback thread).
    """

    def __init__(self, segmenter: Imx500PathSegmenter, buffer_count: int = 12):
        self.segmenter = segmenter
        self.buffer_count = int(buffer_count)
        self._picam2: Optional[Picamera2] = None
        self.frames = 0
        self._t0 = time.time()

    def start(self, on_frame: Callable[[CompletedRequest], object]) -> None:
        self.segmenter.open()
        imx500 = self.segmenter.imx500

        self._picam2 = Picamera2(imx500.camera_num)
        cfg = self._picam2.create_preview_configuration(
            controls={"FrameRate": self.segmenter.intrinsics.inference_rate},
            buffer_count=self.buffer_count,
        )

        def _on_request(request: CompletedRequest):
            self.frames += 1
            on_frame(request)

        self._t0 = time.time()
        self._picam2.pre_callback = _on_request
        self._picam2.start(cfg, show_preview=False)
        print(f"[VISION] IMX500 started: {self.segmenter.model_path}")

    def fps(self) -> float:
        elapsed = time.time() - self._t0
        return self.frames / elapsed if elapsed > 0 else 0.0

    def stop(self) -> None:
        if self._picam2 is not None:
            self._picam2.stop()
            self._picam2 = None
