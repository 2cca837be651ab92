from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
from ultralytics import YOLO

from .inference import SegmentationResult, resize_mask


class YoloSegModel:
    """
    YOLOv8-seg path model (single class) through ultralytics.

    Keeps the highest-confidence instance above conf_threshold and returns
    its mask resized to mask_size, with the box in mask pixels.
    """

    def __init__(
        self,
        weights: str,
        *,
        imgsz: int = 640,
        device: Optional[str] = None,
        mask_size: Tuple[int, int] = (640, 640),
        warmup: bool = True,
    ):
        self.weights = weights
        self.imgsz = int(imgsz)
        self.device = device
        self.mask_size = (int(mask_size[0]), int(mask_size[1]))

        self.model = YOLO(weights)
        if warmup:
            dummy = np.zeros((self.imgsz, self.imgsz, 3), dtype=np.uint8)
            self.model.predict(dummy, task="segment", imgsz=self.imgsz, device=self.device, verbose=False)
        print(f"[VISION] YOLO-seg loaded: {weights}")

    def run_inference(self, image, conf_threshold: float = 0.25) -> Optional[SegmentationResult]:
        res = self.model.predict(
            image,
            task="segment",
            imgsz=self.imgsz,
            conf=conf_threshold,
            device=self.device,
            verbose=False,
        )[0]

        if res.masks is None or res.boxes is None or len(res.boxes) == 0:
            return None

        confs = res.boxes.conf.detach().cpu().numpy()
        best = int(np.argmax(confs))
        conf = float(confs[best])
        if conf < conf_threshold:
            return None

        mask = res.masks.data[best].detach().cpu().numpy().astype(np.float32)
        mask = resize_mask(mask, self.mask_size)

        w, h = self.mask_size
        cx, cy, bw, bh = (float(v) for v in res.boxes.xywhn[best].detach().cpu().numpy())
        cls_id = int(res.boxes.cls[best].item()) if res.boxes.cls is not None else 0

        return SegmentationResult(
            mask=mask,
            confidence=conf,
            bbox=(cx * w, cy * h, bw * w, bh * h),
            class_id=cls_id,
        )

    def close(self) -> None:
        self.model = None
