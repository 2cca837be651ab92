# app/main.py

import time

import numpy as np
from PIL import Image

from app.cli import AppConfig, parse_config
from app.event_logger import EventLogger
from display import DisplayConfig, DisplayService
from guidance import BlindPathGuide
from guidance.session import GuidanceSession
from speech import SpeechService
from vision.inference import overlay_mask


# =========================================================
# Helpers
# =========================================================

def build_backend(cfg: AppConfig):
    size = (cfg.guidance.image_width, cfg.guidance.image_height)

    if cfg.backend == "imx500":
        from vision.imx500_models import assert_paths_exist
        from vision.imx500_runtime import Imx500PathSegmenter

        rpk = assert_paths_exist(cfg.model)
        return Imx500PathSegmenter(str(rpk), path_class=cfg.path_class, mask_size=size)

    from vision.yolo_seg import YoloSegModel

    return YoloSegModel(cfg.model, device=cfg.device, mask_size=size)


def build_frame_source(cfg: AppConfig, backend):
    if cfg.backend == "imx500":
        from vision.imx500_runtime import Imx500FrameSource

        return Imx500FrameSource(backend)

    from vision.webcam import WebcamFrameSource

    return WebcamFrameSource(cfg.camera_index)


def open_speech(cfg: AppConfig):
    if not cfg.speech:
        print("[SYSTEM] Speech disabled")
        return None
    speech = SpeechService(cfg.speech_cfg)
    speech.open()
    return speech


def open_display(cfg: AppConfig):
    if not cfg.display:
        print("[SYSTEM] Display disabled")
        return None
    display = DisplayService(DisplayConfig())
    try:
        display.start()
    except Exception as e:
        print("[WARN] Display not available:", e)
        return None
    return display


# =========================================================
# Offline inspection (--mask / --image)
# =========================================================

def inspect(cfg: AppConfig) -> int:
    image = None
    if cfg.mask:
        mask = np.load(cfg.mask)
        confidence = None
    else:
        backend = build_backend(cfg)
        image = Image.open(cfg.image).convert("RGB")
        result = backend.run_inference(image, cfg.guidance.inference_confidence)
        if result is None:
            print("[VISION] No path detected, try lowering --conf")
            return 1
        mask = result.mask
        confidence = result.confidence

    speech = open_speech(cfg)
    if speech is not None:
        speech.wait_ready(timeout=5.0)

    try:
        guide = BlindPathGuide(cfg.guidance, speech=speech, debug=cfg.debug)
        grid = guide.analyzer.grid(mask)

        if confidence is not None:
            print(f"[VISION] confidence={confidence:.2f}")
        outcome = guide.process_mask(grid)
        print(guide.debug_info(grid))
        if outcome.announcement is not None:
            print(f"[SPEECH] {outcome.instruction}: {outcome.announcement.value}")

        if cfg.overlay:
            if image is None:
                image = Image.fromarray((np.clip(grid, 0.0, 1.0) * 255).astype(np.uint8)).convert("RGB")
            overlay_mask(image, grid, cfg.guidance.mask_threshold).save(cfg.overlay)
            print(f"[SYSTEM] Overlay saved: {cfg.overlay}")

        if speech is not None and outcome.announcement is not None:
            time.sleep(2.0)  # let the utterance play before shutdown
    finally:
        if speech is not None:
            speech.close()

    return 0


# =========================================================
# Live guidance
# =========================================================

def run_live(cfg: AppConfig) -> int:
    backend = build_backend(cfg)
    logger = EventLogger(cfg.log_dir) if cfg.log_dir else None
    speech = open_speech(cfg)
    display = open_display(cfg)

    session = GuidanceSession(
        backend,
        cfg.guidance,
        speech=speech,
        display=display,
        logger=logger,
        debug=cfg.debug,
    )
    source = build_frame_source(cfg, backend)

    try:
        session.open()
        source.start(session.handle_frame)
        print("[SYSTEM] Guidance loop started")

        last_print = time.time()
        while True:
            time.sleep(0.1)
            now = time.time()
            if now - last_print < cfg.print_every:
                continue
            last_print = now

            st = session.admission.stats()
            outcome = session.last_outcome
            last = outcome.instruction if outcome and outcome.instruction else "-"
            print(
                f"[GUIDE] camera={source.fps():4.1f}fps infer={session.fps():4.1f}fps "
                f"processed={st.processed_frames}/{st.total_frames} "
                f"pipeline={st.last_pipeline_sec * 1000.0:.0f}ms last={last}"
            )

    except KeyboardInterrupt:
        print("[SYSTEM] Keyboard interrupt")

    finally:
        print("[SYSTEM] Shutting down safely")
        try:
            source.stop()
        except Exception as e:
            print("[WARN] Frame source stop failed:", e)
        session.close()
        print(session.admission.summary())

    return 0


# =========================================================
# Main
# =========================================================

def main(argv=None) -> int:
    cfg = parse_config(argv)
    if cfg.mask or cfg.image:
        return inspect(cfg)
    return run_live(cfg)


if __name__ == "__main__":
    raise SystemExit(main())
