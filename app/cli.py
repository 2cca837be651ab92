from dataclasses import dataclass
from typing import Optional
import argparse

from guidance.config import GuidanceConfig
from speech.config import SpeechConfig
from vision.imx500_models import PATHS, DEFAULT_PATH_CLASS


@dataclass(frozen=True)
class AppConfig:
    backend: str
    model: str
    path_class: int
    camera_index: int
    device: Optional[str]

    speech: bool
    display: bool
    log_dir: Optional[str]
    print_every: float
    debug: bool

    # offline inspection
    mask: Optional[str]
    image: Optional[str]
    overlay: Optional[str]

    guidance: GuidanceConfig
    speech_cfg: SpeechConfig


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Blind path guidance: segmentation mask -> voice hints")

    p.add_argument("--backend", choices=["imx500", "yolo"], default="imx500")
    p.add_argument("--model", default=None,
                   help="IMX500 .rpk (imx500) or YOLO-seg weights (yolo).")
    p.add_argument("--path-class", type=int, default=DEFAULT_PATH_CLASS,
                   help="Class id treated as walking path (imx500 class maps).")
    p.add_argument("--camera-index", type=int, default=0, help="OpenCV camera index (yolo).")
    p.add_argument("--device", default=None, help="Torch device for YOLO, e.g. cpu, cuda:0.")

    p.add_argument("--no-speech", action="store_true")
    p.add_argument("--no-display", action="store_true")
    p.add_argument("--log-dir", default="logs")
    p.add_argument("--no-log", action="store_true", help="Do not write the JSONL event log.")
    p.add_argument("--print-every", type=float, default=5.0, help="Seconds between status lines.")
    p.add_argument("--debug", action="store_true")

    # Offline inspection
    p.add_argument("--mask", default=None, help="Run guidance on a stored .npy mask and exit.")
    p.add_argument("--image", default=None, help="Run YOLO inference on one image and exit.")
    p.add_argument("--overlay", default=None, help="Save the mask overlay PNG (with --mask/--image).")

    # Guidance thresholds
    d = GuidanceConfig()
    p.add_argument("--mask-threshold", type=float, default=d.mask_threshold)
    p.add_argument("--row-step", type=int, default=d.row_step)
    p.add_argument("--dead-zone", type=float, default=d.offset_dead_zone_ratio,
                   help="Offset dead-zone as a share of frame width.")
    p.add_argument("--turn-threshold", type=float, default=d.turn_angle_threshold, help="Degrees.")
    p.add_argument("--speak-interval", type=float, default=d.speak_interval, help="Seconds.")
    p.add_argument("--min-interval", type=float, default=d.min_process_interval,
                   help="Minimum seconds between processed frames.")
    p.add_argument("--conf", type=float, default=d.inference_confidence)

    # Speech
    s = SpeechConfig()
    p.add_argument("--voice", default=None, help="pyttsx3 voice id.")
    p.add_argument("--rate", type=int, default=s.rate)
    p.add_argument("--volume", type=float, default=s.volume)

    return p


def parse_config(argv=None) -> AppConfig:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if args.image and args.backend != "yolo":
        parser.error("--image requires --backend yolo")
    if args.overlay and not (args.mask or args.image):
        parser.error("--overlay requires --mask or --image")

    try:
        guidance = GuidanceConfig(
            mask_threshold=args.mask_threshold,
            row_step=args.row_step,
            offset_dead_zone_ratio=args.dead_zone,
            turn_angle_threshold=args.turn_threshold,
            speak_interval=args.speak_interval,
            min_process_interval=args.min_interval,
            inference_confidence=args.conf,
        )
    except ValueError as e:
        parser.error(str(e))

    model = args.model
    if model is None:
        model = str(PATHS.deeplabv3plus_rpk) if args.backend == "imx500" else "best.onnx"

    return AppConfig(
        backend=args.backend,
        model=model,
        path_class=args.path_class,
        camera_index=args.camera_index,
        device=args.device,
        speech=not args.no_speech,
        display=not args.no_display,
        log_dir=None if args.no_log else args.log_dir,
        print_every=args.print_every,
        debug=args.debug,
        mask=args.mask,
        image=args.image,
        overlay=args.overlay,
        guidance=guidance,
        speech_cfg=SpeechConfig(rate=args.rate, volume=args.volume, voice_id=args.voice),
    )
