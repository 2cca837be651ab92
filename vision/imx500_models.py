from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class IMX500Paths:
    # installed by the imx500-all / imx500-models packages
    model_zoo_dir: Path = Path("/usr/share/imx500-models")
    deeplabv3plus_rpk: Path = Path("/usr/share/imx500-models/imx500_network_deeplabv3plus.rpk")


PATHS = IMX500Paths()

# DeepLabV3+ (Pascal VOC) has no sidewalk class; background (0) is the
# closest stand-in until a custom tactile-path model is packaged.
DEFAULT_PATH_CLASS = 0


def resolve_model(model_path: Optional[str] = None) -> Path:
    """Bare file names are looked up in the model zoo."""
    if not model_path:
        return PATHS.deeplabv3plus_rpk
    p = Path(model_path)
    if p.parent == Path("."):
        return PATHS.model_zoo_dir / p
    return p


def assert_paths_exist(model_path: Optional[str] = None) -> Path:
    """Return the resolved .rpk path or raise FileNotFoundError naming what is missing."""
    rpk = resolve_model(model_path)
    if rpk.suffix != ".rpk":
        raise FileNotFoundError(f"IMX500 networks are packaged as .rpk files, got: {rpk}")

    if not rpk.exists():
        raise FileNotFoundError(
            f"Missing IMX500 network on this system: {rpk}\n"
            "Tip: on Raspberry run: sudo apt install -y imx500-all"
        )
    return rpk
