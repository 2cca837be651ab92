from .config import DisplayConfig
from .grid import downsample_mask
from .models import DisplayState
from .renderer import RenderConfig, render
from .service import DisplayService

__all__ = ["DisplayConfig", "DisplayState", "DisplayService", "RenderConfig", "downsample_mask", "render"]
