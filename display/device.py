from __future__ import annotations

from PIL import Image

from luma.core.interface.serial import i2c
from luma.oled.device import sh1106

from .config import DisplayConfig


class OLEDDevice:
    """
    Guidance panel sink: SH1106 over I2C through luma.oled.

    Frames that do not match the panel are letterboxed onto a blank canvas
    (never stretched) so the mask grid keeps square cells.
    """

    def __init__(self, cfg: DisplayConfig):
        self.cfg = cfg
        serial = i2c(port=cfg.i2c_bus, address=cfg.i2c_address)
        self.dev = sh1106(serial, width=cfg.width, height=cfg.height, rotate=cfg.rotate)
        self.dev.contrast(cfg.contrast)

        # luma blanks the panel on cleanup unless persist is set
        self.dev.persist = not cfg.clear_on_stop

    @property
    def size(self):
        return int(self.dev.width), int(self.dev.height)

    def _fit(self, img: Image.Image) -> Image.Image:
        if img.size == self.size:
            return img
        canvas = Image.new("1", self.size, 0)
        img = img.copy()
        img.thumbnail(self.size)
        w, h = self.size
        canvas.paste(img.convert("1"), ((w - img.width) // 2, (h - img.height) // 2))
        return canvas

    def clear(self) -> None:
        self.dev.clear()

    def show(self, img: Image.Image) -> None:
        img = self._fit(img)
        if img.mode != self.dev.mode:
            img = img.convert(self.dev.mode)
        self.dev.display(img)

    def close(self) -> None:
        print("[DISPLAY] Releasing OLED")
        self.dev.cleanup()
