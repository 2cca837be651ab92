from __future__ import annotations

import math
from dataclasses import dataclass

from PIL import Image, ImageChops, ImageDraw, ImageFont

from guidance.models import Instruction, Offset, Turn

from .models import DisplayState


@dataclass(frozen=True)
class RenderConfig:
    width: int = 128
    height: int = 64

    # split: left 64x64 mask panel + right 64px text panel
    left_w: int = 64
    split_x: int = 64

    # 32x32 grid => 2px cell => 64x64
    cell_px: int = 2

    arrow_len: int = 22

    invert: bool = False


_OFFSET_TXT = {Offset.LEFT: "L", Offset.CENTER: "C", Offset.RIGHT: "R"}
_TURN_TXT = {Turn.LEFT: "L", Turn.STRAIGHT: "S", Turn.RIGHT: "R"}
_INSTRUCTION_TXT = {
    Instruction.TURN_LEFT: "TURN L",
    Instruction.TURN_RIGHT: "TURN R",
    Instruction.ADJUST_LEFT: "ADJ L",
    Instruction.ADJUST_RIGHT: "ADJ R",
}


def _font() -> ImageFont.ImageFont:
    return ImageFont.load_default()


def _draw_grid(draw: ImageDraw.ImageDraw, state: DisplayState, cfg: RenderConfig, fg: int) -> bool:
    if not state.grid_occ or len(state.grid_occ) < state.grid_w * state.grid_h:
        return False
    cell = cfg.cell_px
    max_x = cfg.left_w - 1
    max_y = cfg.height - 1
    for gy in range(state.grid_h):
        y = gy * cell
        if y > max_y:
            break
        for gx in range(state.grid_w):
            if not state.grid_occ[gy * state.grid_w + gx]:
                continue
            x = gx * cell
            draw.rectangle([x, y, min(x + cell - 1, max_x), min(y + cell - 1, max_y)], fill=fg)
    return True


def _draw_overlay(state: DisplayState, cfg: RenderConfig) -> Image.Image:
    """
    Centre line, fitted centerline, centroid marker and direction arrow,
    drawn on a separate layer that is XOR-ed over the mask so it stays
    visible on both path and background pixels.
    """
    layer = Image.new("1", (cfg.width, cfg.height), 0)
    draw = ImageDraw.Draw(layer)

    sx = cfg.left_w / float(state.frame_w)
    sy = cfg.height / float(state.frame_h)

    # frame centre (dotted)
    cx = cfg.left_w // 2
    for y in range(0, cfg.height, 4):
        draw.point((cx, y), fill=1)

    snap = state.snapshot
    if snap is None:
        return layer

    if snap.fit is not None:
        x_top = snap.fit.x_at(0.0) * sx
        x_bot = snap.fit.x_at(float(state.frame_h)) * sx
        draw.line([(x_top, 0), (x_bot, cfg.height - 1)], fill=1)

    px = snap.centroid[0] * sx
    py = snap.centroid[1] * sy
    draw.rectangle([px - 2, py - 2, px + 2, py + 2], outline=1)

    if snap.angle is not None:
        # arrow follows the path away from the user: positive angle => up-left
        rad = math.radians(snap.angle)
        ex = px - cfg.arrow_len * math.sin(rad)
        ey = py - cfg.arrow_len * math.cos(rad)
        draw.line([(px, py), (ex, ey)], fill=1)
        head = math.atan2(ey - py, ex - px)
        for side in (-math.pi / 6, math.pi / 6):
            hx = ex - 5 * math.cos(head + side)
            hy = ey - 5 * math.sin(head + side)
            draw.line([(ex, ey), (hx, hy)], fill=1)

    # keep the overlay inside the left panel
    draw.rectangle([cfg.split_x, 0, cfg.width - 1, cfg.height - 1], fill=0)
    return layer


def render(state: DisplayState, cfg: RenderConfig = RenderConfig()) -> Image.Image:
    img = _render(state, cfg)
    if cfg.invert:
        img = img.convert("L").point(lambda v: 255 - v).convert("1")
    return img


def _render(state: DisplayState, cfg: RenderConfig) -> Image.Image:
    bg = 0
    fg = 1

    img = Image.new("1", (cfg.width, cfg.height), bg)
    draw = ImageDraw.Draw(img)
    font = _font()

    # split line
    draw.line([(cfg.split_x, 0), (cfg.split_x, cfg.height - 1)], fill=fg)

    # --- left panel
    if not _draw_grid(draw, state, cfg, fg):
        draw.text((2, 2), "NO PATH", font=font, fill=fg)

    img = ImageChops.logical_xor(img, _draw_overlay(state, cfg))
    draw = ImageDraw.Draw(img)

    # --- right panel
    x = cfg.split_x + 3
    if state.message:
        lines = [s for s in state.message.split("\n") if s][:4]
        y = 4
        for line in lines:
            draw.text((x, y), line[:10], font=font, fill=fg)
            y += 12
        return img

    snap = state.snapshot
    off_txt = _OFFSET_TXT[snap.offset] if snap else "-"
    turn_txt = _TURN_TXT[snap.turn] if snap else "-"
    ang_txt = "--"
    if snap is not None and snap.angle is not None:
        ang_txt = f"{snap.angle:+.0f}"

    draw.text((x, 0), f"OFF {off_txt}", font=font, fill=fg)
    draw.text((x, 12), f"TRN {turn_txt}", font=font, fill=fg)
    draw.text((x, 24), f"ANG {ang_txt}", font=font, fill=fg)

    if state.instruction:
        draw.text((x, 36), _INSTRUCTION_TXT.get(state.instruction, state.instruction[:8]), font=font, fill=fg)

    # bottom metrics, placeholders keep layout stable
    c_txt = "--" if state.confidence is None else f"{state.confidence * 100:2.0f}"
    f_txt = "--" if state.fps is None else f"{state.fps:2.0f}"
    draw.text((x, 52), f"C{c_txt} F{f_txt}", font=font, fill=fg)

    return img
