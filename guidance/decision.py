from __future__ import annotations

from typing import Optional

from .models import Instruction, Offset, Turn


def decide(offset: Offset, turn: Turn) -> Optional[str]:
    """
    Turn > offset > nothing.

    The offset instruction names the direction the user should move, so a
    path drifting to the left (Offset.LEFT) yields "adjust right".
    """
    if turn is Turn.LEFT:
        return Instruction.TURN_LEFT
    if turn is Turn.RIGHT:
        return Instruction.TURN_RIGHT

    if offset is Offset.LEFT:
        return Instruction.ADJUST_RIGHT
    if offset is Offset.RIGHT:
        return Instruction.ADJUST_LEFT

    return None
