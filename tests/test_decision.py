import pytest

from guidance.decision import decide
from guidance.models import Instruction, Offset, Turn


@pytest.mark.parametrize("offset", list(Offset))
def test_turn_wins_over_any_offset(offset):
    assert decide(offset, Turn.LEFT) == Instruction.TURN_LEFT
    assert decide(offset, Turn.RIGHT) == Instruction.TURN_RIGHT


def test_offset_instruction_points_back_to_the_path():
    assert decide(Offset.LEFT, Turn.STRAIGHT) == Instruction.ADJUST_RIGHT
    assert decide(Offset.RIGHT, Turn.STRAIGHT) == Instruction.ADJUST_LEFT


def test_centered_and_straight_says_nothing():
    assert decide(Offset.CENTER, Turn.STRAIGHT) is None


def test_instruction_phrases():
    assert Instruction.TURN_LEFT == "turn left ahead"
    assert Instruction.TURN_RIGHT == "turn right ahead"
    assert Instruction.ADJUST_LEFT == "adjust left"
    assert Instruction.ADJUST_RIGHT == "adjust right"
