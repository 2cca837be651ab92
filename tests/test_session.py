import numpy as np
import pytest

from guidance.config import GuidanceConfig
from guidance.models import Instruction
from guidance.session import GuidanceSession
from vision.inference import SegmentationResult

from conftest import FakeSpeech, blank_mask, rect_mask


class FakeBackend:
    def __init__(self, results=None):
        self.results = list(results or [])
        self.calls = 0
        self.opened = False
        self.closed = False

    def open(self):
        self.opened = True

    def run_inference(self, frame, conf_threshold):
        self.calls += 1
        r = self.results.pop(0) if self.results else None
        if isinstance(r, Exception):
            raise r
        return r

    def close(self):
        self.closed = True


class FakeDisplay:
    def __init__(self):
        self.states = []
        self.clears = 0
        self.started = False
        self.stopped = False

    def start(self):
        self.started = True

    def stop(self):
        self.stopped = True

    def update(self, state):
        self.states.append(state)

    def clear(self):
        self.clears += 1


class FakeLogger:
    def __init__(self):
        self.events = []
        self.closed = False

    def write(self, event, **fields):
        self.events.append((event, fields))

    def close(self):
        self.closed = True

    def names(self):
        return [e for e, _ in self.events]


def left_result(confidence=0.8):
    return SegmentationResult(mask=rect_mask(80, 160, 0, 639), confidence=confidence)


@pytest.fixture
def parts():
    return FakeBackend(), FakeSpeech(), FakeDisplay(), FakeLogger()


def make_session(backend, speech, display, logger, **cfg):
    return GuidanceSession(
        backend,
        GuidanceConfig(**cfg),
        speech=speech,
        display=display,
        logger=logger,
    )


def test_lifecycle_opens_and_closes_everything(parts):
    backend, speech, display, logger = parts
    with make_session(*parts):
        assert backend.opened and speech.opened and display.started
    assert backend.closed and speech.closed and display.stopped and logger.closed
    assert logger.names() == ["session_start", "session_stop"]


def test_detected_frame_is_spoken_and_displayed(parts):
    backend, speech, display, logger = parts
    backend.results = [left_result(0.8)]
    session = make_session(*parts).open()

    assert session.handle_frame(np.zeros((480, 640, 3), np.uint8), now=10.0)
    assert speech.spoken == [Instruction.ADJUST_RIGHT]
    assert session.last_confidence == 0.8
    assert session.last_outcome.instruction == Instruction.ADJUST_RIGHT

    state = display.states[-1]
    assert state.instruction == Instruction.ADJUST_RIGHT
    assert state.confidence == 0.8
    assert len(state.grid_occ) == 32 * 32
    assert sum(state.grid_occ) > 0

    decision = [f for e, f in logger.events if e == "decision"][0]
    assert decision["instruction"] == "adjust right"
    assert decision["announcement"] == "spoken"
    assert decision["offset"] == "LEFT"
    session.close()


def test_no_detection_clears_display(parts):
    backend, speech, display, logger = parts
    session = make_session(*parts).open()
    assert session.handle_frame(object(), now=0.0)
    assert session.last_outcome is None
    assert display.clears == 1
    assert "no_detection" in logger.names()
    assert speech.spoken == []


def test_inference_failure_is_absorbed_and_gate_released(parts):
    backend, speech, display, logger = parts
    backend.results = [RuntimeError("npu timeout"), left_result()]
    session = make_session(*parts).open()

    assert session.handle_frame(object(), now=0.0)
    assert not session.admission.processing
    assert ("inference_error", {"error": "npu timeout"}) in logger.events

    assert session.handle_frame(object(), now=1.0)
    assert speech.spoken == [Instruction.ADJUST_RIGHT]


def test_bad_mask_is_absorbed(parts):
    backend, speech, display, logger = parts
    backend.results = [SegmentationResult(mask=np.zeros(10, np.float32), confidence=0.5)]
    session = make_session(*parts).open()
    assert session.handle_frame(object(), now=0.0)
    assert session.last_outcome is None
    assert display.clears == 1
    assert not session.admission.processing


def test_frames_inside_interval_are_dropped(parts):
    backend, speech, display, logger = parts
    session = make_session(*parts).open()
    assert session.handle_frame(object(), now=100.0)
    assert not session.handle_frame(object(), now=100.05)
    assert session.handle_frame(object(), now=100.2)
    assert backend.calls == 2
    assert session.admission.stats().dropped_interval == 1


def test_frame_arriving_while_busy_is_dropped(parts):
    backend, speech, display, logger = parts
    session = make_session(*parts, min_process_interval=0.0).open()

    inner = []

    def reentrant(frame, conf_threshold):
        inner.append(session.handle_frame(object(), now=1.0))
        return None

    backend.run_inference = reentrant
    assert session.handle_frame(object(), now=1.0)
    assert inner == [False]
    assert session.admission.stats().dropped_busy == 1


def test_process_mask_bypasses_gate(parts):
    backend, speech, display, logger = parts
    session = make_session(*parts)
    session.process_mask(rect_mask(80, 160, 0, 639), now=0.0)
    session.process_mask(blank_mask(), now=0.01)
    assert speech.spoken == [Instruction.ADJUST_RIGHT]
    assert display.clears == 1
    assert session.admission.stats().total_frames == 0


def test_failing_collaborator_close_does_not_stop_shutdown(parts):
    backend, speech, display, logger = parts

    def boom():
        raise OSError("i2c gone")

    display.stop = boom
    session = make_session(*parts).open()
    session.close()
    assert speech.closed and logger.closed and backend.closed


def test_failed_open_closes_started_parts(parts):
    backend, speech, display, logger = parts

    def boom():
        raise FileNotFoundError("model missing")

    backend.open = boom
    session = make_session(*parts)
    with pytest.raises(FileNotFoundError):
        session.open()
    assert speech.closed and display.stopped
    assert "session_start" not in logger.names()


def test_session_works_without_optional_parts():
    backend = FakeBackend([left_result()])
    with GuidanceSession(backend) as session:
        assert session.handle_frame(object(), now=0.0)
        assert session.last_outcome.instruction == Instruction.ADJUST_RIGHT
