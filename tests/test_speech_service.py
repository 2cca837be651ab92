import time

from speech.config import SpeechConfig
from speech.service import SpeechService


class FakeEngine:
    def __init__(self):
        self.props = {}
        self.said = []
        self.busy = False
        self.stops = 0
        self.iterations = 0
        self.loop_started = False
        self.loop_ended = False

    def setProperty(self, name, value):
        self.props[name] = value

    def startLoop(self, use_driver_loop=True):
        self.loop_started = not use_driver_loop

    def endLoop(self):
        self.loop_ended = True

    def isBusy(self):
        return self.busy

    def stop(self):
        self.stops += 1
        self.busy = False

    def say(self, text, name=None):
        self.said.append((text, name))
        self.busy = True

    def iterate(self):
        self.iterations += 1


def wait_for(cond, timeout=2.0):
    deadline = time.time() + timeout
    while time.time() < deadline:
        if cond():
            return True
        time.sleep(0.01)
    return cond()


def test_speak_before_ready_is_dropped():
    svc = SpeechService(engine_factory=FakeEngine)
    assert not svc.ready
    assert svc.speak("adjust left") is False


def test_worker_configures_engine_and_speaks():
    engine = FakeEngine()
    svc = SpeechService(SpeechConfig(rate=150, volume=0.5, voice_id="en", poll_interval=0.005),
                        engine_factory=lambda: engine)
    svc.open()
    try:
        assert svc.wait_ready(timeout=2.0)
        assert engine.loop_started
        assert engine.props == {"rate": 150, "volume": 0.5, "voice": "en"}

        assert svc.speak("turn left ahead") is True
        assert wait_for(lambda: engine.said)
        assert engine.said[0] == ("turn left ahead", "path_guide")
    finally:
        svc.close()
    assert engine.loop_ended
    assert not svc.ready


def test_newer_message_replaces_pending_and_interrupts_current():
    engine = FakeEngine()
    svc = SpeechService(engine_factory=lambda: engine)
    svc._ready_evt.set()

    svc.speak("adjust left")
    svc.speak("turn right ahead")
    svc._step(engine)
    assert engine.said == [("turn right ahead", "path_guide")]
    assert svc.spoken == 1

    # still busy with the previous utterance
    svc.speak("adjust right")
    svc._step(engine)
    assert engine.stops == 1
    assert svc.interrupted == 1
    assert engine.said[-1][0] == "adjust right"

    # nothing pending: only pump the loop
    svc._step(engine)
    assert len(engine.said) == 2
    assert engine.iterations == 3


def test_engine_init_failure_keeps_service_not_ready():
    def broken():
        raise RuntimeError("no audio driver")

    svc = SpeechService(engine_factory=broken)
    svc.open()
    assert not svc.wait_ready(timeout=0.2)
    assert svc.speak("adjust left") is False
    svc.close()
