from guidance.announcer import AnnouncementThrottle
from guidance.models import Announcement

from conftest import FakeSpeech


def test_same_message_is_suppressed_inside_interval(speech):
    th = AnnouncementThrottle(speech, interval=2.0)
    assert th.announce("adjust left", now=10.0) is Announcement.SPOKEN
    assert th.announce("adjust left", now=10.5) is Announcement.SUPPRESSED
    assert th.announce("adjust left", now=12.1) is Announcement.SPOKEN
    assert speech.spoken == ["adjust left", "adjust left"]


def test_suppression_is_measured_from_last_spoken(speech):
    th = AnnouncementThrottle(speech, interval=2.0)
    th.announce("adjust left", now=0.0)
    th.announce("adjust left", now=1.9)
    assert th.announce("adjust left", now=2.0) is Announcement.SPOKEN
    assert th.last_time == 2.0


def test_different_message_goes_through_immediately(speech):
    th = AnnouncementThrottle(speech, interval=2.0)
    th.announce("adjust left", now=0.0)
    assert th.announce("turn right ahead", now=0.1) is Announcement.SPOKEN
    assert th.announce("adjust left", now=0.2) is Announcement.SPOKEN
    assert speech.spoken == ["adjust left", "turn right ahead", "adjust left"]
    assert th.last_message == "adjust left"


def test_not_ready_speech_drops_without_touching_record():
    speech = FakeSpeech(ready=False)
    th = AnnouncementThrottle(speech)
    assert th.announce("adjust left", now=5.0) is Announcement.DROPPED
    assert speech.spoken == []
    assert th.last_message is None

    # once ready the first message is not treated as a repeat
    speech.ready = True
    assert th.announce("adjust left", now=5.1) is Announcement.SPOKEN


def test_missing_speech_drops():
    th = AnnouncementThrottle(None)
    assert th.announce("adjust left", now=0.0) is Announcement.DROPPED
    assert th.speak_now("hello", now=0.0) is Announcement.DROPPED


def test_speak_now_bypasses_dedup(speech):
    th = AnnouncementThrottle(speech, interval=2.0)
    th.announce("adjust left", now=0.0)
    assert th.speak_now("adjust left", now=0.1) is Announcement.SPOKEN
    assert speech.spoken == ["adjust left", "adjust left"]
    # a manual message still counts as the last spoken one
    assert th.announce("adjust left", now=0.5) is Announcement.SUPPRESSED
