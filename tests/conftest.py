import mido
import pytest

from midiroll.midifile import MidiFile


def note_on(key, velocity=64, channel=0):
    return mido.Message("note_on", note=key, velocity=velocity, channel=channel)


def note_off(key, channel=0):
    return mido.Message("note_off", note=key, velocity=0, channel=channel)


@pytest.fixture
def two_note_file():
    """Track 0: text only; track 1: two complete notes (60 then 62)."""
    mf = MidiFile(ticks_per_quarter_note=600, tracks=2)
    mf.add_text(0, 0, "an ordinary text event")
    mf.add_event(1, 0, note_on(60))
    mf.add_event(1, 100, note_off(60))
    mf.add_event(1, 200, note_on(62))
    mf.add_event(1, 300, note_off(62))
    return mf
