"""Tests for the tracker-bar emulation (note-off shifting)."""

import logging

import mido
import pytest

from midiroll.errors import MissingPair
from midiroll.midifile import MidiFile
from midiroll.process import trackerize
from midiroll.roll import MidiRoll

from conftest import note_off, note_on


def _notes(events):
    return [(ev.tick, ev.type, ev.key) for ev in events if ev.is_note]


def _assert_sorted(mf):
    for events in mf:
        ticks = [ev.tick for ev in events]
        assert ticks == sorted(ticks)


class TestTrackerize:
    def test_two_notes(self, two_note_file):
        counts = [two_note_file.event_count(i) for i in range(two_note_file.track_count)]
        missing = trackerize(two_note_file, 50)
        assert missing == []
        assert [two_note_file.event_count(i) for i in range(two_note_file.track_count)] == counts
        assert _notes(two_note_file[1]) == [
            (0, "note_on", 60),
            (150, "note_off", 60),
            (200, "note_on", 62),
            (350, "note_off", 62),
        ]
        assert not two_note_file.is_joined
        _assert_sorted(two_note_file)

    def test_event_identity_preserved(self, two_note_file):
        before = {id(ev) for events in two_note_file for ev in events}
        trackerize(two_note_file, 50)
        after = {id(ev) for events in two_note_file for ev in events}
        assert before == after

    def test_shifted_off_overtakes_next_note(self):
        mf = MidiFile(tracks=1)
        mf.add_event(0, 0, note_on(60))
        mf.add_event(0, 100, note_off(60))
        mf.add_event(0, 120, note_on(62))
        mf.add_event(0, 300, note_off(62))
        trackerize(mf, 50)
        assert _notes(mf[0]) == [
            (0, "note_on", 60),
            (120, "note_on", 62),
            (150, "note_off", 60),
            (350, "note_off", 62),
        ]

    def test_pairs_across_tracks_and_split_back(self):
        mf = MidiFile(tracks=3)
        mf.add_text(0, 0, "@TITLE: x")
        mf.add_event(1, 10, note_on(70, channel=1))
        mf.add_event(2, 90, note_off(70, channel=1))
        trackerize(mf, 25)
        assert [ev.tick for ev in mf[1]] == [10]
        assert [ev.tick for ev in mf[2]] == [115]
        assert mf[0][0].content == "@TITLE: x"
        assert all(ev.track == 2 for ev in mf[2])

    def test_velocity_zero_note_on_is_note_off(self):
        mf = MidiFile()
        mf.add_event(0, 0, note_on(60))
        mf.add_event(0, 100, mido.Message("note_on", note=60, velocity=0))
        trackerize(mf, 10)
        assert [ev.tick for ev in mf[0]] == [0, 110]

    def test_channels_do_not_pair(self):
        mf = MidiFile()
        mf.add_event(0, 0, note_on(60, channel=0))
        mf.add_event(0, 50, note_off(60, channel=1))
        missing = trackerize(mf, 10)
        assert len(missing) == 1
        assert [ev.tick for ev in mf[0]] == [0, 50]

    def test_missing_note_off_is_reported(self, two_note_file, caplog):
        two_note_file.add_event(1, 400, note_on(64))
        with caplog.at_level(logging.WARNING, logger="midiroll.process"):
            missing = trackerize(two_note_file, 50)
        assert len(missing) == 1
        miss = missing[0]
        assert isinstance(miss, MissingPair)
        assert (miss.tick, miss.key, miss.track) == (400, 64, 1)
        assert "missing note-off" in caplog.text
        assert _notes(two_note_file[1])[-1] == (400, "note_on", 64)
        # the complete notes are still shifted
        assert _notes(two_note_file[1])[1] == (150, "note_off", 60)

    def test_repeated_notes_pair_in_order(self):
        mf = MidiFile()
        mf.add_event(0, 0, note_on(60))
        mf.add_event(0, 10, note_on(60))
        mf.add_event(0, 20, note_off(60))
        mf.add_event(0, 30, note_off(60))
        assert mf.link_note_pairs() == 2
        assert mf[0][0].link == 2
        assert mf[0][1].link == 3
        trackerize(mf, 5)
        assert [ev.tick for ev in mf[0]] == [0, 10, 25, 35]

    def test_not_idempotent(self, two_note_file):
        trackerize(two_note_file, 50)
        trackerize(two_note_file, 50)
        assert _notes(two_note_file[1])[1] == (200, "note_off", 60)

    def test_negative_offset_shifts_exactly(self):
        mf = MidiFile()
        mf.add_event(0, 100, note_on(60))
        mf.add_event(0, 150, note_off(60))
        assert trackerize(mf, -80) == []
        assert _notes(mf[0]) == [(70, "note_off", 60), (100, "note_on", 60)]

    def test_note_off_before_zero_is_rejected(self, two_note_file):
        two_note_file.add_text(0, 5, "out of order")
        two_note_file.add_text(0, 1, "stays behind")
        before = [[(id(ev), ev.tick) for ev in events] for events in two_note_file]
        with pytest.raises(ValueError):
            trackerize(two_note_file, -120)
        after = [[(id(ev), ev.tick) for ev in events] for events in two_note_file]
        assert after == before
        assert not two_note_file.is_joined

    def test_empty_file(self):
        assert trackerize(MidiFile(tracks=0), 50) == []

    def test_roll_method(self, two_note_file):
        roll = MidiRoll(two_note_file)
        assert roll.trackerize(50) == []
        assert roll.midifile[1][1].tick == 150
