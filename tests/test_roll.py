"""Tests for MidiRoll construction and the scan-resolution parameters."""

import pytest

from midiroll.config import load_config
from midiroll.midifile import MidiFile
from midiroll.roll import MidiRoll


class TestDpi:
    def test_defaults(self):
        roll = MidiRoll()
        assert roll.get_length_dpi() == 300.0
        assert roll.get_width_dpi() == 300.0

    def test_set_length(self):
        roll = MidiRoll()
        roll.set_length_dpi(150.0)
        assert roll.get_length_dpi() == 150.0
        assert roll.length_dpi == 150.0

    @pytest.mark.parametrize("bad", [-1.0, 0.0, -300.25])
    def test_non_positive_is_ignored(self, bad):
        roll = MidiRoll()
        roll.set_length_dpi(150.0)
        roll.set_length_dpi(bad)
        roll.set_width_dpi(bad)
        roll.width_dpi = bad
        assert roll.get_length_dpi() == 150.0
        assert roll.get_width_dpi() == 300.0

    def test_constructor_values_are_validated(self):
        roll = MidiRoll(length_dpi=-5, width_dpi=72)
        assert roll.length_dpi == 300.0
        assert roll.width_dpi == 72.0


class TestConstruction:
    def test_from_midifile_copies(self, two_note_file):
        roll = MidiRoll.from_midifile(two_note_file)
        roll.set_metadata("TITLE", "x")
        assert two_note_file.event_count(0) == 1
        assert roll.midifile.event_count(0) == 2

    def test_copy(self):
        roll = MidiRoll(marker="#", length_dpi=200)
        roll.set_metadata("A", "1")
        dup = roll.copy()
        dup.set_metadata("A", "2")
        assert roll.get_metadata("A") == "1"
        assert dup.marker == "#" and dup.length_dpi == 200.0

    def test_from_config(self, tmp_path, two_note_file):
        user = tmp_path / "config.yaml"
        user.write_text("metadata_marker: '%'\nwidth_dpi: 100\n", encoding="utf-8")
        cfg = load_config(user)
        roll = MidiRoll.from_config(cfg)
        assert roll.marker == "%"
        assert roll.width_dpi == 100.0
        assert roll.length_dpi == 300.0

        path = tmp_path / "in.mid"
        MidiRoll(two_note_file).save(path)
        loaded = MidiRoll.from_config(cfg, path)
        assert loaded.midifile.track_count == 2

    def test_save_and_read_keeps_roll_data(self, tmp_path):
        roll = MidiRoll(MidiFile(tracks=2))
        roll.set_roll_tempo(85)
        roll.set_metadata("SPEED", "85")
        path = tmp_path / "roll.mid"
        roll.save(path)
        back = MidiRoll.read(path)
        assert back.ticks_per_quarter_note == 510
        assert back.get_roll_tempo() == pytest.approx(85.0)
        assert back.get_metadata("SPEED") == "85"
