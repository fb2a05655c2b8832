# src/midiroll/roll.py
"""
MidiRoll: a piano-roll scan stored as a MIDI file.

The roll tempo lives in the ticks-per-quarter-note header (one tick per
scanned image row), not in tempo meta messages. Descriptive data lives in
``@KEY: value`` text events of track 0. The MIDI data itself is held in a
`MidiFile` (``roll.midifile``).
"""
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional, Tuple

from . import metadata, process
from .analyze import Source, read_midifile
from .config import get_charset, get_dpi, get_marker
from .errors import MissingPair
from .midifile import MidiFile
from .timeline import DEFAULT_CHARSET, DEFAULT_DPI, DEFAULT_MARKER, MidiEvent
from .util.time import tempo_to_tpq, tpq_to_tempo
from .write import Target, write_midifile

logger = logging.getLogger(__name__)


class MidiRoll:
    def __init__(
        self,
        midifile: Optional[MidiFile] = None,
        marker: str = DEFAULT_MARKER,
        length_dpi: float = DEFAULT_DPI,
        width_dpi: float = DEFAULT_DPI,
        charset: str = DEFAULT_CHARSET,
    ):
        self.midifile = midifile if midifile is not None else MidiFile()
        self.marker = marker
        self.charset = charset
        self._length_dpi = DEFAULT_DPI
        self._width_dpi = DEFAULT_DPI
        self.set_length_dpi(length_dpi)
        self.set_width_dpi(width_dpi)

    # ---------- construction / I/O ----------

    @classmethod
    def read(cls, source: Source, charset: str = DEFAULT_CHARSET, **kwargs) -> "MidiRoll":
        return cls(read_midifile(source, charset=charset), charset=charset, **kwargs)

    @classmethod
    def from_midifile(cls, midifile: MidiFile, **kwargs) -> "MidiRoll":
        return cls(midifile.copy(), **kwargs)

    @classmethod
    def from_config(cls, cfg: Dict[str, Any], source: Optional[Source] = None) -> "MidiRoll":
        """Roll with marker/dpi/charset taken from a loaded config dict."""
        kwargs = dict(
            marker=get_marker(cfg),
            length_dpi=get_dpi(cfg, "length_dpi"),
            width_dpi=get_dpi(cfg, "width_dpi"),
        )
        charset = get_charset(cfg)
        if source is None:
            return cls(charset=charset, **kwargs)
        return cls.read(source, charset=charset, **kwargs)

    def save(self, target: Target, charset: Optional[str] = None):
        write_midifile(self.midifile, target, charset=charset or self.charset)

    def copy(self) -> "MidiRoll":
        return MidiRoll(
            self.midifile.copy(),
            marker=self.marker,
            length_dpi=self._length_dpi,
            width_dpi=self._width_dpi,
            charset=self.charset,
        )

    # ---------- tempo ----------

    @property
    def ticks_per_quarter_note(self) -> int:
        return self.midifile.ticks_per_quarter_note

    def set_roll_tempo(self, tempo: float, dpi: float = DEFAULT_DPI) -> int:
        """
        Set the roll tempo through the TPQ header (rounded to an integer).
        Raises InvalidTempoRange for a TPQ outside 1..32767; the header is
        then left as it was.
        """
        tpq = tempo_to_tpq(tempo, dpi)
        self.midifile.set_ticks_per_quarter_note(tpq)
        logger.debug("roll tempo %s @ %s dpi -> tpq %d", tempo, dpi, tpq)
        return tpq

    def get_roll_tempo(self, dpi: float = DEFAULT_DPI) -> float:
        return tpq_to_tempo(self.midifile.get_ticks_per_quarter_note(), dpi)

    # ---------- metadata ----------

    def get_metadata_marker(self) -> str:
        return self.marker

    def set_metadata_marker(self, value: str):
        self.marker = value

    def get_text_events(self) -> List[MidiEvent]:
        return metadata.get_text_events(self.midifile)

    def get_metadata_events(self) -> List[MidiEvent]:
        return metadata.get_metadata_events(self.midifile, self.marker)

    def get_metadata(self, key: str) -> str:
        return metadata.get_metadata(self.midifile, self.marker, key)

    def set_metadata(self, key: str, value: str) -> int:
        return metadata.set_metadata(self.midifile, self.marker, key, value)

    def get_metadata_items(self) -> List[Tuple[str, str]]:
        return metadata.get_metadata_items(self.midifile, self.marker)

    # ---------- transform ----------

    def trackerize(self, tracker_height: int) -> List[MissingPair]:
        return process.trackerize(self.midifile, tracker_height)

    # ---------- scan resolution ----------

    @property
    def length_dpi(self) -> float:
        """Scan resolution along the length of the roll."""
        return self._length_dpi

    @length_dpi.setter
    def length_dpi(self, value: float):
        self.set_length_dpi(value)

    @property
    def width_dpi(self) -> float:
        """Scan resolution across the width of the roll."""
        return self._width_dpi

    @width_dpi.setter
    def width_dpi(self, value: float):
        self.set_width_dpi(value)

    def get_length_dpi(self) -> float:
        return self._length_dpi

    def set_length_dpi(self, value: float):
        # non-positive values are ignored
        if value > 0:
            self._length_dpi = float(value)

    def get_width_dpi(self) -> float:
        return self._width_dpi

    def set_width_dpi(self, value: float):
        if value > 0:
            self._width_dpi = float(value)
