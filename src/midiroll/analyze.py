# src/midiroll/analyze.py
from __future__ import annotations
import io
from pathlib import Path
from typing import BinaryIO, Union

import mido

from .errors import SMPTETimingError
from .midifile import MidiFile
from .timeline import DEFAULT_CHARSET, MIN_TPQ, MAX_TPQ

Source = Union[str, Path, bytes, bytearray, BinaryIO]


def _open_mido(source: Source, charset: str) -> mido.MidiFile:
    if isinstance(source, (bytes, bytearray)):
        return mido.MidiFile(file=io.BytesIO(bytes(source)), charset=charset)
    if hasattr(source, "read"):
        return mido.MidiFile(file=source, charset=charset)
    path = Path(source).expanduser()
    return mido.MidiFile(str(path), charset=charset)


def from_mido(mid: mido.MidiFile) -> MidiFile:
    """Convert a parsed mido file (delta times) into a MidiFile (absolute ticks)."""
    tpq = int(mid.ticks_per_beat)
    # mido reads the division as a signed short: SMPTE headers come out negative
    if tpq < MIN_TPQ or tpq > MAX_TPQ:
        raise SMPTETimingError(tpq)

    out = MidiFile(ticks_per_quarter_note=tpq, tracks=0, smf_format=mid.type)
    for mtrack in mid.tracks:
        idx = out.add_track()
        tick = 0
        for msg in mtrack:
            tick += msg.time
            # end_of_track is kept as the track's end tick, not as an event
            if msg.type == "end_of_track":
                continue
            out.add_event(idx, tick, msg.copy(time=0))
        out.set_end_tick(idx, tick)
    return out


def read_midifile(source: Source, charset: str = DEFAULT_CHARSET) -> MidiFile:
    """Read a Standard MIDI File from a path, raw bytes or a binary stream."""
    return from_mido(_open_mido(source, charset))
