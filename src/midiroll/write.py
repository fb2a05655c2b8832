from __future__ import annotations
from pathlib import Path
from typing import BinaryIO, Iterable, Union

import mido

from .midifile import MidiFile
from .timeline import DEFAULT_CHARSET, MidiEvent

Target = Union[str, Path, BinaryIO]

# ---------- interne Helfer ----------

def _emit_track_events(mt: mido.MidiTrack, events: Iterable[MidiEvent], end_tick: int = 0):
    """Schreibt Events (absolute Ticks) als delta-times in einen Track, plus end_of_track."""
    last = 0
    for ev in events:
        delta = ev.tick - last
        if delta < 0:
            raise ValueError(
                f"track is not sorted (tick {ev.tick} after {last}); call sort_tracks() first"
            )
        last = ev.tick
        mt.append(ev.message.copy(time=delta))
    mt.append(mido.MetaMessage("end_of_track", time=max(0, end_tick - last)))

# ---------- öffentliche Writer-APIs ----------

def to_mido(midifile: MidiFile, charset: str = DEFAULT_CHARSET) -> mido.MidiFile:
    # Typ 0 erlaubt nur einen Track
    mtype = midifile.smf_format
    if mtype == 0 and midifile.track_count != 1:
        mtype = 1
    mid = mido.MidiFile(type=mtype, ticks_per_beat=midifile.ticks_per_quarter_note, charset=charset)
    for i, events in enumerate(midifile):
        mt = mido.MidiTrack()
        _emit_track_events(mt, events, midifile.end_tick(i))
        mid.tracks.append(mt)
    return mid


def write_midifile(midifile: MidiFile, target: Target, charset: str = DEFAULT_CHARSET):
    """Save to a path or a writable binary stream."""
    mid = to_mido(midifile, charset=charset)
    if hasattr(target, "write"):
        mid.save(file=target)
    else:
        mid.save(str(Path(target).expanduser()))
