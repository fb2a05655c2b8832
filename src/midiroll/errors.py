# src/midiroll/errors.py
from __future__ import annotations
from typing import Optional


class MidiRollError(Exception):
    """Base class for all roll-level failures. None of them is fatal."""


class InvalidTempoRange(MidiRollError, ValueError):
    """Roll tempo maps to a TPQ outside 1..32767 (header left untouched)."""

    def __init__(self, tempo: float, dpi: float, tpq: Optional[int]):
        self.tempo = tempo
        self.dpi = dpi
        self.tpq = tpq
        if tpq is None:
            reason = "not a finite number"
        elif tpq < 1:
            reason = "too small"
        else:
            reason = "too large (SMPTE range)"
        super().__init__(f"tpq is {reason}: tempo={tempo} dpi={dpi} tpq={tpq}")


class InvalidPattern(MidiRollError, ValueError):
    """Marker/key combination does not compile to a usable search pattern."""

    def __init__(self, pattern: str, detail: str = ""):
        self.pattern = pattern
        msg = f"invalid metadata pattern {pattern!r}"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class EmptyKey(MidiRollError, ValueError):
    def __init__(self):
        super().__init__("metadata key cannot be empty")


class MissingPair(MidiRollError):
    """A note-on without a matching note-off.

    Returned (not raised) by ``trackerize``: the note is skipped and the
    transform carries on.
    """

    def __init__(self, tick: int, channel: int, key: int, track: int):
        self.tick = tick
        self.channel = channel
        self.key = key
        self.track = track
        super().__init__(
            f"missing note-off: track={track} tick={tick} channel={channel} key={key}"
        )


class SMPTETimingError(MidiRollError, ValueError):
    """File header uses SMPTE timing; rolls only use ticks per quarter note."""

    def __init__(self, division: int):
        self.division = division
        super().__init__(f"SMPTE/invalid time division in header: {division}")
