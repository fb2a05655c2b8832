from __future__ import annotations
import math

from ..errors import InvalidTempoRange
from ..timeline import DEFAULT_DPI, MIN_TPQ, MAX_TPQ

# Reference: tempo 100 = roll moving 10 ft/min at its start.
# At 300 dpi that is 10 * 300 * 12 = 36000 rows/min, and with a reference
# of 60 bpm one quarter note is 600 rows (one tick per image row).

def round_half_away(value: float) -> int:
    if value < 0:
        return -int(math.floor(-value + 0.5))
    return int(math.floor(value + 0.5))

def tempo_to_tpq(tempo: float, dpi: float = DEFAULT_DPI) -> int:
    raw = tempo / 10.0 * dpi * 12.0 / 60.0
    if not math.isfinite(raw):
        raise InvalidTempoRange(tempo, dpi, None)
    tpq = round_half_away(raw)
    if tpq < MIN_TPQ or tpq > MAX_TPQ:
        raise InvalidTempoRange(tempo, dpi, tpq)
    return tpq

def tpq_to_tempo(tpq: int, dpi: float = DEFAULT_DPI) -> float:
    # no validation: an SMPTE division still yields a number
    return tpq * 10.0 / dpi / 12.0 * 60.0
