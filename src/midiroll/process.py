from __future__ import annotations
import logging
from typing import List

from .errors import MissingPair
from .midifile import MidiFile

logger = logging.getLogger(__name__)


def trackerize(midifile: MidiFile, offset: int) -> List[MissingPair]:
    """
    Emulate the tracker bar height: every note-off moves `offset` ticks later.

    Tracks are joined so that note pairs can be linked across tracks, then
    split back and re-sorted (shifted note-offs may overtake later events).
    Note-ons are never moved. A note-on without a note-off is reported in the
    returned list and left alone. Applying this twice shifts twice.

    Raises ValueError, with the file left as it was, when a negative offset
    would move a note-off before tick 0.
    """
    offset = int(offset)
    if midifile.track_count == 0:
        return []

    original = [list(events) for events in midifile]
    midifile.join_tracks()   # eine gemeinsame Event-Liste
    midifile.link_note_pairs()
    events = midifile[0]

    for ev in events:
        if ev.is_note_on and ev.link is not None and events[ev.link].tick + offset < 0:
            bad = events[ev.link].tick
            midifile.split_tracks()
            for i, saved in enumerate(original):
                midifile[i][:] = saved
            raise ValueError(f"offset {offset} moves the note-off at tick {bad} before tick 0")

    missing: List[MissingPair] = []
    for ev in events:
        if not ev.is_note_on:
            continue
        if ev.link is None:
            miss = MissingPair(tick=ev.tick, channel=ev.channel, key=ev.key, track=ev.track)
            logger.warning("%s", miss)
            missing.append(miss)
            continue
        events[ev.link].tick += offset

    midifile.split_tracks()  # wieder auf die Original-Tracks verteilen
    midifile.sort_tracks()   # Ticks haben sich verschoben
    return missing
