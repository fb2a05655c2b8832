from __future__ import annotations
import copy
from collections import defaultdict, deque
from operator import attrgetter
from typing import Deque, Dict, Iterator, List, Optional, Tuple

import mido

from .timeline import DEFAULT_TPQ, MidiEvent


class MidiFile:
    """In-memory Standard MIDI File: a TPQ header and tracks of absolute-tick events.

    Events are plain `MidiEvent` objects in per-track lists. Tick order is
    only restored by `sort_track()` / `sort_tracks()`; ad hoc edits may leave
    a track unsorted.

    `join_tracks()` moves every event into a single track (remembering the
    original track of each event), `split_tracks()` undoes that. Note pairs
    are linked by list index (`MidiEvent.link`), so every operation that
    reorders or regroups events drops the links.
    """

    def __init__(self, ticks_per_quarter_note: int = DEFAULT_TPQ, tracks: int = 1, smf_format: int = 1):
        self._tracks: List[List[MidiEvent]] = [[] for _ in range(tracks)]
        self._end_ticks: List[int] = [0] * tracks
        self._tpq = int(ticks_per_quarter_note)
        self.smf_format = int(smf_format)
        self._split_end_ticks: Optional[List[int]] = None   # per-track end ticks before join_tracks()

    # ---------- header ----------

    @property
    def ticks_per_quarter_note(self) -> int:
        return self._tpq

    @ticks_per_quarter_note.setter
    def ticks_per_quarter_note(self, value: int):
        self._tpq = int(value)

    def get_ticks_per_quarter_note(self) -> int:
        return self._tpq

    def set_ticks_per_quarter_note(self, value: int):
        self._tpq = int(value)

    # ---------- tracks / events ----------

    @property
    def track_count(self) -> int:
        return len(self._tracks)

    def __len__(self) -> int:
        return len(self._tracks)

    def __getitem__(self, track: int) -> List[MidiEvent]:
        return self._tracks[track]

    def __iter__(self) -> Iterator[List[MidiEvent]]:
        return iter(self._tracks)

    def event_count(self, track: int) -> int:
        return len(self._tracks[track])

    def total_event_count(self) -> int:
        return sum(len(t) for t in self._tracks)

    def add_track(self) -> int:
        self._tracks.append([])
        self._end_ticks.append(0)
        return len(self._tracks) - 1

    def end_tick(self, track: int) -> int:
        """Tick of the track's end_of_track; never before its last event."""
        events = self._tracks[track]
        last = max((ev.tick for ev in events), default=0)
        return max(self._end_ticks[track], last)

    def set_end_tick(self, track: int, tick: int):
        if tick < 0:
            raise ValueError(f"negative tick: {tick}")
        self._end_ticks[track] = int(tick)

    def add_event(self, track: int, tick: int, message) -> MidiEvent:
        """Append `message` at `tick` to the end of `track` (no re-sort)."""
        if tick < 0:
            raise ValueError(f"negative tick: {tick}")
        ev = MidiEvent(tick=int(tick), message=message, track=track)
        self._tracks[track].append(ev)
        return ev

    def add_text(self, track: int, tick: int, text: str) -> MidiEvent:
        return self.add_event(track, tick, mido.MetaMessage("text", text=text))

    def copy(self) -> "MidiFile":
        return copy.deepcopy(self)

    # ---------- ordering ----------

    def sort_track(self, track: int):
        """Stable sort by tick; events with equal ticks keep their stored order."""
        events = self._tracks[track]
        events.sort(key=attrgetter("tick"))
        for ev in events:
            ev.link = None

    def sort_tracks(self):
        for i in range(len(self._tracks)):
            self.sort_track(i)

    # ---------- join / split ----------

    @property
    def is_joined(self) -> bool:
        return self._split_end_ticks is not None

    def join_tracks(self):
        """Merge all tracks into track 0, ordered by tick then by original position."""
        if self.is_joined:
            return
        merged: List[MidiEvent] = []
        for i, events in enumerate(self._tracks):
            for ev in events:
                ev.track = i
                ev.link = None
                merged.append(ev)
        merged.sort(key=attrgetter("tick"))
        self._split_end_ticks = list(self._end_ticks)
        self._tracks = [merged]
        self._end_ticks = [max(self._split_end_ticks, default=0)]

    def split_tracks(self):
        """Send every event of the joined track back to the track it came from."""
        if not self.is_joined:
            return
        end_ticks = self._split_end_ticks or [0]
        out: List[List[MidiEvent]] = [[] for _ in range(len(end_ticks))]
        for ev in self._tracks[0]:
            while ev.track >= len(out):
                out.append([])
                end_ticks.append(0)
            ev.link = None
            out[ev.track].append(ev)
        self._tracks = out
        self._end_ticks = end_ticks
        self._split_end_ticks = None

    # ---------- note pairing ----------

    def clear_links(self):
        for events in self._tracks:
            for ev in events:
                ev.link = None

    def link_note_pairs(self) -> int:
        """Link note-ons with note-offs inside each track; returns the pair count.

        Per (channel, key) the earliest pending note-on claims the next
        note-off in stored order. A velocity-0 note-on counts as note-off.
        """
        self.clear_links()
        pairs = 0
        for events in self._tracks:
            pending: Dict[Tuple[int, int], Deque[int]] = defaultdict(deque)
            for i, ev in enumerate(events):
                if ev.is_note_on:
                    pending[(ev.channel, ev.key)].append(i)
                elif ev.is_note_off:
                    waiting = pending.get((ev.channel, ev.key))
                    if not waiting:
                        continue  # orphan note-off
                    j = waiting.popleft()
                    events[j].link = i
                    ev.link = j
                    pairs += 1
        return pairs

    def linked_event(self, track: int, index: int) -> Optional[MidiEvent]:
        link = self._tracks[track][index].link
        if link is None:
            return None
        return self._tracks[track][link]
