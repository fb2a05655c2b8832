# src/midiroll/metadata.py
"""
Roll metadata stored in-band as MIDI text meta events.

A metadata line looks like ``<marker><key>: <value>`` (default marker "@",
e.g. ``@TITLE: Kitten on the Keys``). Lookups and updates only look at
track 0, and only the first matching event counts; later duplicates of a
key are ignored, never removed.

Marker and key go into the search pattern verbatim, so regex
metacharacters in either act as regex syntax. A pattern that does not
compile is logged and treated as "not found".
"""
from __future__ import annotations
import logging
import re
from typing import List, Optional, Tuple

from .errors import EmptyKey, InvalidPattern
from .midifile import MidiFile
from .timeline import MidiEvent

logger = logging.getLogger(__name__)

# value part of a metadata line, read the same way as metadata_pattern()
_VALUE_RE = re.compile(r":\s*(.*)\s*$")


def get_text_events(midifile: MidiFile) -> List[MidiEvent]:
    """All text meta events, track by track, in stored (not tick) order."""
    out = []
    for events in midifile:
        for ev in events:
            if ev.is_text:
                out.append(ev)
    return out


def _is_metadata_line(content: str, marker: str) -> bool:
    if not content.startswith(marker):
        return False
    return content.find(":", len(marker)) != -1


def get_metadata_events(midifile: MidiFile, marker: str) -> List[MidiEvent]:
    """Text events shaped like ``<marker>...:...`` (all tracks, stored order)."""
    return [ev for ev in get_text_events(midifile) if _is_metadata_line(ev.content, marker)]


def format_metadata(marker: str, key: str, value: str) -> str:
    return f"{marker}{key}: {value}"


def metadata_pattern(marker: str, key: str) -> re.Pattern:
    query = marker + key + r":\s*(.*)\s*$"
    try:
        return re.compile(query)
    except re.error as e:
        raise InvalidPattern(query, str(e)) from e


def _find(midifile: MidiFile, marker: str, key: str) -> Tuple[Optional[MidiEvent], str]:
    try:
        pattern = metadata_pattern(marker, key)
    except InvalidPattern as e:
        logger.warning("problem searching for metadata: %s", e)
        return None, ""
    if midifile.track_count == 0:
        return None, ""
    for ev in midifile[0]:
        if not ev.is_text:
            continue
        m = pattern.search(ev.content)
        if m:
            return ev, m.group(1)
    return None, ""


def get_metadata(midifile: MidiFile, marker: str, key: str) -> str:
    """Value of the first `key` entry in track 0, or "" when there is none."""
    _, value = _find(midifile, marker, key)
    return value


def set_metadata(midifile: MidiFile, marker: str, key: str, value: str) -> int:
    """
    Upsert `key` in track 0 and return the tick of the written event.

    An existing entry is rewritten in place (its tick is kept). Otherwise a
    new text event goes to tick 0 of track 0, which is then re-sorted.
    """
    if not key:
        raise EmptyKey()
    line = format_metadata(marker, key, value)

    ev, _ = _find(midifile, marker, key)
    if ev is not None:
        ev.content = line
        logger.debug("metadata %r updated at tick %d", key, ev.tick)
        return ev.tick

    if midifile.track_count == 0:
        midifile.add_track()
    midifile.add_text(0, 0, line)
    midifile.sort_track(0)
    logger.debug("metadata %r added at tick 0", key)
    return 0


def get_metadata_items(midifile: MidiFile, marker: str) -> List[Tuple[str, str]]:
    """(key, value) pairs of track 0; first occurrence of a key wins."""
    items: List[Tuple[str, str]] = []
    seen = set()
    if midifile.track_count == 0:
        return items
    for ev in midifile[0]:
        if not ev.is_text:
            continue
        content = ev.content
        if not _is_metadata_line(content, marker):
            continue
        colon = content.find(":", len(marker))
        key = content[len(marker):colon]
        m = _VALUE_RE.match(content, colon)
        if not key or key in seen or m is None:
            continue
        seen.add(key)
        items.append((key, m.group(1)))
    return items
