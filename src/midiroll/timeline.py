from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Dict

DEFAULT_TPQ = 120
DEFAULT_DPI = 300.0        # Stanford roll scans (more precisely 300.25 dpi)
DEFAULT_MARKER = "@"
DEFAULT_CHARSET = "utf-8"

MIN_TPQ = 1
MAX_TPQ = 0x7FFF           # >= 0x8000 is SMPTE timing

# mido meta type name -> SMF meta type byte
META_TYPE_CODES: Dict[str, int] = {
    "sequence_number": 0x00,
    "text": 0x01,
    "copyright": 0x02,
    "track_name": 0x03,
    "instrument_name": 0x04,
    "lyrics": 0x05,
    "marker": 0x06,
    "cue_marker": 0x07,
    "device_name": 0x09,
    "channel_prefix": 0x20,
    "midi_port": 0x21,
    "end_of_track": 0x2F,
    "set_tempo": 0x51,
    "smpte_offset": 0x54,
    "time_signature": 0x58,
    "key_signature": 0x59,
    "sequencer_specific": 0x7F,
}
TEXT_META_TYPE = 0x01

# mido keeps the payload of these in `.text` ...
_TEXT_ATTR_TYPES = ("text", "copyright", "lyrics", "marker", "cue_marker")
# ... and of these in `.name`
_NAME_ATTR_TYPES = ("track_name", "instrument_name", "device_name")


@dataclass
class MidiEvent:
    """One event of a track, timed in absolute ticks.

    `message` is a mido Message/MetaMessage; its own `time` is ignored
    (delta times only exist while reading/writing). `link` is the index of
    the paired note event inside the same track list, set by
    `MidiFile.link_note_pairs()` and cleared by any reordering.
    """
    tick: int
    message: object
    track: int = 0
    link: Optional[int] = None

    @property
    def type(self) -> str:
        return self.message.type

    @property
    def is_meta(self) -> bool:
        return bool(getattr(self.message, "is_meta", False))

    @property
    def meta_type(self) -> Optional[int]:
        if not self.is_meta:
            return None
        if self.message.type == "unknown_meta":
            return int(self.message.type_byte)
        return META_TYPE_CODES.get(self.message.type)

    @property
    def is_text(self) -> bool:
        return self.meta_type == TEXT_META_TYPE

    @property
    def is_note_on(self) -> bool:
        return self.message.type == "note_on" and self.message.velocity > 0

    @property
    def is_note_off(self) -> bool:
        if self.message.type == "note_off":
            return True
        return self.message.type == "note_on" and self.message.velocity == 0

    @property
    def is_note(self) -> bool:
        return self.is_note_on or self.is_note_off

    @property
    def channel(self) -> Optional[int]:
        return getattr(self.message, "channel", None)

    @property
    def key(self) -> Optional[int]:
        return getattr(self.message, "note", None)

    def _content_attr(self) -> Optional[str]:
        if not self.is_meta:
            return None
        if self.message.type in _TEXT_ATTR_TYPES:
            return "text"
        if self.message.type in _NAME_ATTR_TYPES:
            return "name"
        return None

    @property
    def content(self) -> str:
        attr = self._content_attr()
        return getattr(self.message, attr) if attr else ""

    @content.setter
    def content(self, value: str):
        attr = self._content_attr()
        if attr is None:
            raise TypeError(f"event of type {self.message.type!r} carries no text content")
        self.message = self.message.copy(**{attr: value})
