from __future__ import annotations
import argparse, logging, pathlib, sys
from .config import get_dpi, get_tracker_height, load_config
from .errors import MidiRollError
from .roll import MidiRoll

def _parse_assignment(text: str):
    key, sep, value = text.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {text!r}")
    return key, value

def main(argv=None):
    p = argparse.ArgumentParser(description="Piano-roll MIDI tool (tempo, metadata, tracker emulation)")
    p.add_argument("--in", dest="infile", required=True, help="Input MIDI file (.mid)")
    p.add_argument("--out", dest="outfile", required=False, help="Output MIDI file (default: <input>-out.mid when something changed)")
    p.add_argument("--config", dest="config", default=None, help="YAML config (defaults applied if omitted)")
    p.add_argument("--marker", dest="marker", default=None, help="Metadata marker (overrides config)")

    p.add_argument("--tempo", dest="tempo", type=float, default=None, help="Set roll tempo (stored as ticks per quarter note)")
    p.add_argument("--dpi", dest="dpi", type=float, default=None, help="Scan dpi for the tempo conversion (default: config tempo_dpi)")
    p.add_argument("--set", dest="assign", action="append", default=[], type=_parse_assignment,
                   metavar="KEY=VALUE", help="Add or update a metadata entry (repeatable)")
    p.add_argument("--get", dest="keys", action="append", default=[], metavar="KEY", help="Print a metadata value (repeatable)")
    p.add_argument("--list", dest="list_meta", action="store_true", help="List all metadata entries of track 0")
    p.add_argument("--trackerize", dest="tracker", type=int, default=None, help="Shift every note-off by N ticks")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    args = p.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    in_path = pathlib.Path(args.infile).expanduser().resolve()
    if not in_path.exists():
        print(f"[cli] ERROR: Input not found: {in_path}", file=sys.stderr)
        sys.exit(1)

    cfg = load_config(args.config)
    if args.marker is not None:
        cfg["metadata_marker"] = args.marker
    dpi = args.dpi if args.dpi is not None else get_dpi(cfg, "tempo_dpi")
    tracker = args.tracker if args.tracker is not None else get_tracker_height(cfg)
    print(f"[cli] infile = {in_path}")

    changed = False
    try:
        roll = MidiRoll.from_config(cfg, in_path)

        # 1) Tempo
        if args.tempo is not None:
            roll.set_roll_tempo(args.tempo, dpi)
            changed = True
        print(f"[cli] tempo = {roll.get_roll_tempo(dpi):.2f} tpq={roll.ticks_per_quarter_note}")

        # 2) Metadaten schreiben / lesen
        for key, value in args.assign:
            tick = roll.set_metadata(key, value)
            print(f"[cli] set {key} (tick {tick})")
            changed = True
        for key in args.keys:
            print(f"{key}: {roll.get_metadata(key)}")
        if args.list_meta:
            for key, value in roll.get_metadata_items():
                print(f"{roll.marker}{key}: {value}")

        # 3) Tracker-Emulation
        if tracker:
            missing = roll.trackerize(tracker)
            print(f"[cli] trackerize {tracker} ticks, missing note-offs: {len(missing)}")
            changed = True

        out_path = None
        if args.outfile:
            out_path = pathlib.Path(args.outfile).expanduser().resolve()
        elif changed:
            # Default: gleiche Basis wie Input + -out.mid
            out_path = in_path.with_name(in_path.stem + "-out.mid")
        if out_path is not None:
            roll.save(out_path)
            print(f"[cli] written -> {out_path}")
    except (MidiRollError, OSError, EOFError, ValueError) as e:
        print(f"[cli] ERROR: {e}", file=sys.stderr)
        sys.exit(2)

    print(f"[cli] Done. tracks={roll.midifile.track_count} events={roll.midifile.total_event_count()}")
