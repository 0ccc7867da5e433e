"""Command line entry point.

Reads note events from a MIDI file or a JSON event list, searches both
hands and writes the resulting sequences as JSON.
"""

import json
import logging
import sys
from argparse import ArgumentParser, Namespace
from dataclasses import replace
from functools import partial
from typing import List, Optional

from fretdance import constants
from fretdance.base import ConfigError, FretDanceError
from fretdance.config import Config, init_config
from fretdance.export import FrameFn, result_to_dict
from fretdance.midi import calculate_frame, read_note_events, read_tempo_changes
from fretdance.notes import parse_tuning, preset_by_name, preset_tuning
from fretdance.render import render_left_hand
from fretdance.search import NoteEvent, search


def make_parser() -> ArgumentParser:
    """Create the command-line argument parser.

    Returns:
        An ArgumentParser configured with all the command-line options.
    """
    parser = ArgumentParser(description="Find guitar fingerings for a piece of music")
    parser.add_argument("input", help="a .mid file or a JSON list of note events")
    parser.add_argument("--output", help="JSON file for the hand sequences")
    parser.add_argument("--tracks", type=int, nargs="+", default=[0])
    parser.add_argument("--channel", type=int, default=-1)
    parser.add_argument("--fps", type=float, default=constants.DEFAULT_FPS)
    parser.add_argument("--tuning", help='note names, highest string first, e.g. "e b G D A E1"')
    parser.add_argument("--preset", default="StandardGuitar")
    parser.add_argument("--harmonics", action="store_true")
    parser.add_argument("--beam-width", type=int, default=constants.DEFAULT_BEAM_WIDTH)
    parser.add_argument("--octave-down", action="store_true")
    parser.add_argument("--capo", type=int, default=0)
    parser.add_argument("--bass", action="store_true")
    parser.add_argument("--show-hands", action="store_true")
    parser.add_argument("--log-level", default="INFO")
    return parser


def configure_logging(log_level: str) -> None:
    """Configure the logging system with the specified log level.

    Args:
        log_level: The logging level (e.g., 'DEBUG', 'INFO', 'WARNING').
    """
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(filename)s:%(lineno)d -- %(message)s",
        level=log_level,
    )


def build_config(args: Namespace) -> Config:
    if args.tuning is not None:
        tuning = parse_tuning(args.tuning)
    else:
        tuning = preset_tuning(preset_by_name(args.preset))
    config = init_config(tuning, args.harmonics)
    config = replace(
        config,
        search=replace(config.search, beam_width=args.beam_width, bass_mode=args.bass),
    )
    config.validate()
    return config


def load_json_events(path: str) -> List[NoteEvent]:
    with open(path) as f:
        try:
            raw = json.load(f)
            return [
                NoteEvent(tuple(int(n) for n in item["notes"]), float(item["realTick"]))
                for item in raw
            ]
        except (ValueError, KeyError, TypeError) as e:
            raise ConfigError(f"malformed event file {path}: {e!r}") from e


def is_midi_path(path: str) -> bool:
    return path.lower().endswith((".mid", ".midi"))


def run(args: Namespace) -> None:
    config = build_config(args)
    frame_of: Optional[FrameFn] = None
    if is_midi_path(args.input):
        events = read_note_events(
            args.input, args.tracks, args.channel, args.octave_down, args.capo
        )
        tempo_changes, ticks_per_beat = read_tempo_changes(args.input)
        frame_of = partial(calculate_frame, tempo_changes, ticks_per_beat, args.fps)
    else:
        events = load_json_events(args.input)
    logging.info("read %d events from %s", len(events), args.input)
    result = search(config, events)
    if args.show_hands:
        for hand in result.left.states()[1:]:
            print(render_left_hand(hand, len(config.instrument.tuning)))
    if args.output is not None:
        with open(args.output, "w") as f:
            json.dump(result_to_dict(result, frame_of), f, indent=2)
        logging.info("wrote %s", args.output)


def main() -> None:
    """Main entry point.

    Parses command-line arguments, configures logging and runs the search.
    """
    parser = make_parser()
    args = parser.parse_args()
    configure_logging(args.log_level)
    try:
        run(args)
    except (FretDanceError, OSError) as e:
        logging.error("%s", e)
        sys.exit(1)
    logging.info("done")


if __name__ == "__main__":
    main()
