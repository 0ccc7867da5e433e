"""Reading note events from standard MIDI files."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import mido

from fretdance.search import NoteEvent

DEFAULT_TEMPO = 500000
"""Microseconds per beat before the first tempo change (120 bpm)."""


@dataclass(frozen=True)
class TempoChange:
    track: int
    tempo: int
    """Microseconds per beat."""
    tick: int
    """Absolute tick at which the tempo takes effect."""


def read_tempo_changes(path: str) -> Tuple[List[TempoChange], int]:
    """Collect every tempo change in a MIDI file.

    Returns:
        The tempo changes in tick order and the file's ticks per beat.
    """
    midi_file = mido.MidiFile(path)
    changes = []
    for index, track in enumerate(midi_file.tracks):
        tick = 0
        for msg in track:
            tick += msg.time
            if msg.is_meta and msg.type == "set_tempo":
                changes.append(TempoChange(index, msg.tempo, tick))
    changes.sort(key=lambda c: c.tick)
    return (changes, midi_file.ticks_per_beat)


def calculate_frame(
    tempo_changes: Sequence[TempoChange], ticks_per_beat: int, fps: float, tick: float
) -> float:
    """Convert an absolute tick to a (fractional) video frame.

    Args:
        tempo_changes: Tempo changes in tick order.
        ticks_per_beat: Resolution of the MIDI file.
        fps: Frames per second of the output.
        tick: The tick to convert.

    Returns:
        The frame at which ``tick`` sounds.
    """
    changes = list(tempo_changes)
    if not changes or changes[0].tick > 0:
        changes.insert(0, TempoChange(0, DEFAULT_TEMPO, 0))
    frames = 0.0
    for i, current in enumerate(changes):
        if current.tick > tick:
            break
        end = min(changes[i + 1].tick, tick) if i + 1 < len(changes) else tick
        seconds = (end - current.tick) * current.tempo / (ticks_per_beat * 1e6)
        frames += seconds * fps
    return frames


def _is_channel_message(msg: mido.Message) -> bool:
    return not msg.is_meta and hasattr(msg, "channel")


def read_note_events(
    path: str,
    tracks: Sequence[int],
    channel: int = -1,
    octave_down: bool = False,
    capo: int = 0,
) -> List[NoteEvent]:
    """Group the note-ons of a MIDI file into simultaneous pitch events.

    Consecutive note-ons form one event; any other message on the
    selected channel closes it. Pitch bends are ignored.

    Args:
        path: The MIDI file.
        tracks: Indices of the tracks to read.
        channel: Channel to read, or -1 for all channels.
        octave_down: Lower every pitch by an octave.
        capo: Fret of a capo; pitches are lowered by this many semitones.

    Returns:
        Events with absolute-tick timestamps, in tick order.
    """
    midi_file = mido.MidiFile(path)
    shift = capo + (12 if octave_down else 0)
    events: List[NoteEvent] = []
    for track_index in tracks:
        if not 0 <= track_index < len(midi_file.tracks):
            logging.warning("midi file has no track %d", track_index)
            continue
        tick = 0
        previous_tick = 0
        group: List[int] = []
        for msg in midi_file.tracks[track_index]:
            tick += msg.time
            if not _is_channel_message(msg):
                continue
            if channel == -1 or msg.channel == channel:
                if msg.type == "note_on" and msg.velocity > 0:
                    group.append(msg.note - shift)
                elif msg.type != "pitchwheel" and group:
                    events.append(NoteEvent(tuple(sorted(group)), float(previous_tick)))
                    group = []
            previous_tick = tick
        if group:
            events.append(NoteEvent(tuple(sorted(group)), float(previous_tick)))
    events.sort(key=lambda e: e.timestamp)
    return events
