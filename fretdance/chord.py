"""Enumeration of playable chord shapes for a set of simultaneous pitches."""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from fretdance import constants
from fretdance.instrument import Instrument, Position


@dataclass(frozen=True)
class Chord:
    """One way of producing a set of pitches, one position per pitch."""

    positions: Tuple[Position, ...]

    def fretted_frets(self) -> List[int]:
        return [p.fret for p in self.positions if p.fret > 0]

    def strings(self) -> List[int]:
        return [p.string_index for p in self.positions]


def is_playable(positions: Sequence[Position]) -> bool:
    """Check that a combination of positions can be held at once.

    No string may be used twice, at most four distinct frets may be
    fretted, and the fretted span must fit the hand (wider allowed higher
    up the neck where frets are narrower).
    """
    strings = [p.string_index for p in positions]
    if len(set(strings)) != len(strings):
        return False
    frets = [p.fret for p in positions if p.fret > 0]
    if not frets:
        return True
    if len(set(frets)) > constants.MAX_DISTINCT_FRETS:
        return False
    low = min(frets)
    span = max(frets) - low
    if low < constants.HIGH_SPAN_FRET:
        return span <= constants.LOW_SPAN_LIMIT
    else:
        return span <= constants.HIGH_SPAN_LIMIT


def chords_for_notes(instrument: Instrument, pitches: Iterable[int]) -> List[Chord]:
    """Enumerate every playable chord producing exactly ``pitches``.

    Args:
        instrument: The instrument to play on.
        pitches: The simultaneous pitches.

    Returns:
        The playable chords; empty if some pitch cannot be produced at all.
    """
    per_pitch: List[List[Position]] = []
    for pitch in pitches:
        candidates = instrument.positions_for(pitch)
        if not candidates:
            logging.debug("pitch %d has no position on this instrument", pitch)
            return []
        per_pitch.append(candidates)
    if not per_pitch:
        return []
    return [
        Chord(tuple(combo))
        for combo in itertools.product(*per_pitch)
        if is_playable(combo)
    ]
