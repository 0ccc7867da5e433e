"""Static model of a fretted string instrument.

Strings are indexed from 0 (highest pitch) upward. Pitches are integer
semitone numbers (MIDI note numbers).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from fretdance import constants
from fretdance.config import InstrumentConfig


@dataclass(frozen=True)
class Position:
    """A place on the fretboard where a pitch can be produced."""

    string_index: int
    """The string, 0 being the highest-pitched."""
    fret: int
    """The fret, 0 being the open string."""
    harmonic: bool = False
    """Whether the pitch sounds as a natural harmonic over this fret."""


@dataclass(frozen=True)
class HarmonicNote:
    fret: int
    pitch: int


@dataclass(frozen=True)
class GuitarString:
    index: int
    base_pitch: int
    harmonics: Tuple[HarmonicNote, ...]

    @staticmethod
    def mk(index: int, base_pitch: int) -> GuitarString:
        harmonics = tuple(
            HarmonicNote(fret, base_pitch + offset)
            for fret, offset in constants.HARMONIC_OFFSETS
        )
        return GuitarString(index, base_pitch, harmonics)

    def max_fret(self) -> int:
        if self.index < constants.HIGH_STRING_COUNT:
            return constants.MAX_FRET
        else:
            return constants.LOW_STRING_MAX_FRET

    def fret_for(self, pitch: int) -> Optional[int]:
        """Return the fret producing ``pitch`` as a normal note, if any."""
        fret = pitch - self.base_pitch
        if 0 <= fret <= self.max_fret():
            return fret
        return None

    def harmonic_frets(self, pitch: int) -> List[int]:
        return [h.fret for h in self.harmonics if h.pitch == pitch]


@dataclass(frozen=True)
class Instrument:
    """An immutable instrument built from an ``InstrumentConfig``."""

    strings: Tuple[GuitarString, ...]
    use_harmonics: bool
    string_spacing: float
    full_string: float

    @staticmethod
    def from_config(config: InstrumentConfig) -> Instrument:
        config.validate()
        strings = tuple(
            GuitarString.mk(index, pitch) for index, pitch in enumerate(config.tuning)
        )
        return Instrument(
            strings=strings,
            use_harmonics=config.use_harmonics,
            string_spacing=config.string_spacing,
            full_string=config.full_string,
        )

    @property
    def num_strings(self) -> int:
        return len(self.strings)

    @property
    def max_string_index(self) -> int:
        return len(self.strings) - 1

    @property
    def tuning(self) -> Tuple[int, ...]:
        return tuple(s.base_pitch for s in self.strings)

    def positions_for(self, pitch: int) -> List[Position]:
        """List every position producing ``pitch``, harmonics included when enabled."""
        positions: List[Position] = []
        for string in self.strings:
            fret = string.fret_for(pitch)
            if fret is not None:
                positions.append(Position(string.index, fret))
            if self.use_harmonics:
                for harmonic_fret in string.harmonic_frets(pitch):
                    positions.append(Position(string.index, harmonic_fret, True))
        return positions

    def finger_distance(
        self, old_string: int, old_fret: int, new_string: int, new_fret: int
    ) -> float:
        """Euclidean distance a fingertip travels between two positions."""
        string_dist = abs(new_string - old_string) * self.string_spacing
        fret_dist = self.full_string * abs(
            fret_position(new_fret) - fret_position(old_fret)
        )
        return math.hypot(string_dist, fret_dist)


def fret_position(fret: int) -> float:
    """Fractional position of a fret along the string.

    Equal temperament places fret ``f`` at ``1 - 2**(-f/12)`` of the scale
    length. This rescales it so fret 1 sits at 0 and fret 12 at 0.5.
    """
    if fret == 1:
        return 0.0
    elif fret == 12:
        return 0.5
    first = 2 ** (-1 / 12)
    t = (2 ** (-fret / 12) - first) / (2 ** (-12 / 12) - first)
    return 0.5 * t
