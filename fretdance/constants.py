"""Physical constants and defaults for the fingering search."""

STRING_SPACING = 0.85
"""Distance between adjacent strings, in the same unit as the scale length."""

FULL_STRING = 64.7954
"""Scale length of the string from nut to bridge."""

MAX_FRET = 23
"""Highest fret a normal note may use."""

LOW_STRING_MAX_FRET = 16
"""Highest fret on strings below the three highest-pitched ones."""

HIGH_STRING_COUNT = 3
"""Number of high strings exempt from ``LOW_STRING_MAX_FRET``."""

HARMONIC_OFFSETS = ((5, 24), (7, 19), (12, 12), (4, 28), (9, 28))
"""Natural harmonics as (fret, semitones above the open string)."""

MAX_DISTINCT_FRETS = 4
"""A chord may use at most this many distinct fretted positions."""

LOW_SPAN_LIMIT = 5
"""Widest fret span of a chord whose lowest fret is below ``HIGH_SPAN_FRET``."""

HIGH_SPAN_LIMIT = 6
"""Widest fret span of a chord higher up the neck, where frets are narrower."""

HIGH_SPAN_FRET = 8

NECK_CEILING = 22
"""Fret ceiling for the pinky on the highest string; lower for other fingers and strings."""

FOLD_RANGE = 22
"""Octave folding keeps notes within this many semitones above the highest open string."""

OPEN_FINGER = -1
"""Finger id for an open string."""

FRETTING_FINGERS = (1, 2, 3, 4)
"""Index, middle, ring, pinky."""

INDEX_FINGER = 1
PINKY_FINGER = 4

LOW_POSITION_LIMIT = 10
"""Below this hand position, ring/pinky and middle/ring may not stretch."""

HIGH_POSITION_FRET = 17
"""From this hand position on, resting fingers sit on the highest string."""

SEED_STRING = 2
"""String pressed by all four fingers in the initial hand."""

LIFT_OFF_PENALTY = 0.025
"""Cost of lifting a finger off the fretboard."""

REPEAT_PENALTY = 10.0
"""Cost unit for a plucking finger reused on consecutive events."""

STRUM_THRESHOLD = 4
"""More touched strings than this are strummed rather than plucked."""

DEFAULT_BEAM_WIDTH = 100
DEFAULT_PROGRESS_INTERVAL = 10
DEFAULT_FPS = 60.0

FRAME_KEY_SCALE = 1000
"""Output frames closer than 1/FRAME_KEY_SCALE of a frame are merged."""
