"""Note names, tunings and pitch-set preprocessing.

Note names follow the Helmholtz-style convention used for tunings: an
uppercase letter sits in the octave from A2 to G#3 (so ``C`` is 48 and
``E1`` is one octave below ``E``), a lowercase letter sits one octave up
(``e`` is 64) and a digit after a lowercase letter counts octaves up
(``c1`` is the same as ``c``). A ``#`` raises a note by one semitone.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Dict, Iterable, List, Tuple

from lark import Lark, Transformer
from lark.exceptions import LarkError

from fretdance import constants
from fretdance.base import ConfigError

# Lark grammar for tunings: note names or plain semitone numbers,
# separated by whitespace or commas.
TUNING_GRAMMAR = """
%import common.WS
%ignore WS
%ignore COMMA

COMMA: ","
NAME: /[A-Ga-g](#[0-9]*|[0-9]+#?)?/
NUMBER: /[0-9]+/

start: note*
note: NAME | NUMBER
"""

_LETTER_PITCHES: Dict[str, int] = {
    "A": 45,
    "B": 47,
    "C": 48,
    "D": 50,
    "E": 52,
    "F": 53,
    "G": 55,
}

_PARSER = Lark(TUNING_GRAMMAR, parser="lalr")


def name_to_pitch(name: str) -> int:
    letter = name[0]
    sharp = 1 if "#" in name else 0
    digits = "".join(c for c in name[1:] if c.isdigit())
    octaves = int(digits) if digits else 0
    base = _LETTER_PITCHES[letter.upper()] + sharp
    if letter.isupper():
        return base - 12 * octaves
    else:
        return base + 12 * max(octaves, 1)


class TuningTransformer(Transformer):
    """Transform a parsed tuning into a tuple of pitches."""

    def start(self, items):
        return tuple(items)

    def note(self, items):
        token = items[0]
        if token.type == "NUMBER":
            return int(token)
        return name_to_pitch(str(token))


def parse_tuning(tuning_str: str) -> Tuple[int, ...]:
    """Parse a tuning such as ``"e b G D A E1"``.

    Args:
        tuning_str: Note names or semitone numbers, highest-pitched string first.

    Returns:
        The open-string pitches in the same order.

    Raises:
        ConfigError: If the text is not a tuning or names no strings.
    """
    try:
        tree = _PARSER.parse(tuning_str)
    except LarkError as e:
        raise ConfigError(f"invalid tuning {tuning_str!r}: {e}") from e
    pitches = TuningTransformer().transform(tree)
    if not pitches:
        raise ConfigError(f"tuning {tuning_str!r} names no strings")
    return pitches


def parse_note(note_str: str) -> int:
    pitches = parse_tuning(note_str)
    if len(pitches) != 1:
        raise ConfigError(f"expected a single note: {note_str!r}")
    return pitches[0]


class TuningPreset(Enum):
    StandardGuitar = auto()
    DropDGuitar = auto()
    OpenDGuitar = auto()
    OpenGGuitar = auto()
    DadgadGuitar = auto()
    StandardBass = auto()
    FiveStringBass = auto()


TUNING_PRESETS: Dict[TuningPreset, str] = {
    TuningPreset.StandardGuitar: "e b G D A E1",  # E4 B3 G3 D3 A2 E2
    TuningPreset.DropDGuitar: "e b G D A D1",  # E4 B3 G3 D3 A2 D2
    TuningPreset.OpenDGuitar: "d a F# D A D1",  # D4 A3 F#3 D3 A2 D2
    TuningPreset.OpenGGuitar: "d b G D G1 D1",  # D4 B3 G3 D3 G2 D2
    TuningPreset.DadgadGuitar: "d a G D A D1",  # D4 A3 G3 D3 A2 D2
    TuningPreset.StandardBass: "G1 D1 A1 E2",  # G2 D2 A1 E1
    TuningPreset.FiveStringBass: "G1 D1 A1 E2 B2",  # G2 D2 A1 E1 B0
}


def preset_tuning(preset: TuningPreset) -> Tuple[int, ...]:
    return parse_tuning(TUNING_PRESETS[preset])


def preset_by_name(name: str) -> TuningPreset:
    for preset in TuningPreset:
        if preset.name.lower() == name.lower():
            return preset
    choices = ", ".join(p.name for p in TuningPreset)
    raise ConfigError(f"unknown tuning preset {name!r} (choose from {choices})")


def fold_notes(notes: Iterable[int], tuning: Tuple[int, ...]) -> List[int]:
    """Move every pitch by octaves into the playable range of the tuning.

    The range runs from the lowest open string to ``FOLD_RANGE`` semitones
    above the highest open string.

    Returns:
        The folded pitches, deduplicated and sorted.
    """
    low = min(tuning)
    high = max(tuning) + constants.FOLD_RANGE
    folded = set()
    for note in notes:
        while note < low:
            note += 12
        while note > high:
            note -= 12
        folded.add(note)
    return sorted(folded)


def thin_notes(notes: Iterable[int], limit: int) -> List[int]:
    """Reduce a chord to at most ``limit`` notes.

    The lowest and highest notes always survive. Inner notes that double
    either of them at the octave go first, then the highest inner notes.
    """
    ordered = sorted(set(notes))
    if len(ordered) <= limit or len(ordered) <= 2:
        return ordered
    low = ordered[0]
    high = ordered[-1]
    inner = ordered[1:-1]
    room = max(limit - 2, 0)
    doubled = [n for n in inner if (n - low) % 12 == 0 or (high - n) % 12 == 0]
    for note in reversed(doubled):
        if len(inner) <= room:
            break
        inner.remove(note)
    inner = inner[:room]
    return [low, *inner, high]
