"""Assignment of fretting fingers to the positions of a chord.

Fingers are numbered 1 (index) through 4 (pinky); open strings carry
finger -1. A ``HandPosition`` is the result: what is being played right
now, independent of how the hand got there.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Sequence, Tuple

from fretdance import constants
from fretdance.chord import Chord
from fretdance.instrument import Position


@dataclass(frozen=True)
class FingerPosition:
    string_index: int
    fret: int
    finger: int
    """Finger id, -1 for an open string."""

    def is_open(self) -> bool:
        return self.finger == constants.OPEN_FINGER


@dataclass(frozen=True)
class HandPosition:
    """A chord with a finger chosen for every position."""

    fingers: Tuple[FingerPosition, ...]

    def fingerprint(self) -> str:
        """Canonical text key; equal for assignments with the same placements."""
        ordered = sorted(self.fingers, key=lambda f: (f.string_index, f.fret, f.finger))
        return "|".join(f"{f.string_index}:{f.fret}:{f.finger}" for f in ordered)

    def fretted(self) -> List[FingerPosition]:
        return [f for f in self.fingers if not f.is_open()]

    def used_fingers(self) -> List[int]:
        return sorted(set(f.finger for f in self.fretted()))


def _choices(positions: Sequence[Position]) -> Iterator[Tuple[FingerPosition, ...]]:
    if not positions:
        yield ()
        return
    head = positions[0]
    if head.fret == 0:
        options = [constants.OPEN_FINGER]
    else:
        options = list(constants.FRETTING_FINGERS)
    for rest in _choices(positions[1:]):
        for finger in options:
            yield (FingerPosition(head.string_index, head.fret, finger), *rest)


def is_valid_assignment(fingers: Sequence[FingerPosition]) -> bool:
    """Check that the fretting fingers of an assignment can physically coexist."""
    fretted = sorted((f for f in fingers if not f.is_open()), key=lambda f: f.finger)
    for f in fretted:
        # A finger cannot reach further behind the first fret than its own offset
        if f.finger > f.fret + 1:
            return False
    if len(fretted) < 2:
        return True
    for a, b in zip(fretted, fretted[1:]):
        if a.finger == b.finger:
            if a.fret != b.fret:
                return False
            if a.finger != constants.INDEX_FINGER and abs(a.string_index - b.string_index) > 1:
                return False
        elif a.fret > b.fret:
            return False
    first: Dict[int, FingerPosition] = {}
    for f in fretted:
        first.setdefault(f.finger, f)
    index, middle, ring, pinky = (first.get(k) for k in constants.FRETTING_FINGERS)
    if index is not None and middle is not None and middle.fret - 1 > index.fret:
        return False
    if middle is not None and ring is not None and ring.fret - 1 > middle.fret:
        return False
    if (
        ring is not None
        and pinky is not None
        and pinky.fret - 1 > ring.fret
        and abs(pinky.string_index - ring.string_index) > 1
    ):
        return False
    return True


def assign_fingers(chord: Chord) -> List[HandPosition]:
    """Enumerate the distinct legal finger assignments for a chord.

    Args:
        chord: A playable chord.

    Returns:
        Legal hand positions, one per distinct fingerprint, in generation order.
    """
    seen = set()
    hands: List[HandPosition] = []
    for choice in _choices(chord.positions):
        if not is_valid_assignment(choice):
            continue
        hand = HandPosition(choice)
        key = hand.fingerprint()
        if key not in seen:
            seen.add(key)
            hands.append(hand)
    return hands


def hand_positions_for_chords(chords: Sequence[Chord]) -> List[HandPosition]:
    """Assign fingers to every chord, deduplicating across chords."""
    seen = set()
    hands: List[HandPosition] = []
    for chord in chords:
        for hand in assign_fingers(chord):
            key = hand.fingerprint()
            if key not in seen:
                seen.add(key)
                hands.append(hand)
    return hands
