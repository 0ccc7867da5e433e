"""The plucking hand.

Fingerstyle picking uses the thumb and three fingers, named p, i, m and a
after the classical convention. The thumb covers the low (high-index)
strings and a the high ones, so string indices never increase from p to
a. When more strings sound at once than there are fingers, the hand
strums instead and parks on a fixed shape.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, replace
from enum import Enum, unique
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from fretdance import constants
from fretdance.config import CostConfig
from fretdance.instrument import Instrument


@unique
class RightFinger(Enum):
    P = 0
    I = 1
    M = 2
    A = 3

    @property
    def label(self) -> str:
        return self.name.lower()


_FINGERS = tuple(RightFinger)

type Positions = Tuple[int, int, int, int]
type Pluck = Tuple[Tuple[int, RightFinger], ...]


@dataclass(frozen=True)
class RightHand:
    """One configuration of the plucking hand."""

    positions: Positions
    """String under each of p, i, m and a."""
    used: Tuple[RightFinger, ...] = ()
    """Fingers plucking at this tick, in p to a order."""
    previous_used: Tuple[RightFinger, ...] = ()
    """Fingers that plucked at the previous tick."""
    thumb_extra_string: Optional[int] = None
    """Second string struck by the thumb, which then covers two adjacent strings."""
    is_arpeggio: bool = False
    """Strummed rather than plucked; ``used`` is empty."""
    is_bass: bool = False

    def position(self, finger: RightFinger) -> int:
        return self.positions[finger.value]


def seed_right_hand(instrument: Instrument) -> RightHand:
    """Thumb on the lowest string, i/m/a resting on the three highest."""
    top = instrument.max_string_index
    return RightHand((top, min(2, top), min(1, top), 0))


def strum_hand(instrument: Instrument, bass: bool = False) -> RightHand:
    top = instrument.max_string_index
    positions = (top, max(top - 1, 0), max(top - 2, 0), max(top - 3, 0))
    return RightHand(positions, is_arpeggio=True, is_bass=bass)


def thumb_may_double(instrument: Instrument, touched: Sequence[int]) -> bool:
    """The thumb may strike two strings when two of the three lowest sound."""
    low = [s for s in touched if s >= instrument.num_strings - 3]
    return instrument.num_strings > 4 and len(low) > 1


def _in_order(lower: RightFinger, higher: RightFinger, bass: bool) -> bool:
    # "lower" plucks the lower-pitched (higher-index) string
    if bass and lower != RightFinger.P and higher != RightFinger.P:
        return True
    return lower.value <= higher.value


def _plucks(instrument: Instrument, touched: Sequence[int], bass: bool) -> Iterator[Pluck]:
    strings = sorted(set(touched), reverse=True)
    double = thumb_may_double(instrument, strings)
    low_limit = instrument.num_strings - 3
    for choice in itertools.product(_FINGERS, repeat=len(strings)):
        counts: Dict[RightFinger, int] = {}
        for finger in choice:
            counts[finger] = counts.get(finger, 0) + 1
        if any(n > 1 for f, n in counts.items() if f != RightFinger.P):
            continue
        thumbs = [s for s, f in zip(strings, choice) if f == RightFinger.P]
        if len(thumbs) > 2:
            continue
        if len(thumbs) == 2:
            if not double or abs(thumbs[0] - thumbs[1]) != 1 or min(thumbs) < low_limit:
                continue
        pairs = tuple(zip(strings, choice))
        if all(
            _in_order(f1, f2, bass)
            for (_, f1), (_, f2) in itertools.combinations(pairs, 2)
        ):
            yield pairs


def _arrangements(
    instrument: Instrument, pluck: Pluck, bass: bool
) -> Iterator[Tuple[Positions, Optional[int]]]:
    placed: Dict[RightFinger, int] = {}
    extra: Optional[int] = None
    for string, finger in pluck:
        if finger in placed:
            # The thumb sits on the lower-pitched of its two strings
            extra = min(string, placed[finger])
            placed[finger] = max(string, placed[finger])
        else:
            placed[finger] = string
    idle = [f for f in _FINGERS if f not in placed]
    for strings in itertools.product(range(instrument.num_strings), repeat=len(idle)):
        full = dict(placed)
        full.update(zip(idle, strings))
        positions: Positions = (
            full[RightFinger.P],
            full[RightFinger.I],
            full[RightFinger.M],
            full[RightFinger.A],
        )
        if is_ordered(positions, bass) and _under_thumb(positions, extra):
            yield (positions, extra)


def _under_thumb(positions: Sequence[int], extra: Optional[int]) -> bool:
    # i, m and a stay on or above the higher string of a doubled thumb
    return extra is None or all(s <= extra for s in positions[1:])


def is_ordered(positions: Sequence[int], bass: bool = False) -> bool:
    """String indices never increase from p to a (only p is checked in bass mode)."""
    for (f1, s1), (f2, s2) in itertools.combinations(zip(_FINGERS, positions), 2):
        if s1 < s2 and not (bass and f1 != RightFinger.P):
            return False
    return True


def is_valid_right_hand(instrument: Instrument, hand: RightHand) -> bool:
    """Check the plucking-hand invariants of a complete state."""
    plucked = [hand.position(f) for f in hand.used if f != RightFinger.P]
    if len(set(plucked)) != len(plucked):
        return False
    if hand.thumb_extra_string is not None:
        low_limit = instrument.num_strings - 3
        thumb = hand.position(RightFinger.P)
        if abs(thumb - hand.thumb_extra_string) != 1:
            return False
        if min(thumb, hand.thumb_extra_string) < low_limit:
            return False
        if not _under_thumb(hand.positions, hand.thumb_extra_string):
            return False
    return is_ordered(hand.positions, hand.is_bass)


def generate_right_hands(
    instrument: Instrument, touched: Sequence[int], bass: bool = False
) -> List[RightHand]:
    """Enumerate every legal plucking hand for the strings sounding now.

    The hands carry no history; attach it with ``follow``.

    Args:
        instrument: The instrument being played.
        touched: Strings that sound at this tick.
        bass: Let i, m and a cross each other.

    Returns:
        The candidate hands, or the strum shape when more than four
        strings sound.
    """
    if not touched:
        return []
    if len(set(touched)) > constants.STRUM_THRESHOLD:
        return [strum_hand(instrument, bass)]
    hands: List[RightHand] = []
    seen = set()
    for pluck in _plucks(instrument, touched, bass):
        used = tuple(sorted(set(f for _, f in pluck), key=lambda f: f.value))
        for positions, extra in _arrangements(instrument, pluck, bass):
            key = (positions, used, extra)
            if key in seen:
                continue
            seen.add(key)
            hand = RightHand(positions, used, (), extra, False, bass)
            if is_valid_right_hand(instrument, hand):
                hands.append(hand)
    return hands


def right_hand_cost(costs: CostConfig, previous: RightHand, new: RightHand) -> float:
    """Price the move from ``previous`` to ``new``.

    Fingers pay the number of strings they travel. A finger plucking
    again on a different string than last time pays a double penalty,
    the thumb a single one. Plucking with a finger that also plucked two
    ticks ago pays half as much again.
    """
    cost = float(sum(abs(a - b) for a, b in zip(previous.positions, new.positions)))
    penalty = costs.repeat_penalty
    for finger in new.used:
        weight = 1.0 if finger == RightFinger.P else 2.0
        if finger in previous.used and previous.position(finger) != new.position(finger):
            cost += weight * penalty
        if finger in previous.previous_used:
            cost += 0.5 * weight * penalty
    return cost


def follow(previous: RightHand, candidate: RightHand) -> RightHand:
    """Attach the previous tick's fingers to a freshly generated hand."""
    return replace(candidate, previous_used=previous.used)
