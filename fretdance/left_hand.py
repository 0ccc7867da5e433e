"""The fretting hand: states, legality and transitions.

A ``LeftHand`` is one concrete configuration of the four fretting fingers
plus any open strings being sounded. States are immutable; moving to the
next chord builds a new state with ``generate_next_hand``, which also
prices the movement.

Building a successor runs in a fixed order: open strings, singly pressed
fingers, barre promotion for fingers touching several strings, then the
idle fingers, which are either kept where they were or sent to rest.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import Dict, List, Optional, Set, Tuple

from fretdance import constants
from fretdance.base import MatchException
from fretdance.config import CostConfig
from fretdance.fingering import HandPosition
from fretdance.instrument import Instrument


@unique
class PressKind(Enum):
    """How a finger is touching the strings."""

    Open = 0
    """Not pressing: an open string marker, or a finger hovering at rest."""
    Pressed = 1
    Barre = 2
    """The index finger laid across several strings."""
    PartialBarre2 = 3
    PartialBarre3 = 4
    Keep = 5
    """Still holding the position it pressed for an earlier chord."""

    def is_pressing(self) -> bool:
        return self != PressKind.Open

    def sounds_string(self) -> bool:
        """Whether a finger in this state frets a note of the current chord."""
        match self:
            case (
                PressKind.Pressed
                | PressKind.Barre
                | PressKind.PartialBarre2
                | PressKind.PartialBarre3
            ):
                return True
            case PressKind.Open | PressKind.Keep:
                return False
            case _:
                raise MatchException(self)


@dataclass(frozen=True)
class LeftFinger:
    finger: int
    """Finger id 1 to 4, or -1 for an open string."""
    string_index: int
    fret: int
    press: PressKind

    def is_open_string(self) -> bool:
        return self.finger == constants.OPEN_FINGER


@dataclass(frozen=True)
class LeftHand:
    """One configuration of the fretting hand."""

    fingers: Tuple[LeftFinger, ...]
    use_barre: bool = False

    @property
    def hand_position(self) -> int:
        """Fret the index finger is anchored at, never below 1."""
        index = self.finger(constants.INDEX_FINGER)
        if index is not None and index.fret > 1:
            return index.fret
        return 1

    def finger(self, finger: int) -> Optional[LeftFinger]:
        for f in self.fingers:
            if f.finger == finger:
                return f
        return None

    def fretting_fingers(self) -> List[LeftFinger]:
        return sorted(
            (f for f in self.fingers if not f.is_open_string()), key=lambda f: f.finger
        )

    def touched_strings(self) -> List[int]:
        """Strings sounded by this hand: open strings and freshly fretted notes."""
        strings = set()
        for f in self.fingers:
            if f.is_open_string() or f.press.sounds_string():
                strings.add(f.string_index)
        return sorted(strings)


def seed_left_hand(instrument: Instrument) -> LeftHand:
    """The starting hand: all four fingers on one string at frets 1 to 4."""
    string_index = min(constants.SEED_STRING, instrument.max_string_index)
    return LeftHand(
        tuple(
            LeftFinger(finger, string_index, finger, PressKind.Pressed)
            for finger in constants.FRETTING_FINGERS
        )
    )


def is_valid_hand(fingers: List[LeftFinger], hand_position: int) -> bool:
    """Check the biomechanical legality of a complete hand.

    Open-string markers carry no finger and are ignored. The fretting
    fingers must stay under the neck ceiling, keep their frets in finger
    order and stay within stretch limits.
    """
    if not fingers:
        return False
    fretting = sorted(
        (f for f in fingers if not f.is_open_string()), key=lambda f: f.finger
    )
    for f in fretting:
        reach = constants.PINKY_FINGER - f.finger
        ceiling = constants.NECK_CEILING - reach - f.string_index
        if f.fret > ceiling:
            return False
        if f.finger > f.fret + 1:
            return False
    if hand_position < constants.LOW_POSITION_LIMIT and len(fretting) >= 3:
        last, second, third = fretting[-1], fretting[-2], fretting[-3]
        if last.fret - second.fret > 1 or second.fret - third.fret > 1:
            return False
    stretches = 0
    for a, b in zip(fretting, fretting[1:]):
        if abs(a.fret - b.fret) > 1:
            stretches += 1
        if a.finger < b.finger and a.fret > b.fret:
            return False
        if a.fret != 0 and b.fret != 0:
            if abs(a.fret - b.fret) > 2 * abs(a.finger - b.finger):
                return False
        if a.fret == b.fret and a.string_index < b.string_index:
            return False
    return stretches <= 1


def hand_cost(
    instrument: Instrument,
    costs: CostConfig,
    old: LeftHand,
    new_fingers: List[LeftFinger],
    new_hand_position: int,
) -> float:
    """Price the move from ``old`` to ``new_fingers``.

    Every fretting finger pays the distance its tip travels, plus a
    lift-off penalty if it moved and lands pressing. Shifting the hand
    first lifts every finger that was pressing.
    """
    cost = 0.0
    if old.hand_position != new_hand_position:
        for f in old.fingers:
            if f.press.is_pressing():
                cost += costs.lift_off_penalty
    for finger in constants.FRETTING_FINGERS:
        before = old.finger(finger)
        after = next((f for f in new_fingers if f.finger == finger), None)
        if before is None or after is None:
            continue
        distance = instrument.finger_distance(
            before.string_index, before.fret, after.string_index, after.fret
        )
        cost += distance
        if distance > 0 and after.press.is_pressing():
            cost += costs.lift_off_penalty
    return cost


def _barre_kind(finger: int, touches: int) -> PressKind:
    if finger == constants.INDEX_FINGER:
        return PressKind.Barre
    elif finger == constants.PINKY_FINGER and touches == 2:
        return PressKind.PartialBarre2
    elif finger == constants.PINKY_FINGER and touches == 3:
        return PressKind.PartialBarre3
    else:
        return PressKind.Pressed


def _rest_string(instrument: Instrument, used: Set[int], hand_position: int) -> int:
    if used:
        if hand_position < constants.HIGH_POSITION_FRET:
            return (min(used) + max(used)) // 2
        return 0
    if instrument.num_strings > 5:
        return min(2, instrument.max_string_index)
    return min(1, instrument.max_string_index)


def generate_next_hand(
    instrument: Instrument,
    costs: CostConfig,
    current: LeftHand,
    target: HandPosition,
) -> Optional[Tuple[LeftHand, float]]:
    """Move the hand to play ``target``.

    Args:
        instrument: The instrument being played.
        costs: Penalty constants.
        current: The hand before the move.
        target: Finger assignment for the next chord.

    Returns:
        The new hand and the cost of the move, or None if the resulting
        hand is illegal.
    """
    open_fingers: List[LeftFinger] = []
    pressed: Dict[int, Tuple[int, int]] = {}
    barred: Dict[int, Tuple[int, int]] = {}
    touches: Dict[int, int] = {}
    used_strings: Set[int] = set()
    used_frets: Set[int] = set()

    for fp in target.fingers:
        if fp.is_open():
            open_fingers.append(
                LeftFinger(constants.OPEN_FINGER, fp.string_index, 0, PressKind.Open)
            )
            continue
        touches[fp.finger] = touches.get(fp.finger, 0) + 1
        used_frets.add(fp.fret)
        used_strings.add(fp.string_index)
        if touches[fp.finger] == 1:
            pressed[fp.finger] = (fp.fret, fp.string_index)
        else:
            if touches[fp.finger] == 2:
                barred[fp.finger] = pressed.pop(fp.finger)
            _, seen_string = barred[fp.finger]
            barred[fp.finger] = (fp.fret, max(fp.string_index, seen_string))

    pressed_fingers = [
        LeftFinger(finger, string_index, fret, PressKind.Pressed)
        for finger, (fret, string_index) in sorted(pressed.items())
    ]

    need_barre = False
    barre_fingers: List[LeftFinger] = []
    for finger, (fret, string_index) in sorted(barred.items()):
        kind = _barre_kind(finger, touches[finger])
        if kind == PressKind.Barre:
            need_barre = True
            # The barre lies at least one string beyond every fretted note
            string_index = min(
                max(string_index, max(used_strings) + 1), instrument.max_string_index
            )
        barre_fingers.append(LeftFinger(finger, string_index, fret, kind))

    if touches:
        lowest_finger = min(touches)
        new_hand_position = max(1, min(used_frets) - (lowest_finger - 1))
    else:
        new_hand_position = current.hand_position

    barre_active = bool(barred) or current.use_barre
    keep_barre = False
    keep_fingers: List[LeftFinger] = []
    resting: List[int] = []
    for finger in constants.FRETTING_FINGERS:
        if finger in touches:
            continue
        old = current.finger(finger)
        if old is None or new_hand_position != current.hand_position:
            resting.append(finger)
            continue
        if finger == constants.PINKY_FINGER and barre_active:
            resting.append(finger)
            continue
        blocked = any(
            old.fret <= fret or old.string_index > string_index
            for fret, string_index in barred.values()
        )
        blocked = blocked or any(
            old.fret == fret and old.string_index == string_index
            for fret, string_index in pressed.values()
        )
        if blocked:
            resting.append(finger)
            continue
        if (
            old.press == PressKind.Barre
            and finger == constants.INDEX_FINGER
            and used_strings
            and old.string_index <= max(used_strings)
        ):
            keep_barre = True
        match old.press:
            case PressKind.Open | PressKind.Barre:
                press = old.press
            case (
                PressKind.Pressed
                | PressKind.PartialBarre2
                | PressKind.PartialBarre3
                | PressKind.Keep
            ):
                press = PressKind.Keep
            case _:
                raise MatchException(old.press)
        keep_fingers.append(LeftFinger(finger, old.string_index, old.fret, press))
        used_strings.add(old.string_index)

    rest_string = _rest_string(instrument, used_strings, new_hand_position)
    rest_fingers = [
        LeftFinger(finger, rest_string, new_hand_position + finger - 1, PressKind.Open)
        for finger in resting
    ]

    fingers = pressed_fingers + barre_fingers + open_fingers + rest_fingers + keep_fingers
    if not is_valid_hand(fingers, new_hand_position):
        return None
    cost = hand_cost(instrument, costs, current, fingers, new_hand_position)
    return (LeftHand(tuple(fingers), need_barre or keep_barre), cost)


