import pytest

from fretdance import constants
from fretdance.config import CostConfig
from fretdance.fingering import FingerPosition, HandPosition
from fretdance.instrument import Instrument, fret_position
from fretdance.left_hand import (
    LeftFinger,
    LeftHand,
    PressKind,
    generate_next_hand,
    is_valid_hand,
    seed_left_hand,
)


def _target(*fingers) -> HandPosition:
    return HandPosition(tuple(FingerPosition(s, f, k) for s, f, k in fingers))


def _move(guitar, costs, current, *fingers):
    result = generate_next_hand(guitar, costs, current, _target(*fingers))
    assert result is not None
    return result


def _along(a: int, b: int) -> float:
    return constants.FULL_STRING * abs(fret_position(b) - fret_position(a))


def test_seed(guitar: Instrument) -> None:
    seed = seed_left_hand(guitar)
    assert [(f.finger, f.string_index, f.fret) for f in seed.fingers] == [
        (1, 2, 1),
        (2, 2, 2),
        (3, 2, 3),
        (4, 2, 4),
    ]
    assert seed.hand_position == 1
    assert not seed.use_barre
    assert is_valid_hand(list(seed.fingers), seed.hand_position)


def test_all_open_costs_nothing(guitar: Instrument, costs: CostConfig) -> None:
    seed = seed_left_hand(guitar)
    hand, cost = _move(guitar, costs, seed, (0, 0, -1), (1, 0, -1), (2, 0, -1))
    assert cost == 0.0
    assert hand.touched_strings() == [0, 1, 2]
    assert hand.hand_position == 1
    kept = hand.fretting_fingers()
    assert [(f.finger, f.fret, f.press) for f in kept] == [
        (1, 1, PressKind.Keep),
        (2, 2, PressKind.Keep),
        (3, 3, PressKind.Keep),
        (4, 4, PressKind.Keep),
    ]


def test_single_note_after_open(guitar: Instrument, costs: CostConfig) -> None:
    seed = seed_left_hand(guitar)
    open_hand, _ = _move(guitar, costs, seed, (0, 0, -1), (1, 0, -1), (2, 0, -1))
    hand, cost = _move(guitar, costs, open_hand, (2, 5, 1))
    index = hand.finger(1)
    assert index == LeftFinger(1, 2, 5, PressKind.Pressed)
    assert hand.hand_position == 5
    resting = [hand.finger(k) for k in (2, 3, 4)]
    assert [(f.string_index, f.fret, f.press) for f in resting if f is not None] == [
        (2, 6, PressKind.Open),
        (2, 7, PressKind.Open),
        (2, 8, PressKind.Open),
    ]
    lift = costs.lift_off_penalty
    expected = (
        4 * lift
        + _along(1, 5)
        + lift
        + _along(2, 6)
        + _along(3, 7)
        + _along(4, 8)
    )
    assert cost == pytest.approx(expected)
    assert hand.touched_strings() == [2]


def test_single_note_cost_from_open_hand(guitar: Instrument, costs: CostConfig) -> None:
    """Only the index finger moves: its travel plus one lift-off"""
    hovering = LeftHand(
        (
            LeftFinger(1, 2, 1, PressKind.Open),
            LeftFinger(2, 2, 6, PressKind.Open),
            LeftFinger(3, 2, 7, PressKind.Open),
            LeftFinger(4, 2, 8, PressKind.Open),
        )
    )
    _, cost = _move(guitar, costs, hovering, (2, 5, 1))
    assert cost == pytest.approx(
        constants.FULL_STRING * fret_position(5) + costs.lift_off_penalty
    )


def test_full_barre(guitar: Instrument, costs: CostConfig) -> None:
    seed = seed_left_hand(guitar)
    hand, _ = _move(
        guitar,
        costs,
        seed,
        (0, 1, 1),
        (1, 1, 1),
        (2, 2, 2),
        (3, 3, 4),
        (4, 3, 3),
        (5, 1, 1),
    )
    assert hand.use_barre
    assert hand.finger(1) == LeftFinger(1, 5, 1, PressKind.Barre)
    assert hand.hand_position == 1
    assert hand.touched_strings() == [2, 3, 4, 5]


def test_barre_string_is_pushed_past_other_fingers(guitar: Instrument, costs: CostConfig) -> None:
    seed = seed_left_hand(guitar)
    hand, _ = _move(guitar, costs, seed, (0, 3, 1), (1, 3, 1), (2, 4, 2))
    # Index touches strings 0 and 1, the middle finger string 2
    assert hand.finger(1) == LeftFinger(1, 3, 3, PressKind.Barre)


def test_partial_barre(guitar: Instrument, costs: CostConfig) -> None:
    seed = seed_left_hand(guitar)
    open_hand, _ = _move(guitar, costs, seed, (0, 0, -1))
    hand, _ = _move(guitar, costs, open_hand, (2, 5, 1), (0, 8, 4), (1, 8, 4))
    assert hand.finger(4) == LeftFinger(4, 1, 8, PressKind.PartialBarre2)
    assert not hand.use_barre
    assert hand.finger(2) == LeftFinger(2, 1, 6, PressKind.Open)


def test_idle_fingers_are_kept(guitar: Instrument, costs: CostConfig) -> None:
    current = LeftHand(
        (
            LeftFinger(1, 2, 1, PressKind.Pressed),
            LeftFinger(2, 3, 2, PressKind.Pressed),
            LeftFinger(3, 2, 3, PressKind.Open),
            LeftFinger(4, 2, 4, PressKind.Open),
        )
    )
    hand, cost = _move(guitar, costs, current, (2, 1, 1))
    assert cost == 0.0
    assert hand.finger(2) == LeftFinger(2, 3, 2, PressKind.Keep)
    assert hand.finger(3) == LeftFinger(3, 2, 3, PressKind.Open)
    assert hand.touched_strings() == [2]


def test_pinky_not_kept_under_barre(guitar: Instrument, costs: CostConfig) -> None:
    current = LeftHand(
        (
            LeftFinger(1, 5, 3, PressKind.Barre),
            LeftFinger(2, 2, 4, PressKind.Pressed),
            LeftFinger(3, 3, 5, PressKind.Pressed),
            LeftFinger(4, 4, 5, PressKind.Pressed),
        ),
        use_barre=True,
    )
    hand, _ = _move(guitar, costs, current, (5, 3, 1), (0, 3, 1))
    assert hand.finger(4) is not None
    assert hand.finger(4).press == PressKind.Open


def test_illegal_stretch_is_rejected(guitar: Instrument, costs: CostConfig) -> None:
    seed = seed_left_hand(guitar)
    # Index on fret 1 and pinky on fret 5 leaves the pinky stretching two frets
    assert generate_next_hand(guitar, costs, seed, _target((5, 1, 1), (0, 5, 4))) is None


def test_is_valid_hand_rules() -> None:
    def hand(*frets, string=0):
        return [LeftFinger(k, string, f, PressKind.Pressed) for k, f in zip((1, 2, 3, 4), frets)]

    assert is_valid_hand(hand(1, 2, 3, 4), 1)
    assert not is_valid_hand(hand(5, 3, 6, 7), 5)
    assert not is_valid_hand(hand(1, 2, 3, 5), 1)
    assert is_valid_hand(hand(10, 11, 12, 14), 10)
    assert not is_valid_hand(hand(10, 12, 13, 15), 10)
    assert not is_valid_hand(hand(14, 15, 16, 20, string=5), 14)
    assert not is_valid_hand([], 1)
    # Open strings carry no finger and do not take part
    opens = [LeftFinger(-1, s, 0, PressKind.Open) for s in range(3)]
    assert is_valid_hand(opens + hand(1, 2, 3, 4, string=4), 1)
