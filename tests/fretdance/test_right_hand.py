from typing import List

import pytest
from hypothesis import given
from hypothesis import strategies as st

from fretdance.config import CostConfig, InstrumentConfig
from fretdance.instrument import Instrument
from fretdance.right_hand import (
    RightFinger,
    RightHand,
    follow,
    generate_right_hands,
    is_ordered,
    is_valid_right_hand,
    right_hand_cost,
    seed_right_hand,
    thumb_may_double,
)
from tests.fretdance.spiny.hypo import configure_hypo

configure_hypo()

P, I, M, A = RightFinger.P, RightFinger.I, RightFinger.M, RightFinger.A

_GUITAR = Instrument.from_config(InstrumentConfig((64, 59, 55, 50, 45, 40)))


def test_seed(guitar: Instrument, bass: Instrument) -> None:
    assert seed_right_hand(guitar).positions == (5, 2, 1, 0)
    assert seed_right_hand(bass).positions == (3, 2, 1, 0)
    assert seed_right_hand(guitar).used == ()


def test_single_string(guitar: Instrument) -> None:
    hands = generate_right_hands(guitar, [5])
    assert hands
    assert RightHand((5, 2, 1, 0), (P,)) in hands
    for hand in hands:
        assert is_valid_right_hand(guitar, hand)
        assert len(hand.used) == 1
        assert hand.position(hand.used[0]) == 5


def test_no_strings(guitar: Instrument) -> None:
    assert generate_right_hands(guitar, []) == []


def test_strum_fallback(guitar: Instrument) -> None:
    hands = generate_right_hands(guitar, [0, 1, 2, 3, 4])
    assert hands == [RightHand((5, 4, 3, 2), (), is_arpeggio=True)]


def test_order_never_reversed(guitar: Instrument) -> None:
    previous = RightHand((5, 2, 1, 0), (P, I, A))
    hands = [follow(previous, h) for h in generate_right_hands(guitar, [1, 2, 3])]
    assert hands
    for hand in hands:
        assert hand.position(A) <= hand.position(P)
        assert hand.previous_used == (P, I, A)
        assert sorted(hand.position(f) for f in hand.used) == [1, 2, 3]


def test_double_thumb(guitar: Instrument) -> None:
    assert thumb_may_double(guitar, [5, 4])
    hands = generate_right_hands(guitar, [5, 4])
    doubled = [h for h in hands if h.thumb_extra_string is not None]
    assert doubled
    for hand in doubled:
        assert hand.used == (P,)
        assert hand.position(P) == 5
        assert hand.thumb_extra_string == 4
        assert all(hand.position(f) <= 4 for f in (I, M, A))
    assert not is_valid_right_hand(guitar, RightHand((5, 5, 1, 0), (P,), thumb_extra_string=4))
    assert is_valid_right_hand(guitar, RightHand((5, 4, 1, 0), (P,), thumb_extra_string=4))


def test_double_thumb_needs_adjacent_low_strings(guitar: Instrument, bass: Instrument) -> None:
    assert all(h.thumb_extra_string is None for h in generate_right_hands(guitar, [5, 3]))
    assert not thumb_may_double(guitar, [5, 2])
    assert not thumb_may_double(bass, [3, 2])


def test_bass_mode_lets_fingers_cross(bass: Instrument) -> None:
    def crossed(hands: List[RightHand]) -> bool:
        return any(
            I in h.used and M in h.used and h.position(I) < h.position(M) for h in hands
        )

    assert crossed(generate_right_hands(bass, [1, 2], bass=True))
    assert not crossed(generate_right_hands(bass, [1, 2], bass=False))


def test_is_ordered() -> None:
    assert is_ordered((5, 2, 1, 0))
    assert is_ordered((3, 3, 3, 3))
    assert not is_ordered((1, 2, 1, 0))
    assert is_ordered((3, 1, 2, 0), bass=True)
    assert not is_ordered((1, 2, 1, 0), bass=True)


@pytest.mark.parametrize(
    "previous,new,expected",
    [
        # Thumb moves two strings and plucks again elsewhere, i stays put
        (
            RightHand((5, 2, 1, 0), (P, I, A)),
            RightHand((3, 2, 1, 0), (P, I, M), (P, I, A)),
            12.0,
        ),
        # i and a both pluck again on new strings
        (
            RightHand((5, 2, 1, 0), (P, I, A)),
            RightHand((3, 3, 2, 1), (I, M, A), (P, I, A)),
            45.0,
        ),
        # m plucked two ticks ago
        (
            RightHand((5, 2, 1, 0), (I,), (M,)),
            RightHand((5, 2, 1, 0), (M,), (I,)),
            10.0,
        ),
        # Thumb alone on the neighbouring string
        (
            RightHand((5, 2, 1, 0), (P,)),
            RightHand((4, 2, 1, 0), (P,), (P,)),
            11.0,
        ),
    ],
)
def test_cost(previous: RightHand, new: RightHand, expected: float) -> None:
    assert right_hand_cost(CostConfig(), previous, new) == pytest.approx(expected)


def test_cost_scales_with_penalty() -> None:
    previous = RightHand((5, 2, 1, 0), (I,))
    new = RightHand((5, 1, 1, 0), (I,), (I,))
    assert right_hand_cost(CostConfig(repeat_penalty=1.0), previous, new) == 3.0


@given(
    st.lists(st.integers(min_value=0, max_value=5), min_size=1, max_size=4, unique=True),
    st.booleans(),
)
def test_plucked_strings_are_ordered(touched: List[int], bass: bool) -> None:
    for hand in generate_right_hands(_GUITAR, touched, bass):
        assert is_valid_right_hand(_GUITAR, hand)
        plucked = {hand.position(f) for f in hand.used}
        if hand.thumb_extra_string is not None:
            plucked.add(hand.thumb_extra_string)
            assert all(hand.position(f) <= hand.thumb_extra_string for f in (I, M, A))
        assert plucked == set(touched)
        if not bass:
            assert list(hand.positions) == sorted(hand.positions, reverse=True)
