from typing import List

from hypothesis import given
from hypothesis import strategies as st

from fretdance.chord import Chord, chords_for_notes
from fretdance.config import InstrumentConfig
from fretdance.fingering import (
    FingerPosition,
    HandPosition,
    assign_fingers,
    hand_positions_for_chords,
    is_valid_assignment,
)
from fretdance.instrument import Instrument, Position
from tests.fretdance.spiny.hypo import configure_hypo

configure_hypo()

_GUITAR = Instrument.from_config(InstrumentConfig((64, 59, 55, 50, 45, 40)))


def _chord(*positions) -> Chord:
    return Chord(tuple(Position(s, f) for s, f in positions))


def test_open_chord_has_single_assignment() -> None:
    hands = assign_fingers(_chord((0, 0), (1, 0), (2, 0)))
    assert len(hands) == 1
    assert all(f.finger == -1 for f in hands[0].fingers)
    assert hands[0].fretted() == []


def test_single_note_any_finger() -> None:
    hands = assign_fingers(_chord((2, 5)))
    assert sorted(h.fingers[0].finger for h in hands) == [1, 2, 3, 4]


def test_first_fret_limits_reach() -> None:
    hands = assign_fingers(_chord((2, 1)))
    assert sorted(h.fingers[0].finger for h in hands) == [1, 2]


def test_five_frets_cannot_be_fingered() -> None:
    assert assign_fingers(_chord((0, 1), (1, 2), (2, 3), (3, 4), (4, 5))) == []


def test_c_major() -> None:
    hands = assign_fingers(_chord((0, 0), (1, 1), (2, 0), (3, 2), (4, 3)))
    expected = HandPosition(
        (
            FingerPosition(0, 0, -1),
            FingerPosition(1, 1, 1),
            FingerPosition(2, 0, -1),
            FingerPosition(3, 2, 2),
            FingerPosition(4, 3, 3),
        )
    )
    assert expected in hands
    assert expected.used_fingers() == [1, 2, 3]


def test_same_finger_rules() -> None:
    index_barre = [FingerPosition(0, 1, 1), FingerPosition(5, 1, 1), FingerPosition(2, 2, 2)]
    assert is_valid_assignment(index_barre)
    spread_middle = [FingerPosition(0, 2, 2), FingerPosition(2, 2, 2)]
    assert not is_valid_assignment(spread_middle)
    adjacent_middle = [FingerPosition(0, 2, 2), FingerPosition(1, 2, 2)]
    assert is_valid_assignment(adjacent_middle)
    two_frets = [FingerPosition(0, 2, 1), FingerPosition(1, 3, 1)]
    assert not is_valid_assignment(two_frets)


def test_crossing_fingers_rejected() -> None:
    assert not is_valid_assignment([FingerPosition(0, 3, 1), FingerPosition(1, 2, 2)])


def test_finger_gaps() -> None:
    assert not is_valid_assignment([FingerPosition(0, 1, 1), FingerPosition(1, 3, 2)])
    assert not is_valid_assignment([FingerPosition(0, 2, 2), FingerPosition(1, 4, 3)])
    # Ring to pinky may stretch when the strings are adjacent
    assert is_valid_assignment([FingerPosition(0, 5, 3), FingerPosition(1, 7, 4)])
    assert not is_valid_assignment([FingerPosition(0, 5, 3), FingerPosition(2, 7, 4)])


def test_fingerprint_is_canonical() -> None:
    a = HandPosition((FingerPosition(1, 5, 1), FingerPosition(0, 0, -1)))
    b = HandPosition((FingerPosition(0, 0, -1), FingerPosition(1, 5, 1)))
    assert a.fingerprint() == b.fingerprint() == "0:0:-1|1:5:1"


def test_dedup_across_chords() -> None:
    chord = _chord((2, 5))
    hands = hand_positions_for_chords([chord, chord])
    assert len(hands) == 4
    assert len({h.fingerprint() for h in hands}) == 4


@given(st.lists(st.integers(min_value=40, max_value=76), min_size=1, max_size=4, unique=True))
def test_fingers_follow_frets(pitches: List[int]) -> None:
    for hand in hand_positions_for_chords(chords_for_notes(_GUITAR, pitches)):
        fretted = sorted(hand.fretted(), key=lambda f: f.finger)
        for a, b in zip(fretted, fretted[1:]):
            assert a.fret <= b.fret
            if a.finger == b.finger:
                assert a.fret == b.fret
