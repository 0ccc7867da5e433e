"""Output records for the finished hand sequences.

Downstream animation works in frames, so several ticks can land on the
same frame. Only the first record per frame is kept.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from fretdance import constants
from fretdance.left_hand import LeftHand
from fretdance.pool import Beam, Step, UnprocessableEvent
from fretdance.right_hand import RightFinger, RightHand
from fretdance.search import SearchResult

type FrameFn = Callable[[float], float]


@dataclass(frozen=True)
class FingerRecord:
    finger_index: int
    string_index: int
    fret: int
    press: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fingerIndex": self.finger_index,
            "fingerInfo": {
                "stringIndex": self.string_index,
                "fret": self.fret,
                "press": self.press,
            },
        }


@dataclass(frozen=True)
class LeftHandFrame:
    timestamp: float
    frame: float
    fingers: Tuple[FingerRecord, ...]
    hand_position: int
    use_barre: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "realTick": self.timestamp,
            "frame": self.frame,
            "leftHand": [f.to_dict() for f in self.fingers],
            "useBarre": self.use_barre,
            "handPosition": self.hand_position,
        }


@dataclass(frozen=True)
class RightHandFrame:
    timestamp: float
    frame: float
    used_fingers: Tuple[str, ...]
    positions: Tuple[int, ...]
    """String under p, i, m and a."""
    is_arpeggio: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "realTick": self.timestamp,
            "frame": self.frame,
            "rightHand": {
                "usedFingers": list(self.used_fingers),
                "rightFingerPositions": list(self.positions),
                "isArpeggio": self.is_arpeggio,
            },
        }


def frame_key(frame: float) -> int:
    return int(frame * constants.FRAME_KEY_SCALE)


def _dedup_frames[S, R](
    steps: List[Step[S]], frame_of: Optional[FrameFn], build: Callable[[Step[S], float], R]
) -> List[R]:
    seen: Dict[int, R] = {}
    for step in steps[1:]:
        frame = step.timestamp if frame_of is None else frame_of(step.timestamp)
        key = frame_key(frame)
        if key not in seen:
            seen[key] = build(step, frame)
    return [seen[key] for key in sorted(seen)]


def left_hand_frames(
    beam: Beam[LeftHand], frame_of: Optional[FrameFn] = None
) -> List[LeftHandFrame]:
    """Frames of a fretting sequence, without the seed.

    Args:
        beam: The chosen fretting sequence.
        frame_of: Converts a timestamp to a frame; identity if omitted.

    Returns:
        One record per distinct frame, in frame order.
    """

    def build(step: Step[LeftHand], frame: float) -> LeftHandFrame:
        hand = step.state
        fingers = tuple(
            FingerRecord(f.finger, f.string_index, f.fret, f.press.name)
            for f in hand.fingers
        )
        return LeftHandFrame(step.timestamp, frame, fingers, hand.hand_position, hand.use_barre)

    return _dedup_frames(beam.steps(), frame_of, build)


def right_hand_frames(
    beam: Beam[RightHand], frame_of: Optional[FrameFn] = None
) -> List[RightHandFrame]:
    def build(step: Step[RightHand], frame: float) -> RightHandFrame:
        hand = step.state
        used = tuple(f.label for f in hand.used)
        if hand.thumb_extra_string is not None:
            used = (RightFinger.P.label, *used)
        return RightHandFrame(step.timestamp, frame, used, hand.positions, hand.is_arpeggio)

    return _dedup_frames(beam.steps(), frame_of, build)


def unprocessable_to_dict(event: UnprocessableEvent) -> Dict[str, Any]:
    return {
        "realTick": event.timestamp,
        "content": list(event.content),
        "reason": event.reason,
    }


def result_to_dict(
    result: SearchResult, frame_of: Optional[FrameFn] = None
) -> Dict[str, Any]:
    """Everything a caller persists after a search, as JSON-ready data."""
    return {
        "leftHand": [f.to_dict() for f in left_hand_frames(result.left, frame_of)],
        "rightHand": [f.to_dict() for f in right_hand_frames(result.right, frame_of)],
        "leftCost": result.left_cost,
        "rightCost": result.right_cost,
        "unprocessable": [unprocessable_to_dict(e) for e in result.unprocessable],
    }
