"""Text diagrams of fretting-hand poses, for logs and the command line."""

from __future__ import annotations

from typing import List

from fretdance.left_hand import LeftHand

CELLS = 8
"""Frets shown per diagram."""


def base_fret(hand: LeftHand) -> int:
    """Choose the fret the diagram starts after, from the lowest fretted finger."""
    frets = [f.fret for f in hand.fingers if f.fret != 0]
    if not frets:
        return 0
    low = min(frets)
    if low < 4:
        return 0
    elif low < 6:
        return 3
    elif low < 8:
        return 5
    elif low < 10:
        return 7
    elif low < 13:
        return 9
    else:
        return 12


def render_left_hand(hand: LeftHand, num_strings: int, show_open: bool = False) -> str:
    """Draw a hand as one line per string, highest-pitched string first.

    An open string starts with ``0``. A pressing finger shows as ``-k``;
    with ``show_open`` a hovering finger shows as ``~k``.
    """
    base = base_fret(hand)
    lines: List[str] = [str(base)]
    for string_index in range(num_strings):
        on_string = [f for f in hand.fingers if f.string_index == string_index]
        sounded = any(f.is_open_string() for f in on_string)
        cells = ["0" if sounded else "|"]
        for cell in range(1, CELLS + 1):
            fret = base + cell
            pressing = [
                f for f in on_string if f.fret == fret and f.press.is_pressing()
            ]
            hovering = [
                f
                for f in on_string
                if f.fret == fret and not f.press.is_pressing() and not f.is_open_string()
            ]
            if pressing:
                cells.append(f" -{pressing[-1].finger}")
            elif hovering and show_open:
                cells.append(" ~" + "".join(str(f.finger) for f in hovering)[:2])
            else:
                cells.append(" --")
        cells.append(str(string_index))
        lines.append("".join(cells))
    lines.append(f"position {hand.hand_position}")
    return "\n".join(lines)
