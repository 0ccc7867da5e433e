"""Persistent data structures backing the beam search."""

from fretdance.spiny.chain import PChain
from fretdance.spiny.common import Entry, Flip, Impossible, Ordering, compare
from fretdance.spiny.heap import PHeap

__all__ = ["Entry", "Flip", "Impossible", "Ordering", "PChain", "PHeap", "compare"]
