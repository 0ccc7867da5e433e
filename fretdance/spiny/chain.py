"""Persistent append-only chain with shared prefixes.

A beam's history only ever grows at the end, and sibling beams produced
from the same parent share everything but their newest entry. ``PChain``
stores each entry as a node pointing at its parent, so ``snoc`` is O(1)
and costs no copying no matter how long the history is.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, List, Optional, Type, override

from fretdance.spiny.common import Iterating, Sized

__all__ = ["PChain"]


@dataclass(frozen=True, eq=False)
class PChainNode[T]:
    value: T
    parent: Optional[PChainNode[T]]


@dataclass(frozen=True, eq=False)
class PChain[T](Sized, Iterating[T]):
    """An immutable sequence supporting O(1) append and last-element access."""

    _size: int
    _last: Optional[PChainNode[T]]

    @staticmethod
    def empty(_ty: Optional[Type[T]] = None) -> PChain[T]:
        return _CHAIN_EMPTY

    @staticmethod
    def singleton(value: T) -> PChain[T]:
        return PChain(1, PChainNode(value, None))

    @staticmethod
    def mk(values: Iterable[T]) -> PChain[T]:
        chain: PChain[T] = PChain.empty()
        for value in values:
            chain = chain.snoc(value)
        return chain

    @override
    def size(self) -> int:
        return self._size

    def snoc(self, value: T) -> PChain[T]:
        """Return a new chain with ``value`` appended; this chain is unchanged."""
        return PChain(self._size + 1, PChainNode(value, self._last))

    def last(self) -> Optional[T]:
        return None if self._last is None else self._last.value

    def init(self) -> Optional[PChain[T]]:
        """Return the chain without its last element, or None when empty."""
        if self._last is None:
            return None
        return PChain(self._size - 1, self._last.parent)

    def iter_reversed(self) -> Iterator[T]:
        node = self._last
        while node is not None:
            yield node.value
            node = node.parent

    @override
    def iter(self) -> Iterator[T]:
        return iter(self.list())

    @override
    def list(self) -> List[T]:
        values = list(self.iter_reversed())
        values.reverse()
        return values

    def shares_prefix_with(self, other: PChain[T]) -> bool:
        """True when both chains are extensions of one common non-empty node."""
        mine = set(id(n) for n in _nodes(self._last))
        return any(id(n) in mine for n in _nodes(other._last))


def _nodes[T](node: Optional[PChainNode[T]]) -> Iterator[PChainNode[T]]:
    while node is not None:
        yield node
        node = node.parent


_CHAIN_EMPTY: PChain[Any] = PChain(0, None)
