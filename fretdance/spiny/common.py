"""Common comparison types shared by the persistent structures.

The beam pool keys beams by cumulative cost, so everything here is about
ordering: a three-way comparison result, a mixin deriving the rich
comparison operators from it, a key-only entry and an order-reversing
wrapper that turns a min-heap into a max-heap.
"""

from __future__ import annotations

from abc import ABCMeta, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, List, cast, override

__all__ = [
    "Comparable",
    "Entry",
    "Flip",
    "Impossible",
    "Iterating",
    "Ordering",
    "Sized",
    "compare",
]


class Impossible(Exception):
    """Raised when an internal consistency check fails.

    Reaching one of these is a programming error, never a property of the
    input being searched.
    """

    pass


class Sized(metaclass=ABCMeta):
    @abstractmethod
    def size(self) -> int: ...

    def null(self) -> bool:
        return self.size() == 0

    def __bool__(self) -> bool:
        return not self.null()

    def __len__(self) -> int:
        return self.size()


class Iterating[U](metaclass=ABCMeta):
    @abstractmethod
    def iter(self) -> Iterator[U]: ...

    def list(self) -> List[U]:
        return list(self.iter())

    def __iter__(self) -> Iterator[U]:
        return self.iter()


class Ordering(Enum):
    """Result of a three-way comparison."""

    Lt = -1
    Eq = 0
    Gt = 1

    def flip(self) -> Ordering:
        match self:
            case Ordering.Lt:
                return Ordering.Gt
            case Ordering.Gt:
                return Ordering.Lt
            case Ordering.Eq:
                return Ordering.Eq
            case _:
                raise Impossible


class Comparable[T](metaclass=ABCMeta):
    @abstractmethod
    def compare(self, other: T) -> Ordering: ...

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, type(self)):
            return self.compare(cast(T, other)) == Ordering.Eq
        else:
            return False

    def __ne__(self, other: Any) -> bool:
        return not self.__eq__(other)

    def __lt__(self, other: T) -> bool:
        return self.compare(other) == Ordering.Lt

    def __le__(self, other: T) -> bool:
        return not self.__gt__(other)

    def __gt__(self, other: T) -> bool:
        return self.compare(other) == Ordering.Gt

    def __ge__(self, other: T) -> bool:
        return not self.__lt__(other)


@dataclass(frozen=True, eq=False)
class Entry[K, V](Comparable["Entry[K, V]"]):
    """A key-value pair ordered by its key alone.

    Lets a heap hold arbitrary payloads (beams, here) while ordering them
    by a cheap scalar such as cumulative cost.
    """

    key: K
    value: V

    @override
    def compare(self, other: Entry[K, V]) -> Ordering:
        return compare(self.key, other.key)


@dataclass(frozen=True, eq=False)
class Flip[T](Comparable["Flip[T]"]):
    """Wrapper that reverses the ordering of the wrapped value.

    Example:
        >>> from fretdance.spiny.common import Flip, compare
        >>> compare(1, 2)
        <Ordering.Lt: -1>
        >>> compare(Flip(1), Flip(2))
        <Ordering.Gt: 1>
    """

    value: T

    @override
    def compare(self, other: Flip[T]) -> Ordering:
        return compare(self.value, other.value).flip()


def compare[T](a: T, b: T) -> Ordering:
    """Compare two values with their own ``__eq__`` and ``__lt__``.

    Args:
        a: First value to compare.
        b: Second value to compare.

    Returns:
        How ``a`` orders relative to ``b``.
    """
    # Unsafe eq/lt because generic protocols are half-baked
    if getattr(a, "__eq__")(b):
        return Ordering.Eq
    elif getattr(a, "__lt__")(b):
        return Ordering.Lt
    else:
        return Ordering.Gt
