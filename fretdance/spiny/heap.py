"""Persistent min-heap implemented as a leftist tree.

Every operation returns a new heap and shares untouched subtrees with the
old one, so a snapshot of the heap taken before an event stays valid while
the next generation is built. Wrapping elements in ``Flip`` turns this
into a max-heap, which is how the beam pool evicts its worst beam.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, Optional, Tuple, Type, override

from fretdance.spiny.common import Iterating, Ordering, Sized, compare

__all__ = ["PHeap"]


@dataclass(frozen=True, eq=False)
class PHeapNode[T]:
    """Internal tree node.

    Attributes:
        value: The smallest element of this subtree.
        rank: Length of the rightmost spine (the leftist "s-value").
        left: Subtree whose rank is at least that of ``right``.
        right: Subtree on the short spine.
    """

    value: T
    rank: int
    left: PHeap[T]
    right: PHeap[T]


@dataclass(frozen=True, eq=False)
class PHeap[T](Sized, Iterating[T]):
    """A persistent leftist min-heap"""

    _size: int
    _root: Optional[PHeapNode[T]]

    @staticmethod
    def empty(_ty: Optional[Type[T]] = None) -> PHeap[T]:
        """Create an empty heap.

        Args:
            _ty: Optional type hint for elements (unused).

        Returns:
            An empty heap instance.
        """
        return _HEAP_EMPTY

    @staticmethod
    def singleton(value: T) -> PHeap[T]:
        return PHeap(1, PHeapNode(value, 1, _HEAP_EMPTY, _HEAP_EMPTY))

    @staticmethod
    def mk(values: Iterable[T]) -> PHeap[T]:
        heap: PHeap[T] = PHeap.empty()
        for value in values:
            heap = heap.insert(value)
        return heap

    @override
    def null(self) -> bool:
        return self._root is None

    @override
    def size(self) -> int:
        return self._size

    def rank(self) -> int:
        return 0 if self._root is None else self._root.rank

    def insert(self, value: T) -> PHeap[T]:
        """Insert an element.

        Time Complexity: O(log n)

        Args:
            value: The element to insert.

        Returns:
            A new heap containing the inserted element.
        """
        return _heap_merge(self, PHeap.singleton(value))

    def merge(self, other: PHeap[T]) -> PHeap[T]:
        """Merge two heaps in O(log(m + n))."""
        return _heap_merge(self, other)

    def find_min(self) -> Optional[Tuple[T, PHeap[T]]]:
        """Find the minimum element.

        Returns:
            None if the heap is empty, otherwise a tuple containing:
            - The minimum element
            - A new heap with the minimum element removed
        """
        if self._root is None:
            return None
        return (self._root.value, _heap_merge(self._root.left, self._root.right))

    def peek_min(self) -> Optional[T]:
        """Return the minimum element without building the remainder."""
        return None if self._root is None else self._root.value

    def delete_min(self) -> Optional[PHeap[T]]:
        result = self.find_min()
        return None if result is None else result[1]

    @override
    def iter(self) -> Iterator[T]:
        """Iterate through the heap in ascending order.

        Each step pays for a ``delete_min``; use ``iter_unordered`` when
        order does not matter.
        """
        heap = self
        while True:
            result = heap.find_min()
            if result is None:
                return
            value, heap = result
            yield value

    def iter_unordered(self) -> Iterator[T]:
        """Visit every element once in tree order, in O(n)."""
        stack = [self]
        while stack:
            heap = stack.pop()
            node = heap._root
            if node is not None:
                yield node.value
                stack.append(node.right)
                stack.append(node.left)

    def fold[Z](self, fn: Callable[[Z, T], Z], acc: Z) -> Z:
        result = acc
        for item in self.iter_unordered():
            result = fn(result, item)
        return result

    def __add__(self, other: PHeap[T]) -> PHeap[T]:
        """Alias for merge()."""
        return self.merge(other)

    def __rshift__(self, value: T) -> PHeap[T]:
        """Alias for insert()."""
        return self.insert(value)


_HEAP_EMPTY: PHeap[Any] = PHeap(0, None)


def _heap_make[T](value: T, first: PHeap[T], second: PHeap[T]) -> PHeap[T]:
    # Keep the higher-ranked child on the left
    if first.rank() >= second.rank():
        left, right = first, second
    else:
        left, right = second, first
    size = 1 + first._size + second._size
    return PHeap(size, PHeapNode(value, right.rank() + 1, left, right))


def _heap_merge[T](first: PHeap[T], second: PHeap[T]) -> PHeap[T]:
    first_root = first._root
    second_root = second._root
    if first_root is None:
        return second
    elif second_root is None:
        return first
    elif compare(first_root.value, second_root.value) == Ordering.Gt:
        return _heap_make(
            second_root.value, second_root.left, _heap_merge(first, second_root.right)
        )
    else:
        # Prefer the first heap on ties
        return _heap_make(
            first_root.value, first_root.left, _heap_merge(first_root.right, second)
        )
