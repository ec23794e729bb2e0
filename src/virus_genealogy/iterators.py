"""
Bidirectional iteration over a virus's children.
"""

from typing import Any, Hashable, Iterator, Sequence

from .cache import InstanceCache


class ChildrenIterator:
    """
    Position in the ascending sequence of one virus's children.

    Works both as a cursor (current, advance, retreat, equality by position)
    and as a regular Python iterator yielding canonical payload instances from
    the current position to the end.

    The child ids are captured when the iterator is created. Mutations of the
    genealogy replace node records instead of editing them, so an existing
    iterator keeps walking the children it started with; fetch a new one to
    see later changes.
    """

    def __init__(self, child_ids: Sequence[Hashable], position: int, cache: InstanceCache):
        self._child_ids = tuple(child_ids)
        self._position = position
        self._cache = cache

    def __repr__(self) -> str:
        return f"ChildrenIterator(position={self._position}, size={len(self._child_ids)})"

    @property
    def position(self) -> int:
        return self._position

    @property
    def current(self) -> Any:
        """
        Canonical payload at the current position.

        Raises:
            IndexError: If the iterator is at the end
        """
        if not 0 <= self._position < len(self._child_ids):
            raise IndexError("ChildrenIterator is not dereferenceable at this position")
        return self._cache.materialize(self._child_ids[self._position])

    def advance(self) -> "ChildrenIterator":
        """Move one child forward and return self."""
        if self._position >= len(self._child_ids):
            raise IndexError("Cannot advance past the last child")
        self._position += 1
        return self

    def retreat(self) -> "ChildrenIterator":
        """Move one child back and return self."""
        if self._position <= 0:
            raise IndexError("Cannot retreat before the first child")
        self._position -= 1
        return self

    def copy(self) -> "ChildrenIterator":
        return ChildrenIterator(self._child_ids, self._position, self._cache)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ChildrenIterator):
            return NotImplemented
        return self._child_ids == other._child_ids and self._position == other._position

    __hash__ = None  # type: ignore[assignment]

    def __iter__(self) -> Iterator[Any]:
        return self

    def __next__(self) -> Any:
        if self._position >= len(self._child_ids):
            raise StopIteration
        instance = self._cache.materialize(self._child_ids[self._position])
        self._position += 1
        return instance

    def __reversed__(self) -> Iterator[Any]:
        # Walks backwards from just before the current position.
        for index in range(self._position - 1, -1, -1):
            yield self._cache.materialize(self._child_ids[index])
