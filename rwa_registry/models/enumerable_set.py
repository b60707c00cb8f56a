from __future__ import annotations
from typing import Dict, Generic, Hashable, Iterable, Iterator, List, Sequence, TypeVar

from .errors import InvalidIteration

__all__ = ["EnumerableSet", "iterate"]

T = TypeVar("T", bound=Hashable)


def iterate(collection: Sequence[T], start: int, end: int) -> List[T]:
    """
    Return ``collection[start:end]`` with the registry's paging rules.

    ``end`` is clamped to ``len(collection)``. After clamping, ``start > end``
    raises InvalidIteration. ``iterate(c, 0, <anything >= len(c)>)`` is the
    full listing.
    """
    if start < 0 or end < 0:
        raise InvalidIteration(start, end)
    end = min(end, len(collection))
    if start > end:
        raise InvalidIteration(start, end)
    return list(collection[start:end])


class EnumerableSet(Generic[T]):
    """
    Set with O(1) add/contains/remove that can also be enumerated by index.

    Values live in a dense list; a dict maps each value to its index. Removal
    moves the last element into the freed slot, so the relative order of the
    remaining values is NOT preserved after a removal.
    """

    def __init__(self, values: Iterable[T] = ()):
        self._values: List[T] = []
        self._indexes: Dict[T, int] = {}
        for value in values:
            self.add(value)

    def add(self, value: T) -> bool:
        """Append ``value``. Returns False if it was already present."""
        if value in self._indexes:
            return False
        self._indexes[value] = len(self._values)
        self._values.append(value)
        return True

    def remove(self, value: T) -> bool:
        """Swap-remove ``value``. Returns False if it was not present."""
        index = self._indexes.pop(value, None)
        if index is None:
            return False
        last = self._values.pop()
        if index < len(self._values):
            self._values[index] = last
            self._indexes[last] = index
        return True

    def index_of(self, value: T) -> int:
        return self._indexes[value]

    def reinsert(self, value: T, index: int) -> None:
        """Undo ``remove(value)`` when ``value`` used to sit at ``index``."""
        if value in self._indexes:
            raise ValueError(f"{value!r} is already present")
        if index == len(self._values):
            self.add(value)
            return
        moved = self._values[index]
        self._values[index] = value
        self._indexes[value] = index
        self._indexes[moved] = len(self._values)
        self._values.append(moved)

    def at(self, index: int) -> T:
        if index < 0:
            raise IndexError(index)
        return self._values[index]

    def values(self) -> List[T]:
        return list(self._values)

    def slice(self, start: int, end: int) -> List[T]:
        return iterate(self._values, start, end)

    def __contains__(self, value) -> bool:
        return value in self._indexes

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._values))

    def __eq__(self, other) -> bool:
        if not isinstance(other, EnumerableSet):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        return f"EnumerableSet({self._values!r})"
