"""
genarena/iterators.py
Lazy, double-ended iterators over an Arena's slots.

Every iterator wraps a _SlotCursor: a window entries[front:back] over the
slot list.  next() advances the front edge, next_back() retreats the back
edge, and both skip Free slots.  Handles are rebuilt from the absolute slot
index and the Occupied slot's generation, so a handle yielded from either
end is identical to the one insert returned.

    Iter      -> (Handle, value)
    IterMut   -> (Handle, SlotRef)
    IntoIter  -> value
    Indices   -> Handle
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Generic, Iterator, TypeVar

from genarena.handle import Handle
from genarena.slots import Occupied, Slot, SlotRef

T = TypeVar("T")
Item = TypeVar("Item")


class _SlotCursor:
    """Two-ended scan over a slot list, yielding (index, Occupied) pairs."""

    def __init__(self, entries: list[Slot]) -> None:
        self._entries = entries
        self._front = 0
        self._back = len(entries)

    def next_front(self) -> tuple[int, Occupied]:
        while self._front < self._back:
            index = self._front
            self._front += 1
            entry = self._entries[index]
            if isinstance(entry, Occupied):
                return index, entry
        raise StopIteration

    def next_back(self) -> tuple[int, Occupied]:
        while self._front < self._back:
            self._back -= 1
            entry = self._entries[self._back]
            if isinstance(entry, Occupied):
                return self._back, entry
        raise StopIteration


class _ArenaIterator(ABC, Generic[Item]):
    """
    Base for the four iterator kinds.

    Subclasses must implement _project() to turn a visited (index, Occupied)
    pair into the item they yield.
    """

    def __init__(self, entries: list[Slot]) -> None:
        self._cursor = _SlotCursor(entries)

    @abstractmethod
    def _project(self, index: int, entry: Occupied) -> Item:
        raise NotImplementedError

    def __iter__(self) -> "_ArenaIterator[Item]":
        return self

    def __next__(self) -> Item:
        return self._project(*self._cursor.next_front())

    def next_back(self) -> Item:
        """Return the item with the highest remaining index."""
        return self._project(*self._cursor.next_back())

    def __reversed__(self) -> Iterator[Item]:
        # Drains the same cursor from the back end.
        while True:
            try:
                yield self.next_back()
            except StopIteration:
                return


class Iter(_ArenaIterator[tuple[Handle[T], T]]):
    def _project(self, index: int, entry: Occupied) -> tuple[Handle[T], T]:
        return Handle(index, entry.generation), entry.value


class IterMut(_ArenaIterator[tuple[Handle[T], SlotRef[T]]]):
    def _project(self, index: int, entry: Occupied) -> tuple[Handle[T], SlotRef[T]]:
        return Handle(index, entry.generation), SlotRef(entry)


class IntoIter(_ArenaIterator[T]):
    """Owns its slot list; the arena it came from has been emptied."""

    def _project(self, index: int, entry: Occupied) -> T:
        return entry.value


class Indices(_ArenaIterator[Handle[T]]):
    def _project(self, index: int, entry: Occupied) -> Handle[T]:
        return Handle(index, entry.generation)
