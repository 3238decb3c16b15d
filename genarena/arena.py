"""
genarena/arena.py
Arena: a generational slot arena.

Values live in a list of slots.  Each slot is either Occupied (holding a
value and the generation it was stored under) or Free (holding the
generation for its next occupant and a link to the next Free slot).
Free slots form a singly linked free list threaded through the slot list
by index; the most recently removed slot is reused first.

insert() hands back a Handle (index, generation).  A handle stays valid
until its slot is removed; after that every lookup with it reports
"not found", even once the slot has been reused under generation + 1.

The slot list never shrinks.  len() counts live values, not slots.
"""

from __future__ import annotations
import logging
from typing import Callable, Generic, Iterator, TypeVar

from genarena.handle import Handle
from genarena.iterators import Indices, IntoIter, Iter, IterMut
from genarena.slots import Free, Occupied, Slot, SlotRef

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StaleHandleError(KeyError):
    """Raised by arena[handle] when the handle is stale or unknown."""

    def __init__(self, handle: Handle) -> None:
        super().__init__(f"handle {handle} does not exist or has been removed")
        self.handle = handle


class Arena(Generic[T]):
    """
    Generational slot arena.

    Lookups with a stale handle return None (get, get_mut, remove) or False
    (contains).  Only the indexing operator raises, with StaleHandleError.

    Not thread-safe: concurrent mutation needs external locking.
    """

    def __init__(self) -> None:
        self._entries: list[Slot] = []
        self._free_head: int | None = None
        self._length: int = 0
        # Slots held by _reserve() and not yet committed or released.
        self._reserved: set[int] = set()

    # ------------------------------------------------------------------
    # Size
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        """Number of live values (not the size of the slot list)."""
        return self._length

    def is_empty(self) -> bool:
        return self._length == 0

    # ------------------------------------------------------------------
    # Insert / remove
    # ------------------------------------------------------------------

    def insert(self, value: T) -> Handle[T]:
        """Store value and return its handle."""
        handle = self._reserve()
        self._commit(handle, value)
        return handle

    def insert_with_id(self, builder: Callable[[Handle[T]], T]) -> Handle[T]:
        """
        Store builder(handle) and return handle.

        The handle is fixed before builder runs, so the built value may keep
        a reference to its own handle.  builder is called exactly once.  The
        slot is reserved while it runs, so inserts made from inside builder
        land elsewhere.  If builder raises, the reservation goes back on the
        free list and the exception propagates.
        """
        handle = self._reserve()
        try:
            value = builder(handle)
        except BaseException:
            self._release(handle)
            raise
        self._commit(handle, value)
        return handle

    def remove(self, handle: Handle[T]) -> T | None:
        """Remove and return the value for handle, or None if it is stale."""
        entry = self._occupied(handle)
        if entry is None:
            return None
        self._entries[handle.index] = Free(
            next_generation=handle.generation + 1,
            next_free=self._free_head,
        )
        self._free_head = handle.index
        self._length -= 1
        return entry.value

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, handle: Handle[T]) -> T | None:
        """Return the value for handle, or None if it is stale."""
        ref = self.get_mut(handle)
        if ref is None:
            return None
        return ref.value

    def get_mut(self, handle: Handle[T]) -> SlotRef[T] | None:
        """Return a writable SlotRef for handle, or None if it is stale."""
        entry = self._occupied(handle)
        if entry is None:
            return None
        return SlotRef(entry)

    def contains(self, handle: Handle[T]) -> bool:
        return self._occupied(handle) is not None

    def __contains__(self, handle: object) -> bool:
        return isinstance(handle, Handle) and self.contains(handle)

    def __getitem__(self, handle: Handle[T]) -> T:
        entry = self._occupied(handle)
        if entry is None:
            raise StaleHandleError(handle)
        return entry.value

    def __setitem__(self, handle: Handle[T], value: T) -> None:
        entry = self._occupied(handle)
        if entry is None:
            raise StaleHandleError(handle)
        entry.value = value

    # ------------------------------------------------------------------
    # Iteration
    # ------------------------------------------------------------------

    def iter(self) -> Iter[T]:
        """(handle, value) pairs in ascending slot order."""
        return Iter(self._entries)

    def iter_mut(self) -> IterMut[T]:
        """(handle, SlotRef) pairs in ascending slot order."""
        return IterMut(self._entries)

    def indices(self) -> Indices[T]:
        """Live handles in ascending slot order."""
        return Indices(self._entries)

    def into_iter(self) -> IntoIter[T]:
        """
        Hand every live value over to the returned iterator.

        The arena is left empty, as if newly created; handles issued
        before the call are not valid against it afterwards.
        Raises RuntimeError if called from inside an insert_with_id builder.
        """
        if self._reserved:
            raise RuntimeError(
                f"cannot consume arena while slot(s) {sorted(self._reserved)} "
                "are reserved by insert_with_id"
            )
        entries = self._entries
        self._entries = []
        self._free_head = None
        self._length = 0
        return IntoIter(entries)

    def __iter__(self) -> Iter[T]:
        return self.iter()

    def __reversed__(self) -> Iterator[tuple[Handle[T], T]]:
        return reversed(self.iter())

    # ------------------------------------------------------------------
    # Copy / repr
    # ------------------------------------------------------------------

    def copy(self) -> "Arena[T]":
        """
        Shallow copy: own slots and free list, same value objects.

        Slots reserved by a running insert_with_id builder are free in the
        clone: they are linked onto its free list with their generation.
        """
        clone: Arena[T] = Arena()
        clone._entries = [
            Occupied(e.generation, e.value) if isinstance(e, Occupied) else e
            for e in self._entries
        ]
        clone._free_head = self._free_head
        clone._length = self._length
        for index in sorted(self._reserved, reverse=True):
            placeholder = self._entries[index]
            clone._entries[index] = Free(placeholder.next_generation, clone._free_head)
            clone._free_head = index
        return clone

    __copy__ = copy

    def __repr__(self) -> str:
        items = ", ".join(f"{h}: {v!r}" for h, v in self.iter())
        return f"Arena({{{items}}})"

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _occupied(self, handle: Handle[T]) -> Occupied | None:
        """The Occupied entry handle points at, or None if it is stale."""
        if handle.index < 0 or handle.index >= len(self._entries):
            return None
        entry = self._entries[handle.index]
        if not isinstance(entry, Occupied) or entry.generation != handle.generation:
            return None
        return entry

    def _reserve(self) -> Handle[T]:
        """
        Pick the slot for the next value and take it out of circulation.

        A reused slot is unlinked from the free list; a new slot is appended
        as an unlinked Free placeholder.  Either way the slot is invisible to
        lookups and iteration until _commit() or _release().
        """
        if self._free_head is not None:
            index = self._free_head
            entry = self._entries[index]
            if not isinstance(entry, Free):
                raise RuntimeError(f"free list head {index} is occupied")
            self._free_head = entry.next_free
            self._entries[index] = Free(entry.next_generation, None)
            self._reserved.add(index)
            return Handle(index, entry.next_generation)

        index = len(self._entries)
        self._entries.append(Free(next_generation=0))
        self._reserved.add(index)
        logger.debug("arena grew to %d slots", len(self._entries))
        return Handle(index, 0)

    def _commit(self, handle: Handle[T], value: T) -> None:
        self._reserved.discard(handle.index)
        self._entries[handle.index] = Occupied(handle.generation, value)
        self._length += 1

    def _release(self, handle: Handle[T]) -> None:
        """Return a reserved, never-committed slot to the free list."""
        logger.debug("insert_with_id builder failed; releasing slot %s", handle)
        self._reserved.discard(handle.index)
        self._entries[handle.index] = Free(
            next_generation=handle.generation,
            next_free=self._free_head,
        )
        self._free_head = handle.index
