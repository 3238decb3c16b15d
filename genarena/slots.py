"""
genarena/slots.py
Slot union for the Arena backing list.

  Occupied(generation, value)      — a live entry, created under `generation`
  Free(next_generation, next_free) — a vacated entry; `next_generation` is
                                     stamped on the next value stored here,
                                     `next_free` links to the next Free slot
                                     (None at the tail of the free list)
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from genarena.handle import Generation

T = TypeVar("T")


@dataclass
class Occupied:
    generation: Generation
    value: Any


@dataclass(frozen=True)
class Free:
    next_generation: Generation
    next_free: int | None = None


Slot = Union[Occupied, Free]


class SlotRef(Generic[T]):
    """
    Writable view of one Occupied slot, returned by get_mut and iter_mut.

    Assigning to `value` replaces the stored value in place.  Once the slot
    is removed the arena drops the Occupied entry this ref points at, so
    later writes through the ref no longer reach the arena.
    """

    __slots__ = ("_entry",)

    def __init__(self, entry: Occupied) -> None:
        self._entry = entry

    @property
    def value(self) -> T:
        return self._entry.value

    @value.setter
    def value(self, new_value: T) -> None:
        self._entry.value = new_value

    def __repr__(self) -> str:
        return f"SlotRef({self._entry.value!r})"
