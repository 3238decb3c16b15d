"""
genarena/handle.py
Handle: the (index, generation) key returned by Arena.insert.

A handle names one specific insertion into one specific slot.  Once the
slot is removed the handle is stale forever: a later insert into the same
slot is stamped with generation + 1, so the old handle no longer matches.

Handle is generic over the element type so that a Handle[Node] cannot be
passed to an Arena[Edge] without a type checker noticing.  The parameter
is erased at runtime.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

Generation = int


@dataclass(frozen=True)
class Handle(Generic[T]):
    """Immutable, hashable lookup key into an Arena."""

    index: int
    generation: Generation = 0

    def __str__(self) -> str:
        if self.generation == 0:
            return str(self.index)
        return f"({self.index}-{self.generation})"
