"""Key/value view returned when dereferencing a cache cursor."""

from __future__ import annotations

from typing import Any, Generic, Iterator, TypeVar

from .errors import ReadOnlyIterator
from .internal.entry import Entry

K = TypeVar("K")
V = TypeVar("V")


class Pair(Generic[K, V]):
    """Live view onto one cache entry.

    The key is read-only. The value can be replaced through pairs obtained
    from mutable cursors; the change is visible in the cache immediately and
    does not affect recency order. Pairs unpack like 2-tuples and compare
    equal to any pair or 2-tuple with equal elements.
    """

    __slots__ = ("_entry", "_mutable")

    def __init__(self, entry: Entry, mutable: bool = True) -> None:
        self._entry = entry
        self._mutable = mutable

    @property
    def key(self) -> K:
        return self._entry.key

    @property
    def value(self) -> V:
        return self._entry.value

    @value.setter
    def value(self, value: V) -> None:
        if not self._mutable:
            raise ReadOnlyIterator("cannot assign a value through a read-only pair")
        self._entry.value = value

    # std::pair-style aliases
    first = key
    second = value

    @property
    def is_mutable(self) -> bool:
        return self._mutable

    def __iter__(self) -> Iterator[Any]:
        yield self._entry.key
        yield self._entry.value

    def __len__(self) -> int:
        return 2

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Pair):
            return self.key == other.key and self.value == other.value
        if isinstance(other, tuple) and len(other) == 2:
            return self.key == other[0] and self.value == other[1]
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Pair({self.key!r}, {self.value!r})"
