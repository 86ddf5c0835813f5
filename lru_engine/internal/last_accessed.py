"""Single-entry memoization of the most recently touched entry.

The slot is mutable state updated even by read-only operations. The engine
must invalidate it wherever the referenced entry leaves the cache: erase by
key, erase by cursor, eviction, clear, shrink and capacity decrease. Insert
(new or existing key) and successful lookups repoint it, and swap exchanges
it together with the structures it refers into.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from .keys import KeyStrategy

if TYPE_CHECKING:  # pragma: no cover
    from ..cache import Entry


class LastAccessed:
    """Holds a non-owning reference to one entry, or nothing."""

    __slots__ = ("_entry", "_strategy")

    def __init__(self, strategy: KeyStrategy) -> None:
        self._strategy = strategy
        self._entry: Optional["Entry"] = None

    def __bool__(self) -> bool:
        return self._entry is not None

    @property
    def entry(self) -> "Entry":
        assert self._entry is not None, "last-accessed slot is empty"
        return self._entry

    def set(self, entry: "Entry") -> None:
        self._entry = entry

    def invalidate(self) -> None:
        self._entry = None

    def matches(self, key: Any) -> bool:
        """Return whether the slot currently names ``key``."""
        entry = self._entry
        if entry is None:
            return False
        return entry.key is key or self._strategy.equal(entry.key, key)

    def refers_to(self, entry: "Entry") -> bool:
        return self._entry is entry
