"""Cursors over a cache's entries.

A single :class:`CacheIterator` type covers all four views of the cache:
hash order or recency order, each mutable or read-only. A cursor is a
position, not a Python iterator: ``advance()`` moves it in place, and
iterating over it yields :class:`~lru_engine.pair.Pair` objects from its
position to the end of its view without moving it.

Cursors hold a weak reference to the cache that produced them and a
non-owning reference to one entry. Any erase, eviction, clear, shrink or
capacity decrease that removes the entry expires the cursor; structural
changes also invalidate in-flight hash-order walks.
"""

from __future__ import annotations

import weakref
from typing import TYPE_CHECKING, Any, Generic, Iterator, Optional, TypeVar

from .errors import InvalidIterator, ReadOnlyIterator
from .internal.entry import Entry
from .pair import Pair

if TYPE_CHECKING:  # pragma: no cover
    from .cache import Cache

K = TypeVar("K")
V = TypeVar("V")


class CacheIterator(Generic[K, V]):
    """Position in the hash-order or recency-order view of a cache.

    Parameters
    ----------
    owner: Cache or None
        The cache the position belongs to. ``None`` gives a default
        (ownerless) end cursor.
    entry: Entry or None
        The referenced entry; ``None`` is the end position.
    ordered: bool
        Walk recency order (oldest to newest) instead of hash order.
    mutable: bool
        Whether values may be written through this cursor.
    """

    __slots__ = ("_owner", "_entry", "_ordered", "_mutable", "_walker")

    def __init__(
        self,
        owner: Optional["Cache[K, V]"] = None,
        entry: Optional[Entry] = None,
        *,
        ordered: bool = False,
        mutable: bool = True,
    ) -> None:
        self._owner: Optional[weakref.ReferenceType[Cache[K, V]]] = (
            weakref.ref(owner) if owner is not None else None
        )
        self._entry = entry
        self._ordered = ordered
        self._mutable = mutable
        self._walker: Optional[Iterator[Entry]] = None

    @classmethod
    def _begin_unordered(
        cls, owner: "Cache[K, V]", mutable: bool
    ) -> "CacheIterator[K, V]":
        walker = iter(owner._index.values())
        cursor = cls(owner, next(walker, None), ordered=False, mutable=mutable)
        cursor._walker = walker
        return cursor

    # ---------------- Introspection ----------------
    @property
    def owner(self) -> Optional["Cache[K, V]"]:
        """The cache this cursor belongs to, if it is still alive."""
        return self._owner() if self._owner is not None else None

    @property
    def is_ordered(self) -> bool:
        return self._ordered

    @property
    def is_mutable(self) -> bool:
        return self._mutable

    @property
    def is_end(self) -> bool:
        return self._entry is None

    @property
    def is_expired(self) -> bool:
        """True when the referenced entry has left the cache."""
        return self._entry is not None and not self._entry.alive

    @property
    def is_valid(self) -> bool:
        return self._entry is not None and self._entry.alive and self.owner is not None

    # ---------------- Dereference ----------------
    def _live_entry(self) -> Entry:
        entry = self._entry
        if entry is None:
            raise InvalidIterator("cannot dereference an end iterator")
        if not entry.alive:
            raise InvalidIterator(
                f"iterator refers to a removed entry (key {entry.key!r})"
            )
        return entry

    @property
    def key(self) -> K:
        return self._live_entry().key

    @property
    def value(self) -> V:
        return self._live_entry().value

    @value.setter
    def value(self, value: V) -> None:
        if not self._mutable:
            raise ReadOnlyIterator("cannot assign a value through a read-only iterator")
        self._live_entry().value = value

    @property
    def pair(self) -> Pair[K, V]:
        return Pair(self._live_entry(), self._mutable)

    # ---------------- Movement ----------------
    def _require_owner(self) -> "Cache[K, V]":
        owner = self.owner
        if owner is None:
            raise InvalidIterator("iterator has no live owning cache")
        return owner

    def _next_ordered(self, entry: Entry) -> Optional[Entry]:
        owner = self._require_owner()
        node = entry.node
        assert node is not None
        nxt = node.next
        if nxt is None or nxt is owner._order.root:
            return None
        return owner._index[nxt.key]

    def _next_unordered(self, entry: Entry) -> Optional[Entry]:
        if self._walker is None:
            # Positions obtained from find() have no walk in flight yet.
            owner = self._require_owner()
            walker = iter(owner._index.values())
            for candidate in walker:
                if candidate is entry:
                    break
            self._walker = walker
        try:
            return next(self._walker, None)
        except RuntimeError as exc:
            raise InvalidIterator(
                "cache was structurally modified during hash-order iteration"
            ) from exc

    def advance(self) -> "CacheIterator[K, V]":
        """Move to the next position in this cursor's view and return self."""
        entry = self._live_entry()
        if self._ordered:
            self._entry = self._next_ordered(entry)
        else:
            self._entry = self._next_unordered(entry)
        return self

    def __iter__(self) -> Iterator[Pair[K, V]]:
        cursor = self.copy()
        while cursor._entry is not None:
            yield cursor.pair
            cursor.advance()

    # ---------------- Conversion ----------------
    def _converted(self, *, ordered: bool, mutable: bool) -> "CacheIterator[K, V]":
        cursor: CacheIterator[K, V] = CacheIterator(
            ordered=ordered, mutable=mutable
        )
        cursor._owner = self._owner
        cursor._entry = self._entry
        return cursor

    def copy(self) -> "CacheIterator[K, V]":
        return self._converted(ordered=self._ordered, mutable=self._mutable)

    __copy__ = copy

    def to_ordered(self) -> "CacheIterator[K, V]":
        """Recency-order cursor at the same entry."""
        return self._converted(ordered=True, mutable=self._mutable)

    def to_unordered(self) -> "CacheIterator[K, V]":
        """Hash-order cursor at the same entry."""
        return self._converted(ordered=False, mutable=self._mutable)

    def to_readonly(self) -> "CacheIterator[K, V]":
        return self._converted(ordered=self._ordered, mutable=False)

    # ---------------- Comparison ----------------
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CacheIterator):
            return NotImplemented
        if self._entry is not None or other._entry is not None:
            return self._entry is other._entry
        # Both at the end: ownerless cursors match any end.
        if self._owner is None or other._owner is None:
            return True
        return self.owner is other.owner

    def __hash__(self) -> int:
        return hash(id(self._entry))

    def __repr__(self) -> str:
        view = "ordered" if self._ordered else "unordered"
        mode = "" if self._mutable else ", const"
        if self._entry is None:
            return f"CacheIterator(<end>, {view}{mode})"
        state = "" if self._entry.alive else ", expired"
        return f"CacheIterator({self._entry.key!r}, {view}{mode}{state})"


def end_iterator(
    owner: Optional["Cache[Any, Any]"] = None,
    *,
    ordered: bool = False,
    mutable: bool = True,
) -> CacheIterator[Any, Any]:
    """Return an end cursor for ``owner`` (or an ownerless one)."""
    return CacheIterator(owner, None, ordered=ordered, mutable=mutable)
