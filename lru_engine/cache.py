"""Bounded key/value cache with least-recently-used eviction.

The engine keeps two structures in lockstep:

- a hash index (``dict``) mapping each key to its :class:`Entry`;
- a :class:`RecencySequence` holding one node per key, oldest first.

Only (re-)insertion promotes a key to the newest end of the sequence;
``contains``, ``lookup`` and ``find`` never change recency order. A
single-entry last-accessed slot short-circuits repeated access to the same
key, and an optional :class:`~lru_engine.statistics.Statistics` hook
receives exactly one hit or miss event per lookup-class call.

The cache is not thread-safe. Even read operations update the
last-accessed slot, so concurrent use requires external locking.
"""

from __future__ import annotations

import copy as _copy
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import (
    TYPE_CHECKING,
    Any,
    Dict,
    Generic,
    Hashable,
    Iterable,
    Iterator,
    List,
    Optional,
    Tuple,
    TypeVar,
    Union,
)

from .errors import InvalidIterator, KeyNotFound, NotMonitoring
from .internal.entry import Entry
from .internal.keys import HashFunction, KeyEqual, KeyStrategy
from .internal.last_accessed import LastAccessed
from .internal.recency import RecencySequence
from .iterators import CacheIterator
from .statistics import Statistics, make_statistics

if TYPE_CHECKING:  # pragma: no cover
    from .config.models import CacheConfig

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

PairsLike = Union[Mapping, Iterable[Tuple[Any, Any]]]


@dataclass(frozen=True)
class InsertionResult(Generic[K, V]):
    """Outcome of :meth:`Cache.insert`.

    Attributes
    ----------
    inserted: bool
        True when a new entry was created, False when an existing entry's
        value was replaced.
    iterator: CacheIterator
        Hash-order cursor at the entry (the end cursor if a zero-capacity
        cache declined to admit it).
    """

    inserted: bool
    iterator: CacheIterator[K, V]

    @property
    def was_inserted(self) -> bool:
        return self.inserted

    @property
    def was_replaced(self) -> bool:
        return not self.inserted

    def __bool__(self) -> bool:
        return self.inserted


def _iter_pairs(items: PairsLike) -> Iterator[Tuple[Any, Any]]:
    if isinstance(items, Cache):
        yield from items.ordered_items()
    elif isinstance(items, Mapping):
        yield from items.items()
    else:
        for key, value in items:
            yield key, value


class Cache(Generic[K, V]):
    """LRU cache with a hard capacity ceiling.

    Parameters
    ----------
    capacity: int
        Maximum number of entries. A capacity of 0 makes the cache
        permanently full: inserts of new keys are declined.
    items: Mapping or iterable of pairs, optional
        Initial content, inserted in iteration order (later pairs are
        newer; excess pairs evict earlier ones).
    hash_function: callable, optional
        Hash strategy applied to keys instead of ``hash``.
    key_equal: callable, optional
        Equality strategy applied to keys instead of ``==``.
    """

    def __init__(
        self,
        capacity: int = 128,
        items: Optional[PairsLike] = None,
        *,
        hash_function: Optional[HashFunction] = None,
        key_equal: Optional[KeyEqual] = None,
    ) -> None:
        self._capacity = _validate_capacity(capacity)
        self._keys = KeyStrategy(hash_function, key_equal)
        self._index: Dict[Hashable, Entry] = {}
        self._order = RecencySequence()
        self._last_accessed = LastAccessed(self._keys)
        self._stats: Optional[Statistics] = None
        if items is not None:
            self.insert_all(items)

    # ---------------- Alternate constructors ----------------
    @classmethod
    def from_items(
        cls,
        items: PairsLike,
        capacity: Optional[int] = None,
        *,
        hash_function: Optional[HashFunction] = None,
        key_equal: Optional[KeyEqual] = None,
    ) -> "Cache[K, V]":
        """Build a cache from ``items``, sized to fit them by default."""
        pairs = list(_iter_pairs(items))
        return cls(
            len(pairs) if capacity is None else capacity,
            pairs,
            hash_function=hash_function,
            key_equal=key_equal,
        )

    @classmethod
    def from_config(cls, config: "CacheConfig") -> "Cache[K, V]":
        """Build an empty cache from a validated :class:`CacheConfig`."""
        cache: Cache[K, V] = cls(config.capacity)
        if config.monitor:
            cache.monitor(None, *config.monitored_keys)
        return cache

    def _empty_like(self) -> "Cache[K, V]":
        clone: Cache[K, V] = type(self).__new__(type(self))
        clone._capacity = self._capacity
        clone._keys = self._keys
        clone._index = {}
        clone._order = RecencySequence()
        clone._last_accessed = LastAccessed(self._keys)
        clone._stats = None
        return clone

    # ---------------- Size & capacity ----------------
    def __len__(self) -> int:
        return len(self._index)

    @property
    def size(self) -> int:
        assert len(self._index) == len(self._order), "index/order out of sync"
        return len(self._index)

    @property
    def capacity(self) -> int:
        return self._capacity

    @capacity.setter
    def capacity(self, new_capacity: int) -> None:
        new_capacity = _validate_capacity(new_capacity)
        evicted = 0
        while len(self._index) > new_capacity:
            self._evict_lru()
            evicted += 1
        old_capacity, self._capacity = self._capacity, new_capacity
        logger.debug(
            "lru.capacity.changed",
            extra={"old": old_capacity, "new": new_capacity, "evicted": evicted},
        )

    @property
    def space_left(self) -> int:
        return max(0, self._capacity - len(self._index))

    @property
    def is_empty(self) -> bool:
        return not self._index

    @property
    def is_full(self) -> bool:
        return len(self._index) >= self._capacity

    @property
    def hash_function(self) -> HashFunction:
        return self._keys.hash_function

    @property
    def key_equal(self) -> KeyEqual:
        return self._keys.key_equal

    # ---------------- Lookup ----------------
    def _probe(self, key: Any) -> Optional[Entry]:
        """Resolve ``key`` to its entry, recording exactly one hit or miss."""
        if self._last_accessed.matches(key):
            self._register_hit(key)
            return self._last_accessed.entry

        entry = self._index.get(self._keys.index_key(key))
        if entry is None:
            self._register_miss(key)
            return None

        self._last_accessed.set(entry)
        self._register_hit(key)
        return entry

    def contains(self, key: K) -> bool:
        """Return whether ``key`` is cached. Does not affect recency."""
        return self._probe(key) is not None

    __contains__ = contains

    def lookup(self, key: K) -> V:
        """Return the value stored for ``key``.

        Raises
        ------
        KeyNotFound
            If ``key`` is not cached.
        """
        entry = self._probe(key)
        if entry is None:
            raise KeyNotFound(key)
        return entry.value

    __getitem__ = lookup

    def get(self, key: K, default: Optional[V] = None) -> Optional[V]:
        entry = self._probe(key)
        return default if entry is None else entry.value

    def find(self, key: K) -> CacheIterator[K, V]:
        """Return a hash-order cursor at ``key``, or the end cursor."""
        return CacheIterator(self, self._probe(key), ordered=False, mutable=True)

    def cfind(self, key: K) -> CacheIterator[K, V]:
        """Read-only variant of :meth:`find`."""
        return CacheIterator(self, self._probe(key), ordered=False, mutable=False)

    # ---------------- Insertion ----------------
    def insert(self, key: K, value: V) -> InsertionResult[K, V]:
        """Insert ``key`` or replace its value.

        A new key evicts the least recently promoted entry when the cache is
        full. An existing key has its value replaced and is promoted to the
        newest end of the recency order; size is unchanged.
        """
        index_key = self._keys.index_key(key)
        entry = self._index.get(index_key)

        if entry is not None:
            self._register_hit(key)
            self._promote(entry, value)
            return InsertionResult(False, CacheIterator(self, entry))

        if self.is_full:
            if self._order:
                self._evict_lru()
            if self._capacity == 0:
                logger.debug("lru.insert.declined", extra={"capacity": 0})
                return InsertionResult(True, CacheIterator(self, None))

        entry = self._admit(key, value, index_key)
        self._last_accessed.set(entry)
        return InsertionResult(True, CacheIterator(self, entry))

    def __setitem__(self, key: K, value: V) -> None:
        self.insert(key, value)

    def insert_all(self, items: PairsLike) -> None:
        """Insert every pair of ``items`` in order, one at a time."""
        for key, value in _iter_pairs(items):
            self.insert(key, value)

    update = insert_all

    def assign(self, items: PairsLike) -> None:
        """Replace the whole content with ``items``; capacity is kept."""
        pairs = list(_iter_pairs(items))
        self.clear()
        self.insert_all(pairs)

    def _admit(self, key: Any, value: Any, index_key: Hashable) -> Entry:
        assert len(self._index) < self._capacity, "admission over capacity"
        node = self._order.append(index_key)
        entry = Entry(key, value, index_key, node)
        self._index[index_key] = entry
        return entry

    def _promote(self, entry: Entry, value: Any) -> None:
        assert entry.node is not None
        self._order.remove(entry.node)
        entry.node = self._order.append(entry.index_key)
        entry.value = value
        self._last_accessed.set(entry)

    # ---------------- Removal ----------------
    def erase(self, key_or_iterator: Union[K, CacheIterator[K, V]]) -> bool:
        """Remove a key, or the entry under a cursor.

        Returns False when the key is absent or the cursor is at the end or
        expired. Cursors from another cache raise :class:`InvalidIterator`.
        """
        if isinstance(key_or_iterator, CacheIterator):
            return self._erase_iterator(key_or_iterator)

        key = key_or_iterator
        if self._last_accessed.matches(key):
            self._remove(self._last_accessed.entry)
            return True

        entry = self._index.get(self._keys.index_key(key))
        if entry is None:
            return False
        self._remove(entry)
        return True

    def __delitem__(self, key: K) -> None:
        if not self.erase(key):
            raise KeyNotFound(key)

    def _erase_iterator(self, iterator: CacheIterator[K, V]) -> bool:
        entry = iterator._entry
        if entry is None:
            return False
        if iterator.owner is not self:
            raise InvalidIterator("iterator does not belong to this cache")
        if not entry.alive or self._index.get(entry.index_key) is not entry:
            return False
        self._remove(entry)
        return True

    def pop(self, key: K) -> V:
        """Remove ``key`` and return its value, or raise ``KeyNotFound``."""
        if self._last_accessed.matches(key):
            entry: Optional[Entry] = self._last_accessed.entry
        else:
            entry = self._index.get(self._keys.index_key(key))
        if entry is None:
            raise KeyNotFound(key)
        self._remove(entry)
        return entry.value

    def _remove(self, entry: Entry) -> None:
        if self._last_accessed.refers_to(entry):
            self._last_accessed.invalidate()
        assert entry.node is not None, "entry already removed"
        self._order.remove(entry.node)
        del self._index[entry.index_key]
        entry.node = None

    def _evict_lru(self) -> None:
        entry = self._index[self._order.front().key]
        self._remove(entry)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "lru.evict",
                extra={"key": repr(entry.key), "size": len(self._index)},
            )

    def clear(self) -> None:
        """Drop every entry; outstanding cursors expire."""
        for entry in self._index.values():
            entry.node = None
        self._index.clear()
        self._order.clear()
        self._last_accessed.invalidate()

    def shrink(self, new_size: int) -> None:
        """Evict the oldest entries until at most ``new_size`` remain."""
        if new_size < 0:
            raise ValueError(f"new_size must be >= 0, got {new_size}")
        if new_size >= len(self._index):
            return
        if new_size == 0:
            self.clear()
            return
        while len(self._index) > new_size:
            self._evict_lru()

    # ---------------- Statistics ----------------
    def monitor(
        self, statistics: Optional[Statistics] = None, *keys: Hashable
    ) -> Statistics:
        """Attach a statistics hook and return it.

        Passing an existing :class:`Statistics` object shares it; otherwise
        a new one is created. Extra ``keys`` are monitored individually.
        """
        self._stats = make_statistics(statistics, keys)
        logger.debug(
            "lru.monitor.attached",
            extra={"monitored_keys": self._stats.number_of_monitored_keys},
        )
        return self._stats

    def stop_monitoring(self) -> None:
        self._stats = None

    @property
    def is_monitoring(self) -> bool:
        return self._stats is not None

    @property
    def statistics(self) -> Statistics:
        if self._stats is None:
            raise NotMonitoring()
        return self._stats

    def _register_hit(self, key: Any) -> None:
        if self._stats is not None:
            self._stats.register_hit(key)

    def _register_miss(self, key: Any) -> None:
        if self._stats is not None:
            self._stats.register_miss(key)

    # ---------------- Cursors ----------------
    def _front_entry(self) -> Optional[Entry]:
        if not self._order:
            return None
        return self._index[self._order.front().key]

    def unordered_begin(self) -> CacheIterator[K, V]:
        return CacheIterator._begin_unordered(self, mutable=True)

    def unordered_cbegin(self) -> CacheIterator[K, V]:
        return CacheIterator._begin_unordered(self, mutable=False)

    def unordered_end(self) -> CacheIterator[K, V]:
        return CacheIterator(self, None, ordered=False, mutable=True)

    def unordered_cend(self) -> CacheIterator[K, V]:
        return CacheIterator(self, None, ordered=False, mutable=False)

    def ordered_begin(self) -> CacheIterator[K, V]:
        return CacheIterator(self, self._front_entry(), ordered=True, mutable=True)

    def ordered_cbegin(self) -> CacheIterator[K, V]:
        return CacheIterator(self, self._front_entry(), ordered=True, mutable=False)

    def ordered_end(self) -> CacheIterator[K, V]:
        return CacheIterator(self, None, ordered=True, mutable=True)

    def ordered_cend(self) -> CacheIterator[K, V]:
        return CacheIterator(self, None, ordered=True, mutable=False)

    begin = unordered_begin
    cbegin = unordered_cbegin
    end = unordered_end
    cend = unordered_cend

    # ---------------- Views ----------------
    def _ordered_entries(self) -> Iterator[Entry]:
        index = self._index
        for node in self._order.nodes():
            yield index[node.key]

    def __iter__(self) -> Iterator[K]:
        for entry in self._index.values():
            yield entry.key

    def keys(self) -> List[K]:
        return [entry.key for entry in self._index.values()]

    def values(self) -> List[V]:
        return [entry.value for entry in self._index.values()]

    def items(self) -> List[Tuple[K, V]]:
        """Key/value pairs in hash order."""
        return [(entry.key, entry.value) for entry in self._index.values()]

    def ordered_keys(self) -> List[K]:
        return [entry.key for entry in self._ordered_entries()]

    def ordered_items(self) -> List[Tuple[K, V]]:
        """Key/value pairs from least to most recently promoted."""
        return [(entry.key, entry.value) for entry in self._ordered_entries()]

    # ---------------- Structural operations ----------------
    def swap(self, other: "Cache[K, V]") -> None:
        """Exchange content, order, last-accessed slot and capacity.

        Statistics hooks stay with their caches. Cursors obtained before the
        swap must be discarded.
        """
        self._index, other._index = other._index, self._index
        self._order, other._order = other._order, self._order
        self._last_accessed, other._last_accessed = (
            other._last_accessed,
            self._last_accessed,
        )
        self._capacity, other._capacity = other._capacity, self._capacity
        self._keys, other._keys = other._keys, self._keys

    def copy(self) -> "Cache[K, V]":
        """Shallow copy: same capacity, pairs and recency order.

        The copy starts with an empty last-accessed slot and no statistics
        hook.
        """
        clone = self._empty_like()
        for entry in self._ordered_entries():
            clone._admit(entry.key, entry.value, entry.index_key)
        return clone

    __copy__ = copy

    def __deepcopy__(self, memo: Dict[int, Any]) -> "Cache[K, V]":
        clone = self._empty_like()
        memo[id(self)] = clone
        for entry in self._ordered_entries():
            key = _copy.deepcopy(entry.key, memo)
            value = _copy.deepcopy(entry.value, memo)
            clone._admit(key, value, self._keys.index_key(key))
        return clone

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Cache):
            return NotImplemented
        if len(self._index) != len(other._index):
            return False
        equal = self._keys.equal
        for mine, theirs in zip(self._ordered_entries(), other._ordered_entries()):
            if not equal(mine.key, theirs.key) or mine.value != theirs.value:
                return False
        return True

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(capacity={self._capacity}, {self.ordered_items()!r})"


def _validate_capacity(capacity: int) -> int:
    if isinstance(capacity, bool) or not isinstance(capacity, int):
        raise TypeError(f"capacity must be an int, got {type(capacity).__name__}")
    if capacity < 0:
        raise ValueError(f"capacity must be >= 0, got {capacity}")
    return capacity


def swap(first: Cache[Any, Any], second: Cache[Any, Any]) -> None:
    """Module-level counterpart of :meth:`Cache.swap`."""
    first.swap(second)
