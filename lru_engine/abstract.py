"""Capability interface shared by cache variants."""

from __future__ import annotations

from typing import Any, Hashable, Iterable, Optional, Protocol, Tuple, TypeVar

from .statistics import Statistics

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class CacheProtocol(Protocol[K, V]):
    """Protocol for bounded key/value caches.

    Helpers such as :func:`lru_engine.memoize.memoize` are written against
    this protocol, so any variant that implements it can back them.
    """

    def contains(self, key: K) -> bool:
        """Return whether ``key`` is cached, recording a hit or miss."""
        raise NotImplementedError

    def lookup(self, key: K) -> V:
        """Return the value for ``key`` or raise ``KeyNotFound``."""
        raise NotImplementedError

    def find(self, key: K) -> Any:
        """Return a cursor at ``key`` or the end cursor."""
        raise NotImplementedError

    def insert(self, key: K, value: V) -> Any:
        """Insert or replace ``key``, evicting if the cache is full."""
        raise NotImplementedError

    def insert_all(self, pairs: Iterable[Tuple[K, V]]) -> None:
        """Insert every pair in iteration order."""
        raise NotImplementedError

    def erase(self, key_or_iterator: Any) -> bool:
        """Remove a key (or cursor position); return whether it existed."""
        raise NotImplementedError

    def clear(self) -> None:
        """Drop every entry."""
        raise NotImplementedError

    def shrink(self, new_size: int) -> None:
        """Evict the oldest entries until at most ``new_size`` remain."""
        raise NotImplementedError

    @property
    def size(self) -> int:
        """Number of cached entries."""
        raise NotImplementedError

    @property
    def capacity(self) -> int:
        """Maximum number of entries."""
        raise NotImplementedError

    def monitor(
        self, statistics: Optional[Statistics] = None, *keys: Hashable
    ) -> Statistics:
        """Attach a statistics hook."""
        raise NotImplementedError

    def stop_monitoring(self) -> None:
        """Detach the statistics hook."""
        raise NotImplementedError

    @property
    def is_monitoring(self) -> bool:
        """Whether a statistics hook is attached."""
        raise NotImplementedError

    @property
    def statistics(self) -> Statistics:
        """The attached hook; raises ``NotMonitoring`` if there is none."""
        raise NotImplementedError
