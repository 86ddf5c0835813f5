"""Exception types raised by the cache engine.

Absence of a key is a normal outcome for ``contains``, ``find`` and
``erase`` and is reported through their return values. The exceptions below
are reserved for caller precondition violations.
"""

from __future__ import annotations


class LRUError(Exception):
    """Base class for all errors raised by ``lru_engine``."""


class KeyNotFound(LRUError, KeyError):
    """Raised when the value of an absent key is requested."""

    def __init__(self, key: object = None) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"key not found in cache: {self.key!r}"


class NotMonitoring(LRUError, RuntimeError):
    """Raised when statistics are requested but no hook is attached."""

    def __init__(self) -> None:
        super().__init__("cache is not monitoring; call monitor() first")


class InvalidIterator(LRUError, ValueError):
    """Raised when a cursor is used outside of its valid lifetime.

    This covers dereferencing an end cursor, dereferencing a cursor whose
    entry has been removed, and erasing through a cursor that belongs to a
    different cache.
    """


class ReadOnlyIterator(InvalidIterator, TypeError):
    """Raised when a value is written through a read-only cursor."""
