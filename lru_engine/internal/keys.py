"""Adapters for caller-supplied hash and equality strategies.

The hash index is a plain ``dict``. When the caller supplies neither a hash
nor an equality function, keys are stored as-is. Otherwise every key is
wrapped in a :class:`StrategyKey` whose ``__hash__`` and ``__eq__`` delegate
to the supplied callables.
"""

from __future__ import annotations

from typing import Any, Callable, Hashable, Optional

HashFunction = Callable[[Any], int]
KeyEqual = Callable[[Any, Any], bool]


def _default_equal(first: Any, second: Any) -> bool:
    return bool(first == second)


class StrategyKey:
    """Index key that hashes and compares through a :class:`KeyStrategy`."""

    __slots__ = ("key", "_hash", "_strategy")

    def __init__(self, key: Any, strategy: "KeyStrategy") -> None:
        self.key = key
        self._strategy = strategy
        self._hash = strategy.hash(key)

    def __hash__(self) -> int:
        return self._hash

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StrategyKey):
            return NotImplemented
        return self._strategy.equal(self.key, other.key)

    def __repr__(self) -> str:
        return f"StrategyKey({self.key!r})"


class KeyStrategy:
    """Hash/equality policy applied to every key entering the index."""

    __slots__ = ("_hash_function", "_key_equal", "_wraps")

    def __init__(
        self,
        hash_function: Optional[HashFunction] = None,
        key_equal: Optional[KeyEqual] = None,
    ) -> None:
        self._hash_function: HashFunction = hash_function or hash
        self._key_equal: KeyEqual = key_equal or _default_equal
        self._wraps = hash_function is not None or key_equal is not None

    @property
    def hash_function(self) -> HashFunction:
        return self._hash_function

    @property
    def key_equal(self) -> KeyEqual:
        return self._key_equal

    def hash(self, key: Any) -> int:
        return self._hash_function(key)

    def equal(self, first: Any, second: Any) -> bool:
        return self._key_equal(first, second)

    def index_key(self, key: Any) -> Hashable:
        """Return the object under which ``key`` is stored in the index."""
        if self._wraps:
            return StrategyKey(key, self)
        return key
