"""Cache entry record."""

from __future__ import annotations

from typing import Any, Hashable, Optional

from .recency import Node


class Entry:
    """Key, value and the recency handle of one cached item.

    ``index_key`` is the object the entry is stored under in the hash index
    (the key itself, or its strategy wrapper). ``node`` is ``None`` once the
    entry has been removed from the cache.
    """

    __slots__ = ("key", "value", "index_key", "node")

    def __init__(self, key: Any, value: Any, index_key: Hashable, node: Node) -> None:
        self.key = key
        self.value = value
        self.index_key = index_key
        self.node: Optional[Node] = node

    @property
    def alive(self) -> bool:
        return self.node is not None

    def __repr__(self) -> str:
        state = "" if self.alive else ", expired"
        return f"Entry({self.key!r}, {self.value!r}{state})"
