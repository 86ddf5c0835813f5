"""Doubly-linked recency sequence.

The sequence is a circular list around a sentinel ``root`` node. The node
after ``root`` is the front (least recently promoted, next to be evicted);
the node before ``root`` is the back (most recently promoted). The sequence
owns its nodes. Entries in the hash index hold a node as a handle, never as
a second owner.
"""

from __future__ import annotations

from typing import Any, Hashable, Iterator, Optional


class Node:
    """Single link in the recency sequence.

    A detached node has ``prev`` and ``next`` set to ``None``; cursors use
    this to detect that their position has been removed.
    """

    __slots__ = ("prev", "next", "key")

    def __init__(self, key: Any = None) -> None:
        self.prev: Optional[Node] = None
        self.next: Optional[Node] = None
        self.key = key

    @property
    def linked(self) -> bool:
        return self.next is not None

    def __repr__(self) -> str:
        return f"Node({self.key!r})"


class RecencySequence:
    """Ordered sequence of index keys, oldest first."""

    __slots__ = ("_root", "_size")

    def __init__(self) -> None:
        root = Node()
        root.prev = root.next = root
        self._root = root
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self._size > 0

    def __iter__(self) -> Iterator[Hashable]:
        for node in self.nodes():
            yield node.key

    def __repr__(self) -> str:
        return f"RecencySequence({list(self)!r})"

    @property
    def root(self) -> Node:
        """Sentinel node; doubles as the end position for cursors."""
        return self._root

    def front(self) -> Node:
        assert self._size > 0, "front() on empty recency sequence"
        node = self._root.next
        assert node is not None
        return node

    def back(self) -> Node:
        assert self._size > 0, "back() on empty recency sequence"
        node = self._root.prev
        assert node is not None
        return node

    def append(self, key: Hashable) -> Node:
        """Link a fresh node for ``key`` at the back and return it."""
        root = self._root
        last = root.prev
        assert last is not None
        node = Node(key)
        node.prev = last
        node.next = root
        last.next = node
        root.prev = node
        self._size += 1
        return node

    def remove(self, node: Node) -> None:
        """Unlink ``node``; the node is left detached."""
        assert node is not self._root, "cannot remove the sentinel"
        assert node.linked, "node already detached"
        prev, nxt = node.prev, node.next
        assert prev is not None and nxt is not None
        prev.next = nxt
        nxt.prev = prev
        node.prev = node.next = None
        self._size -= 1

    def clear(self) -> None:
        """Detach every node so that outstanding handles become expired."""
        node = self._root.next
        while node is not None and node is not self._root:
            nxt = node.next
            node.prev = node.next = None
            node = nxt
        self._root.prev = self._root.next = self._root
        self._size = 0

    def nodes(self, start: Optional[Node] = None) -> Iterator[Node]:
        """Yield nodes from ``start`` (default: the front) to the back."""
        node = self._root.next if start is None else start
        while node is not None and node is not self._root:
            nxt = node.next
            yield node
            node = nxt
