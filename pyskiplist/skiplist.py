"""Probabilistic ordered multi-map backed by a skip list.

Every node draws its level once, at insertion time, from a geometric
distribution (fair coin flips, 50 % branching factor). Higher levels skip
over more nodes which gives the usual expected complexities:

    • search            – O(log n)
    • insert            – O(log n)
    • remove            – O(log n)
    • remove_by_value   – O(n)  (values are not ordered)
    • iterate           – O(n)

Duplicate keys are allowed; a new entry is spliced in front of the run of
entries that already carry the same key.

The structure is *not* thread-safe. Callers sharing one list between
threads must guard every call with their own lock.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from random import random
from typing import Any, Generic, Optional, TypeVar, Union

from .entry import Entry

__all__ = ["SkipList", "SkipListIterator", "random_level"]

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")

_P = 0.5


def random_level(p: float = _P) -> int:
    """Count successful trials before the first failure.

    P(level = k) = p**k * (1 - p); with the default p = 0.5 that is
    2**-(k+1), expected value 1. No upper bound is applied.
    """
    lvl = 0
    while random() < p:
        lvl += 1
    return lvl


class _Head:
    """Sentinel anchoring every level. Carries no key and is never compared."""

    __slots__ = ("level", "forward")

    def __init__(self, level: int):
        self.level = level
        self.forward: list[Optional[_Node[Any, Any]]] = [None] * (level + 1)

    def __repr__(self) -> str:  # pragma: no cover
        return f"Head<level={self.level}>"


class _Node(Generic[K, V]):
    __slots__ = ("entry", "level", "forward")

    def __init__(self, entry: Entry[K, V], level: int):
        self.entry = entry
        self.level = level
        self.forward: list[Optional[_Node[K, V]]] = [None] * (level + 1)

    @property
    def key(self) -> K:
        return self.entry.key

    @property
    def value(self) -> V:
        return self.entry.value

    def __repr__(self) -> str:  # pragma: no cover
        return f"Node<{self.entry.key!r}:{self.entry.value!r}@{self.level}>"


_Link = Union[_Head, _Node[Any, Any]]


class SkipListIterator(Iterator[Entry[K, V]], Generic[K, V]):
    """Forward cursor over level 0.

    Besides the iterator protocol it offers the explicit ``has_next()`` /
    ``next()`` pair. A cursor is single-use; ask the list for a new one to
    start over.
    """

    __slots__ = ("_current",)

    def __init__(self, first: Optional[_Node[K, V]]):
        self._current = first

    def has_next(self) -> bool:
        return self._current is not None

    def __next__(self) -> Entry[K, V]:
        node = self._current
        if node is None:
            raise StopIteration
        self._current = node.forward[0]
        return node.entry

    next = __next__


class SkipList(Generic[K, V]):
    """Ordered multi-map from totally ordered keys to arbitrary values.

    Parameters
    ----------
    entries: Iterable | None
        Initial entries (``Entry`` objects or ``(key, value)`` pairs),
        inserted in the given order.
    level_source: Callable[[], int] | None
        Produces the level of each new node. Defaults to `random_level`;
        tests pass a deterministic source here.
    max_level: int | None
        Optional ceiling applied to every sampled level. ``None`` keeps the
        draw uncapped.
    per_level_search: bool
        Make `search` collect matches at every level it passes instead of
        once at level 0. The result then repeats an entry once for each
        level on which the descent lands right in front of it.
    """

    def __init__(
        self,
        entries: Optional[Iterable[Any]] = None,
        *,
        level_source: Optional[Callable[[], int]] = None,
        max_level: Optional[int] = None,
        per_level_search: bool = False,
    ):
        if max_level is not None and max_level < 0:
            raise ValueError(f"max_level must be >= 0, got {max_level}")
        self._level_source = level_source or random_level
        self._max_level = max_level
        self._per_level_search = per_level_search
        self._size = 0
        self._head = _Head(0)
        if entries is not None:
            for item in entries:
                self.insert(item)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    def size(self) -> int:
        return self._size

    def __len__(self) -> int:
        return self._size

    @property
    def level(self) -> int:
        """Current top level of the head (0 for an empty list)."""
        return self._head.level

    def __contains__(self, key: object) -> bool:
        self._check_key(key)
        x: _Link = self._head
        for i in reversed(range(self._head.level + 1)):
            while (nxt := x.forward[i]) is not None and nxt.key < key:
                x = nxt
        nxt = x.forward[0]
        return nxt is not None and nxt.key == key

    def __repr__(self) -> str:
        return f"{type(self).__name__}({[tuple(e) for e in self]!r})"

    # ------------------------------------------------------------------
    # Mutation API
    # ------------------------------------------------------------------
    def insert(self, entry: Union[Entry[K, V], tuple[K, V]]) -> None:
        """Add *entry*; existing entries with an equal key are kept."""
        entry = Entry.of(entry)
        key = entry.key
        self._check_key(key)
        lvl = self._random_level()

        # Splice points are collected before the head grows so a failing key
        # comparison leaves the list untouched.
        old_head = self._head
        update: list[_Link] = [old_head] * (lvl + 1)
        x: _Link = old_head
        for i in reversed(range(old_head.level + 1)):
            while (nxt := x.forward[i]) is not None and nxt.key < key:
                x = nxt
            if i <= lvl:
                update[i] = x
        if lvl > old_head.level:
            self._grow_head(lvl)
            update = [self._head if u is old_head else u for u in update]

        node: _Node[K, V] = _Node(entry, lvl)
        for i in range(lvl + 1):
            node.forward[i] = update[i].forward[i]
            update[i].forward[i] = node
        self._size += 1

    def remove(self, key: K) -> Optional[Entry[K, V]]:
        """Unlink one entry stored under *key*.

        Returns a new ``Entry(key, value)`` for the removed node or ``None``
        if the key is absent. The node removed is the first equal-key node
        met while descending, i.e. the leftmost one on the highest level
        that holds the key.
        """
        self._check_key(key)
        x: _Link = self._head
        for i in reversed(range(self._head.level + 1)):
            while (nxt := x.forward[i]) is not None and nxt.key < key:
                x = nxt
            if nxt is not None and nxt.key == key:
                self._unlink(x, nxt)
                logger.debug("removed %r from level %d", key, nxt.level)
                return Entry(key, nxt.value)
        logger.debug("remove: key %r not found", key)
        return None

    def remove_by_value(self, value: V) -> Optional[Entry[K, V]]:
        """Unlink one entry whose value equals *value*.

        Values are unordered, so every level is walked from the head. The
        first level carrying a match determines the node removed.
        """
        for i in reversed(range(self._head.level + 1)):
            x: _Link = self._head
            while (nxt := x.forward[i]) is not None and nxt.value != value:
                x = nxt
            if nxt is not None:
                self._unlink(x, nxt)
                logger.debug("removed value %r (key %r) from level %d", value, nxt.key, nxt.level)
                return Entry(nxt.key, nxt.value)
        logger.debug("remove_by_value: value %r not found", value)
        return None

    # ------------------------------------------------------------------
    # Query API
    # ------------------------------------------------------------------
    def search(self, key: K) -> Optional[list[Entry[K, V]]]:
        """Return every entry stored under *key*, or ``None`` if there is none."""
        self._check_key(key)
        found: list[Entry[K, V]] = []
        x: _Link = self._head
        for i in reversed(range(self._head.level + 1)):
            while (nxt := x.forward[i]) is not None and nxt.key < key:
                x = nxt
            if i == 0 or self._per_level_search:
                found.extend(self._equal_run(x.forward[i], i, key))
        return found or None

    # ------------------------------------------------------------------
    # Iteration helpers (ordered)
    # ------------------------------------------------------------------
    def iterate(self) -> SkipListIterator[K, V]:
        """Fresh cursor yielding entries in ascending key order."""
        return SkipListIterator(self._head.forward[0])

    def __iter__(self) -> SkipListIterator[K, V]:
        return self.iterate()

    def dump(self) -> str:
        """Render the list one node per line; also logged at DEBUG level."""
        lines = [f"head: level {self._head.level}"]
        node = self._head.forward[0]
        while node is not None:
            lines.append(f"level {node.level}: ({node.key!r}, {node.value!r})")
            node = node.forward[0]
        lines.append(f"size: {self._size}")
        text = "\n".join(lines)
        logger.debug("skip list dump:\n%s", text)
        return text

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _check_key(key: object) -> None:
        if key is None:
            raise ValueError("key must not be None")

    def _random_level(self) -> int:
        lvl = self._level_source()
        if isinstance(lvl, bool) or not isinstance(lvl, int) or lvl < 0:
            raise ValueError(f"level source returned an invalid level: {lvl!r}")
        if self._max_level is not None and lvl > self._max_level:
            lvl = self._max_level
        return lvl

    def _grow_head(self, level: int) -> None:
        """Replace the head with a taller one, keeping the existing links."""
        old = self._head
        head = _Head(level)
        head.forward[: old.level + 1] = old.forward
        self._head = head
        logger.debug("head grown from level %d to %d", old.level, level)

    def _unlink(self, x: _Link, target: _Node[K, V]) -> None:
        # *x* precedes *target* on every level the target occupies; the
        # target's top level is the one the caller found it on.
        for i in reversed(range(target.level + 1)):
            while (nxt := x.forward[i]) is not target:
                x = nxt  # type: ignore[assignment]
            x.forward[i] = target.forward[i]
        self._size -= 1

    @staticmethod
    def _equal_run(node: Optional[_Node[K, V]], level: int, key: K) -> Iterator[Entry[K, V]]:
        while node is not None and node.key == key:
            yield node.entry
            node = node.forward[level]
