"""Immutable key/value pair stored by the skip list.

`Entry` is a plain named tuple, so it compares equal to an ordinary
``(key, value)`` tuple and can be unpacked the same way.
"""
from __future__ import annotations

from typing import Any, Generic, NamedTuple, TypeVar

__all__ = ["Entry"]

K = TypeVar("K")
V = TypeVar("V")


class Entry(NamedTuple, Generic[K, V]):
    """A single (key, value) pair. Keys must be totally ordered."""

    key: K
    value: V

    @classmethod
    def of(cls, item: Any) -> "Entry[K, V]":
        """Coerce *item* (an `Entry` or any 2-item pair) into an `Entry`."""
        if isinstance(item, Entry):
            return item
        if isinstance(item, (str, bytes)):
            raise TypeError(f"expected a (key, value) pair, got {item!r}")
        try:
            key, value = item
        except (TypeError, ValueError):
            raise TypeError(f"expected a (key, value) pair, got {item!r}") from None
        return cls(key, value)

    def get_key(self) -> K:
        return self.key

    def get_value(self) -> V:
        return self.value
