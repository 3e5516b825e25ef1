"""PySkipList: a small probabilistic ordered multi-map for Python.

The package exposes `pyskiplist.SkipList`, an in-memory skip list that keeps
(key, value) entries sorted by key, allows duplicate keys and supports
removal by key or by value.
"""

from __future__ import annotations

__all__ = [
    "Entry",
    "SkipList",
    "SkipListIterator",
    "random_level",
]

from .entry import Entry
from .skiplist import SkipList, SkipListIterator, random_level
