"""Unit tests for the Entry pair."""
import pytest

from pyskiplist import Entry


def test_entry_behaves_like_tuple():
    e = Entry(1, "a")
    assert e == (1, "a")
    key, value = e
    assert (key, value) == (1, "a")
    assert e.get_key() == 1
    assert e.get_value() == "a"


def test_entry_is_immutable():
    e = Entry(1, "a")
    with pytest.raises(AttributeError):
        e.key = 2  # type: ignore[misc]


def test_of_coerces_pairs():
    assert Entry.of((2, "b")) == Entry(2, "b")
    assert isinstance(Entry.of([2, "b"]), Entry)
    e = Entry(3, "c")
    assert Entry.of(e) is e


@pytest.mark.parametrize("item", [None, 7, "ab", b"ab", (1,), (1, 2, 3)])
def test_of_rejects_non_pairs(item):
    with pytest.raises(TypeError):
        Entry.of(item)
