"""Descending-order ranking helpers shared by the similarity and item rankings."""

import bisect
from typing import Callable, Iterable, List, Tuple, TypeVar

T = TypeVar("T")

RankKey = Callable[[T], Tuple[float, ...]]


def _ascending(key: RankKey) -> Callable[[T], Tuple[float, ...]]:
    return lambda entry: tuple(-part for part in key(entry))


def insert_descending(ranked: List[T], entry: T, key: RankKey) -> None:
    """Insert ``entry`` into ``ranked``, which is already sorted descending by ``key``.

    The entry goes after every existing entry with an equal key, so entries
    inserted earlier win exact ties.

    Args:
        ranked: List sorted in descending key order. Modified in place.
        entry: Entry to insert.
        key: Function returning a tuple of numbers for an entry. Negate a
            component to rank that component ascending.
    """
    bisect.insort_right(ranked, entry, key=_ascending(key))


def rank_descending(entries: Iterable[T], key: RankKey) -> List[T]:
    """Return ``entries`` ordered descending by ``key`` using :func:`insert_descending`."""
    ranked: List[T] = []
    for entry in entries:
        insert_descending(ranked, entry, key)
    return ranked

