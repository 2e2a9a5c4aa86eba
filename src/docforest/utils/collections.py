"""Set helpers for record collections."""

from __future__ import annotations

from typing import Hashable, Iterable, Set, TypeVar

T = TypeVar("T", bound=Hashable)


def union_many(collections: Iterable[Iterable[T]]) -> Set[T]:
    """Union several record collections into one set."""
    result: Set[T] = set()
    for collection in collections:
        result.update(collection)
    return result


def difference(records: Iterable[T], to_remove: Iterable[T]) -> Set[T]:
    """Return the records that are not in ``to_remove``."""
    return set(records).difference(to_remove)
