"""Ordering and sibling tests over tree positions."""

from __future__ import annotations

from typing import Iterable, List

from docforest.corpus import Corpus
from docforest.models import CorruptHierarchyError, Position, Record


class PositionIndex:
    """Compares records by their tree position.

    Positions order lexicographically, which matches a left-to-right,
    depth-first walk of the corpus.
    """

    def __init__(self, corpus: Corpus) -> None:
        self.corpus = corpus

    def position_of(self, record: Record) -> Position:
        position = tuple(self.corpus.position(record))
        if not position:
            raise CorruptHierarchyError(f"{record!r} has an empty position")
        if min(position) < 0:
            raise CorruptHierarchyError(f"{record!r} has a negative position element")
        return position

    def sort_key(self, record: Record) -> Position:
        return self.position_of(record)

    def sort(self, records: Iterable[Record]) -> List[Record]:
        return sorted(records, key=self.sort_key)

    def compare(self, a: Record, b: Record) -> int:
        pos_a = self.position_of(a)
        pos_b = self.position_of(b)
        return (pos_a > pos_b) - (pos_a < pos_b)

    def are_siblings(self, a: Record, b: Record) -> bool:
        """Return True when both records sit under the same parent."""
        pos_a = self.position_of(a)
        pos_b = self.position_of(b)
        if len(pos_a) != len(pos_b):
            return False
        return pos_a[:-1] == pos_b[:-1]

    def siblings_of(self, record: Record) -> List[Record]:
        """Return the record's sibling list (itself included) in position order."""
        parent = self.corpus.parent(record)
        if parent is None:
            siblings = self.corpus.roots()
        else:
            siblings = self.corpus.children(parent)
        return self.sort(siblings)
