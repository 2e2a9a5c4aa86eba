"""Expansion of a record selection to neighboring siblings."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Set, Tuple

from docforest.corpus import Corpus
from docforest.hierarchy.position import PositionIndex
from docforest.models import CorruptHierarchyError, Record

LOGGER = logging.getLogger(__name__)

_ROOTS = object()


class NeighborhoodExpander:
    """Adds the siblings surrounding each selected record."""

    def __init__(self, corpus: Corpus) -> None:
        self.corpus = corpus
        self.positions = PositionIndex(corpus)

    def expand(
        self, records: Iterable[Record], items_before: int, items_after: int
    ) -> List[Record]:
        """Return the records plus up to ``items_before``/``items_after`` siblings each.

        Windows are clamped to each record's own sibling list. The result is
        deduplicated and sorted by position.
        """
        items_before = max(items_before, 0)
        items_after = max(items_after, 0)

        # Sorted sibling list and ordinal lookup, built once per parent
        groups: Dict[object, Tuple[List[Record], Dict[int, int]]] = {}
        selected: Set[Record] = set()
        for record in records:
            parent = self.corpus.parent(record)
            key = _ROOTS if parent is None else parent
            if key not in groups:
                siblings = self.positions.siblings_of(record)
                groups[key] = (siblings, {id(s): i for i, s in enumerate(siblings)})
            siblings, ordinals = groups[key]

            index = ordinals.get(id(record))
            if index is None:
                raise CorruptHierarchyError(f"{record!r} is missing from its sibling list")
            first = max(index - items_before, 0)
            last = min(index + items_after, len(siblings) - 1)
            selected.update(siblings[first : last + 1])

        if not selected:
            LOGGER.warning("No records to expand")
            return []
        LOGGER.debug("Expanded selection to %d records", len(selected))
        return self.positions.sort(selected)
