"""Family-aware chunking of record collections."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Iterator, List, Optional, Set

from docforest.corpus import Corpus
from docforest.hierarchy.position import PositionIndex
from docforest.models import Record
from docforest.utils.collections import difference

LOGGER = logging.getLogger(__name__)

ChunkSink = Callable[[List[Record]], None]


class FamilyPartitioner:
    """Splits records into chunks without splitting a family across two chunks."""

    def __init__(self, corpus: Corpus) -> None:
        self.corpus = corpus
        self.positions = PositionIndex(corpus)

    def partition(
        self, records: Iterable[Record], target_chunk_size: int, sink: ChunkSink
    ) -> int:
        """Deliver position-ordered chunks of about ``target_chunk_size`` to ``sink``.

        A chunk is only closed where the family changes, so a family larger
        than the target yields a chunk larger than the target. Returns the
        number of chunks delivered.
        """
        delivered = 0
        for chunk in self.iter_chunks(records, target_chunk_size):
            sink(chunk)
            delivered += 1
        return delivered

    def iter_chunks(
        self, records: Iterable[Record], target_chunk_size: int
    ) -> Iterator[List[Record]]:
        ordered = self.positions.sort(records)
        if not ordered:
            LOGGER.warning("No records to partition")
            return

        chunk: List[Record] = []
        previous: Optional[Record] = None
        for record in ordered:
            if chunk and len(chunk) >= target_chunk_size and self._can_cut(previous, record):
                LOGGER.debug("Delivering chunk of %d records", len(chunk))
                yield chunk
                chunk = []
            chunk.append(record)
            previous = record

        if chunk:
            LOGGER.debug("Delivering final chunk of %d records", len(chunk))
            yield chunk

    def _can_cut(self, previous: Optional[Record], record: Record) -> bool:
        if previous is None:
            return True
        top_level = self.corpus.top_level(record)
        if top_level is None:
            return True
        return top_level is not self.corpus.top_level(previous)

    def find_top_level_records(self, records: Iterable[Record]) -> Set[Record]:
        tops = (self.corpus.top_level(record) for record in records)
        return {top for top in tops if top is not None}

    def find_families(self, records: Iterable[Record]) -> Set[Record]:
        """Expand records to their whole families (family roots and descendants)."""
        result: Set[Record] = set()
        stack = list(self.find_top_level_records(records))
        while stack:
            record = stack.pop()
            if record in result:
                continue
            result.add(record)
            stack.extend(self.corpus.children(record))
        return result

    def find_families_without(
        self, records: Iterable[Record], predicate: Callable[[Record], bool]
    ) -> Set[Record]:
        """Families of ``records`` with every record matching ``predicate`` removed."""
        families = self.find_families(records)
        return difference(families, filter(predicate, families))
