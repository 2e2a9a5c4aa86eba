"""Digest based deduplication with a caller-chosen survivor."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Set, Tuple

from docforest.corpus import Corpus
from docforest.hierarchy.position import PositionIndex
from docforest.models import Record

LOGGER = logging.getLogger(__name__)

TieBreaker = Callable[[Record, Record], Any]


class TieBreakDeduplicator:
    """Keeps one record per digest, letting a tie-breaker pick which one.

    Records are visited in the order given. The first record of a digest
    group is the champion; every later record of the group is offered to
    ``tie_breaker(champion, contender)`` and replaces the champion only if
    the tie-breaker returns that very contender object. Any other return
    value, ``None`` included, keeps the champion.

    Records without a digest are never grouped and always survive. The
    tie-breaker must not modify records. Exceptions it raises propagate.
    """

    def __init__(self, corpus: Corpus) -> None:
        self.corpus = corpus

    def deduplicate(self, records: Iterable[Record], tie_breaker: TieBreaker) -> Set[Record]:
        champions: Dict[str, Record] = {}
        no_digest: List[Record] = []
        for record in records:
            digest = self._digest_key(record)
            if digest is None:
                no_digest.append(record)
                continue

            champion = champions.get(digest)
            if champion is None:
                champions[digest] = record
            elif tie_breaker(champion, record) is record:
                champions[digest] = record

        if not champions and not no_digest:
            LOGGER.warning("No records to deduplicate")
            return set()

        LOGGER.debug(
            "Deduplicated to %d digest groups plus %d records without digest",
            len(champions),
            len(no_digest),
        )
        result = set(champions.values())
        result.update(no_digest)
        return result

    def group_by_digest(self, records: Iterable[Record]) -> Dict[str, List[Record]]:
        """Group records by digest, preserving input order; undigested records are left out."""
        groups: Dict[str, List[Record]] = {}
        for record in records:
            digest = self._digest_key(record)
            if digest is not None:
                groups.setdefault(digest, []).append(record)
        return groups

    def _digest_key(self, record: Record) -> str | None:
        digest = self.corpus.digest(record)
        if digest is None or not digest.strip():
            return None
        return digest


def prefer_lowest(key: Callable[[Record], Any]) -> TieBreaker:
    """Tie-breaker keeping the record with the strictly lowest ``key``.

    Ties keep the current champion.
    """

    def tie_breaker(champion: Record, contender: Record) -> Record:
        if key(contender) < key(champion):
            return contender
        return champion

    return tie_breaker


def prefer_earliest_position(corpus: Corpus) -> TieBreaker:
    """Tie-breaker keeping the record that comes first in the corpus."""
    positions = PositionIndex(corpus)

    def position_key(record: Record) -> Tuple[int, ...]:
        return positions.position_of(record)

    return prefer_lowest(position_key)
