"""Nearest-ancestor resolution over record paths."""

from __future__ import annotations

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from pathlib import PurePosixPath, PureWindowsPath
from typing import Callable, Collection, Optional, Set
from urllib.parse import unquote, urlparse

from docforest.corpus import Corpus
from docforest.models import Record
from docforest.utils.collections import union_many

LOGGER = logging.getLogger(__name__)

RecordPredicate = Callable[[Record], bool]

CONTAINER_KIND = "container"

_WINDOWS_DRIVE_RE = re.compile(r"^/?[A-Za-z]:")


class AncestorResolver:
    """Walks record paths bottom-up looking for a matching ancestor."""

    def __init__(self, corpus: Corpus, *, max_workers: int | None = None) -> None:
        self.corpus = corpus
        self.max_workers = max_workers

    def find_nearest_ancestor(
        self, record: Record, predicate: RecordPredicate
    ) -> Optional[Record]:
        """Return the closest ancestor matching ``predicate``, never the record itself."""
        for candidate in reversed(self.corpus.path(record)):
            if candidate is record:
                continue
            if predicate(candidate):
                return candidate
        return None

    def find_nearest_ancestors(
        self, records: Collection[Record], predicate: RecordPredicate
    ) -> Set[Record]:
        """Resolve many records at once; records without a match are dropped.

        Each lookup is independent and read-only, so they are fanned out over a
        thread pool and the results unioned.
        """
        if not records:
            LOGGER.warning("No records to resolve ancestors for")
            return set()

        def resolve(record: Record) -> Optional[Record]:
            return self.find_nearest_ancestor(record, predicate)

        if self.max_workers == 1 or len(records) == 1:
            result = {ancestor for ancestor in map(resolve, records) if ancestor is not None}
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                resolved = executor.map(resolve, records)
                result = {ancestor for ancestor in resolved if ancestor is not None}

        LOGGER.debug("Resolved %d ancestors for %d records", len(result), len(records))
        return result

    def find_physical_file_ancestor(self, record: Record) -> Optional[Record]:
        return self.find_nearest_ancestor(record, self.corpus.is_physical_file)

    def find_physical_file_ancestors(self, records: Collection[Record]) -> Set[Record]:
        return self.find_nearest_ancestors(records, self.corpus.is_physical_file)

    def find_container_ancestor(
        self, record: Record, *, kind: str = CONTAINER_KIND
    ) -> Optional[Record]:
        return self.find_nearest_ancestor(record, self._kind_predicate(kind))

    def find_container_ancestors(
        self, records: Collection[Record], *, kind: str = CONTAINER_KIND
    ) -> Set[Record]:
        return self.find_nearest_ancestors(records, self._kind_predicate(kind))

    def find_parents(self, records: Collection[Record]) -> Set[Record]:
        """Resolve records to their parents; root records contribute nothing."""
        parents = (self.corpus.parent(record) for record in records)
        return {parent for parent in parents if parent is not None}

    def find_records_and_parents(self, records: Collection[Record]) -> Set[Record]:
        return union_many([records, self.find_parents(records)])

    def physical_ancestor_path(self, record: Record) -> str:
        """File system path of the record's physical file ancestor.

        Returns an empty string when there is no physical ancestor or it has
        no URI.
        """
        ancestor = self.find_physical_file_ancestor(record)
        if ancestor is None:
            return ""
        uri = self.corpus.uri(ancestor)
        if not uri:
            return ""
        return uri_to_path(uri)

    def _kind_predicate(self, kind: str) -> RecordPredicate:
        return lambda candidate: self.corpus.is_kind(candidate, kind)


def uri_to_path(uri: str) -> str:
    """Convert a ``file://`` URI into a file system path string."""
    parsed = urlparse(uri)
    if parsed.scheme != "file":
        return unquote(uri)
    path = unquote(parsed.path)
    if parsed.netloc:
        return str(PureWindowsPath(f"//{parsed.netloc}{path}"))
    if _WINDOWS_DRIVE_RE.match(path):
        return str(PureWindowsPath(path.lstrip("/")))
    return str(PurePosixPath(path))
