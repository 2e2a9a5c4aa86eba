"""Corpus accessors and an in-memory corpus implementation.

Algorithms in :mod:`docforest.hierarchy` never touch record attributes
directly; they go through a :class:`Corpus` so any store able to answer the
same questions (parent, children, position, digest, ...) can be plugged in.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping, Optional, Protocol

from docforest.models import CorruptHierarchyError, Position, Record
from docforest.utils.digests import compute_digest, normalize_digest

LOGGER = logging.getLogger(__name__)

DEFAULT_CONTAINER_KINDS = frozenset({"container"})


class Corpus(Protocol):
    """Read-only view of a record hierarchy."""

    def path(self, record: Record) -> Sequence[Record]: ...

    def position(self, record: Record) -> Position: ...

    def parent(self, record: Record) -> Optional[Record]: ...

    def children(self, record: Record) -> Sequence[Record]: ...

    def roots(self) -> Sequence[Record]: ...

    def top_level(self, record: Record) -> Optional[Record]: ...

    def digest(self, record: Record) -> Optional[str]: ...

    def uri(self, record: Record) -> Optional[str]: ...

    def is_physical_file(self, record: Record) -> bool: ...

    def is_kind(self, record: Record, kind: str) -> bool: ...


class RecordPath(Sequence):
    """Root-to-record path resolved lazily from parent links.

    ``reversed(path)`` walks from the record up to its root without building
    a list, which is all nearest-ancestor lookups need.
    """

    __slots__ = ("_record",)

    def __init__(self, record: Record) -> None:
        if not record.position:
            raise CorruptHierarchyError(f"{record!r} has an empty position")
        self._record = record

    def __len__(self) -> int:
        return len(self._record.position)

    def __reversed__(self) -> Iterator[Record]:
        current: Optional[Record] = self._record
        remaining = len(self)
        while current is not None:
            if remaining == 0:
                raise CorruptHierarchyError(
                    f"Path of {self._record!r} is deeper than its position"
                )
            yield current
            remaining -= 1
            current = current.parent
        if remaining:
            raise CorruptHierarchyError(
                f"Path of {self._record!r} is shorter than its position"
            )

    def __iter__(self) -> Iterator[Record]:
        return iter(list(reversed(self))[::-1])

    def __getitem__(self, index):  # type: ignore[override]
        if isinstance(index, slice):
            return list(self)[index]
        size = len(self)
        if index < 0:
            index += size
        if not 0 <= index < size:
            raise IndexError("path index out of range")
        steps = size - 1 - index
        for step, record in enumerate(reversed(self)):
            if step == steps:
                return record
        raise IndexError("path index out of range")  # pragma: no cover


class InMemoryCorpus:
    """Corpus backed by linked :class:`Record` objects held in memory."""

    def __init__(
        self,
        roots: Sequence[Record] = (),
        *,
        container_kinds: Iterable[str] = DEFAULT_CONTAINER_KINDS,
    ) -> None:
        self._roots = list(roots)
        self.container_kinds = frozenset(container_kinds)
        self._by_id: dict[str, Record] = {}
        for record in self.records():
            if record.record_id in self._by_id:
                raise ValueError(f"Duplicate record id: {record.record_id}")
            self._by_id[record.record_id] = record

    @classmethod
    def from_tree(
        cls,
        nodes: Iterable[Mapping[str, Any]],
        *,
        container_kinds: Iterable[str] = DEFAULT_CONTAINER_KINDS,
    ) -> "InMemoryCorpus":
        """Build a corpus from nested node mappings.

        Each node may carry ``id``, ``name``, ``kind``, ``digest`` (or
        ``content`` to digest), ``physical_file``, ``uri`` and ``children``.
        Positions follow the nesting order.
        """
        kinds = frozenset(container_kinds)
        roots = [
            _build_record(node, (index,), None, kinds)
            for index, node in enumerate(nodes)
        ]
        return cls(roots, container_kinds=kinds)

    @classmethod
    def from_json(
        cls,
        path: Path,
        *,
        container_kinds: Iterable[str] = DEFAULT_CONTAINER_KINDS,
    ) -> "InMemoryCorpus":
        """Load a corpus tree from a JSON file."""
        with Path(path).open("r", encoding="utf-8") as handle:
            data = json.load(handle)
        nodes = data.get("records", []) if isinstance(data, dict) else data
        corpus = cls.from_tree(nodes, container_kinds=container_kinds)
        LOGGER.debug("Loaded %d records from %s", len(corpus), path)
        return corpus

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, record: object) -> bool:
        if not isinstance(record, Record):
            return False
        return self._by_id.get(record.record_id) is record

    def get(self, record_id: str) -> Record:
        try:
            return self._by_id[record_id]
        except KeyError:
            raise KeyError(f"Unknown record id: {record_id}") from None

    def records(self) -> Iterator[Record]:
        """Yield every record depth-first, i.e. in position order."""
        stack = list(reversed(self._roots))
        while stack:
            record = stack.pop()
            yield record
            stack.extend(reversed(record.children))

    # Corpus protocol

    def path(self, record: Record) -> Sequence[Record]:
        return RecordPath(record)

    def position(self, record: Record) -> Position:
        return record.position

    def parent(self, record: Record) -> Optional[Record]:
        return record.parent

    def children(self, record: Record) -> Sequence[Record]:
        return record.children

    def roots(self) -> Sequence[Record]:
        return self._roots

    def top_level(self, record: Record) -> Optional[Record]:
        return record.top_level

    def digest(self, record: Record) -> Optional[str]:
        return record.digest

    def uri(self, record: Record) -> Optional[str]:
        return record.uri

    def is_physical_file(self, record: Record) -> bool:
        return record.physical_file

    def is_kind(self, record: Record, kind: str) -> bool:
        return record.kind == kind


def _build_record(
    node: Mapping[str, Any],
    position: Position,
    parent: Optional[Record],
    container_kinds: frozenset[str],
) -> Record:
    record_id = str(node["id"])
    kind = str(node.get("kind", "file"))
    digest = normalize_digest(node.get("digest"))
    if digest is None and node.get("content") is not None:
        digest = compute_digest(node["content"])

    record = Record(
        record_id=record_id,
        name=str(node.get("name", record_id)),
        position=position,
        kind=kind,
        digest=digest,
        physical_file=bool(node.get("physical_file", False)),
        uri=node.get("uri"),
        parent=parent,
    )
    # The family root is the first non-container record on the path.
    if parent is not None and parent.top_level is not None:
        record.top_level = parent.top_level
    elif kind not in container_kinds:
        record.top_level = record

    record.children = [
        _build_record(child, position + (index,), record, container_kinds)
        for index, child in enumerate(node.get("children", ()))
    ]
    return record
