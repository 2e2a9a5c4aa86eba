"""Core DocForest data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

Position = Tuple[int, ...]


class CorruptHierarchyError(ValueError):
    """Raised when record positions or parent links contradict each other."""


@dataclass(slots=True, eq=False)
class Record:
    """A record positioned in the corpus tree.

    Records compare and hash by identity so that sets of records behave like
    sets of corpus references.
    """

    record_id: str
    name: str
    position: Position
    kind: str = "file"
    digest: Optional[str] = None
    physical_file: bool = False
    uri: Optional[str] = None
    parent: Optional[Record] = None
    children: List[Record] = field(default_factory=list)
    top_level: Optional[Record] = None

    @property
    def depth(self) -> int:
        return len(self.position)

    def __repr__(self) -> str:
        pos = ".".join(str(p) for p in self.position)
        return f"Record({self.record_id!r}, position={pos})"
