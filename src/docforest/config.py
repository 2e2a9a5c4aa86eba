"""Application configuration defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from docforest.hierarchy.ancestors import CONTAINER_KIND

CORPUS_ENV_VAR = "DOCFOREST_CORPUS"


def _get_default_corpus_path() -> Path:
    """Get the default corpus path from the environment or the local data folder."""
    from_env = os.environ.get(CORPUS_ENV_VAR)
    if from_env:
        return Path(from_env)
    return Path("data/corpus.json")


@dataclass(slots=True)
class AppConfig:
    corpus_path: Path | None = None
    chunk_size: int = 1000
    items_before: int = 1
    items_after: int = 1
    max_workers: int | None = None
    container_kind: str = CONTAINER_KIND

    def __post_init__(self) -> None:
        if self.corpus_path is None:
            self.corpus_path = _get_default_corpus_path()

    def resolve_corpus_path(self, base_dir: Path | None = None) -> Path:
        if self.corpus_path is None:
            self.corpus_path = _get_default_corpus_path()
        if Path(self.corpus_path).is_absolute() or base_dir is None:
            return Path(self.corpus_path)
        return base_dir / self.corpus_path
