"""Command line interface for DocForest."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from docforest.config import AppConfig
from docforest.corpus import InMemoryCorpus
from docforest.hierarchy.ancestors import AncestorResolver
from docforest.hierarchy.dedupe import TieBreakDeduplicator, prefer_earliest_position
from docforest.hierarchy.families import FamilyPartitioner
from docforest.hierarchy.neighbors import NeighborhoodExpander
from docforest.models import Record


console = Console()
app = typer.Typer(help="DocForest - structural queries over record hierarchies")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _load_corpus(corpus_path: Optional[Path], config: AppConfig) -> InMemoryCorpus:
    if corpus_path is not None:
        config.corpus_path = corpus_path
    resolved = config.resolve_corpus_path(Path.cwd())
    if not resolved.exists():
        raise typer.BadParameter(f"Corpus not found: {resolved}")
    return InMemoryCorpus.from_json(resolved, container_kinds={config.container_kind})


def _select(corpus: InMemoryCorpus, ids: Optional[List[str]]) -> List[Record]:
    if not ids:
        return list(corpus.records())
    try:
        return [corpus.get(record_id) for record_id in ids]
    except KeyError as exc:
        raise typer.BadParameter(str(exc.args[0])) from exc


def _format_position(record: Record) -> str:
    return ".".join(str(part) for part in record.position)


def _records_table(records: Iterable[Record], title: str | None = None) -> Table:
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("ID")
    table.add_column("Position")
    table.add_column("Kind")
    table.add_column("Digest")
    table.add_column("Name")
    for record in records:
        table.add_row(
            record.record_id,
            _format_position(record),
            record.kind,
            record.digest or "",
            record.name,
        )
    return table


@app.command()
def ancestors(
    ids: Optional[List[str]] = typer.Argument(None, help="Record ids (default: whole corpus)."),
    corpus: Path = typer.Option(None, "--corpus", help="Corpus JSON path"),
    physical: bool = typer.Option(
        False, "--physical", help="Find physical file ancestors instead of containers"
    ),
    workers: Optional[int] = typer.Option(None, help="Worker threads for resolution"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Resolve the nearest container (or physical file) ancestors."""
    _setup_logging(verbose)
    config = AppConfig(max_workers=workers)
    loaded = _load_corpus(corpus, config)
    records = _select(loaded, ids)

    resolver = AncestorResolver(loaded, max_workers=config.max_workers)
    if physical:
        found = resolver.find_physical_file_ancestors(records)
    else:
        found = resolver.find_container_ancestors(records, kind=config.container_kind)

    if not found:
        console.print("[yellow]No matching ancestors.[/yellow]")
        return
    ordered = sorted(found, key=lambda record: record.position)
    console.print(_records_table(ordered, title=f"{len(ordered)} ancestors"))


@app.command()
def partition(
    corpus: Path = typer.Option(None, "--corpus", help="Corpus JSON path"),
    chunk_size: int = typer.Option(AppConfig().chunk_size, help="Target chunk size"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Split the corpus into chunks without breaking families apart."""
    _setup_logging(verbose)
    config = AppConfig(chunk_size=chunk_size)
    loaded = _load_corpus(corpus, config)

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Chunk")
    table.add_column("Records")
    table.add_column("First")
    table.add_column("Last")

    def sink(chunk: List[Record]) -> None:
        table.add_row(
            str(table.row_count + 1),
            str(len(chunk)),
            chunk[0].record_id,
            chunk[-1].record_id,
        )

    delivered = FamilyPartitioner(loaded).partition(loaded.records(), config.chunk_size, sink)
    if not delivered:
        console.print("[yellow]Corpus is empty.[/yellow]")
        return
    console.print(table)


@app.command()
def dedupe(
    ids: Optional[List[str]] = typer.Argument(None, help="Record ids (default: whole corpus)."),
    corpus: Path = typer.Option(None, "--corpus", help="Corpus JSON path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Keep one record per digest, preferring the earliest position."""
    _setup_logging(verbose)
    config = AppConfig()
    loaded = _load_corpus(corpus, config)
    records = _select(loaded, ids)

    survivors = TieBreakDeduplicator(loaded).deduplicate(
        records, prefer_earliest_position(loaded)
    )
    ordered = sorted(survivors, key=lambda record: record.position)
    console.print(_records_table(ordered, title=f"{len(ordered)} of {len(records)} records kept"))


@app.command()
def neighbors(
    ids: List[str] = typer.Argument(..., help="Record ids to expand."),
    corpus: Path = typer.Option(None, "--corpus", help="Corpus JSON path"),
    before: int = typer.Option(AppConfig().items_before, help="Siblings before each record"),
    after: int = typer.Option(AppConfig().items_after, help="Siblings after each record"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Show records together with their neighboring siblings."""
    _setup_logging(verbose)
    config = AppConfig(items_before=before, items_after=after)
    loaded = _load_corpus(corpus, config)
    records = _select(loaded, ids)

    expanded = NeighborhoodExpander(loaded).expand(
        records, config.items_before, config.items_after
    )
    console.print(_records_table(expanded))
