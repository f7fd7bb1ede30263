"""Command line interface for docwalker."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import List

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from docwalker.config import AppConfig
from docwalker.errors import DocWalkerError
from docwalker.index.records import SourceRecordBuilder
from docwalker.index.storage import SQLiteRecordStore
from docwalker.index.transforms import TransformCache
from docwalker.index.walker import DirectoryWalker
from docwalker.selection.evaluator import SelectionEvaluator
from docwalker.selection.loader import load_selector


console = Console()
app = typer.Typer(help="docwalker - discover source documents for indexing")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _ensure_db_parent(db_path: Path) -> None:
    db_path.parent.mkdir(parents=True, exist_ok=True)


@app.command()
def scan(
    roots: List[Path] = typer.Argument(
        ..., help="Source directories to scan.", resolve_path=True
    ),
    db: Path = typer.Option(None, "--db", help="SQLite database path"),
    home: Path = typer.Option(
        None, "--home", help="Home directory for relative selector and transform paths"
    ),
    selector: str = typer.Option(AppConfig().selector, help="Selector as module:function or file.py:function"),
    chunk_size: int = typer.Option(AppConfig().chunk_size, help="Chunk size in words"),
    overlap: int = typer.Option(AppConfig().chunk_overlap, help="Chunk overlap in words"),
    keep_going: bool = typer.Option(False, "--keep-going", help="Continue with other roots after a failure"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Scan source trees and record the documents selected for indexing."""
    _setup_logging(verbose)
    config = AppConfig(
        home_path=home if home is not None else Path.cwd(),
        db_path=db if db is not None else AppConfig().db_path,
        selector=selector,
        chunk_size=chunk_size,
        chunk_overlap=overlap,
    )
    chunks = config.chunk_config()

    try:
        selector_fn = load_selector(config.selector, config.home_path)
    except DocWalkerError as exc:
        raise typer.BadParameter(str(exc), param_hint="--selector") from exc

    resolved_db = config.resolve_db_path(Path.cwd())
    _ensure_db_parent(resolved_db)
    store = SQLiteRecordStore(resolved_db)

    walker = DirectoryWalker(
        SelectionEvaluator(selector_fn),
        SourceRecordBuilder(TransformCache(config.transform_cache_size), config.home_path),
        store,
        progress_interval=config.progress_interval,
    )

    console.print(f"Scanning into [bold]{resolved_db}[/bold]...")
    console.print(f"Chunk size: {chunks.size} words, overlap: {chunks.overlap} words")
    try:
        store.save_chunk_config(chunks)
        with store.transaction():
            stats = walker.run(roots, keep_going=keep_going)
    except (DocWalkerError, OSError, sqlite3.Error) as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1)
    finally:
        store.close()

    console.print(
        f"Directories: {stats.directories_visited}, submitted: {stats.submitted}, "
        f"skipped: {stats.skipped}, aborted: {len(stats.aborted_directories)}"
    )
    if stats.failed_roots:
        for root in stats.failed_roots:
            console.print(f"[red]Failed:[/red] {root}")
        raise typer.Exit(code=1)


@app.command("list")
def list_records(
    db: Path = typer.Option(None, "--db", help="SQLite database path"),
) -> None:
    """Show the recorded source documents."""
    config = AppConfig(db_path=db if db is not None else AppConfig().db_path)
    resolved_db = config.resolve_db_path(Path.cwd())

    if not resolved_db.exists():
        raise typer.BadParameter(f"Database not found: {resolved_db}")

    store = SQLiteRecordStore(resolved_db)
    try:
        records = store.list_records()
        chunks = store.load_chunk_config()
    finally:
        store.close()

    if not records:
        console.print("[yellow]No documents recorded.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Format")
    table.add_column("Document")
    table.add_column("Input filter")
    table.add_column("Display style")

    for record in records:
        table.add_row(
            record["format"],
            record["path"],
            record["input_filter"] or "",
            record["display_style"] or "",
        )

    console.print(table)
    if chunks is not None:
        console.print(f"Chunk size: {chunks.size} words, overlap: {chunks.overlap} words")


@app.command()
def prune(
    db: Path = typer.Option(None, "--db", help="SQLite database path"),
) -> None:
    """Remove records for documents that no longer exist on disk."""
    config = AppConfig(db_path=db if db is not None else AppConfig().db_path)
    resolved_db = config.resolve_db_path(Path.cwd())

    if not resolved_db.exists():
        console.print("[yellow]Database not found, nothing to prune.[/yellow]")
        return

    store = SQLiteRecordStore(resolved_db)
    removed = store.remove_missing_files()
    console.print(f"Removed {removed} orphaned documents.")
    store.close()
