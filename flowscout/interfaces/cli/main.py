"""
CLI Main - Typer-based command-line interface.

Usage:
    flowscout search "gmail to slack notification"
    flowscout search "" --service Telegram --limit 5
    flowscout stats --corpus data/workflows
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from flowscout.config import CorpusLoadError, EmbeddingError, InvalidQueryError

if TYPE_CHECKING:
    from flowscout.domains.catalog import CorpusStore

app = typer.Typer(
    name="flowscout",
    help="FlowScout - Workflow template search",
    add_completion=False,
)
console = Console()


def _configure_logging() -> None:
    from flowscout.config import get_settings

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(levelname)s: %(message)s",
    )


def _load_corpus(corpus_dir: Path | None) -> CorpusStore:
    """Read the corpus directory into a store; exits on a missing directory."""
    from flowscout.adapters.filesystem import load_corpus_directory
    from flowscout.config import get_settings
    from flowscout.domains.catalog import CorpusStore

    settings = get_settings()
    path = corpus_dir or settings.corpus_dir

    try:
        source = load_corpus_directory(path)
    except CorpusLoadError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)

    store = CorpusStore(embedding_timeout=settings.embedding_timeout)
    report = store.load(source.documents)

    skipped = len(source.skipped) + report.rejected_count
    if skipped:
        console.print(f"[yellow]{skipped} record(s) skipped while loading {path}[/yellow]")
    return store


@app.command()
def search(
    query: str = typer.Argument("", help="Search query (empty to browse)"),
    limit: int | None = typer.Option(None, "--limit", "-n", help="Number of results"),
    service: list[str] = typer.Option([], "--service", "-s", help="Required service (repeatable)"),
    category: str | None = typer.Option(None, "--category", "-c", help="Category name"),
    complexity: str | None = typer.Option(None, "--complexity", help="low, medium, high or unknown"),
    min_rating: float | None = typer.Option(None, "--min-rating", help="Minimum rating"),
    corpus: Path | None = typer.Option(None, "--corpus", help="Corpus directory"),
    lexical_only: bool = typer.Option(False, "--lexical-only", help="Skip embeddings"),
    diagnostics: bool = typer.Option(False, "--diagnostics", "-d", help="Show score breakdown"),
) -> None:
    """Search the workflow template catalog."""
    _configure_logging()

    filters = {
        "services": service,
        "category": category,
        "complexity": complexity,
        "min_rating": min_rating,
    }
    asyncio.run(_search_async(query, filters, limit, corpus, lexical_only, diagnostics))


async def _search_async(
    query: str,
    filters: dict[str, Any],
    limit: int | None,
    corpus_dir: Path | None,
    lexical_only: bool,
    diagnostics: bool,
) -> None:
    """Async search implementation."""
    from flowscout.adapters.embeddings import (
        OllamaEmbedder,
        SentenceTransformerEmbedder,
        get_embedder,
    )
    from flowscout.config import get_settings
    from flowscout.domains.search import HybridSearchEngine, SearchQuery

    settings = get_settings()

    if limit is None:
        limit = settings.search_default_limit

    try:
        parsed = SearchQuery.parse(query, filters, limit)
    except InvalidQueryError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(2)

    embedder = None
    if not lexical_only:
        try:
            embedder = get_embedder(settings)
        except ValueError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("Loading corpus...", total=None)
            store = _load_corpus(corpus_dir)

            if isinstance(embedder, SentenceTransformerEmbedder) and not parsed.is_browse:
                progress.update(task, description="Loading embedding model...")
                try:
                    await embedder.warm_up()
                except EmbeddingError as e:
                    console.print(f"[yellow]Embeddings unavailable: {e.message}[/yellow]")
                    embedder = None

            engine = HybridSearchEngine(store, embedder, tuning=settings.search_tuning())

            progress.update(task, description="Searching...")
            results = await engine.search(parsed)
    finally:
        if isinstance(embedder, OllamaEmbedder):
            await embedder.close()

    if not results:
        console.print("[yellow]No matching workflows.[/yellow]")
        return

    title = "Top workflows" if parsed.is_browse else f"Results for: {parsed.text}"
    table = Table(title=title)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Category")
    table.add_column("Services")
    table.add_column("Score", justify="right", style="green")
    if diagnostics:
        table.add_column("Lexical", justify="right")
        table.add_column("Semantic", justify="right")

    for i, result in enumerate(results, 1):
        row = [
            str(i),
            result.title,
            result.category,
            ", ".join(result.services),
            f"{result.combined_score:.3f}",
        ]
        if diagnostics:
            row.append(f"{result.lexical_score:.3f} (#{result.lexical_rank or '-'})")
            row.append(f"{result.semantic_score:.3f} (#{result.semantic_rank or '-'})")
        table.add_row(*row)

    console.print(table)


@app.command()
def stats(
    corpus: Path | None = typer.Option(None, "--corpus", help="Corpus directory"),
) -> None:
    """Show catalog statistics."""
    _configure_logging()

    store = _load_corpus(corpus)
    summary = store.stats()

    table = Table(title="Catalog")
    table.add_column("Category", style="cyan")
    table.add_column("Workflows", justify="right", style="green")
    for name, count in summary.categories.items():
        table.add_row(name, str(count))

    console.print(table)
    console.print(f"\n[bold]Total workflows:[/bold] {summary.total_documents}")
    console.print(f"[bold]Distinct services:[/bold] {len(summary.services)}")
    if summary.complexity:
        breakdown = ", ".join(f"{k}={v}" for k, v in sorted(summary.complexity.items()))
        console.print(f"[dim]Complexity: {breakdown}[/dim]")


@app.command()
def version() -> None:
    """Show version information."""
    from flowscout import __version__

    console.print(f"FlowScout v{__version__}")


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
