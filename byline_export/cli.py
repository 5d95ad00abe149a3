"""
Command-line interface for the author article exporter.

Uses Typer to expose the export pipeline and the export history. Supports
loading .env files for local configuration.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from .config import load_config
from .errors import EmptyResultError, ValidationError
from .output.history import ExportHistory
from .runner import run_export

try:
    from dotenv import load_dotenv
except Exception:  # noqa: BLE001
    load_dotenv = None

app = typer.Typer(add_completion=False)
console = Console()


@app.command()
def export(
    url: str = typer.Argument(..., help="Author page URL, e.g. https://www.elcorreo.com/autor/nombre-123.html"),
    format: str = typer.Option("csv", "--format", "-f", help="csv, json, markdown or pdf."),
    output: Path = typer.Option(Path("out"), "--output", "-o"),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    max_articles: int | None = typer.Option(None, "--max-articles", help="Maximum articles exported."),
    max_pages: int | None = typer.Option(None, "--max-pages", help="Maximum listing pages fetched."),
    concurrency: int | None = typer.Option(None, "--concurrency", help="Article fetches per batch."),
    timeout: float | None = typer.Option(None, "--timeout", help="Per-request timeout in seconds."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Export an author's articles.

    Crawls the author's listing pages, enriches every article from its own
    page and writes the result as CSV, JSON, Markdown or PDF.

    Args:
        url: Author page on an allowed news site
        format: Export format
        output: Directory for the exported file
        config: Optional path to YAML config file
        max_articles: Override for the article cap
        max_pages: Override for the listing page cap
        concurrency: Override for enrichment concurrency
        timeout: Override for the per-request timeout
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    if load_dotenv is not None:
        load_dotenv()

    cfg = load_config(str(config) if config else None)

    if max_articles is not None:
        cfg.crawl.max_articles = max_articles
    if max_pages is not None:
        cfg.crawl.max_pages = max_pages
    if concurrency is not None:
        cfg.enrich.concurrency = concurrency
    if timeout is not None:
        cfg.fetch.timeout_seconds = timeout
    if log_level:
        cfg.logging.level = log_level

    try:
        path, result = run_export(url, format, output, cfg, console=console)
    except ValidationError as exc:
        console.print(f"[red]Invalid request:[/red] {exc.message}")
        raise typer.Exit(code=2)
    except EmptyResultError as exc:
        console.print(f"[yellow]{exc.message}[/yellow]")
        raise typer.Exit(code=1)

    console.print(f"Export written: {path} ({len(result.articles)} articles)")


@app.command()
def history(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    days: int = typer.Option(30, "--days", help="Number of days shown."),
):
    """Show export history totals and daily counters."""
    cfg = load_config(str(config) if config else None)
    ledger = ExportHistory(Path(cfg.history.path))
    summary = ledger.summarize()

    console.print(
        f"Downloads: {summary.totals.downloads}  Errors: {summary.totals.errors}"
    )
    table = Table(title="Exports per day")
    table.add_column("Date")
    table.add_column("Downloads", justify="right")
    table.add_column("Errors", justify="right")
    for day, counters in list(summary.daily.items())[:days]:
        table.add_row(day, str(counters.downloads), str(counters.errors))
    console.print(table)


if __name__ == "__main__":
    app()
