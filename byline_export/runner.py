"""
Export pipeline orchestration.

This module coordinates the whole workflow for one author page:
1. Parse the format and validate the author URL (no network before this)
2. Crawl the author's listing pages for article previews
3. Enrich every preview from its article page and filter by author
4. Encode the result set and, for file exports, write it to disk

Each export uses its own HTTP client and records a history entry when the
history ledger is enabled.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
from pathlib import Path

import httpx
from rich.console import Console

from .config import AppConfig
from .core.author import resolve_author_context
from .core.types import ArticlePreview, AuthorContext, ExportFormat, ExportPayload
from .crawl.collector import CrawlStats, collect_previews
from .crawl.enricher import enrich_articles
from .errors import ExportError, NoArticlesFound, NoEnrichedArticles
from .fetch.fetcher import build_client
from .output.encoder import encode_export
from .output.history import ExportHistory
from .utils.logging import get_logger, log_event, setup_logging


@dataclass
class ExportResult:
    """A finished export.

    Attributes:
        payload: Encoded export content and its MIME type
        filename: Suggested download name, ``<prefix>-<author slug>.<ext>``
        articles: Exported articles in order
        context: Author context the export was built for
    """
    payload: ExportPayload
    filename: str
    articles: list[ArticlePreview]
    context: AuthorContext


def export_filename(context: AuthorContext, fmt: ExportFormat, prefix: str = "articulos") -> str:
    return f"{prefix}-{context.author_slug}.{fmt.extension}"


async def export_author_async(
    author_url: str,
    format_token: str | ExportFormat,
    cfg: AppConfig,
    transport: httpx.AsyncBaseTransport | None = None,
    logger: logging.Logger | None = None,
) -> ExportResult:
    """Run one export end to end.

    Args:
        author_url: Author listing page on an allowed site
        format_token: ``csv``, ``json``, ``markdown`` (or ``md``) or ``pdf``
        cfg: Application configuration
        transport: Optional httpx transport override (used by tests)
        logger: Logger for pipeline events

    Returns:
        The encoded export

    Raises:
        ValidationError: If the URL or format is rejected
        NoArticlesFound: If the crawl discovers no article
        NoEnrichedArticles: If enrichment filters out every article
    """
    logger = logger or get_logger("runner")
    history = ExportHistory(Path(cfg.history.path), enabled=cfg.history.enabled)
    run = history.start(str(getattr(format_token, "value", format_token)), author_url)

    try:
        fmt = ExportFormat.parse(format_token)
        context = resolve_author_context(author_url, cfg.crawl.allowed_domains)
        log_event(
            logger,
            "Export start",
            event="export_start",
            url=context.canonical_url,
            author=context.author_name,
            format=fmt.value,
        )

        stats = CrawlStats()
        async with build_client(cfg.fetch, transport=transport) as client:
            previews = await collect_previews(context, client, cfg, stats=stats)
            if not previews:
                raise NoArticlesFound(
                    "No se han encontrado artículos en la página de autor indicada.",
                    details={"url": context.canonical_url, "pages": stats.pages_fetched},
                )

            if cfg.enrich.enabled:
                articles = await enrich_articles(previews, context.author_name, context, client, cfg)
            else:
                articles = previews[: cfg.crawl.max_articles]
            if not articles:
                raise NoEnrichedArticles(
                    "Ningún artículo encontrado corresponde al autor indicado.",
                    details={"url": context.canonical_url, "previews": len(previews)},
                )

        payload = encode_export(
            articles, fmt, cfg.output.pdf_wrap_width, cfg.output.pdf_max_lines
        )
    except ExportError as exc:
        history.finish(run, http_status=exc.status_code, error=exc.message)
        log_event(
            logger,
            "Export failed",
            level=logging.WARNING,
            event="export_failed",
            url=author_url,
            error=exc.message,
            error_type=type(exc).__name__,
            status=exc.status_code,
        )
        raise
    except Exception as exc:
        error = f"{type(exc).__name__}: {exc}"
        history.finish(run, http_status=500, error=error)
        log_event(
            logger,
            "Export crashed",
            level=logging.ERROR,
            event="export_failed",
            url=author_url,
            error=error,
            error_type=type(exc).__name__,
            status=500,
        )
        raise

    history.finish(run, http_status=200, articles=len(articles))
    result = ExportResult(
        payload=payload,
        filename=export_filename(context, fmt, cfg.output.filename_prefix),
        articles=articles,
        context=context,
    )
    log_event(
        logger,
        "Export done",
        event="export_done",
        url=context.canonical_url,
        format=fmt.value,
        articles=len(articles),
        previews=len(previews),
        filename=result.filename,
    )
    return result


def export_author(
    author_url: str,
    format_token: str | ExportFormat,
    cfg: AppConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ExportResult:
    """Synchronous wrapper around :func:`export_author_async`."""
    return asyncio.run(export_author_async(author_url, format_token, cfg, transport=transport))


def run_export(
    author_url: str,
    format_token: str | ExportFormat,
    output_dir: Path,
    cfg: AppConfig,
    console: Console | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> tuple[Path, ExportResult]:
    """Export an author and write the file into ``output_dir``.

    Returns:
        The written file path and the export result
    """
    console = console or Console()
    setup_logging(cfg.logging, output_dir)
    with console.status(f"Exporting {author_url}"):
        result = export_author(author_url, format_token, cfg, transport=transport)

    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / result.filename
    path.write_bytes(result.payload.to_bytes())
    return path, result
