"""
Article enrichment.

Each preview's article page is fetched and its fields are re-derived from
the page itself. Every field resolves through an ordered chain of
extractors; the first non-empty value wins and the preview's own value is
the last resort. Articles whose byline clearly names someone else are
dropped.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace
from itertools import chain
import logging
from typing import Callable

import httpx

from ..config import AppConfig
from ..core.author import is_same_author
from ..core.types import ArticlePreview, AuthorContext
from ..fetch.fetcher import fetch_payload
from ..markup.cards import AUTHOR_HINTS, DESCRIPTOR_HINTS, SUBTITLE_HINTS
from ..markup.jsonld import StructuredArticle, extract_structured_article
from ..markup.scanner import MarkupScanner, clean_html, first_non_empty, scan_html
from ..utils.logging import get_logger, log_event


@dataclass
class ArticlePage:
    """A fetched article page plus its structured data."""

    scanner: MarkupScanner
    structured: StructuredArticle


Extractor = Callable[[ArticlePage], str]


TITLE_CHAIN: tuple[Extractor, ...] = (
    lambda page: page.structured.title,
    lambda page: clean_html(page.scanner.meta("property", "og:title")),
    lambda page: page.scanner.first_text("h1"),
    lambda page: page.scanner.first_text("title"),
)

SUBTITLE_CHAIN: tuple[Extractor, ...] = (
    lambda page: page.structured.subtitle,
    lambda page: clean_html(page.scanner.meta("property", "og:description")),
    lambda page: clean_html(page.scanner.meta("name", "description")),
    lambda page: page.scanner.by_class(SUBTITLE_HINTS),
)

DESCRIPTOR_CHAIN: tuple[Extractor, ...] = (
    lambda page: page.structured.descriptor,
    lambda page: clean_html(page.scanner.meta("property", "article:section")),
    lambda page: page.scanner.by_class(DESCRIPTOR_HINTS),
)

PUBLISHED_CHAIN: tuple[Extractor, ...] = (
    lambda page: page.structured.published_at,
    lambda page: clean_html(page.scanner.meta("property", "article:published_time")),
    lambda page: clean_html(page.scanner.attr("time", "datetime")),
)

AUTHOR_CHAIN: tuple[Extractor, ...] = (
    lambda page: page.structured.author,
    lambda page: clean_html(page.scanner.meta("name", "author")),
    lambda page: clean_html(page.scanner.meta("property", "article:author")),
    lambda page: page.scanner.by_class(AUTHOR_HINTS),
)


def resolve(page: ArticlePage, extractors: tuple[Extractor, ...], *fallbacks: str) -> str:
    """First non-empty value from ``extractors``, then from ``fallbacks``."""
    return first_non_empty(chain((extractor(page) for extractor in extractors), fallbacks))


def enrich_from_markup(
    preview: ArticlePreview, markup: str, fallback_author: str
) -> ArticlePreview:
    """Re-derive a preview's fields from its article page markup."""
    scanner = scan_html(markup)
    page = ArticlePage(scanner=scanner, structured=extract_structured_article(scanner))
    return replace(
        preview,
        title=resolve(page, TITLE_CHAIN, preview.title),
        subtitle=resolve(page, SUBTITLE_CHAIN, preview.subtitle),
        descriptor=resolve(page, DESCRIPTOR_CHAIN, preview.descriptor),
        published_at=resolve(page, PUBLISHED_CHAIN, preview.published_at),
        author=resolve(page, AUTHOR_CHAIN, preview.author, fallback_author),
    )


async def enrich_article(
    preview: ArticlePreview,
    fallback_author: str,
    context: AuthorContext,
    client: httpx.AsyncClient,
    retries: int = 0,
    logger: logging.Logger | None = None,
) -> ArticlePreview | None:
    """Enrich one preview.

    Returns:
        The enriched article, the unchanged preview when the page cannot be
        fetched or parsed, or None when the page names a different author
    """
    try:
        result, payload = await fetch_payload(client, preview.url, preview.url, retries)
        if payload is None or not payload.html:
            log_event(
                logger,
                "Enrich fetch failed",
                level=logging.DEBUG,
                event="enrich_fetch_failed",
                url=preview.url,
                status_code=result.status_code,
                error=result.error or "empty body",
            )
            return preview
        enriched = enrich_from_markup(preview, payload.html, fallback_author)
    except Exception as exc:  # noqa: BLE001
        log_event(
            logger,
            "Enrich parse failed",
            level=logging.WARNING,
            event="enrich_parse_failed",
            url=preview.url,
            error=f"{type(exc).__name__}: {exc}",
        )
        return preview

    if not is_same_author(enriched.author, context):
        log_event(
            logger,
            "Enrich author mismatch",
            level=logging.DEBUG,
            event="enrich_author_mismatch",
            url=preview.url,
            author=enriched.author,
        )
        return None
    return enriched


async def enrich_articles(
    previews: list[ArticlePreview],
    fallback_author: str,
    context: AuthorContext,
    client: httpx.AsyncClient,
    cfg: AppConfig,
    logger: logging.Logger | None = None,
) -> list[ArticlePreview]:
    """Enrich previews in batches of ``cfg.enrich.concurrency``.

    Each batch is awaited before the next starts. Output keeps input order;
    articles attributed to another author are left out.
    """
    logger = logger or get_logger("enrich")
    limited = previews[: cfg.crawl.max_articles]
    batch_size = max(1, cfg.enrich.concurrency)

    results: list[ArticlePreview] = []
    for start in range(0, len(limited), batch_size):
        batch = limited[start : start + batch_size]
        enriched = await asyncio.gather(
            *(
                enrich_article(preview, fallback_author, context, client, cfg.fetch.retries, logger)
                for preview in batch
            )
        )
        results.extend(article for article in enriched if article is not None)

    log_event(
        logger,
        "Enrich done",
        event="enrich_done",
        url=context.canonical_url,
        requested=len(limited),
        kept=len(results),
    )
    return results
