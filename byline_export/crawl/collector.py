"""
Frontier crawl over an author's listing pages.

The crawl is sequential: one listing page is fetched at a time, its cards
are collected, and any further pagination candidates it reveals are
enqueued. Syndication feeds found along the way are read after the page
loop while the collection still has room.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Iterable

import httpx

from ..config import AppConfig
from ..core.frontier import Frontier, PreviewCollection
from ..core.types import ArticlePreview, AuthorContext
from ..core.urls import (
    is_potential_author_pagination,
    normalize_url,
    with_pagina_path,
    with_path_page,
    with_query_param,
)
from ..fetch.fetcher import FetchPayload, FetchResult, fetch_payload
from ..markup.cards import extract_feed_previews, extract_page_previews
from ..markup.discovery import discover_feed_urls, discover_page_urls
from ..markup.scanner import scan_html
from ..utils.logging import get_logger, log_event


FEED_CONTENT_TYPES = ("application/rss+xml", "application/atom+xml", "application/xml", "text/xml")
FEED_AUTHOR_PARAMS = ("author", "autor", "writer")


@dataclass
class CrawlStats:
    """Counters collected during the listing crawl.

    Attributes:
        pages_fetched: Listing pages fetched successfully
        pages_failed: Listing pages that failed or returned nothing usable
        feeds_fetched: Feeds fetched successfully
        previews: Previews collected
    """
    pages_fetched: int = 0
    pages_failed: int = 0
    feeds_fetched: int = 0
    previews: int = 0


def seed_urls(context: AuthorContext, max_pages: int, offset_step: int = 10, seed_feeds: bool = True) -> list[str]:
    """Listing-page guesses for an author, canonical URL first.

    Pages 2..max_pages are guessed through the ``page``, ``pagina``,
    ``_page`` and ``offset`` query parameters and the ``/<n>.html`` and
    ``/pagina-<n>.html`` path variants. When the author id is known, site
    RSS endpoints filtered by author are guessed as well.
    """
    base = context.canonical_url
    urls = [base]
    for page in range(2, max_pages + 1):
        urls.extend(
            [
                with_query_param(base, "page", page),
                with_query_param(base, "pagina", page),
                with_query_param(base, "_page", page),
                with_query_param(base, "offset", (page - 1) * offset_step),
                with_path_page(base, page),
                with_pagina_path(base, page),
            ]
        )
    if seed_feeds and context.author_id:
        for param in FEED_AUTHOR_PARAMS:
            url = normalize_url(f"/rss/2.0/?{param}={context.author_id}", base)
            if url:
                urls.append(url)
    return list(dict.fromkeys(urls))


def _is_feed_response(result: FetchResult) -> bool:
    if any(kind in result.content_type for kind in FEED_CONTENT_TYPES):
        return True
    head = (result.text or "").lstrip()[:200].lower()
    return "<rss" in head or "<feed" in head


async def collect_previews(
    context: AuthorContext,
    client: httpx.AsyncClient,
    cfg: AppConfig,
    stats: CrawlStats | None = None,
    logger: logging.Logger | None = None,
) -> list[ArticlePreview]:
    """Crawl the author's listing pages and return deduplicated previews.

    Args:
        context: Validated author context
        client: Shared HTTP client for this export
        cfg: Application configuration (crawl limits, fetch retries)
        stats: Optional counters updated in place
        logger: Logger for crawl events (defaults to ``byline_export.crawl``)

    Returns:
        At most ``cfg.crawl.max_articles`` previews in discovery order
    """
    crawl = cfg.crawl
    stats = stats if stats is not None else CrawlStats()
    logger = logger or get_logger("crawl")

    frontier = Frontier(crawl.max_pages, crawl.max_pages * crawl.frontier_factor)
    collection = PreviewCollection(crawl.max_articles)
    feeds: dict[str, None] = {}

    seeded = frontier.seed(seed_urls(context, crawl.max_pages, crawl.offset_step, crawl.seed_feeds))
    log_event(
        logger,
        "Crawl start",
        level=logging.DEBUG,
        event="crawl_start",
        url=context.canonical_url,
        seeds=seeded,
    )

    while frontier.has_pending and not collection.full:
        url = frontier.pop()
        if url is None:
            break

        try:
            result, payload = await fetch_payload(
                client, url, context.canonical_url, cfg.fetch.retries
            )
            if payload is None or not payload.html:
                stats.pages_failed += 1
                log_event(
                    logger,
                    "Crawl page failed",
                    level=logging.DEBUG,
                    event="crawl_page_failed",
                    url=url,
                    status_code=result.status_code,
                    error=result.error or "empty body",
                )
                continue
            added, enqueued = _parse_page(
                result, payload, context, cfg, frontier, collection, feeds
            )
        except Exception as exc:  # noqa: BLE001
            stats.pages_failed += 1
            log_event(
                logger,
                "Crawl page failed",
                level=logging.DEBUG,
                event="crawl_page_failed",
                url=url,
                error=f"{type(exc).__name__}: {exc}",
            )
            continue

        stats.pages_fetched += 1
        log_event(
            logger,
            "Crawl page",
            level=logging.DEBUG,
            event="crawl_page_done",
            url=url,
            added=added,
            enqueued=enqueued,
            collected=len(collection),
        )

    for feed in feeds:
        if collection.full:
            break
        try:
            result, payload = await fetch_payload(
                client, feed, context.canonical_url, cfg.fetch.retries
            )
            error = result.error or "empty body"
            if payload is not None and payload.html:
                collection.extend(extract_feed_previews(payload.html, context))
                stats.feeds_fetched += 1
                continue
            status_code = result.status_code
        except Exception as exc:  # noqa: BLE001
            error, status_code = f"{type(exc).__name__}: {exc}", None
        log_event(
            logger,
            "Crawl feed failed",
            level=logging.DEBUG,
            event="crawl_feed_failed",
            url=feed,
            status_code=status_code,
            error=error,
        )

    previews = collection.to_list()
    stats.previews = len(previews)
    log_event(
        logger,
        "Crawl done",
        event="crawl_done",
        url=context.canonical_url,
        pages=frontier.visited_count,
        pages_failed=stats.pages_failed,
        feeds=stats.feeds_fetched,
        previews=stats.previews,
    )
    return previews


def _enqueue(
    frontier: Frontier, context: AuthorContext, discovered: Iterable[str], payload: FetchPayload
) -> int:
    enqueued = 0
    for url in [*discovered, *payload.extra_urls]:
        if not is_potential_author_pagination(url, context):
            continue
        if frontier.offer(url):
            enqueued += 1
    return enqueued


def _parse_page(
    result: FetchResult,
    payload: FetchPayload,
    context: AuthorContext,
    cfg: AppConfig,
    frontier: Frontier,
    collection: PreviewCollection,
    feeds: dict[str, None],
) -> tuple[int, int]:
    """Extract previews from one fetched page and queue what it links to.

    Returns:
        ``(previews added, URLs enqueued)``
    """
    if _is_feed_response(result):
        return collection.extend(extract_feed_previews(payload.html, context)), 0

    crawl = cfg.crawl
    page = scan_html(payload.html)
    added = collection.extend(
        extract_page_previews(page, context, crawl.max_fallback_blocks, crawl.min_link_title)
    )
    for feed in discover_feed_urls(page, context.canonical_url):
        feeds.setdefault(feed, None)
    enqueued = _enqueue(frontier, context, discover_page_urls(page, context, crawl.max_pages), payload)
    return added, enqueued
