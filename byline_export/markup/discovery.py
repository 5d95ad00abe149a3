"""
Discovery of further listing pages and syndication feeds.

Every function returns absolute candidate URLs in discovery order without
duplicates. Candidates are not yet filtered for author relevance except
where noted; the crawler applies the pagination filter before enqueueing.
"""

from __future__ import annotations

import re
from typing import Iterable

from ..core.text import normalize_text
from ..core.types import AuthorContext
from ..core.urls import (
    is_feed_url,
    is_potential_author_pagination,
    looks_like_load_more_url,
    normalize_url,
    with_pagina_path,
    with_query_param,
)
from .scanner import MarkupScanner


ABSOLUTE_URL_RE = re.compile(r"https?://[^\"'\s<>()]+", re.IGNORECASE)
QUOTED_AUTHOR_PATH_RE = re.compile(r"([\"'])(/[^\"']*/autor/[^\"']+)\1", re.IGNORECASE)
PAGE_HINT_RE = re.compile(r"(?:page|pagina|_page|offset)\s*[:=]\s*([0-9]{1,3})", re.IGNORECASE)

LOAD_MORE_ATTRIBUTES = ("data-url", "data-next", "data-href", "href", "data-endpoint", "data-api-url")
FEED_TYPES = ("application/rss+xml", "application/atom+xml")
SHOW_MORE_ATTRIBUTE = "data-voc-show-news"


def _unique(urls: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(urls))


def absolute_urls(text: str) -> list[str]:
    return ABSOLUTE_URL_RE.findall(text or "")


def discover_load_more_urls(page: MarkupScanner, base_url: str) -> list[str]:
    """Absolute URLs and tagged attributes that look like author "load more" endpoints."""
    found = [url for url in absolute_urls(page.markup) if looks_like_load_more_url(url)]
    for _, value in page.attribute_values(LOAD_MORE_ATTRIBUTES):
        url = normalize_url(value, base_url)
        if url and looks_like_load_more_url(url):
            found.append(url)
    return _unique(url for url in (normalize_url(item, base_url) for item in found) if url)


def discover_author_button_urls(
    page: MarkupScanner, context: AuthorContext, max_pages: int
) -> list[str]:
    """Pagination guesses from author "show more news" buttons.

    A button's own href is kept when it is an author listing URL; ``data-page``
    maps to the ``/pagina-<n>.html`` variant; a button carrying this author's
    id or name expands to every ``/pagina-<n>.html`` up to ``max_pages``.
    """
    found: list[str] = []
    for attrs in page.tag_attrs("a", required=SHOW_MORE_ATTRIBUTE):
        href = attrs.get("href", "").strip()
        if href:
            url = normalize_url(href, context.canonical_url)
            if url and is_potential_author_pagination(url, context):
                found.append(url)

        data_page = attrs.get("data-page", "").strip()
        if re.fullmatch(r"[0-9]{1,3}", data_page) and int(data_page) > 1:
            found.append(with_pagina_path(context.canonical_url, int(data_page)))

        journalist_id = attrs.get("data-journalists-id", "").strip()
        journalist_name = attrs.get("data-journalists-name", "").strip()
        same_id = bool(journalist_id and context.author_id and journalist_id == context.author_id)
        same_name = bool(journalist_name and normalize_text(journalist_name) == context.author_slug)
        if same_id or same_name:
            found.extend(
                with_pagina_path(context.canonical_url, page_number)
                for page_number in range(2, max_pages + 1)
            )
    return _unique(found)


def discover_script_pagination_urls(
    page: MarkupScanner, context: AuthorContext, max_pages: int
) -> list[str]:
    """Pagination hints embedded in inline scripts.

    Collects load-more absolute URLs, quoted ``/.../autor/...`` paths for
    this author, and turns the first ``page|pagina|_page|offset = <n>`` hint
    into ``page``/``pagina``/``_page`` query variants of the listing URL.
    """
    base_url = context.canonical_url
    found: list[str] = []
    for block in page.scripts():
        decoded = (block or "").replace("\\/", "/")

        found.extend(url for url in absolute_urls(decoded) if looks_like_load_more_url(url))

        for match in QUOTED_AUTHOR_PATH_RE.finditer(decoded):
            url = normalize_url(match.group(2), base_url)
            if url and is_potential_author_pagination(url, context):
                found.append(url)

        hint = PAGE_HINT_RE.search(decoded)
        if hint:
            number = int(hint.group(1))
            if 1 < number <= max_pages * 3:
                found.extend(
                    with_query_param(base_url, param, number) for param in ("page", "pagina", "_page")
                )
    return _unique(url for url in (normalize_url(item, base_url) for item in found) if url)


def discover_rel_next_urls(page: MarkupScanner, base_url: str) -> list[str]:
    """Targets of ``<link rel="next">``."""
    found = []
    for attrs in page.tag_attrs("link", required="rel"):
        if "next" not in attrs.get("rel", "").lower().split():
            continue
        url = normalize_url(attrs.get("href", ""), base_url)
        if url:
            found.append(url)
    return _unique(found)


def discover_feed_urls(page: MarkupScanner, base_url: str) -> list[str]:
    """Syndication feeds: typed ``<link>`` alternates plus raw feed-looking URLs."""
    found = []
    for attrs in page.tag_attrs("link", required="type"):
        if attrs.get("type", "").strip().lower() not in FEED_TYPES:
            continue
        url = normalize_url(attrs.get("href", ""), base_url)
        if url:
            found.append(url)
    found.extend(url for url in absolute_urls(page.markup) if is_feed_url(url))
    return _unique(url for url in (normalize_url(item, base_url) for item in found) if url)


def discover_page_urls(page: MarkupScanner, context: AuthorContext, max_pages: int) -> list[str]:
    """All further listing-page candidates found on one page, in heuristic order."""
    base_url = context.canonical_url
    return _unique(
        [
            *discover_load_more_urls(page, base_url),
            *discover_author_button_urls(page, context, max_pages),
            *discover_script_pagination_urls(page, context, max_pages),
            *discover_rel_next_urls(page, base_url),
        ]
    )
