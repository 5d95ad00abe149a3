"""
URL classification and rewriting helpers.

Decides whether a discovered URL belongs to the allowed site family, looks
like an article, or looks like a pagination/feed link for the target author.
Also builds the pagination variants used to seed the crawl frontier.
"""

from __future__ import annotations

from typing import Iterable
from urllib.parse import parse_qsl, urlencode, urljoin, urlsplit, urlunsplit

from .text import normalize_text
from .types import AuthorContext


BLOCKED_PATH_TOKENS = (
    "/servicios/",
    "/contacto",
    "/condiciones-uso",
    "/compromisos-periodisticos",
    "/reglamento",
    "/servicio-utig",
    "/temas/generales/",
    "/areapersonal",
    "/gestion/",
)

LOAD_MORE_TOKENS = (
    "page=",
    "pagina=",
    "_page=",
    "offset=",
    "load",
    "more",
    "ajax",
    "siguiente",
    "next",
)


def strip_www(hostname: str) -> str:
    return hostname[4:] if hostname.startswith("www.") else hostname


def is_same_family_host(hostname: str, domains: Iterable[str]) -> bool:
    """Return True when the host equals or is a subdomain of an allowed domain."""
    host = strip_www((hostname or "").lower())
    if not host:
        return False
    return any(host == domain or host.endswith(f".{domain}") for domain in domains)


def normalize_url(value: str, base: str) -> str | None:
    """Resolve ``value`` against ``base`` into an absolute http(s) URL.

    Returns:
        The absolute URL without fragment, or None when the value cannot be
        resolved to an http(s) URL with a host
    """
    candidate = (value or "").strip()
    if not candidate:
        return None
    try:
        joined = urljoin(base, candidate)
        parts = urlsplit(joined)
        parts.port
    except ValueError:
        return None
    if parts.scheme not in ("http", "https") or not parts.hostname:
        return None
    return urlunsplit((parts.scheme, parts.netloc, parts.path or "/", parts.query, ""))


def url_key(url: str) -> str:
    """Build the deduplication key for an absolute URL.

    Scheme and host are lowercased and a leading ``www.`` is stripped;
    path and query are kept as-is and the fragment is dropped.
    """
    parts = urlsplit(url)
    host = strip_www((parts.hostname or "").lower())
    try:
        port = parts.port
    except ValueError:
        port = None
    netloc = f"{host}:{port}" if port else host
    return urlunsplit((parts.scheme.lower(), netloc, parts.path or "/", parts.query, ""))


def url_path(url: str) -> str:
    return urlsplit(url).path


def url_host(url: str) -> str:
    return urlsplit(url).hostname or ""


def looks_like_article_path(path: str) -> bool:
    """Return True for ``.html`` paths outside service/legal sections."""
    lowered = path.lower()
    if any(token in lowered for token in BLOCKED_PATH_TOKENS):
        return False
    return lowered.endswith(".html")


def looks_like_load_more_url(url: str) -> bool:
    """Return True for author URLs that look like "load more" or pagination endpoints."""
    lowered = url.lower()
    return "autor" in lowered and any(token in lowered for token in LOAD_MORE_TOKENS)


def is_feed_url(url: str) -> bool:
    lowered = url.lower()
    return "rss" in lowered or "feed" in lowered or lowered.endswith(".xml")


def is_potential_author_pagination(url: str, context: AuthorContext) -> bool:
    """Check that a discovered URL is a listing page of the context author.

    The URL must be on the allowed site family, have ``/autor/`` in its
    path, and either contain the canonical author path or, once
    normalized, the author slug.
    """
    parts = urlsplit(url)
    if not is_same_family_host(parts.hostname or "", context.allowed_domains):
        return False
    path = parts.path.lower()
    if "/autor/" not in path:
        return False
    return context.author_path in path or context.author_slug in normalize_text(path)


def is_article_candidate(url: str, context: AuthorContext) -> bool:
    """Same-family host, not an author listing, and an article-looking path."""
    parts = urlsplit(url)
    if not is_same_family_host(parts.hostname or "", context.allowed_domains):
        return False
    if "/autor/" in parts.path:
        return False
    return looks_like_article_path(parts.path)


def with_query_param(url: str, name: str, value: int | str) -> str:
    """Set a query parameter, replacing any existing values for it."""
    parts = urlsplit(url)
    pairs = parse_qsl(parts.query, keep_blank_values=True)
    updated: list[tuple[str, str]] = []
    replaced = False
    for key, current in pairs:
        if key == name:
            if not replaced:
                updated.append((key, str(value)))
                replaced = True
            continue
        updated.append((key, current))
    if not replaced:
        updated.append((name, str(value)))
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(updated), parts.fragment))


def _with_path_suffix(url: str, suffix: str) -> str:
    parts = urlsplit(url)
    if not parts.path.endswith(".html"):
        return url
    path = parts.path[: -len(".html")] + suffix
    return urlunsplit((parts.scheme, parts.netloc, path, parts.query, parts.fragment))


def with_path_page(url: str, page: int) -> str:
    """``/autor/x.html`` -> ``/autor/x/<page>.html``."""
    return _with_path_suffix(url, f"/{page}.html")


def with_pagina_path(url: str, page: int) -> str:
    """``/autor/x.html`` -> ``/autor/x/pagina-<page>.html``."""
    return _with_path_suffix(url, f"/pagina-{page}.html")
