"""
Author context resolution.

Validates an author listing URL against the allowed news-site family and
derives the canonical identity (slug, display name, numeric id) that every
later stage matches against.
"""

from __future__ import annotations

import re
from typing import Iterable
from urllib.parse import unquote, urlsplit

from ..errors import DomainNotAllowed, InvalidUrl, NotAuthorPage
from .text import normalize_text
from .types import AuthorContext
from .urls import is_same_family_host


ALLOWED_DOMAINS: tuple[str, ...] = (
    "abc.es",
    "colpisa.com",
    "elcorreo.com",
    "diariovasco.com",
    "eldiariomontanes.es",
    "laverdad.es",
    "ideal.es",
    "hoy.es",
    "diariosur.es",
    "larioja.com",
    "elnortedecastilla.es",
    "elcomercio.es",
    "lasprovincias.es",
    "lavozdigital.es",
    "burgosconecta.es",
    "leonoticias.com",
    "elbierzonoticias.com",
    "salamancahoy.es",
    "todoalicante.es",
    "huelva24.com",
)

AUTHOR_SEGMENT = "/autor/"

_TRAILING_ID_RE = re.compile(r"-(\d+)$")


def resolve_author_context(
    url: str,
    allowed_domains: Iterable[str] = ALLOWED_DOMAINS,
) -> AuthorContext:
    """Validate an author page URL and derive its AuthorContext.

    Validation runs in order: well-formed http(s) URL, allowed domain
    family, ``/autor/`` path segment.

    Args:
        url: Raw author listing URL supplied by the caller
        allowed_domains: Domain family the URL (and every crawled URL) must belong to

    Returns:
        The immutable AuthorContext for this request

    Raises:
        InvalidUrl: If the input is not a well-formed http(s) URL
        DomainNotAllowed: If the host is outside the allowed family
        NotAuthorPage: If the path has no ``/autor/`` segment or no usable slug
    """
    domains = tuple(domain.lower() for domain in allowed_domains)
    raw = (url or "").strip()
    try:
        parsed = urlsplit(raw)
        hostname = parsed.hostname or ""
        # Accessing .port validates it; a bad port raises ValueError.
        parsed.port
    except ValueError as exc:
        raise InvalidUrl(f"Invalid URL: {raw!r}", details={"reason": str(exc)}) from exc

    if parsed.scheme not in ("http", "https") or not hostname:
        raise InvalidUrl(f"Invalid URL: {raw!r}")

    if not is_same_family_host(hostname, domains):
        raise DomainNotAllowed(
            "Only author pages from the allowed news sites are supported.",
            details={"host": hostname},
        )

    if AUTHOR_SEGMENT not in parsed.path:
        raise NotAuthorPage(
            "The URL must be an author page (path /autor/...).",
            details={"path": parsed.path},
        )

    slug_with_id = unquote(parsed.path.split(AUTHOR_SEGMENT, 1)[1]).lstrip("/")
    if slug_with_id.endswith(".html"):
        slug_with_id = slug_with_id[: -len(".html")]

    id_match = _TRAILING_ID_RE.search(slug_with_id)
    author_id = id_match.group(1) if id_match else ""
    slug_base = _TRAILING_ID_RE.sub("", slug_with_id)

    author_slug = normalize_text(slug_base)
    if not author_slug:
        raise NotAuthorPage(
            "The author page URL does not name an author.",
            details={"path": parsed.path},
        )

    author_name = " ".join(
        part[:1].upper() + part[1:] for part in slug_base.split("-") if part
    )

    return AuthorContext(
        canonical_url=raw,
        author_slug=author_slug,
        author_name=author_name,
        author_id=author_id,
        allowed_domains=domains,
    )


def is_same_author(author: str, context: AuthorContext) -> bool:
    """Check whether a resolved byline belongs to the context author.

    An empty normalized byline is treated as a match. Otherwise the byline
    matches when it equals the slug or either one contains the other.
    """
    normalized = normalize_text(author)
    if not normalized:
        return True
    slug = context.author_slug
    return normalized == slug or slug in normalized or normalized in slug
