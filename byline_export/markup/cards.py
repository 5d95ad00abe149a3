"""
Preview extraction from author listing pages and syndication feeds.

Listing pages are tried in order: ``<article>`` cards, then class-hinted
container blocks, then loose anchors to article pages.
"""

from __future__ import annotations

from ..core.types import ArticlePreview, AuthorContext
from ..core.urls import (
    is_article_candidate,
    is_same_family_host,
    looks_like_article_path,
    normalize_url,
    url_host,
    url_path,
)
from .scanner import MarkupScanner, clean_html, scan_xml


NO_HEADLINE = "Sin titular"

CARD_CLASS_HINTS = ("noticia", "news", "story", "item", "article")
CARD_CONTAINER_TAGS = ("div", "li", "section")

SUBTITLE_HINTS = ("subtitulo", "subtitle", "entradilla", "resumen")
DESCRIPTOR_HINTS = ("descriptor", "antetitulo", "kicker", "volanta", "seccion")
DATE_HINTS = ("fecha", "date", "time")
AUTHOR_HINTS = ("author", "autor", "firma")

# Card links under these sections are never the card's article.
NON_ARTICLE_SEGMENTS = ("/autor/", "/tag/", "/servicios/")


def extract_page_previews(
    page: MarkupScanner,
    context: AuthorContext,
    max_fallback_blocks: int = 800,
    min_link_title: int = 12,
) -> list[ArticlePreview]:
    """Extract previews from one listing page, falling back card -> block -> link."""
    cards = page.blocks("article")
    if not cards:
        cards = page.class_blocks(CARD_CONTAINER_TAGS, CARD_CLASS_HINTS, max_fallback_blocks)

    previews = [preview for preview in (card_preview(card, context) for card in cards) if preview]
    if previews:
        return previews
    return link_previews(page, context, min_link_title)


def card_preview(card: MarkupScanner, context: AuthorContext) -> ArticlePreview | None:
    """Build a preview from one card block, or None when it links to no article."""
    url = main_article_link(card, context)
    if url is None:
        return None

    title = card.first_text("h2", "h3", "h1")
    if not title:
        links = card.links()
        title = links[0][1] if links else ""

    return ArticlePreview(
        title=title or NO_HEADLINE,
        url=url,
        subtitle=card.by_class(SUBTITLE_HINTS) or card.first_text("p"),
        descriptor=card.by_class(DESCRIPTOR_HINTS),
        published_at=clean_html(card.attr("time", "datetime")) or card.by_class(DATE_HINTS),
        author=card.by_class(AUTHOR_HINTS) or context.author_name,
    )


def main_article_link(card: MarkupScanner, context: AuthorContext) -> str | None:
    """First href in the card that points to a same-family article page."""
    for href in card.hrefs():
        url = normalize_url(href, context.canonical_url)
        if url is None:
            continue
        path = url_path(url)
        if not path.endswith(".html"):
            continue
        if any(segment in path for segment in NON_ARTICLE_SEGMENTS):
            continue
        if not looks_like_article_path(path):
            continue
        if not is_same_family_host(url_host(url), context.allowed_domains):
            # Only the first article-looking link counts.
            return None
        return url
    return None


def link_previews(
    page: MarkupScanner, context: AuthorContext, min_title: int = 12
) -> list[ArticlePreview]:
    """Loose anchors to article pages whose text is long enough to be a headline."""
    previews: list[ArticlePreview] = []
    seen: set[str] = set()
    for href, text in page.links():
        if not href.lower().split("#", 1)[0].split("?", 1)[0].endswith(".html"):
            continue
        url = normalize_url(href, context.canonical_url)
        if url is None or url in seen:
            continue
        if not is_article_candidate(url, context):
            continue
        if len(text) < min_title:
            continue
        seen.add(url)
        previews.append(ArticlePreview(title=text, url=url, author=context.author_name))
    return previews


def extract_feed_previews(xml: str, context: AuthorContext) -> list[ArticlePreview]:
    """Previews from RSS ``<item>`` / Atom ``<entry>`` blocks.

    Entries must link to a same-family article page.
    """
    feed = scan_xml(xml)
    previews: list[ArticlePreview] = []
    for entry in feed.blocks("item", "entry"):
        raw_link = entry.first_text("link") or entry.attr("link", "href")
        url = normalize_url(raw_link, context.canonical_url)
        if url is None or not url_path(url).endswith(".html"):
            continue
        if not is_same_family_host(url_host(url), context.allowed_domains):
            continue
        if not looks_like_article_path(url_path(url)):
            continue
        previews.append(
            ArticlePreview(
                title=entry.first_text("title") or NO_HEADLINE,
                url=url,
                subtitle=entry.first_text("description", "summary"),
                descriptor=entry.first_text("category"),
                published_at=entry.first_text("pubDate", "updated", "published"),
                author=entry.first_text("author", "dc:creator", "creator") or context.author_name,
            )
        )
    return previews
