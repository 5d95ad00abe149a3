"""
Structured-data (JSON-LD) article lookup.

Pages embed schema.org descriptions in ``application/ld+json`` scripts,
sometimes wrapped in ``@graph`` containers or nested inside other nodes.
The first node whose ``@type`` names an article type wins.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
from typing import Any

from .scanner import MarkupScanner, clean_html


ARTICLE_TYPES = ("NewsArticle", "Article", "ReportageNewsArticle")


@dataclass
class StructuredArticle:
    """Article fields found in embedded structured data (empty strings when absent)."""

    title: str = ""
    subtitle: str = ""
    descriptor: str = ""
    published_at: str = ""
    author: str = ""


def extract_structured_article(scanner: MarkupScanner) -> StructuredArticle:
    """Return the fields of the first article-typed JSON-LD node on the page.

    Scripts that fail to parse are skipped.
    """
    for block in scanner.scripts("application/ld+json"):
        if not block or not block.strip():
            continue
        try:
            parsed = json.loads(block)
        except ValueError:
            continue
        node = find_article_node(parsed)
        if node is None:
            continue
        return StructuredArticle(
            title=clean_html(_as_text(node.get("headline") or node.get("name"))),
            subtitle=clean_html(_as_text(node.get("description"))),
            descriptor=clean_html(_as_text(node.get("articleSection"))),
            published_at=clean_html(_as_text(node.get("datePublished"))),
            author=clean_html(author_from_node(node.get("author"))),
        )
    return StructuredArticle()


def find_article_node(value: Any) -> dict[str, Any] | None:
    """Depth-first search for a node whose ``@type`` is article-like."""
    if not value:
        return None
    if isinstance(value, list):
        for item in value:
            found = find_article_node(item)
            if found is not None:
                return found
        return None
    if isinstance(value, dict):
        declared = _as_text(value.get("@type"), sep=",")
        if any(kind in declared for kind in ARTICLE_TYPES):
            return value
        graph = value.get("@graph")
        if isinstance(graph, list):
            found = find_article_node(graph)
            if found is not None:
                return found
        for child in value.values():
            found = find_article_node(child)
            if found is not None:
                return found
    return None


def author_from_node(node: Any) -> str:
    """Byline from a JSON-LD author value: a string, a Person/Organization, or a list of them."""
    if isinstance(node, str):
        return node
    if isinstance(node, list):
        names = [author_from_node(item) for item in node]
        return ", ".join(name for name in names if name)
    if isinstance(node, dict):
        return _as_text(node.get("name"))
    return ""


def _as_text(value: Any, sep: str = ", ") -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return sep.join(_as_text(item, sep) for item in value if item is not None)
    if isinstance(value, dict):
        return ""
    return str(value)
