"""
Core data types for the export pipeline.

- AuthorContext: immutable identity of the requested author
- ArticlePreview: article fields as found on a listing page (or after enrichment)
- ExportFormat: the four supported output variants
- ExportPayload: serialized output plus its content type
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from urllib.parse import urlsplit

from ..errors import UnsupportedFormat


@dataclass(frozen=True)
class AuthorContext:
    """Canonical identity of the author whose articles are exported.

    Built once per request by ``resolve_author_context`` and never mutated.

    Attributes:
        canonical_url: The validated author listing URL
        author_slug: Normalized slug used for author matching (never empty)
        author_name: Human-readable name title-cased from the URL slug
        author_id: Numeric id from a trailing ``-<digits>`` segment, or ""
        allowed_domains: Domain family used for every host check downstream
    """

    canonical_url: str
    author_slug: str
    author_name: str
    author_id: str = ""
    allowed_domains: tuple[str, ...] = field(default_factory=tuple)

    @property
    def author_path(self) -> str:
        """Lowercased listing path without its ``.html`` suffix."""
        path = urlsplit(self.canonical_url).path.lower()
        return path[: -len(".html")] if path.endswith(".html") else path


# Wire names of the exported fields, in tabular column order.
EXPORT_FIELDS = ("title", "subtitle", "descriptor", "url", "publishedAt", "author")


@dataclass
class ArticlePreview:
    """An article's summary fields.

    Produced by the crawler from listing pages and feeds; the enricher
    returns new instances with fields overwritten from the article page.
    ``published_at`` keeps whatever format the source used.
    """

    title: str
    url: str
    subtitle: str = ""
    descriptor: str = ""
    published_at: str = ""
    author: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "title": self.title,
            "subtitle": self.subtitle,
            "descriptor": self.descriptor,
            "url": self.url,
            "publishedAt": self.published_at,
            "author": self.author,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ArticlePreview":
        return cls(
            title=data.get("title", ""),
            subtitle=data.get("subtitle", ""),
            descriptor=data.get("descriptor", ""),
            url=data.get("url", ""),
            published_at=data.get("publishedAt", ""),
            author=data.get("author", ""),
        )


class ExportFormat(str, Enum):
    """Output variants selectable by the caller."""

    CSV = "csv"
    JSON = "json"
    MARKDOWN = "markdown"
    PDF = "pdf"

    @property
    def extension(self) -> str:
        return "md" if self is ExportFormat.MARKDOWN else self.value

    @classmethod
    def parse(cls, token: "str | ExportFormat") -> "ExportFormat":
        """Map a user-supplied token to a format.

        Raises:
            UnsupportedFormat: If the token names no known format
        """
        if isinstance(token, ExportFormat):
            return token
        value = (token or "").strip().lower()
        if value == "md":
            value = "markdown"
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedFormat(
                f"Unsupported export format: {token!r}",
                details={"allowed": [item.value for item in cls]},
            ) from None


@dataclass
class ExportPayload:
    """Serialized export ready for delivery.

    Attributes:
        content_type: MIME type (with charset for text formats)
        content: Text for csv/json/markdown, bytes for pdf
        extension: File extension matching the format
    """

    content_type: str
    content: str | bytes
    extension: str

    def to_bytes(self) -> bytes:
        if isinstance(self.content, bytes):
            return self.content
        return self.content.encode("utf-8")
