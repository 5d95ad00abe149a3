"""
Core domain models and business logic.

This package contains data types, author identity resolution, URL
classification and crawl state that are independent of any pipeline stage.
"""

from .author import ALLOWED_DOMAINS, is_same_author, resolve_author_context
from .frontier import Frontier, PreviewCollection
from .text import normalize_text
from .types import ArticlePreview, AuthorContext, ExportFormat, ExportPayload

__all__ = [
    "ALLOWED_DOMAINS",
    "ArticlePreview",
    "AuthorContext",
    "ExportFormat",
    "ExportPayload",
    "Frontier",
    "PreviewCollection",
    "is_same_author",
    "normalize_text",
    "resolve_author_context",
]
