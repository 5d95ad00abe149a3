"""
Byline Export - article exporter for Vocento author pages.

This package crawls an author's listing pages on the Vocento family of
Spanish news sites, enriches every discovered article from its own page
and exports the result as CSV, JSON, Markdown or PDF.

Main entry point is the CLI via `byline-export export` command.

Example:
    $ byline-export export https://www.elcorreo.com/autor/nombre-apellido-123.html -f pdf
"""

__all__ = [
    "__version__",
    "ArticlePreview",
    "AuthorContext",
    "ExportFormat",
    "ExportResult",
    "encode_export",
    "export_author",
    "export_author_async",
    "resolve_author_context",
]
__version__ = "0.1.0"

from .core.author import resolve_author_context
from .core.types import ArticlePreview, AuthorContext, ExportFormat
from .output.encoder import encode_export
from .runner import ExportResult, export_author, export_author_async
