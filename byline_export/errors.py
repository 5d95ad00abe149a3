"""
Exception taxonomy for the export pipeline.

Error philosophy:
  - ValidationError    -> FAIL FAST: raised before any network I/O.
  - EmptyResultError   -> the crawl ran but produced nothing exportable.
  - Fetch/parse errors -> never raised; the page or article is skipped
                          (or kept as-is) and the crawl continues.

Each exception carries the HTTP status a request handler should answer with.
"""

from __future__ import annotations

from typing import Any


class ExportError(Exception):
    """Base exception for all export pipeline errors."""

    status_code = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly error body."""
        return {
            "error": self.message,
            "type": self.__class__.__name__,
            "status": self.status_code,
            "details": self.details,
        }


# --- Input validation: surfaced to the caller, request aborted early ---

class ValidationError(ExportError):
    status_code = 400


class InvalidUrl(ValidationError):
    """The author URL is not a well-formed http(s) URL."""


class DomainNotAllowed(ValidationError):
    """The author URL host is outside the allowed news-site family."""


class NotAuthorPage(ValidationError):
    """The author URL path has no usable /autor/ segment."""


class UnsupportedFormat(ValidationError):
    """The requested export format token is unknown."""


# --- Empty results: distinct from validation errors ---

class EmptyResultError(ExportError):
    pass


class NoArticlesFound(EmptyResultError):
    """The crawl finished without discovering any article."""

    status_code = 404


class NoEnrichedArticles(EmptyResultError):
    """Every discovered article was filtered out during enrichment."""

    status_code = 422
