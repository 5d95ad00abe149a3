"""
Markup scanning and extraction.

This package turns fetched HTML/XML into previews, structured article
fields and further crawl candidates.
"""

from .cards import extract_feed_previews, extract_page_previews
from .discovery import discover_feed_urls, discover_page_urls
from .jsonld import StructuredArticle, extract_structured_article
from .scanner import MarkupScanner, SoupScanner, clean_html, scan_html, scan_xml

__all__ = [
    "MarkupScanner",
    "SoupScanner",
    "StructuredArticle",
    "clean_html",
    "discover_feed_urls",
    "discover_page_urls",
    "extract_feed_previews",
    "extract_page_previews",
    "extract_structured_article",
    "scan_html",
    "scan_xml",
]
