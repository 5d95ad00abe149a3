"""
Crawl stages: listing-page collection and article enrichment.
"""

from .collector import CrawlStats, collect_previews, seed_urls
from .enricher import enrich_article, enrich_articles, enrich_from_markup

__all__ = [
    "CrawlStats",
    "collect_previews",
    "seed_urls",
    "enrich_article",
    "enrich_articles",
    "enrich_from_markup",
]
